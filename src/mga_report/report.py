"""Calendar report assembly.

``build_calendar_report`` is the top-level entry point: it organizes the
floor calendars into sections, reconciles each bill's committee vote and
classifies its voting pattern, producing a plain data structure that the
rich renderer and the JSON dump both read.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .calendar import (
    organize_floor_calendars,
    parse_hidden_calendars,
    section_date_label,
)
from .models import (
    Bill,
    CalendarEntry,
    CalendarItem,
    CalendarType,
    Note,
    PartyLineLabel,
    ReconciliationResult,
)
from .normalize import parse_calendar_date
from .party_line import get_committee_party_line_label, has_party_votes
from .reconcile import (
    ReconciliationPolicy,
    is_unanimous_vote_action,
    reconcile_committee_vote,
    votes_for_action,
)
from .tallies import format_counts_breakdown, has_any_counts

LOGGER = logging.getLogger(__name__)

NO_COUNTS_TEXT = "No recorded counts"
PLACEHOLDER = "---"

_SPONSOR_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("Senator ", "Sen. "),
    ("Delegate ", "Del. "),
    (" Committee", ""),
)

_NOTE_RANK = {"PINNED": 0, "VISIBLE": 1}


# ── Data structures ──────────────────────────────────────────────────────────


@dataclass
class ReportOptions:
    hidden_calendars: frozenset[CalendarType] = field(default_factory=frozenset)
    hide_unanimous: bool = False
    flagged_only: bool = False

    @classmethod
    def from_flags(
        cls,
        hide_calendars: str | Iterable[str] | None = None,
        hide_unanimous: bool = False,
        flagged_only: bool = False,
    ) -> ReportOptions:
        return cls(
            hidden_calendars=parse_hidden_calendars(hide_calendars),
            hide_unanimous=hide_unanimous,
            flagged_only=flagged_only,
        )


@dataclass
class ReportRow:
    bill_number: str
    is_flagged: bool = False
    sponsor: str = ""
    short_title: str = ""
    committee_abbrev: str = PLACEHOLDER
    counts_display: str = PLACEHOLDER
    pattern_label: PartyLineLabel | None = None
    status_text: str | None = None
    source: str | None = None
    used_manual_counts_to_fill_mga: bool = False
    action_text: str | None = None
    cross_file_external_id: str | None = None
    notes: list[str] = field(default_factory=list)
    item_notes: str | None = None
    is_unanimous: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "billNumber": self.bill_number,
            "isFlagged": self.is_flagged,
            "sponsor": self.sponsor,
            "shortTitle": self.short_title,
            "committee": self.committee_abbrev,
            "counts": self.counts_display,
            "pattern": self.pattern_label.value if self.pattern_label else None,
            "status": self.status_text,
            "source": self.source,
            "usedManualCountsToFillMga": self.used_manual_counts_to_fill_mga,
            "actionText": self.action_text,
            "crossFileExternalId": self.cross_file_external_id,
            "notes": list(self.notes),
            "itemNotes": self.item_notes,
            "isUnanimous": self.is_unanimous,
        }


@dataclass
class ReportGroup:
    heading: str
    calendar_type: str
    rows: list[ReportRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "heading": self.heading,
            "calendarType": self.calendar_type,
            "rows": [r.to_dict() for r in self.rows],
        }


@dataclass
class ReportSection:
    title: str
    calendar_type: CalendarType
    date_label: str = ""
    groups: list[ReportGroup] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return sum(len(g.rows) for g in self.groups)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "calendarType": self.calendar_type.value,
            "dateLabel": self.date_label,
            "groups": [g.to_dict() for g in self.groups],
        }


@dataclass
class CalendarReport:
    sections: list[ReportSection] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return sum(s.row_count for s in self.sections)

    def to_dict(self) -> dict[str, Any]:
        return {"sections": [s.to_dict() for s in self.sections]}


# ── Row helpers ──────────────────────────────────────────────────────────────


def shorten_sponsor(sponsor: str | None) -> str:
    """``"Senator Jane Doe"`` -> ``"Sen. Jane Doe"``; drops ``" Committee"``."""
    text = sponsor or ""
    for old, new in _SPONSOR_REPLACEMENTS:
        text = text.replace(old, new)
    return text.strip()


def visible_notes(notes: Iterable[Note] | None) -> list[Note]:
    """Drop hidden notes; pinned first, then newest first."""
    kept = [n for n in notes or [] if n.visibility != "HIDDEN"]

    def _created(note: Note) -> float:
        dt = parse_calendar_date(note.created_at)
        return dt.timestamp() if dt is not None else float("-inf")

    # Two stable passes: newest first, then pinned ahead of the rest.
    kept.sort(key=_created, reverse=True)
    kept.sort(key=lambda n: _NOTE_RANK.get(n.visibility, 1))
    return kept


def committee_id_for_item(
    item: CalendarItem,
    entry_committee_id: str | None,
    bill: Bill,
) -> str | None:
    if item.committee_id:
        return item.committee_id
    if entry_committee_id:
        return entry_committee_id
    if bill.current_committee is not None:
        return bill.current_committee.committee_id
    return None


def _committee_abbrev(bill: Bill) -> str:
    current = bill.current_committee
    if current is not None and current.committee is not None:
        abbrev = (current.committee.abbreviation or "").strip()
        if abbrev:
            return abbrev
    return PLACEHOLDER


def _status_text(result: ReconciliationResult) -> str | None:
    action = result.action
    if action is None:
        return None
    return action.vote_result or action.motion or action.description


def _counts_display(result: ReconciliationResult) -> str:
    if result.action is None:
        return PLACEHOLDER
    if not has_any_counts(result.counts):
        return NO_COUNTS_TEXT
    return format_counts_breakdown(result.counts) or NO_COUNTS_TEXT


def build_row(item: CalendarItem, committee_id: str | None) -> ReportRow | None:
    """Build one report row; ``None`` for an item without a bill."""
    bill = item.bill
    if bill is None:
        return None

    committee_id = committee_id_for_item(item, committee_id, bill)
    result = reconcile_committee_vote(
        bill.actions,
        committee_id,
        policy=ReconciliationPolicy.PREFER_MGA_COUNTS,
        fallback=True,
    )
    ballots = votes_for_action(bill.votes, result.action)
    label = get_committee_party_line_label(ballots)
    if label is not None:
        unanimous = label == PartyLineLabel.UNANIMOUS
    else:
        counts = result.counts if has_any_counts(result.counts) else None
        unanimous = not has_party_votes(ballots) and is_unanimous_vote_action(result.action, counts)

    return ReportRow(
        bill_number=bill.bill_number or item.bill_number,
        is_flagged=bill.is_flagged,
        sponsor=shorten_sponsor(bill.sponsor_display),
        short_title=bill.short_title,
        committee_abbrev=_committee_abbrev(bill),
        counts_display=_counts_display(result),
        pattern_label=label,
        status_text=_status_text(result),
        source=result.source,
        used_manual_counts_to_fill_mga=result.used_manual_counts_to_fill_mga,
        action_text=item.action_text,
        cross_file_external_id=bill.cross_file_external_id,
        notes=[n.content for n in visible_notes(bill.notes)],
        item_notes=item.notes,
        is_unanimous=unanimous,
    )


# ── Entry point ──────────────────────────────────────────────────────────────


def build_calendar_report(
    entries: Iterable[CalendarEntry] | None,
    options: ReportOptions | None = None,
) -> CalendarReport:
    """Assemble the calendar report for *entries*."""
    options = options or ReportOptions()
    entry_list = [e for e in entries or [] if e is not None]

    organized = organize_floor_calendars(
        entry_list,
        hidden=options.hidden_calendars,
        flagged_only=options.flagged_only,
    )

    report = CalendarReport()
    dropped_unanimous = 0
    for section in organized.sections:
        out_section = ReportSection(
            title=section.title,
            calendar_type=section.calendar_type,
            date_label=section_date_label(entry_list, section.calendar_type),
        )
        for group in section.groups:
            out_group = ReportGroup(heading=group.heading, calendar_type=group.calendar_type)
            for item in group.items:
                row = build_row(item, group.committee_id)
                if row is None:
                    LOGGER.debug("Skipping calendar item %s without a bill", item.id)
                    continue
                if options.hide_unanimous and row.is_unanimous:
                    dropped_unanimous += 1
                    continue
                out_group.rows.append(row)
            out_section.groups.append(out_group)
        report.sections.append(out_section)

    LOGGER.info(
        "Built calendar report: %d sections, %d groups, %d rows (%d unanimous hidden)",
        len(report.sections),
        sum(len(s.groups) for s in report.sections),
        report.row_count,
        dropped_unanimous,
    )
    return report
