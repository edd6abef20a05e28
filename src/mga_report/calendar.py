"""Floor calendar organization.

Turns the flat list of published calendars into the report's fixed sequence
of sections (First Reading through Vetoed), each holding ordered groups:

- Committee reports (Second Reading) group by committee, report number and
  consent calendar number, and sort alphabetically by committee first.
- Every other calendar groups by calendar number and sorts numerically.

Several raw calendars can land in the same group; their items are merged and
re-sorted by position.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field

from .models import CalendarEntry, CalendarItem, CalendarType
from .normalize import format_long_date, parse_calendar_date

LOGGER = logging.getLogger(__name__)

# Canonical report order.
SECTION_DEFS: tuple[tuple[str, CalendarType], ...] = (
    ("First Reading Calendar", CalendarType.FIRST_READING),
    ("Second Reading Calendar", CalendarType.COMMITTEE_REPORT),
    ("Third Reading Calendar", CalendarType.THIRD_READING),
    ("Special Order Calendar", CalendarType.SPECIAL_ORDER),
    ("Laid Over Bills Calendar", CalendarType.LAID_OVER),
    ("Vetoed Bills Calendar", CalendarType.VETOED),
)

# ``hideCalendars`` short codes.
HIDE_CODES: dict[str, CalendarType] = {
    "first": CalendarType.FIRST_READING,
    "second": CalendarType.COMMITTEE_REPORT,
    "third": CalendarType.THIRD_READING,
    "special": CalendarType.SPECIAL_ORDER,
    "laid_over": CalendarType.LAID_OVER,
    "vetoed": CalendarType.VETOED,
}

_MISSING = sys.maxsize  # missing report/consent/calendar numbers sort last


# ── Data structures ──────────────────────────────────────────────────────────


@dataclass
class OrganizedGroup:
    key: str
    heading: str
    committee_id: str | None = None
    committee_name: str | None = None
    committee_abbrev: str | None = None
    committee_label: str | None = None  # committee reports only
    report_number: int | None = None
    consent_calendar_number: int | None = None
    calendar_number: int | None = None
    calendar_type: str = ""
    calendar_ids: list[str] = field(default_factory=list)
    items: list[CalendarItem] = field(default_factory=list)


@dataclass
class OrganizedSection:
    title: str
    calendar_type: CalendarType
    groups: list[OrganizedGroup] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.groups


@dataclass
class OrganizedCalendars:
    sections: list[OrganizedSection] = field(default_factory=list)


# ── Helpers ──────────────────────────────────────────────────────────────────


def parse_hidden_calendars(
    value: str | Iterable[CalendarType | str] | None,
) -> frozenset[CalendarType]:
    """Map ``"first,vetoed"`` (or an iterable of codes) to calendar types.

    Full calendar type names are accepted too; unknown codes are ignored.
    """
    if not value:
        return frozenset()
    codes = value.split(",") if isinstance(value, str) else list(value)
    hidden: set[CalendarType] = set()
    for raw in codes:
        if isinstance(raw, CalendarType):
            hidden.add(raw)
            continue
        code = str(raw).strip().lower()
        if not code:
            continue
        if code in HIDE_CODES:
            hidden.add(HIDE_CODES[code])
            continue
        try:
            hidden.add(CalendarType(code.upper()))
        except ValueError:
            LOGGER.debug("Ignoring unknown hideCalendars code %r", raw)
    return frozenset(hidden)


def committee_label(entry: CalendarEntry) -> str:
    """Committee name, else abbreviation, else ``"Committee"``."""
    committee = entry.committee
    if committee is not None:
        for candidate in (committee.name, committee.abbreviation):
            if candidate and candidate.strip():
                return candidate.strip()
    return "Committee"


def _is_committee_report(entry: CalendarEntry) -> bool:
    return entry.calendar_type == CalendarType.COMMITTEE_REPORT.value


def group_key_for(entry: CalendarEntry) -> str:
    if _is_committee_report(entry):
        report_no = entry.calendar_number if entry.calendar_number is not None else -1
        consent = entry.consent_calendar if entry.consent_calendar is not None else "none"
        return f"COMMITTEE_REPORT|{committee_label(entry)}|report:{report_no}|consent:{consent}"
    n = entry.calendar_number if entry.calendar_number is not None else -1
    return f"{entry.calendar_type}|calendar:{n}"


def heading_for(entry: CalendarEntry) -> str:
    if _is_committee_report(entry):
        report_no = entry.calendar_number if entry.calendar_number is not None else ""
        heading = f"{committee_label(entry)} - Report {report_no}"
        if entry.consent_calendar is not None:
            heading += f", Consent Calendar {entry.consent_calendar}"
        return heading
    if entry.calendar_name:
        return entry.calendar_name
    n = entry.calendar_number if entry.calendar_number is not None else ""
    return f"Calendar Number {n}"


def sort_items(items: Iterable[CalendarItem] | None) -> list[CalendarItem]:
    """Position ascending (missing position = 0); stable otherwise."""
    return sorted(items or [], key=lambda i: i.position if i.position is not None else 0)


def _group_sort_key(group: OrganizedGroup) -> tuple:
    def _num(n: int | None) -> int:
        return n if n is not None else _MISSING

    if group.calendar_type == CalendarType.COMMITTEE_REPORT.value:
        return (
            (group.committee_label or "").casefold(),
            _num(group.report_number),
            _num(group.consent_calendar_number),
            group.heading,
        )
    return (_num(group.calendar_number), group.heading)


def _filter_flagged(entries: list[CalendarEntry]) -> list[CalendarEntry]:
    """Keep flagged bills (and bill-less rows); drop calendars left empty.

    Returns copies; the input entries are not modified.
    """
    kept: list[CalendarEntry] = []
    for entry in entries:
        items = [i for i in entry.items if i.bill is None or i.bill.is_flagged]
        if not items:
            continue
        kept.append(
            CalendarEntry(
                id=entry.id,
                calendar_type=entry.calendar_type,
                calendar_number=entry.calendar_number,
                calendar_date=entry.calendar_date,
                calendar_name=entry.calendar_name,
                committee=entry.committee,
                consent_calendar=entry.consent_calendar,
                chamber=entry.chamber,
                items=items,
            )
        )
    return kept


# ── Core ─────────────────────────────────────────────────────────────────────


def build_section(
    title: str,
    calendar_type: CalendarType,
    entries: Iterable[CalendarEntry],
) -> OrganizedSection:
    groups: dict[str, OrganizedGroup] = {}

    for entry in entries:
        key = group_key_for(entry)
        group = groups.get(key)
        if group is None:
            is_report = _is_committee_report(entry)
            group = OrganizedGroup(
                key=key,
                heading=heading_for(entry),
                committee_id=entry.committee.id if entry.committee and is_report else None,
                committee_name=entry.committee.name if entry.committee else None,
                committee_abbrev=entry.committee.abbreviation if entry.committee else None,
                committee_label=committee_label(entry) if is_report else None,
                report_number=entry.calendar_number if is_report else None,
                consent_calendar_number=entry.consent_calendar if is_report else None,
                calendar_number=None if is_report else entry.calendar_number,
                calendar_type=entry.calendar_type,
            )
            groups[key] = group
        if entry.id is not None:
            group.calendar_ids.append(entry.id)
        group.items.extend(entry.items)

    for group in groups.values():
        group.items = sort_items(group.items)

    return OrganizedSection(
        title=title,
        calendar_type=calendar_type,
        groups=sorted(groups.values(), key=_group_sort_key),
    )


def organize_floor_calendars(
    raw: Iterable[CalendarEntry] | None,
    *,
    hidden: Iterable[CalendarType | str] | str | None = None,
    flagged_only: bool = False,
) -> OrganizedCalendars:
    """Group calendars into the canonical sections.

    Every section is returned, empty or not, except one that is both listed
    in *hidden* and has no groups.  A hidden section that still has bills is
    kept.
    """
    entries = [e for e in (raw or []) if e is not None]
    if flagged_only:
        entries = _filter_flagged(entries)

    hidden_types = parse_hidden_calendars(hidden)

    sections: list[OrganizedSection] = []
    for title, calendar_type in SECTION_DEFS:
        matching = [e for e in entries if e.calendar_type == calendar_type.value]
        section = build_section(title, calendar_type, matching)
        if section.is_empty and calendar_type in hidden_types:
            LOGGER.debug("Suppressing hidden empty section %s", title)
            continue
        sections.append(section)

    LOGGER.debug(
        "Organized %d calendars into %d sections (%d groups)",
        len(entries),
        len(sections),
        sum(len(s.groups) for s in sections),
    )
    return OrganizedCalendars(sections=sections)


def section_date_label(entries: Iterable[CalendarEntry] | None, calendar_type: CalendarType | str) -> str:
    """Date or date range covered by the calendars of one type.

    ``"Monday, March 10, 2025"`` when every calendar falls on the same UTC
    day, otherwise ``"<first> – <last>"``; ``""`` when no date parses.
    """
    wanted = calendar_type.value if isinstance(calendar_type, CalendarType) else str(calendar_type)
    dates = sorted(
        dt
        for dt in (
            parse_calendar_date(e.calendar_date)
            for e in entries or []
            if e is not None and e.calendar_type == wanted
        )
        if dt is not None
    )
    if not dates:
        return ""
    first, last = dates[0], dates[-1]
    if first.date() == last.date():
        return format_long_date(first)
    return f"{format_long_date(first)} – {format_long_date(last)}"
