from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .normalize import to_int


class CalendarType(str, Enum):
    """Floor calendar kinds published by the General Assembly.

    Inherits from ``str`` so values compare equal to the raw payload strings
    (e.g. ``CalendarType.THIRD_READING == "THIRD_READING"``).  Calendars with
    a type outside this set are carried through as plain strings.
    """

    FIRST_READING = "FIRST_READING"
    COMMITTEE_REPORT = "COMMITTEE_REPORT"
    THIRD_READING = "THIRD_READING"
    SPECIAL_ORDER = "SPECIAL_ORDER"
    LAID_OVER = "LAID_OVER"
    VETOED = "VETOED"


class ActionCode(str, Enum):
    COMMITTEE_VOTE = "COMMITTEE_VOTE"
    COMMITTEE_VOTE_LEGACY = "COMMITEE_VOTE"  # misspelled in early scrapes
    FLOOR_VOTE = "FLOOR_VOTE"
    THIRD_READING = "THIRD_READING"
    PASSAGE = "PASSAGE"


COMMITTEE_VOTE_CODES: frozenset[str] = frozenset(
    {ActionCode.COMMITTEE_VOTE.value, ActionCode.COMMITTEE_VOTE_LEGACY.value}
)


class ActionSource(str, Enum):
    MGA_SCRAPE = "MGA_SCRAPE"
    MANUAL = "MANUAL"


class PartyLineLabel(str, Enum):
    """Report-level voting pattern badge."""

    UNANIMOUS = "Unanimous"
    PARTY_LINE = "Party Line"
    PARTY_SPLIT = "Party Split"


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


@dataclass
class CommitteeRef:
    id: str | None = None
    name: str | None = None
    abbreviation: str | None = None

    @classmethod
    def from_dict(cls, d: Any) -> CommitteeRef | None:
        if not isinstance(d, dict):
            return None
        return cls(
            id=_str_or_none(d.get("id")),
            name=d.get("name"),
            abbreviation=d.get("abbreviation"),
        )


@dataclass
class Legislator:
    party: str | None = None
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""

    @classmethod
    def from_dict(cls, d: Any) -> Legislator | None:
        if not isinstance(d, dict):
            return None
        return cls(
            party=d.get("party"),
            first_name=d.get("firstName") or "",
            last_name=d.get("lastName") or "",
            full_name=d.get("fullName") or "",
        )


@dataclass
class BillVote:
    """One legislator's ballot on a specific bill action."""

    bill_action_id: str | None
    vote: str | None = None
    legislator: Legislator | None = None

    @classmethod
    def from_dict(cls, d: dict) -> BillVote:
        return cls(
            bill_action_id=_str_or_none(d.get("billActionId")),
            vote=d.get("vote"),
            legislator=Legislator.from_dict(d.get("legislator")),
        )


@dataclass
class BillAction:
    """A recorded legislative action.

    Tally fields stay exactly as received: ``None`` means "not recorded",
    which is different from a recorded ``0``.
    """

    id: str | None
    chamber: str | None = None
    action_code: str | None = None
    committee_id: str | None = None
    source: str | None = None
    yes_votes: int | None = None
    no_votes: int | None = None
    not_voting: int | None = None
    excused: int | None = None
    absent: int | None = None
    abstain: int | None = None
    vote_counts: dict = field(default_factory=dict)
    vote_result: str | None = None
    description: str | None = None
    motion: str | None = None
    action_date: str | None = None  # ISO timestamp
    sequence: int | None = None
    data_source: dict = field(default_factory=dict)

    @property
    def is_committee_vote(self) -> bool:
        return (self.action_code or "").strip().upper() in COMMITTEE_VOTE_CODES

    @classmethod
    def from_dict(cls, d: dict) -> BillAction:
        return cls(
            id=_str_or_none(d.get("id")),
            chamber=d.get("chamber"),
            action_code=d.get("actionCode"),
            committee_id=_str_or_none(d.get("committeeId")),
            source=d.get("source"),
            yes_votes=to_int(d.get("yesVotes")),
            no_votes=to_int(d.get("noVotes")),
            not_voting=to_int(d.get("notVoting")),
            excused=to_int(d.get("excused")),
            absent=to_int(d.get("absent")),
            abstain=to_int(d.get("abstain") if d.get("abstain") is not None else d.get("abstains")),
            vote_counts=_as_dict(d.get("voteCounts")),
            vote_result=d.get("voteResult") or d.get("result"),
            description=d.get("description"),
            motion=d.get("motion"),
            action_date=_str_or_none(d.get("actionDate") or d.get("date")),
            sequence=to_int(d.get("sequence")),
            data_source=_as_dict(d.get("dataSource")),
        )


@dataclass
class Note:
    id: str | None
    content: str = ""
    visibility: str = "VISIBLE"  # "PINNED" | "HIDDEN" | "VISIBLE"
    created_at: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> Note:
        return cls(
            id=_str_or_none(d.get("id")),
            content=d.get("content") or "",
            visibility=(d.get("visibility") or "VISIBLE").upper(),
            created_at=d.get("createdAt") or "",
        )


@dataclass
class CurrentCommittee:
    committee_id: str | None
    committee: CommitteeRef | None = None
    vote_action_id: str | None = None  # last known committee vote

    @classmethod
    def from_dict(cls, d: Any) -> CurrentCommittee | None:
        if not isinstance(d, dict):
            return None
        committee = CommitteeRef.from_dict(d.get("committee"))
        committee_id = _str_or_none(d.get("committeeId"))
        if committee_id is None and committee is not None:
            committee_id = committee.id
        return cls(
            committee_id=committee_id,
            committee=committee,
            vote_action_id=_str_or_none(d.get("voteActionId") or d.get("billActionId")),
        )


@dataclass
class Bill:
    bill_number: str  # e.g. "SB0123"
    sponsor_display: str = ""
    short_title: str = ""
    cross_file_external_id: str | None = None
    origin_chamber: str | None = None
    is_flagged: bool = False
    actions: list[BillAction] = field(default_factory=list)
    votes: list[BillVote] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    current_committee: CurrentCommittee | None = None

    @classmethod
    def from_dict(cls, d: Any) -> Bill | None:
        if not isinstance(d, dict):
            return None
        return cls(
            bill_number=d.get("billNumber") or "",
            sponsor_display=d.get("sponsorDisplay") or "",
            short_title=d.get("shortTitle") or "",
            cross_file_external_id=_str_or_none(d.get("crossFileExternalId")),
            origin_chamber=d.get("originChamber") or d.get("chamber"),
            is_flagged=bool(d.get("isFlagged")),
            actions=[BillAction.from_dict(a) for a in _as_list(d.get("actions")) if isinstance(a, dict)],
            votes=[BillVote.from_dict(v) for v in _as_list(d.get("votes")) if isinstance(v, dict)],
            notes=[Note.from_dict(n) for n in _as_list(d.get("notes")) if isinstance(n, dict)],
            current_committee=CurrentCommittee.from_dict(d.get("currentCommittee")),
        )


@dataclass
class CalendarItem:
    """One bill's appearance on a floor calendar."""

    id: str | None
    position: int | None = None
    bill_number: str = ""
    notes: str | None = None
    action_text: str | None = None
    committee_id: str | None = None
    bill: Bill | None = None

    @classmethod
    def from_dict(cls, d: dict) -> CalendarItem:
        committee_id = _str_or_none(d.get("committeeId"))
        if committee_id is None:
            committee = CommitteeRef.from_dict(d.get("committee"))
            committee_id = committee.id if committee else None
        return cls(
            id=_str_or_none(d.get("id")),
            position=to_int(d.get("position")),
            bill_number=d.get("billNumber") or "",
            notes=d.get("notes"),
            action_text=d.get("actionText"),
            committee_id=committee_id,
            bill=Bill.from_dict(d.get("bill")),
        )


@dataclass
class CalendarEntry:
    """One published floor calendar (a read-only snapshot)."""

    id: str | None
    calendar_type: str
    calendar_number: int | None = None  # report number for committee reports
    calendar_date: Any = None  # str | date | datetime
    calendar_name: str | None = None
    committee: CommitteeRef | None = None
    consent_calendar: int | None = None
    chamber: str | None = None
    items: list[CalendarItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict) -> CalendarEntry:
        header = _as_dict(_as_dict(d.get("dataSource")).get("header"))
        consent = header.get("consentCalendar")
        # A boolean "true" flags a consent calendar without telling us its number.
        if isinstance(consent, bool) or not isinstance(consent, (int, float)):
            consent = None
        return cls(
            id=_str_or_none(d.get("id")),
            calendar_type=str(d.get("calendarType") or ""),
            calendar_number=to_int(d.get("calendarNumber")),
            calendar_date=d.get("calendarDate"),
            calendar_name=_str_or_none(d.get("calendarName")),
            committee=CommitteeRef.from_dict(d.get("committee")),
            consent_calendar=int(consent) if consent is not None else None,
            chamber=d.get("chamber"),
            items=[CalendarItem.from_dict(i) for i in _as_list(d.get("items")) if isinstance(i, dict)],
        )


@dataclass
class VoteTally:
    """Fully-populated vote counts for one action."""

    yes_votes: int = 0
    no_votes: int = 0
    abstain: int = 0
    excused: int = 0
    absent: int = 0
    not_voting: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "yesVotes": self.yes_votes,
            "noVotes": self.no_votes,
            "abstain": self.abstain,
            "excused": self.excused,
            "absent": self.absent,
            "notVoting": self.not_voting,
        }


@dataclass
class ReconciliationResult:
    """The authoritative vote record chosen for a bill/committee."""

    action: BillAction | None = None
    counts: VoteTally | None = None
    source: str | None = None
    used_manual_counts_to_fill_mga: bool = False
    manual_action: BillAction | None = None
