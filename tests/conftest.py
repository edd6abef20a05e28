from __future__ import annotations

import pytest

from mga_report.models import (
    Bill,
    BillAction,
    BillVote,
    CalendarEntry,
    CalendarItem,
    CommitteeRef,
    CurrentCommittee,
    Legislator,
)

# ── Builders ──────────────────────────────────────────────────────────────────


def _make_action(
    id: str,
    *,
    source: str | None = "MGA_SCRAPE",
    committee_id: str | None = "C1",
    action_code: str = "COMMITTEE_VOTE",
    **kwargs: object,
) -> BillAction:
    return BillAction(
        id=id,
        source=source,
        committee_id=committee_id,
        action_code=action_code,
        **kwargs,
    )


def _make_votes(action_id: str, ballots: list[tuple[str, str]]) -> list[BillVote]:
    """``[("Democrat", "YEA"), ...]`` -> ballots on *action_id*."""
    return [
        BillVote(bill_action_id=action_id, vote=vote, legislator=Legislator(party=party))
        for party, vote in ballots
    ]


def _make_item(position: int | None, bill_number: str, **bill_kwargs: object) -> CalendarItem:
    return CalendarItem(
        id=f"item-{bill_number}",
        position=position,
        bill_number=bill_number,
        bill=Bill(bill_number=bill_number, **bill_kwargs),
    )


@pytest.fixture
def make_action():
    """Factory for committee-vote actions: ``make_action("a", yes_votes=3)``."""
    return _make_action


@pytest.fixture
def make_votes():
    return _make_votes


@pytest.fixture
def make_item():
    return _make_item


# ── Action fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def mga_with_counts() -> BillAction:
    return _make_action(
        "mga-1",
        yes_votes=9,
        no_votes=2,
        action_date="2025-03-05T15:00:00Z",
        vote_result="Favorable",
    )


@pytest.fixture
def mga_empty() -> BillAction:
    """Official scrape that has not picked up the tally yet."""
    return _make_action(
        "mga-2",
        yes_votes=0,
        no_votes=0,
        action_date="2025-03-05T15:00:00Z",
        vote_result="Favorable with Amendments",
    )


@pytest.fixture
def manual_with_counts() -> BillAction:
    return _make_action(
        "man-1",
        source="MANUAL",
        yes_votes=8,
        no_votes=3,
        action_date="2025-03-05T12:00:00Z",
        motion="Favorable",
    )


@pytest.fixture
def manual_empty() -> BillAction:
    return _make_action("man-2", source="MANUAL", motion="Hearing held")


# ── Ballot fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def party_line_ballots() -> list[BillVote]:
    """5 Democrats YEA, 5 Republicans NAY."""
    return _make_votes("mga-1", [("Democrat", "YEA")] * 5 + [("Republican", "NAY")] * 5)


@pytest.fixture
def one_defector_ballots() -> list[BillVote]:
    """Party line except one Democrat voting NAY."""
    return _make_votes(
        "mga-1",
        [("Democrat", "YEA")] * 4 + [("Democrat", "NAY")] + [("Republican", "NAY")] * 5,
    )


@pytest.fixture
def unanimous_ballots() -> list[BillVote]:
    return _make_votes("mga-1", [("Democrat", "YEA")] * 6 + [("Republican", "Yea")] * 4)


# ── Calendar fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def judiciary() -> CommitteeRef:
    return CommitteeRef(id="C1", name="Judicial Proceedings", abbreviation="JPR")


@pytest.fixture
def report_entries(judiciary: CommitteeRef) -> list[CalendarEntry]:
    """Two raw calendars for the same committee report, one third reading."""
    return [
        CalendarEntry(
            id="cal-1",
            calendar_type="COMMITTEE_REPORT",
            calendar_number=12,
            calendar_date="2025-03-10",
            committee=judiciary,
            consent_calendar=2,
            items=[_make_item(3, "SB0003"), _make_item(1, "SB0001")],
        ),
        CalendarEntry(
            id="cal-2",
            calendar_type="COMMITTEE_REPORT",
            calendar_number=12,
            calendar_date="2025-03-10",
            committee=judiciary,
            consent_calendar=2,
            items=[_make_item(2, "SB0002")],
        ),
        CalendarEntry(
            id="cal-3",
            calendar_type="THIRD_READING",
            calendar_number=40,
            calendar_date="2025-03-12",
            items=[_make_item(1, "HB0100")],
        ),
    ]


@pytest.fixture
def voted_bill(
    mga_with_counts: BillAction,
    party_line_ballots: list[BillVote],
    judiciary: CommitteeRef,
) -> Bill:
    return Bill(
        bill_number="SB0123",
        sponsor_display="Senator Jane Doe",
        short_title="Criminal Law - Expungement",
        cross_file_external_id="HB0456",
        is_flagged=True,
        actions=[mga_with_counts],
        votes=party_line_ballots,
        current_committee=CurrentCommittee(committee_id="C1", committee=judiciary),
    )
