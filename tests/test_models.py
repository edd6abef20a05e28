"""Tests for reading the calendar API's camelCase payload into models."""

from __future__ import annotations

from mga_report.models import (
    Bill,
    BillAction,
    CalendarEntry,
    CalendarItem,
    CalendarType,
    Note,
    VoteTally,
)


class TestCalendarType:
    def test_str_enum_compares_with_payload(self) -> None:
        assert CalendarType.THIRD_READING == "THIRD_READING"


class TestBillAction:
    def test_from_dict(self) -> None:
        action = BillAction.from_dict(
            {
                "id": 17,
                "actionCode": "COMMITTEE_VOTE",
                "committeeId": 4,
                "source": "MGA_SCRAPE",
                "yesVotes": "9",
                "noVotes": 2,
                "abstains": 1,
                "voteCounts": {"excused": 1},
                "result": "Favorable",
                "actionDate": "2025-03-05T15:00:00Z",
            }
        )
        assert action.id == "17"
        assert action.committee_id == "4"
        assert action.yes_votes == 9
        assert action.abstain == 1
        assert action.excused is None
        assert action.vote_counts == {"excused": 1}
        assert action.vote_result == "Favorable"
        assert action.is_committee_vote is True

    def test_missing_tallies_stay_none(self) -> None:
        action = BillAction.from_dict({"id": "a"})
        assert (action.yes_votes, action.no_votes, action.not_voting) == (None, None, None)
        assert action.is_committee_vote is False


class TestNote:
    def test_visibility_upper_cased(self) -> None:
        assert Note.from_dict({"id": "n", "visibility": "pinned"}).visibility == "PINNED"
        assert Note.from_dict({"id": "n"}).visibility == "VISIBLE"


class TestBill:
    def test_nested(self) -> None:
        bill = Bill.from_dict(
            {
                "billNumber": "SB0123",
                "isFlagged": 1,
                "actions": [{"id": "a"}, "junk"],
                "votes": [{"billActionId": "a", "vote": "YEA", "legislator": {"party": "D"}}],
                "notes": [{"id": "n", "content": "watch"}],
                "currentCommittee": {"committee": {"id": "C1", "abbreviation": "JPR"}},
            }
        )
        assert bill is not None
        assert bill.is_flagged is True
        assert [a.id for a in bill.actions] == ["a"]
        assert bill.votes[0].legislator.party == "D"
        assert bill.current_committee.committee_id == "C1"
        assert bill.current_committee.committee.abbreviation == "JPR"

    def test_not_a_dict(self) -> None:
        assert Bill.from_dict(None) is None


class TestCalendarEntry:
    def test_consent_calendar_from_header(self) -> None:
        entry = CalendarEntry.from_dict(
            {
                "id": "c",
                "calendarType": "COMMITTEE_REPORT",
                "calendarNumber": "12",
                "dataSource": {"header": {"consentCalendar": 2}},
                "items": [{"id": "i", "committee": {"id": "C7"}}],
            }
        )
        assert entry.calendar_number == 12
        assert entry.consent_calendar == 2
        assert entry.items[0].committee_id == "C7"

    def test_boolean_consent_flag_ignored(self) -> None:
        entry = CalendarEntry.from_dict(
            {"id": "c", "calendarType": "COMMITTEE_REPORT", "dataSource": {"header": {"consentCalendar": True}}}
        )
        assert entry.consent_calendar is None

    def test_items_not_a_list(self) -> None:
        assert CalendarEntry.from_dict({"id": "c", "calendarType": "VETOED", "items": {}}).items == []


class TestCalendarItem:
    def test_position_string(self) -> None:
        assert CalendarItem.from_dict({"id": "i", "position": "3"}).position == 3


class TestVoteTally:
    def test_to_dict(self) -> None:
        assert VoteTally(yes_votes=3, not_voting=1).to_dict() == {
            "yesVotes": 3,
            "noVotes": 0,
            "abstain": 0,
            "excused": 0,
            "absent": 0,
            "notVoting": 1,
        }
