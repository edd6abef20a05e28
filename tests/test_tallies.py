"""Tests for tally extraction and count formatting."""

from __future__ import annotations

import pytest

from mga_report.models import BillAction, VoteTally
from mga_report.tallies import (
    PartyBreakdown,
    extract_counts,
    extract_counts_from_vote_ai_result,
    extract_party_breakdown,
    format_counts_breakdown,
    format_counts_inline,
    format_counts_short,
    format_party_breakdown_line,
    has_any_counts,
)


class TestExtractCounts:
    def test_top_level_fields(self) -> None:
        action = BillAction(id="a", yes_votes=9, no_votes=2, excused=1)
        assert extract_counts(action) == VoteTally(yes_votes=9, no_votes=2, excused=1)

    def test_nested_vote_counts_fallback(self) -> None:
        action = BillAction(id="a", vote_counts={"yesVotes": "5", "noVotes": 1, "abstains": 2})
        assert extract_counts(action) == VoteTally(yes_votes=5, no_votes=1, abstain=2)

    def test_top_level_wins_over_nested(self) -> None:
        action = BillAction(id="a", yes_votes=4, vote_counts={"yesVotes": 10, "noVotes": 3})
        tally = extract_counts(action)
        assert tally.yes_votes == 4
        assert tally.no_votes == 3

    def test_raw_dict_input(self) -> None:
        tally = extract_counts({"yesVotes": 3, "voteCounts": {"notVoting": 2}})
        assert tally == VoteTally(yes_votes=3, not_voting=2)

    def test_none_action(self) -> None:
        assert extract_counts(None) == VoteTally()

    def test_non_numeric_values_become_zero(self) -> None:
        tally = extract_counts({"yesVotes": "n/a", "noVotes": True})
        assert tally == VoteTally()


class TestHasAnyCounts:
    def test_all_absent(self) -> None:
        assert has_any_counts(extract_counts(BillAction(id="a"))) is False

    def test_all_zero(self) -> None:
        action = BillAction(id="a", yes_votes=0, no_votes=0, excused=0, absent=0)
        assert has_any_counts(extract_counts(action)) is False

    @pytest.mark.parametrize(
        "field", ["yes_votes", "no_votes", "abstain", "excused", "absent", "not_voting"]
    )
    def test_any_positive_field(self, field: str) -> None:
        assert has_any_counts(VoteTally(**{field: 1})) is True

    def test_none(self) -> None:
        assert has_any_counts(None) is False


class TestVoteAiResult:
    def test_prefers_totals_row(self) -> None:
        action = BillAction(
            id="a",
            data_source={
                "voteAiResult": {
                    "vote": {"yeas": 1, "nays": 1, "totalsRow": {"yeas": 10, "nays": 2, "excused": 1}}
                }
            },
        )
        assert extract_counts_from_vote_ai_result(action) == VoteTally(
            yes_votes=10, no_votes=2, excused=1
        )

    def test_vote_level_totals(self) -> None:
        action = {"dataSource": {"voteAiResult": {"vote": {"yeas": "7", "nays": 0}}}}
        assert extract_counts_from_vote_ai_result(action) == VoteTally(yes_votes=7)

    def test_missing_payload(self) -> None:
        assert extract_counts_from_vote_ai_result(BillAction(id="a")) is None
        assert extract_counts_from_vote_ai_result({"dataSource": {"voteAiResult": None}}) is None


class TestFormatting:
    def test_short(self) -> None:
        assert format_counts_short(VoteTally(yes_votes=9, no_votes=2)) == "9-2"
        assert format_counts_short(None) == "--"

    def test_breakdown(self) -> None:
        assert format_counts_breakdown(VoteTally(yes_votes=9, no_votes=2)) == "9-2"
        assert format_counts_breakdown(None) is None

    def test_inline_omits_zero_extras(self) -> None:
        tally = VoteTally(yes_votes=8, no_votes=2, excused=1)
        assert format_counts_inline(tally) == "Yes 8 · No 2 · Excused 1"


class TestPartyBreakdown:
    def test_aliases_and_party_keys(self) -> None:
        payload = {"breakdownByParty": {"yeas": {"Democrat": 5, "dem": "1"}, "nay": {"Republican": 3}}}
        assert extract_party_breakdown(payload) == PartyBreakdown(yes={"D": 6}, no={"R": 3})

    def test_missing(self) -> None:
        assert extract_party_breakdown({"yes": 3}) is None
        assert extract_party_breakdown("nope") is None

    def test_line(self) -> None:
        line = format_party_breakdown_line(PartyBreakdown(yes={"D": 5}, no={"R": 3}))
        assert line == "Yes: D 5 | No: R 3"

    def test_line_empty(self) -> None:
        assert format_party_breakdown_line(PartyBreakdown(yes={"D": 0})) is None
