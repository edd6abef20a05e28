"""Voting-pattern classification from individual ballots.

Two classifiers with different strictness are kept side by side and must not
be merged:

- :func:`get_committee_party_line_label` -- the calendar report badge
  (``Unanimous`` / ``Party Line`` / ``Party Split``).
- :func:`compute_strict_party_line` -- the bill detail view, which tells a
  single-defector split apart from any other non-alignment.

Only ballots that normalize to YEA/NAY count.  Party splits need both
Democrats and Republicans present.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .models import BillVote, PartyLineLabel
from .normalize import normalize_party, normalize_vote
from .tallies import PartyBreakdown


class StrictPartyLineKind(str, Enum):
    UNANIMOUS_FOR = "UNANIMOUS_FOR"
    PARTY_LINE = "PARTY_LINE"
    SPLIT = "SPLIT"
    NOT_PARTY_LINE = "NOT_PARTY_LINE"


class PartyLineDirection(str, Enum):
    D_YEA_R_NAY = "D_YEA_R_NAY"
    D_NAY_R_YEA = "D_NAY_R_YEA"


@dataclass(frozen=True)
class StrictPartyLineResult:
    kind: StrictPartyLineKind
    direction: PartyLineDirection | None = None
    defectors: int = 0


@dataclass
class _PartyTotals:
    total_yea: int = 0
    total_nay: int = 0
    d_yea: int = 0
    d_nay: int = 0
    r_yea: int = 0
    r_nay: int = 0

    @property
    def d_total(self) -> int:
        return self.d_yea + self.d_nay

    @property
    def r_total(self) -> int:
        return self.r_yea + self.r_nay


def _ballot_party(ballot: BillVote) -> str | None:
    if ballot.legislator is None:
        return None
    return normalize_party(ballot.legislator.party)


def _tally_party_votes(votes: Iterable[BillVote | None] | None, *, partisan_only: bool) -> _PartyTotals:
    """Count YEA/NAY ballots overall and per major party.

    With ``partisan_only`` ballots from other/unknown parties are dropped from
    the overall totals too.
    """
    totals = _PartyTotals()
    for ballot in votes or []:
        if ballot is None:
            continue
        val = normalize_vote(ballot.vote)
        if val is None:
            continue
        party = _ballot_party(ballot)
        if partisan_only and party is None:
            continue

        if val == "YEA":
            totals.total_yea += 1
            if party == "Democrat":
                totals.d_yea += 1
            elif party == "Republican":
                totals.r_yea += 1
        else:
            totals.total_nay += 1
            if party == "Democrat":
                totals.d_nay += 1
            elif party == "Republican":
                totals.r_nay += 1
    return totals


def has_party_votes(votes: Iterable[BillVote | None] | None) -> bool:
    """True when at least one YEA/NAY ballot came from a Democrat or Republican."""
    return any(
        b is not None and normalize_vote(b.vote) is not None and _ballot_party(b) is not None
        for b in votes or []
    )


# ── Lenient (report) ─────────────────────────────────────────────────────────


def get_committee_party_line_label(
    votes: Iterable[BillVote | None] | None,
) -> PartyLineLabel | None:
    """Report badge for a committee vote, or ``None`` if not classifiable."""
    t = _tally_party_votes(votes, partisan_only=True)

    if t.total_yea + t.total_nay == 0:
        return None
    if t.total_nay == 0:
        return PartyLineLabel.UNANIMOUS
    if t.d_total == 0 or t.r_total == 0:
        return None

    if (t.d_yea == t.d_total and t.r_nay == t.r_total) or (
        t.d_nay == t.d_total and t.r_yea == t.r_total
    ):
        return PartyLineLabel.PARTY_LINE
    return PartyLineLabel.PARTY_SPLIT


# ── Strict (bill detail) ─────────────────────────────────────────────────────


def compute_strict_party_line(votes: Iterable[BillVote | None] | None) -> StrictPartyLineResult:
    """Classify ballots as unanimous, party line, one-defector split or neither.

    Unanimity is judged on every YEA/NAY ballot regardless of party; the
    party-line checks use Democrat and Republican ballots only.
    """
    t = _tally_party_votes(votes, partisan_only=False)

    if t.total_yea + t.total_nay == 0:
        return StrictPartyLineResult(StrictPartyLineKind.NOT_PARTY_LINE)
    if t.total_nay == 0:
        return StrictPartyLineResult(StrictPartyLineKind.UNANIMOUS_FOR)
    if t.d_total == 0 or t.r_total == 0:
        return StrictPartyLineResult(StrictPartyLineKind.NOT_PARTY_LINE)

    if t.d_yea == t.d_total and t.r_nay == t.r_total:
        return StrictPartyLineResult(StrictPartyLineKind.PARTY_LINE, PartyLineDirection.D_YEA_R_NAY)
    if t.d_nay == t.d_total and t.r_yea == t.r_total:
        return StrictPartyLineResult(StrictPartyLineKind.PARTY_LINE, PartyLineDirection.D_NAY_R_YEA)

    if (t.d_total - t.d_yea) + (t.r_total - t.r_nay) == 1:
        return StrictPartyLineResult(
            StrictPartyLineKind.SPLIT, PartyLineDirection.D_YEA_R_NAY, defectors=1
        )
    if (t.d_total - t.d_nay) + (t.r_total - t.r_yea) == 1:
        return StrictPartyLineResult(
            StrictPartyLineKind.SPLIT, PartyLineDirection.D_NAY_R_YEA, defectors=1
        )

    return StrictPartyLineResult(StrictPartyLineKind.NOT_PARTY_LINE)


_STRICT_LABELS = {
    StrictPartyLineKind.UNANIMOUS_FOR: "Unanimous",
    StrictPartyLineKind.PARTY_LINE: "Party Line",
    StrictPartyLineKind.SPLIT: "Party Split",
    StrictPartyLineKind.NOT_PARTY_LINE: "Not party line",
}


def strict_party_line_label(result: StrictPartyLineResult) -> str:
    return _STRICT_LABELS[result.kind]


# ── Party-count payloads ─────────────────────────────────────────────────────


def compute_party_line_from_counts(
    yes_total: int,
    no_total: int,
    breakdown: PartyBreakdown | None,
) -> str:
    """Classify an alert payload that only has per-party counts.

    Returns ``"Unanimous"``, ``"Party Line"``, ``"Mixed Party"`` or
    ``"Unknown"``.
    """
    if yes_total > 0 and no_total == 0:
        return "Unanimous"
    if breakdown is None:
        return "Unknown"

    parties = set(breakdown.yes) | set(breakdown.no)
    if not parties:
        return "Unknown"

    with_yes = [p for p in sorted(parties) if breakdown.yes.get(p, 0) > 0]
    with_no = [p for p in sorted(parties) if breakdown.no.get(p, 0) > 0]

    if not with_no and sum(breakdown.yes.values()) > 0:
        return "Unanimous"

    if len(with_yes) == 1 and len(with_no) == 1 and with_yes[0] != with_no[0]:
        yes_party, no_party = with_yes[0], with_no[0]
        if breakdown.no.get(yes_party, 0) == 0 and breakdown.yes.get(no_party, 0) == 0:
            return "Party Line"

    return "Mixed Party"
