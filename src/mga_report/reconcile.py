"""Committee vote reconciliation.

A bill can carry several records of the same committee vote: the official
scrape of the legislature's site (``MGA_SCRAPE``), a manual entry keyed in by
staff before the official tally is posted, and tallies extracted by the AI
pipeline from the vote PDF.  This module picks the single record the report
shows and the counts that go with it.

Two precedence chains exist and both are kept:

- :func:`pick_committee_vote_for_committee` (``PREFER_MGA_COUNTS``) --
  used per report row, scoped to one committee.
- :func:`pick_preferred_committee_vote_from_actions` (``PREFER_ANY_COUNTS``)
  -- coarser, over every committee-vote action; used as the display
  fallback when the scoped pick finds nothing.

:func:`reconcile_committee_vote` is the single entry point over both.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from .models import ActionSource, BillAction, BillVote, ReconciliationResult, VoteTally
from .normalize import normalize_source, parse_calendar_date
from .tallies import extract_counts, extract_counts_from_vote_ai_result, has_any_counts

LOGGER = logging.getLogger(__name__)


class ReconciliationPolicy(str, Enum):
    PREFER_MGA_COUNTS = "preferMgaCounts"
    PREFER_ANY_COUNTS = "preferAnyCounts"


# ── Ordering ─────────────────────────────────────────────────────────────────


def order_actions(actions: Iterable[BillAction] | None) -> list[BillAction]:
    """Return a new list ordered newest-first by ``action_date`` then ``sequence``.

    The sort is stable: actions sharing a date/sequence, and undated actions
    (which go after dated ones), keep their input order.  Input that already
    follows the upstream newest-first contract comes back unchanged.
    """
    indexed = list(enumerate(actions or []))

    def _key(pair: tuple[int, BillAction]) -> tuple[int, float, int, int]:
        idx, action = pair
        dt = parse_calendar_date(action.action_date)
        if dt is None:
            return (1, 0.0, 0, idx)
        seq = action.sequence if action.sequence is not None else 0
        return (0, -dt.timestamp(), -seq, idx)

    return [action for _, action in sorted(indexed, key=_key)]


def _is_mga(action: BillAction) -> bool:
    return normalize_source(action.source).startswith("MGA")


def _is_manual(action: BillAction) -> bool:
    return normalize_source(action.source) == ActionSource.MANUAL.value


# ── Primary: scoped to one committee ─────────────────────────────────────────


def pick_committee_vote_for_committee(
    actions: Iterable[BillAction] | None,
    committee_id: str | int | None,
) -> ReconciliationResult:
    """Select the authoritative committee vote for *committee_id*.

    Precedence:

    1. Official (MGA) action with real counts.
    2. Official action for the narrative, manual counts filling it in
       (``used_manual_counts_to_fill_mga``).
    3. Manual action, even without counts (motion/result still shows).
    4. Official action with empty counts.

    A missing committee id or no matching actions is a normal outcome and
    yields an empty :class:`ReconciliationResult`.
    """
    if committee_id is None or str(committee_id).strip() == "":
        return ReconciliationResult()

    target = str(committee_id)
    relevant = [a for a in order_actions(actions) if str(a.committee_id or "") == target]
    if not relevant:
        return ReconciliationResult()

    best_mga = next((a for a in relevant if _is_mga(a)), None)
    best_manual = next((a for a in relevant if _is_manual(a)), None)

    mga_counts = extract_counts(best_mga) if best_mga else None
    manual_counts = extract_counts(best_manual) if best_manual else None

    if best_mga is not None and has_any_counts(mga_counts):
        return ReconciliationResult(
            action=best_mga,
            counts=mga_counts,
            source=best_mga.source or ActionSource.MGA_SCRAPE.value,
            manual_action=best_manual,
        )

    if best_mga is not None and best_manual is not None and has_any_counts(manual_counts):
        LOGGER.debug(
            "Committee %s: filling official action %s with manual counts from %s",
            target,
            best_mga.id,
            best_manual.id,
        )
        return ReconciliationResult(
            action=best_mga,
            counts=manual_counts,
            source=best_mga.source or ActionSource.MGA_SCRAPE.value,
            used_manual_counts_to_fill_mga=True,
            manual_action=best_manual,
        )

    if best_manual is not None:
        return ReconciliationResult(
            action=best_manual,
            counts=manual_counts,
            source=best_manual.source or ActionSource.MANUAL.value,
            manual_action=best_manual,
        )

    if best_mga is not None:
        return ReconciliationResult(
            action=best_mga,
            counts=mga_counts,
            source=best_mga.source or ActionSource.MGA_SCRAPE.value,
        )

    # Matching actions exist but none is official or manual.
    return ReconciliationResult()


# ── Fallback: any committee vote ─────────────────────────────────────────────


def pick_preferred_committee_vote_from_actions(
    actions: Iterable[BillAction] | None,
) -> ReconciliationResult:
    """Coarse pick over every committee-vote action on a bill.

    1. An action with an AI-extracted tally that has counts (AI counts used).
    2. A manual action with counts.
    3. Any action without an AI tally that has counts.
    4. The first committee-vote action.
    """
    committee_votes = [a for a in order_actions(actions) if a.is_committee_vote]
    if not committee_votes:
        return ReconciliationResult()

    for action in committee_votes:
        ai_counts = extract_counts_from_vote_ai_result(action)
        if ai_counts is not None and has_any_counts(ai_counts):
            return ReconciliationResult(action=action, counts=ai_counts, source=action.source)

    for action in committee_votes:
        if _is_manual(action):
            counts = extract_counts(action)
            if has_any_counts(counts):
                return ReconciliationResult(
                    action=action, counts=counts, source=action.source, manual_action=action
                )

    for action in committee_votes:
        if extract_counts_from_vote_ai_result(action) is not None:
            continue
        counts = extract_counts(action)
        if has_any_counts(counts):
            return ReconciliationResult(action=action, counts=counts, source=action.source)

    first = committee_votes[0]
    return ReconciliationResult(action=first, counts=extract_counts(first), source=first.source)


# ── Consolidated entry point ─────────────────────────────────────────────────


def reconcile_committee_vote(
    actions: Iterable[BillAction] | None,
    committee_id: str | int | None = None,
    *,
    policy: ReconciliationPolicy = ReconciliationPolicy.PREFER_MGA_COUNTS,
    fallback: bool = False,
) -> ReconciliationResult:
    """Pick a committee vote under *policy*.

    ``PREFER_MGA_COUNTS`` runs the committee-scoped chain; with ``fallback``
    the ``PREFER_ANY_COUNTS`` chain fills in when it finds no action.
    ``PREFER_ANY_COUNTS`` ignores *committee_id*.
    """
    action_list = list(actions or [])
    if policy == ReconciliationPolicy.PREFER_ANY_COUNTS:
        return pick_preferred_committee_vote_from_actions(action_list)

    result = pick_committee_vote_for_committee(action_list, committee_id)
    if result.action is None and fallback:
        return pick_preferred_committee_vote_from_actions(action_list)
    return result


# ── Helpers for report rows ──────────────────────────────────────────────────


def votes_for_action(
    votes: Iterable[BillVote] | None,
    action: BillAction | None,
) -> list[BillVote]:
    """Ballots recorded against *action* (ids compared as strings)."""
    if action is None or action.id is None:
        return []
    target = str(action.id)
    return [v for v in votes or [] if v.bill_action_id is not None and str(v.bill_action_id) == target]


def is_unanimous_vote_action(action: BillAction | None, counts: VoteTally | None = None) -> bool:
    """True for a vote with yeas and no nays, excused or non-voting members.

    When none of the tallies was recorded, falls back to the vote-result text
    ("Unanimous", "unanimously").
    """
    if action is None:
        return False
    if counts is None:
        recorded = (action.yes_votes, action.no_votes, action.excused, action.not_voting)
        if all(v is None for v in recorded):
            return "unanim" in (action.vote_result or "").lower()
        counts = extract_counts(action)
    return counts.yes_votes > 0 and counts.no_votes == 0 and counts.excused == 0 and counts.not_voting == 0
