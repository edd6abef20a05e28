"""Vote tally extraction.

One adapter per upstream shape, each mapping into :class:`VoteTally`:

- :func:`extract_counts` -- top-level action fields, falling back to a nested
  ``voteCounts`` object (alternate spellings such as ``abstains``).
- :func:`extract_counts_from_vote_ai_result` -- the AI-extracted roll call
  stored at ``dataSource.voteAiResult.vote`` (prefers ``totalsRow``).
- :func:`extract_party_breakdown` -- alert/event payloads carrying per-party
  yes/no counts instead of individual ballots.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .models import BillAction, VoteTally
from .normalize import normalize_party_key, to_int

# (VoteTally attribute, top-level keys, nested voteCounts keys)
_COUNT_FIELDS: tuple[tuple[str, tuple[str, ...], tuple[str, ...]], ...] = (
    ("yes_votes", ("yesVotes",), ("yesVotes",)),
    ("no_votes", ("noVotes",), ("noVotes",)),
    ("abstain", ("abstain", "abstains"), ("abstain", "abstains")),
    ("excused", ("excused",), ("excused",)),
    ("absent", ("absent",), ("absent",)),
    ("not_voting", ("notVoting",), ("notVoting",)),
)

# AI totals use roll-call vocabulary
_AI_FIELDS: tuple[tuple[str, str], ...] = (
    ("yes_votes", "yeas"),
    ("no_votes", "nays"),
    ("abstain", "abstain"),
    ("excused", "excused"),
    ("absent", "absent"),
    ("not_voting", "notVoting"),
)


def _action_as_mapping(action: BillAction | Mapping[str, Any] | None) -> tuple[dict, dict]:
    """Return ``(top_level, nested_vote_counts)`` for an action or raw dict."""
    if action is None:
        return {}, {}
    if isinstance(action, BillAction):
        top = {
            "yesVotes": action.yes_votes,
            "noVotes": action.no_votes,
            "abstain": action.abstain,
            "excused": action.excused,
            "absent": action.absent,
            "notVoting": action.not_voting,
        }
        return top, dict(action.vote_counts or {})
    if isinstance(action, Mapping):
        nested = action.get("voteCounts")
        return dict(action), dict(nested) if isinstance(nested, Mapping) else {}
    return {}, {}


def _first_present(source: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = source.get(key)
        if value is not None:
            return value
    return None


def extract_counts(action: BillAction | Mapping[str, Any] | None) -> VoteTally:
    """Build a fully-populated tally for *action*.

    A top-level field wins over the nested ``voteCounts`` field when both are
    present; a field neither supplies (or supplies as non-numeric) is 0.
    """
    top, nested = _action_as_mapping(action)
    values: dict[str, int] = {}
    for attr, top_keys, nested_keys in _COUNT_FIELDS:
        raw = _first_present(top, top_keys)
        if raw is None:
            raw = _first_present(nested, nested_keys)
        values[attr] = to_int(raw) or 0
    return VoteTally(**values)


def vote_ai_payload(action: BillAction | Mapping[str, Any] | None) -> dict | None:
    """Return the AI ``vote`` object stored on an action, if any."""
    if action is None:
        return None
    if isinstance(action, BillAction):
        data_source = action.data_source
    elif isinstance(action, Mapping):
        data_source = action.get("dataSource")
    else:
        return None
    if not isinstance(data_source, Mapping):
        return None
    ai_result = data_source.get("voteAiResult")
    if not isinstance(ai_result, Mapping):
        return None
    vote = ai_result.get("vote")
    return dict(vote) if isinstance(vote, Mapping) else None


def extract_counts_from_vote_ai_result(
    action: BillAction | Mapping[str, Any] | None,
) -> VoteTally | None:
    """Tally from the AI-extracted roll call, or ``None`` if there is none."""
    vote = vote_ai_payload(action)
    if vote is None:
        return None
    totals = vote.get("totalsRow")
    source = totals if isinstance(totals, Mapping) else vote
    return VoteTally(**{attr: to_int(source.get(key)) or 0 for attr, key in _AI_FIELDS})


def has_any_counts(tally: VoteTally | None) -> bool:
    """True iff any of the six tally fields is strictly positive."""
    if tally is None:
        return False
    return (
        tally.yes_votes > 0
        or tally.no_votes > 0
        or tally.abstain > 0
        or tally.excused > 0
        or tally.absent > 0
        or tally.not_voting > 0
    )


# ── Display formatting ───────────────────────────────────────────────────────


def format_counts_short(tally: VoteTally | None) -> str:
    if tally is None:
        return "--"
    return f"{tally.yes_votes}-{tally.no_votes}"


def format_counts_breakdown(tally: VoteTally | None) -> str | None:
    """Yea-nay breakdown for the report's vote column."""
    if tally is None:
        return None
    # TODO: append abstain/absent once the printed report has room for them
    return f"{tally.yes_votes}-{tally.no_votes}"


def format_counts_inline(tally: VoteTally | None) -> str:
    """``Yes 8 · No 2 · Excused 1`` -- zero fields beyond yes/no are omitted."""
    if tally is None:
        return ""
    parts = [f"Yes {tally.yes_votes}", f"No {tally.no_votes}"]
    for label, value in (
        ("Abstain", tally.abstain),
        ("Excused", tally.excused),
        ("Absent", tally.absent),
        ("Not voting", tally.not_voting),
    ):
        if value > 0:
            parts.append(f"{label} {value}")
    return " · ".join(parts)


# ── Party-count payloads ─────────────────────────────────────────────────────


@dataclass
class PartyBreakdown:
    """Per-party yes/no counts, keyed by short party key (``D``/``R``/``I``)."""

    yes: dict[str, int] = field(default_factory=dict)
    no: dict[str, int] = field(default_factory=dict)


def _normalize_party_counts(obj: Any) -> dict[str, int]:
    if not isinstance(obj, Mapping):
        return {}
    out: dict[str, int] = {}
    for key, value in obj.items():
        n = to_int(value)
        if n is None:
            continue
        party = normalize_party_key(str(key))
        out[party] = out.get(party, 0) + n
    return out


def extract_party_breakdown(payload: Any) -> PartyBreakdown | None:
    """Read ``partyBreakdown`` (or its aliases) from an event payload."""
    if not isinstance(payload, Mapping):
        return None
    raw = None
    for key in ("partyBreakdown", "party_breakdown", "breakdownByParty", "party"):
        if isinstance(payload.get(key), Mapping):
            raw = payload[key]
            break
    if raw is None:
        return None
    yes_raw = _first_present(raw, ("yes", "yea", "yeas"))
    no_raw = _first_present(raw, ("no", "nay", "nays"))
    return PartyBreakdown(yes=_normalize_party_counts(yes_raw), no=_normalize_party_counts(no_raw))


def format_party_breakdown_line(breakdown: PartyBreakdown | None) -> str | None:
    if breakdown is None:
        return None
    yes_parts = ", ".join(f"{p} {n}" for p, n in breakdown.yes.items() if n > 0)
    no_parts = ", ".join(f"{p} {n}" for p, n in breakdown.no.items() if n > 0)
    if not yes_parts and not no_parts:
        return None
    return f"Yes: {yes_parts or '-'} | No: {no_parts or '-'}"
