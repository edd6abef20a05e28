"""Shared data normalization utilities.

Centralizes vote, count, party and date normalization so the tally,
reconciliation, party-line and calendar modules agree on one reading of the
upstream JSON.

**Vote normalization:**
    Ballot text is trimmed and upper-cased, then collapsed to ``"YEA"`` or
    ``"NAY"``.  Anything else (abstain, excused, absent, blank) is ``None``
    and never counts toward a binary tally.

**Date normalization:**
    Calendar dates arrive as bare ``YYYY-MM-DD`` strings, full ISO
    timestamps, or ``date``/``datetime`` objects.  All are read as UTC; a bare
    date is UTC midnight, never local midnight.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, timezone
from typing import Any

LOGGER = logging.getLogger(__name__)

_ISO_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_YEA_TOKENS: frozenset[str] = frozenset({"YEA", "AYE", "YES", "Y"})
_NAY_TOKENS: frozenset[str] = frozenset({"NAY", "NO", "N"})

_PARTY_MAP = {
    "d": "Democrat",
    "dem": "Democrat",
    "democrat": "Democrat",
    "democratic": "Democrat",
    "r": "Republican",
    "rep": "Republican",
    "gop": "Republican",
    "republican": "Republican",
}

_PARTY_KEY_MAP = {
    "d": "D",
    "dem": "D",
    "democrat": "D",
    "democratic": "D",
    "r": "R",
    "rep": "R",
    "republican": "R",
    "i": "I",
    "ind": "I",
    "independent": "I",
}


def normalize_vote(raw: str | None) -> str | None:
    """Collapse free-text ballot values to ``"YEA"`` / ``"NAY"`` / ``None``.

    Examples::

        >>> normalize_vote(" aye ")
        'YEA'
        >>> normalize_vote("No")
        'NAY'
        >>> normalize_vote("EXCUSED") is None
        True
    """
    if not isinstance(raw, str):
        return None
    val = raw.strip().upper()
    if val in _YEA_TOKENS:
        return "YEA"
    if val in _NAY_TOKENS:
        return "NAY"
    return None


def to_int(value: Any) -> int | None:
    """Coerce a finite number or numeric string to ``int``; else ``None``.

    Upstream counts sometimes arrive as strings (``"7"``).  Booleans are not
    treated as numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        if not math.isfinite(number) or not number.is_integer():
            return None
        return int(number)
    return None


def normalize_party(raw: str | None) -> str | None:
    """Return ``"Democrat"`` / ``"Republican"`` or ``None`` for anything else."""
    if not raw or not isinstance(raw, str):
        return None
    return _PARTY_MAP.get(raw.strip().lower())


def normalize_party_key(raw: str) -> str:
    """Short party key for party-count payloads: ``D``, ``R``, ``I`` or the
    upper-cased raw key (max 8 chars)."""
    key = raw.strip().lower()
    return _PARTY_KEY_MAP.get(key, raw.strip().upper()[:8])


def normalize_source(raw: str | None) -> str:
    if not raw or not isinstance(raw, str):
        return ""
    return raw.strip().upper()


# ── Dates ────────────────────────────────────────────────────────────────────


def is_iso_date_only(value: Any) -> bool:
    return isinstance(value, str) and bool(_ISO_DATE_ONLY_RE.match(value.strip()))


def parse_calendar_date(value: Any) -> datetime | None:
    """Parse a calendar date into a UTC-aware ``datetime``.

    Returns ``None`` for empty or unparseable input.

    Examples::

        >>> parse_calendar_date("2025-03-10")
        datetime.datetime(2025, 3, 10, 0, 0, tzinfo=datetime.timezone.utc)
        >>> parse_calendar_date("2025-03-10T04:00:00.000Z").hour
        4
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if is_iso_date_only(text):
        try:
            d = date.fromisoformat(text)
        except ValueError:
            LOGGER.debug("parse_calendar_date: invalid date %r", value)
            return None
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)

    # fromisoformat does not accept a trailing "Z" before Python 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        LOGGER.debug("parse_calendar_date: unparseable date %r", value)
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_long_date(dt: datetime) -> str:
    """``Monday, March 10, 2025`` for the UTC calendar day of *dt*."""
    dt = dt.astimezone(timezone.utc)
    return f"{dt:%A}, {dt:%B} {dt.day}, {dt.year}"


# ── Payload validation ───────────────────────────────────────────────────────


class PayloadValidationError(ValueError):
    """Raised when a calendar payload fails strict validation."""


def validate_calendar_dict(d: Any, *, strict: bool = False) -> list[str]:
    """Validate one calendar dict from the calendar-data provider.

    Returns a list of warning messages. If ``strict`` is True, raises
    ``PayloadValidationError`` on the first critical issue.

    Critical (the calendar cannot be placed in a section):
        - not a dict
        - ``calendarType``: non-empty string
        - ``items``: a list when present

    Recommended:
        - ``calendarDate``: parseable date
        - committee reports should carry a committee
    """
    warnings: list[str] = []

    if not isinstance(d, dict):
        msg = f"Calendar entry is not a dict: {type(d).__name__}"
        if strict:
            raise PayloadValidationError(msg)
        return [msg]

    cal_id = d.get("id", "?")
    calendar_type = d.get("calendarType")
    if not calendar_type or not isinstance(calendar_type, str) or not calendar_type.strip():
        msg = f"Calendar missing required field 'calendarType': {cal_id}"
        if strict:
            raise PayloadValidationError(msg)
        warnings.append(msg)

    items = d.get("items")
    if items is not None and not isinstance(items, list):
        msg = f"Calendar {cal_id}: 'items' is not a list"
        if strict:
            raise PayloadValidationError(msg)
        warnings.append(msg)

    if parse_calendar_date(d.get("calendarDate")) is None:
        warnings.append(f"Calendar {cal_id}: unparseable calendarDate {d.get('calendarDate')!r}")

    if calendar_type == "COMMITTEE_REPORT" and not d.get("committee"):
        warnings.append(f"Calendar {cal_id}: committee report without committee")

    return warnings


def validate_calendar_payload(calendars: list, *, strict: bool = False) -> list[str]:
    """Validate every calendar in a provider payload and log a summary."""
    all_warnings: list[str] = []
    for cal in calendars:
        all_warnings.extend(validate_calendar_dict(cal, strict=strict))

    if all_warnings:
        LOGGER.warning(
            "Calendar payload validation: %d warnings across %d calendars",
            len(all_warnings),
            len(calendars),
        )
        for w in all_warnings[:10]:  # Log first 10
            LOGGER.warning("  %s", w)
        if len(all_warnings) > 10:
            LOGGER.warning("  ... and %d more", len(all_warnings) - 10)

    return all_warnings
