"""Calendar-data provider.

Loads calendar payloads either from a JSON file (offline) or from the
calendar API over HTTP.  This is the only module that performs I/O; the
report engine receives fully materialized :class:`CalendarEntry` objects.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .models import CalendarEntry
from .normalize import is_iso_date_only, validate_calendar_payload

LOGGER = logging.getLogger(__name__)


class CalendarFetchError(RuntimeError):
    """Raised when calendar data cannot be loaded from the API or disk."""


# ── Payload parsing ──────────────────────────────────────────────────────────


def parse_calendar_payload(payload: Any, *, strict: bool = False) -> list[CalendarEntry]:
    """Build calendar entries from ``{"calendars": [...]}`` or a bare list.

    Entries that are not dicts are dropped after validation logs them.
    """
    if isinstance(payload, dict):
        raw = payload.get("calendars")
    else:
        raw = payload
    if not isinstance(raw, list):
        LOGGER.warning("Calendar payload has no calendar list (got %s)", type(raw).__name__)
        return []

    validate_calendar_payload(raw, strict=strict)
    entries = [CalendarEntry.from_dict(d) for d in raw if isinstance(d, dict)]
    LOGGER.info("Parsed %d calendars", len(entries))
    return entries


def load_calendar_file(path: Path | str, *, strict: bool = False) -> list[CalendarEntry]:
    """Read a saved calendar API response from disk."""
    path = Path(path)
    try:
        with open(path) as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise CalendarFetchError(f"Unable to load calendar data from {path}: {exc}") from exc
    return parse_calendar_payload(payload, strict=strict)


# ── Date range ───────────────────────────────────────────────────────────────


def _parse_iso(value: str | None) -> date | None:
    if not is_iso_date_only(value):
        if value:
            LOGGER.debug("Ignoring invalid date %r", value)
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        LOGGER.debug("Ignoring invalid date %r", value)
        return None


def resolve_date_range(
    start: str | None = None,
    end: str | None = None,
    single: str | None = None,
    today: date | None = None,
) -> tuple[date, date]:
    """Resolve the ``(start, end)`` dates of a calendar request.

    The explicit range is used only when both bounds are valid
    ``YYYY-MM-DD`` dates.  Otherwise *single* (or *today*) is used for both
    ends.  A reversed range is swapped.
    """
    start_date = _parse_iso(start)
    end_date = _parse_iso(end)
    if start_date is None or end_date is None:
        start_date = end_date = _parse_iso(single) or today or date.today()
    if start_date > end_date:
        start_date, end_date = end_date, start_date
    return start_date, end_date


# ── HTTP client ──────────────────────────────────────────────────────────────


@dataclass
class CalendarClient:
    base_url: str
    api_key: str = ""
    timeout_seconds: int = 20
    _session: requests.Session = field(default_factory=requests.Session, repr=False)

    def __post_init__(self) -> None:
        """Configure retry adapter for resilient HTTP requests."""
        retry_strategy = Retry(
            total=3,
            backoff_factor=1.0,
            status_forcelist=[429, 500, 502, 503, 504],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        if self.api_key:
            self._session.headers["Authorization"] = f"Bearer {self.api_key}"

    def fetch_calendars(
        self,
        start: date,
        end: date,
        *,
        hide_unanimous: bool = False,
        flagged_only: bool = False,
    ) -> list[CalendarEntry]:
        if not self.base_url:
            raise CalendarFetchError("No calendar API base URL configured")

        url = f"{self.base_url.rstrip('/')}/api/calendar"
        params = {
            "startDate": start.isoformat(),
            "endDate": end.isoformat(),
        }
        if hide_unanimous:
            params["hideUnanimous"] = "true"
        if flagged_only:
            params["flaggedOnly"] = "true"

        LOGGER.info("Fetching calendars %s..%s from %s", params["startDate"], params["endDate"], url)
        try:
            resp = self._session.get(url, params=params, timeout=self.timeout_seconds)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            LOGGER.warning("Calendar fetch from %s failed: %s", url, exc)
            raise CalendarFetchError(f"Unable to load calendar data: {exc}") from exc
        except ValueError as exc:
            LOGGER.warning("Calendar API at %s returned invalid JSON: %s", url, exc)
            raise CalendarFetchError(f"Unable to load calendar data: {exc}") from exc

        return parse_calendar_payload(payload)
