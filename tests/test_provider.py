"""Tests for the calendar-data provider (file loading, date range, HTTP client)."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from mga_report.normalize import PayloadValidationError
from mga_report.provider import (
    CalendarClient,
    CalendarFetchError,
    load_calendar_file,
    parse_calendar_payload,
    resolve_date_range,
)

PAYLOAD = {
    "calendars": [
        {
            "id": "cal-1",
            "calendarType": "COMMITTEE_REPORT",
            "calendarNumber": 12,
            "calendarDate": "2025-03-10",
            "committee": {"id": "C1", "name": "Judicial Proceedings", "abbreviation": "JPR"},
            "items": [{"id": "i1", "position": 1, "billNumber": "SB0123", "bill": {"billNumber": "SB0123"}}],
        },
        "garbage",
    ]
}


class TestParseCalendarPayload:
    def test_wrapped_payload(self) -> None:
        entries = parse_calendar_payload(PAYLOAD)
        assert [e.id for e in entries] == ["cal-1"]
        assert entries[0].items[0].bill.bill_number == "SB0123"

    def test_bare_list(self) -> None:
        assert len(parse_calendar_payload(PAYLOAD["calendars"])) == 1

    def test_not_a_list(self) -> None:
        assert parse_calendar_payload({"calendars": "nope"}) == []
        assert parse_calendar_payload(None) == []

    def test_strict_raises(self) -> None:
        with pytest.raises(PayloadValidationError):
            parse_calendar_payload(PAYLOAD, strict=True)


class TestLoadCalendarFile:
    def test_reads_json(self, tmp_path: Path) -> None:
        path = tmp_path / "calendar.json"
        path.write_text(json.dumps(PAYLOAD))
        assert [e.id for e in load_calendar_file(path)] == ["cal-1"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CalendarFetchError, match="Unable to load calendar data"):
            load_calendar_file(tmp_path / "missing.json")

    def test_bad_json(self, tmp_path: Path) -> None:
        path = tmp_path / "calendar.json"
        path.write_text("{not json")
        with pytest.raises(CalendarFetchError):
            load_calendar_file(path)


class TestResolveDateRange:
    TODAY = date(2025, 3, 10)

    def test_explicit_range(self) -> None:
        assert resolve_date_range("2025-03-01", "2025-03-05", today=self.TODAY) == (
            date(2025, 3, 1),
            date(2025, 3, 5),
        )

    def test_reversed_range_swapped(self) -> None:
        assert resolve_date_range("2025-03-05", "2025-03-01", today=self.TODAY) == (
            date(2025, 3, 1),
            date(2025, 3, 5),
        )

    def test_single_date_fallback(self) -> None:
        assert resolve_date_range(None, "bad", single="2025-03-07", today=self.TODAY) == (
            date(2025, 3, 7),
            date(2025, 3, 7),
        )

    def test_start_only_uses_single_date_for_both_ends(self) -> None:
        assert resolve_date_range("2025-03-01", None, single="2025-03-07", today=self.TODAY) == (
            date(2025, 3, 7),
            date(2025, 3, 7),
        )

    def test_start_only_without_single_uses_today(self) -> None:
        assert resolve_date_range("2025-03-01", today=self.TODAY) == (self.TODAY, self.TODAY)

    def test_non_date_only_bound_rejected(self) -> None:
        assert resolve_date_range("2025-03-01", "20250305", today=self.TODAY) == (self.TODAY, self.TODAY)

    def test_today_fallback(self) -> None:
        assert resolve_date_range(today=self.TODAY) == (self.TODAY, self.TODAY)


def _client(response: MagicMock | None = None, error: Exception | None = None) -> CalendarClient:
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return CalendarClient(base_url="https://example.test/", api_key="secret", _session=session)


class TestCalendarClient:
    def test_fetch_builds_request(self) -> None:
        response = MagicMock()
        response.json.return_value = PAYLOAD
        client = _client(response)

        entries = client.fetch_calendars(
            date(2025, 3, 10), date(2025, 3, 12), hide_unanimous=True, flagged_only=True
        )

        assert [e.id for e in entries] == ["cal-1"]
        url = client._session.get.call_args.args[0]
        kwargs = client._session.get.call_args.kwargs
        assert url == "https://example.test/api/calendar"
        assert kwargs["params"] == {
            "startDate": "2025-03-10",
            "endDate": "2025-03-12",
            "hideUnanimous": "true",
            "flaggedOnly": "true",
        }
        assert kwargs["timeout"] == 20
        assert client._session.headers["Authorization"] == "Bearer secret"

    def test_retry_adapter_mounted(self) -> None:
        client = _client(MagicMock())
        mounted = [c.args[0] for c in client._session.mount.call_args_list]
        assert mounted == ["https://", "http://"]

    def test_transport_error_wrapped(self) -> None:
        client = _client(error=requests.ConnectionError("boom"))
        with pytest.raises(CalendarFetchError, match="boom"):
            client.fetch_calendars(date(2025, 3, 10), date(2025, 3, 10))

    def test_http_error_wrapped(self) -> None:
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        client = _client(response)
        with pytest.raises(CalendarFetchError, match="503"):
            client.fetch_calendars(date(2025, 3, 10), date(2025, 3, 10))

    def test_missing_base_url(self) -> None:
        client = CalendarClient(base_url="", _session=MagicMock(spec=requests.Session))
        with pytest.raises(CalendarFetchError, match="base URL"):
            client.fetch_calendars(date(2025, 3, 10), date(2025, 3, 10))
