#!/usr/bin/env python3
"""Print the floor calendar report.

Loads calendars from the calendar API (or a saved JSON response), reconciles
each bill's committee vote and prints the sectioned report.

Usage::

    python scripts/calendar_report.py --file cache/calendar.json
    python scripts/calendar_report.py --date 2025-03-10
    python scripts/calendar_report.py --start 2025-03-10 --end 2025-03-14
    python scripts/calendar_report.py --hide-calendars first,vetoed --hide-unanimous
    python scripts/calendar_report.py --flagged-only --json > report.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))

from mga_report import config  # noqa: E402
from mga_report.normalize import PayloadValidationError  # noqa: E402
from mga_report.provider import (  # noqa: E402
    CalendarClient,
    CalendarFetchError,
    load_calendar_file,
    resolve_date_range,
)
from mga_report.render import render_report  # noqa: E402
from mga_report.report import ReportOptions, build_calendar_report  # noqa: E402

console = Console(stderr=True)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Print the floor calendar report with reconciled committee votes.",
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Read a saved calendar API response instead of calling the API.",
    )
    parser.add_argument("--start", default=None, help="First calendar date (YYYY-MM-DD).")
    parser.add_argument("--end", default=None, help="Last calendar date (YYYY-MM-DD).")
    parser.add_argument(
        "--date",
        default=None,
        help="Single calendar date; used when --start/--end are missing (default: today).",
    )
    parser.add_argument(
        "--hide-calendars",
        default=config.HIDE_CALENDARS,
        help="Comma-separated sections to hide when empty: first, second, third, "
        "special, laid_over, vetoed (default: MGA_HIDE_CALENDARS).",
    )
    parser.add_argument(
        "--hide-unanimous",
        action="store_true",
        help="Drop bills whose committee vote was unanimous.",
    )
    parser.add_argument(
        "--flagged-only",
        action="store_true",
        help="Only include flagged bills.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of tables.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)-8s %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        if args.file is not None:
            entries = load_calendar_file(args.file)
        else:
            start, end = resolve_date_range(args.start, args.end, args.date)
            client = CalendarClient(
                base_url=config.API_BASE_URL,
                api_key=config.API_KEY,
                timeout_seconds=config.TIMEOUT_SECONDS,
            )
            entries = client.fetch_calendars(
                start,
                end,
                hide_unanimous=args.hide_unanimous,
                flagged_only=args.flagged_only,
            )
    except (CalendarFetchError, PayloadValidationError) as exc:
        console.print(f"[bold red]Unable to load calendar data:[/] {exc}")
        return 1

    options = ReportOptions.from_flags(
        hide_calendars=args.hide_calendars,
        hide_unanimous=args.hide_unanimous,
        flagged_only=args.flagged_only,
    )
    report = build_calendar_report(entries, options)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        render_report(report, Console())
    return 0


if __name__ == "__main__":
    sys.exit(main())
