"""Floor calendar report for the Maryland General Assembly.

Turns the calendar API payload into a sectioned report of the bills on each
floor calendar, with the committee vote behind each bill:

- **Reconciliation**: picks the authoritative committee vote when the
  official scrape, manual entries and AI-extracted tallies disagree
- **Party line**: classifies each roll call as unanimous, party line or split
- **Calendar organization**: groups calendars into the fixed report sections

Build a report with ``mga_report.report.build_calendar_report`` or run
``python scripts/calendar_report.py``.
"""
