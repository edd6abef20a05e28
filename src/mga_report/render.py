"""Terminal rendering of a :class:`CalendarReport` with rich."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import PartyLineLabel
from .report import CalendarReport, ReportGroup, ReportRow, ReportSection

_PATTERN_STYLES = {
    PartyLineLabel.UNANIMOUS: "green",
    PartyLineLabel.PARTY_LINE: "bold red",
    PartyLineLabel.PARTY_SPLIT: "yellow",
}


def _bill_cell(row: ReportRow) -> str:
    text = escape(row.bill_number)
    if row.is_flagged:
        text = f"[bold magenta]*[/] {text}"
    if row.cross_file_external_id:
        text += f"\n[dim]x-file {escape(row.cross_file_external_id)}[/]"
    return text


def _title_cell(row: ReportRow) -> str:
    lines = [escape(row.short_title)]
    if row.action_text:
        lines.append(f"[dim]{escape(row.action_text)}[/]")
    if row.item_notes:
        lines.append(f"[italic]{escape(row.item_notes)}[/]")
    for note in row.notes:
        lines.append(f"[cyan]note:[/] {escape(note)}")
    return "\n".join(lines)


def _vote_cell(row: ReportRow) -> str:
    text = escape(row.counts_display)
    if row.used_manual_counts_to_fill_mga:
        text += " [dim](manual)[/]"
    if row.status_text:
        text += f"\n[dim]{escape(row.status_text)}[/]"
    return text


def _pattern_cell(row: ReportRow) -> str:
    if row.pattern_label is None:
        return "[dim]-[/]"
    style = _PATTERN_STYLES.get(row.pattern_label, "")
    return f"[{style}]{row.pattern_label.value}[/]"


def group_table(group: ReportGroup) -> Table:
    table = Table(title=escape(group.heading), title_style="bold", show_lines=True, expand=True)
    table.add_column("Bill", style="bold", no_wrap=True)
    table.add_column("Sponsor")
    table.add_column("Title")
    table.add_column("Cmte", justify="center")
    table.add_column("Vote", justify="right")
    table.add_column("Pattern")
    for row in group.rows:
        table.add_row(
            _bill_cell(row),
            escape(row.sponsor),
            _title_cell(row),
            escape(row.committee_abbrev),
            _vote_cell(row),
            _pattern_cell(row),
        )
    return table


def render_section(console: Console, section: ReportSection) -> None:
    header = f"[bold cyan]== {escape(section.title)} ==[/]"
    if section.date_label:
        header += f"  [dim]{escape(section.date_label)}[/]"
    console.print()
    console.print(header)
    if not section.groups:
        console.print("[dim]No Bills on this calendar[/]")
        return
    for group in section.groups:
        if not group.rows:
            console.print(f"[bold]{escape(group.heading)}[/]  [dim]no bills[/]")
            continue
        console.print(group_table(group))


def render_report(report: CalendarReport, console: Console | None = None) -> None:
    console = console or Console()
    for section in report.sections:
        render_section(console, section)
    console.print()
    console.print(f"[dim]{report.row_count} bills across {len(report.sections)} sections[/]")
