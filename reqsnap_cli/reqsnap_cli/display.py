"""Rich output formatting for the reqsnap CLI.

All functions write to a :class:`rich.console.Console` instance (typically
bound to *stderr*) so that machine-readable output on *stdout* is never
polluted with human-readable decoration.  Values taken from responses are
escaped before being embedded in markup.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.json import JSON
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from reqsnap_engine.models.diff import DiffKind
from reqsnap_engine.models.report import Verdict

if TYPE_CHECKING:
    from pathlib import Path

    from reqsnap_engine.models.diff import DiffItem
    from reqsnap_engine.models.report import CheckReport
    from reqsnap_engine.models.snapshot import SnapshotRecord, SnapshotSummary


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_DIFF_ICONS: dict[DiffKind, str] = {
    DiffKind.ADDED: "+",
    DiffKind.REMOVED: "-",
    DiffKind.CHANGED: "~",
}

_VERDICT_LINES: dict[Verdict, str] = {
    Verdict.BREAKING: "[red bold]Result: BREAKING CHANGES DETECTED[/red bold]",
    Verdict.CHANGED: "[yellow bold]Result: Changes detected (non-breaking)[/yellow bold]",
    Verdict.IDENTICAL: "[green bold]Result: No changes. API response matches snapshot.[/green bold]",
}


def format_value(value: Any) -> str:
    """Render a JSON value compactly for a ``was:``/``now:`` line."""
    return json.dumps(value, ensure_ascii=False, default=str)


def _status_style(status: int) -> str:
    if status >= 500:
        return "red"
    if status >= 400:
        return "yellow"
    if status >= 300:
        return "cyan"
    return "green"


def _coloured_status(status: int) -> str:
    """Return a Rich markup string with the status code colour-coded by class."""
    colour = _status_style(status)
    return f"[{colour}]{status}[/{colour}]"


# ---------------------------------------------------------------------------
# save
# ---------------------------------------------------------------------------


def display_saved(console: Console, record: SnapshotRecord, path: Path) -> None:
    """Confirm a saved snapshot with a short summary."""
    body_type = "JSON" if record.body_is_json else "text"
    console.print("[green]Snapshot saved[/green]")
    console.print(f"  Status:    {_coloured_status(record.status)}")
    console.print(f"  Headers:   [dim]{len(record.headers)} fields[/dim]")
    console.print(f"  Body type: [dim]{body_type}[/dim]")
    console.print(f"  File:      [dim]{escape(str(path))}[/dim]")


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


def _diff_colour(diff: DiffItem) -> str:
    if diff.breaking:
        return "red"
    return "green" if diff.kind == DiffKind.ADDED else "yellow"


def _print_diff_group(console: Console, diffs: list[DiffItem]) -> None:
    for diff in diffs:
        icon = _DIFF_ICONS[diff.kind]
        item_colour = _diff_colour(diff)
        console.print(f"    [{item_colour}]{icon} {escape(diff.path)}[/{item_colour}]")
        if diff.has_old_value:
            console.print(f"      [dim]was: {escape(format_value(diff.old_value))}[/dim]")
        if diff.has_new_value:
            console.print(f"      [dim]now: {escape(format_value(diff.new_value))}[/dim]")


def display_check_report(console: Console, report: CheckReport) -> None:
    """Render the differences of a check grouped by severity, then the verdict."""
    console.print(f"[dim]Snapshot from: {escape(report.snapshot_timestamp)}[/dim]")
    console.print(f"[dim]Current check: {escape(report.current_timestamp)}[/dim]")
    console.print()

    if report.identical:
        console.print("  [green]No differences found[/green]")
    else:
        breaking = report.breaking_diffs
        if breaking:
            console.print(f"  [red bold]BREAKING CHANGES ({len(breaking)})[/red bold]")
            _print_diff_group(console, breaking)
            console.print()

        non_breaking = report.non_breaking_diffs
        if non_breaking:
            console.print(f"  [yellow]Changes ({len(non_breaking)})[/yellow]")
            _print_diff_group(console, non_breaking)

    console.print()
    console.print(_VERDICT_LINES[report.verdict])


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


def display_snapshot_list(console: Console, summaries: list[SnapshotSummary]) -> None:
    """Render stored snapshots as a table."""
    if not summaries:
        console.print("[dim]No snapshots found. Run 'reqsnap save <url>' to create one.[/dim]")
        return

    table = Table(
        title=f"Saved snapshots ({len(summaries)})",
        show_lines=False,
        pad_edge=True,
        expand=False,
    )
    table.add_column("Method", style="cyan")
    table.add_column("URL", style="bold", overflow="fold")
    table.add_column("Status", justify="right")
    table.add_column("Saved")
    table.add_column("File", style="dim")

    for summary in summaries:
        table.add_row(
            escape(summary.method),
            escape(summary.url),
            _coloured_status(summary.status),
            escape(summary.timestamp),
            escape(summary.file),
        )

    console.print(table)


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


def display_snapshot(console: Console, record: SnapshotRecord) -> None:
    """Render one stored snapshot: summary panel, headers table, body."""
    header_lines = [
        f"[bold]URL:[/bold]     {escape(record.url)}",
        f"[bold]Method:[/bold]  {escape(record.method)}",
        f"[bold]Status:[/bold]  {_coloured_status(record.status)}",
        f"[bold]Saved:[/bold]   {escape(record.timestamp)}",
    ]
    console.print(Panel("\n".join(header_lines), title="Snapshot", border_style="blue"))

    if record.headers:
        table = Table(title="Headers", show_lines=False, pad_edge=True, expand=False)
        table.add_column("Name", style="cyan")
        table.add_column("Value", overflow="fold")
        for name, value in record.headers.items():
            table.add_row(escape(name), escape(value))
        console.print(table)
    else:
        console.print("[dim]No headers recorded.[/dim]")

    console.print("[bold]Body:[/bold]")
    if isinstance(record.body, str):
        console.print(escape(record.body) if record.body else "[dim](empty)[/dim]")
    else:
        console.print(JSON.from_data(record.body, ensure_ascii=False))
