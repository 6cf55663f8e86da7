"""Rich-based terminal report renderer with JSON/CSV support."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ContributionData, StatsData


def _format_number(n: int) -> str:
    return f"{n:,}"


def _make_bar(value: int, maximum: int, width: int = 20) -> str:
    filled = round(value / maximum * width) if maximum else 0
    return "█" * filled + "░" * (width - filled)


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def render_report(
    data: ContributionData,
    stats: StatsData,
    recent_days: int = 14,
    output_file: str | None = None,
) -> None:
    """Render contribution data and derived stats to the terminal using rich."""
    if output_file:
        string_io = io.StringIO()
        console = Console(file=string_io, force_terminal=False, width=120)
    else:
        console = Console()

    period = ""
    if data.year_start or data.year_end:
        period = f"\nPeriod: {data.year_start or '...'} ~ {data.year_end or '...'}"

    console.print(Panel(
        Text(f"loc-graph: {data.username}{period}", justify="center"),
        style="bold cyan",
    ))
    console.print()

    if data.truncated or data.skipped_commits:
        console.print(
            f"[bold yellow]Warning:[/bold yellow] Partial result "
            f"({data.skipped_commits} commit(s) skipped"
            f"{', deadline reached' if data.truncated else ''})"
        )
        console.print()

    console.print("[bold]Summary[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Repositories", _format_number(data.repositories))
    summary.add_row("Lines Changed", _format_number(stats.total_lines))
    summary.add_row("Lines Added", "+" + _format_number(stats.total_lines_added))
    summary.add_row("Lines Deleted", "-" + _format_number(stats.total_lines_deleted))
    summary.add_row("Commits", _format_number(stats.total_commits))
    summary.add_row("Filtered Commits", _format_number(stats.filtered_commits))
    summary.add_row("Active Days", _format_number(stats.contributing_days))
    summary.add_row("Longest Streak", f"{stats.longest_streak} days")
    summary.add_row("Current Streak", f"{stats.current_streak} days")
    summary.add_row("Avg / Day", _format_number(round(stats.avg_lines_per_day)))
    summary.add_row("Avg / Commit", _format_number(round(stats.avg_lines_per_commit)))
    console.print(summary)
    console.print()

    days = data.sorted_days()[-recent_days:] if recent_days > 0 else []
    if days:
        console.print(f"[bold]Recent Activity (last {len(days)} active days)[/bold]")
        day_table = Table(show_header=True, header_style="bold")
        day_table.add_column("Date")
        day_table.add_column("Bar")
        day_table.add_column("Added", justify="right")
        day_table.add_column("Deleted", justify="right")
        day_table.add_column("Commits", justify="right")

        peak = max(d.total_lines for d in days)
        for d in days:
            day_table.add_row(
                d.date,
                _make_bar(d.total_lines, peak),
                "+" + _format_number(d.lines_added),
                "-" + _format_number(d.lines_deleted),
                _format_number(d.commits),
            )
        console.print(day_table)
        console.print()

    if data.recent_commits:
        console.print("[bold]Recent Commits[/bold]")
        commit_table = Table(show_header=True, header_style="bold")
        commit_table.add_column("Date")
        commit_table.add_column("Repository", style="cyan")
        commit_table.add_column("Message")
        commit_table.add_column("Lines", justify="right")
        commit_table.add_column("SHA", style="dim")
        for c in data.recent_commits:
            commit_table.add_row(c.date, c.repo, c.message, _format_number(c.lines), c.sha)
        console.print(commit_table)
        console.print()

    if output_file:
        _write_to_file(string_io.getvalue(), output_file)


def render_json(
    data: ContributionData, stats: StatsData, output_file: str | None = None
) -> None:
    """Render a lossless JSON snapshot of the contribution data plus its stats."""
    snapshot = {"contributions": data.to_dict(), "stats": asdict(stats)}
    content = json.dumps(snapshot, indent=2, ensure_ascii=False)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)


def render_csv(data: ContributionData, output_file: str | None = None) -> None:
    """Render the daily series as CSV, one row per day in date order."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["date", "lines_added", "lines_deleted", "total_lines", "commits"])
    for d in data.sorted_days():
        writer.writerow([d.date, d.lines_added, d.lines_deleted, d.total_lines, d.commits])
    content = output.getvalue()
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content, end="")


def load_snapshot(path: str) -> ContributionData:
    """Load the ContributionData written by :func:`render_json`."""
    with open(path, encoding="utf-8") as f:
        snapshot = json.load(f)
    return ContributionData.from_dict(snapshot.get("contributions", snapshot))
