"""Command-line interface for loc-graph."""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime, timedelta, timezone

import click
from rich.logging import RichHandler

from . import __version__
from .config import RunLimits, filter_config_from_env, make_filter_config
from .errors import LocGraphError

_RELATIVE_DATE_RE = re.compile(r"^(\d+)([dwmy])$")
_UNIT_DAYS = {"d": 1, "w": 7, "m": 30, "y": 365}


def _parse_relative_date(value: str) -> str | None:
    """Convert '7d', '2w', '3m', '1y' to a YYYY-MM-DD string, or None."""
    match = _RELATIVE_DATE_RE.match(value)
    if not match:
        return None
    amount, unit = int(match.group(1)), match.group(2)
    return (datetime.now(timezone.utc) - timedelta(days=amount * _UNIT_DAYS[unit])).strftime("%Y-%m-%d")


def _resolve_date(value: str | None) -> str | None:
    if value is None:
        return None
    return _parse_relative_date(value) or value


def _to_datetime(value: str | None, option: str) -> datetime | None:
    resolved = _resolve_date(value)
    if resolved is None:
        return None
    try:
        parsed = datetime.strptime(resolved, "%Y-%m-%d")
    except ValueError:
        raise click.BadParameter(
            f"expected YYYY-MM-DD or a relative date like 30d, got {value!r}",
            param_hint=option,
        ) from None
    return parsed.replace(tzinfo=timezone.utc)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


@click.command()
@click.argument("username")
@click.option("--token", envvar="GITHUB_TOKEN", required=True, help="GitHub token (or set GITHUB_TOKEN).")
@click.option("--days", default=365, show_default=True, help="Window size in days back from now.")
@click.option("--since", default=None, help="Start date (YYYY-MM-DD or relative: 7d, 2w, 3m, 1y).")
@click.option("--until", default=None, help="End date, exclusive (YYYY-MM-DD or relative).")
@click.option(
    "--exclude-extension", "exclude_extensions", multiple=True,
    help="File extension to ignore (repeatable). Replaces the defaults.",
)
@click.option(
    "--exclude-path", "exclude_paths", multiple=True,
    help="Path substring to ignore (repeatable). Replaces the defaults.",
)
@click.option("--max-lines-per-file", type=int, default=None, help="Ignore files with more added lines [default: 2000].")
@click.option("--min-lines-per-commit", type=int, default=None, help="Ignore smaller commits [default: 0].")
@click.option("--max-repos", default=50, show_default=True, help="Maximum repositories to scan.")
@click.option("--max-commits", default=200, show_default=True, help="Maximum commits per repository.")
@click.option(
    "--affiliation", "affiliations", multiple=True,
    type=click.Choice(["OWNER", "COLLABORATOR", "ORGANIZATION_MEMBER"], case_sensitive=False),
    help="Repository affiliation to include (repeatable, default OWNER).",
)
@click.option("--concurrency", default=8, show_default=True, help="Repositories scanned in parallel.")
@click.option("--deadline", type=float, default=None, help="Stop fetching after this many seconds.")
@click.option("--recent-commits", default=10, show_default=True, help="Number of recent commits to list.")
@click.option(
    "--format", "output_format", type=click.Choice(["table", "json", "csv"]),
    default="table", show_default=True, help="Output format.",
)
@click.option("--output", "-o", "output_file", default=None, help="Write output to file.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__)
def main(
    username: str,
    token: str,
    days: int,
    since: str | None,
    until: str | None,
    exclude_extensions: tuple[str, ...],
    exclude_paths: tuple[str, ...],
    max_lines_per_file: int | None,
    min_lines_per_commit: int | None,
    max_repos: int,
    max_commits: int,
    affiliations: tuple[str, ...],
    concurrency: int,
    deadline: float | None,
    recent_commits: int,
    output_format: str,
    output_file: str | None,
    verbose: bool,
) -> None:
    """Measure USERNAME's GitHub activity in lines of code changed."""
    from .orchestrator import run

    _setup_logging(verbose)

    try:
        env_config = filter_config_from_env()
        config = make_filter_config(
            exclude_extensions=exclude_extensions or env_config.exclude_extensions,
            exclude_paths=exclude_paths or env_config.exclude_paths,
            max_lines_per_file=(
                env_config.max_lines_per_file if max_lines_per_file is None else max_lines_per_file
            ),
            min_lines_per_commit=(
                env_config.min_lines_per_commit if min_lines_per_commit is None else min_lines_per_commit
            ),
        )
        limits = RunLimits(
            days_back=days,
            max_repos=max_repos,
            max_commits_per_repo=max_commits,
            affiliations=tuple(a.upper() for a in affiliations) or ("OWNER",),
            concurrency=concurrency,
            deadline_seconds=deadline,
            recent_commits=recent_commits,
        )
        asyncio.run(run(
            username=username,
            token=token,
            config=config,
            limits=limits,
            since=_to_datetime(since, "--since"),
            until=_to_datetime(until, "--until"),
            output_format=output_format,
            output_file=output_file,
        ))
    except LocGraphError as exc:
        raise click.ClickException(str(exc)) from exc
