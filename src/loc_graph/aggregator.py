"""Aggregation of per-commit line deltas into a per-day time series."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import httpx

from .config import DEFAULT_FILTER_CONFIG, RunLimits
from .discovery import discover_repositories
from .errors import LocGraphError
from .filters import file_counts
from .github.client import GitHubClient
from .models import (
    CommitDetail,
    ContributionData,
    DailyContribution,
    FilterConfig,
    RecentCommit,
    RepositoryRef,
    merge_daily,
    newest_commits,
)

logger = logging.getLogger(__name__)

# Errors that cost a single commit or repository, never the whole run.
_RECOVERABLE = (LocGraphError, httpx.HTTPError)


@dataclass
class CommitSummary:
    additions: int = 0
    deletions: int = 0
    partially_filtered: bool = False

    @property
    def total(self) -> int:
        return self.additions + self.deletions


@dataclass
class RepoResult:
    repo: RepositoryRef
    daily: dict[str, DailyContribution] = field(default_factory=dict)
    filtered_commits: int = 0
    dropped_commits: int = 0
    skipped_commits: int = 0
    truncated: bool = False
    recent: list[RecentCommit] = field(default_factory=list)


def summarize_commit(detail: CommitDetail, config: FilterConfig) -> CommitSummary:
    """Sum the deltas of the files in *detail* that survive filtering."""
    summary = CommitSummary()
    for f in detail.files:
        if not file_counts(f, config):
            summary.partially_filtered = True
            continue
        summary.additions += f.additions
        summary.deletions += f.deletions
    return summary


def commit_counts(summary: CommitSummary, config: FilterConfig) -> bool:
    """A commit counts when something survived and it meets the minimum size."""
    return summary.total > 0 and summary.total >= config.min_lines_per_commit


def _day_key(timestamp: str) -> str:
    return timestamp[:10]


def _format_timestamp(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


async def _within_deadline(coro, deadline: float | None):
    """Await *coro*, raising asyncio.TimeoutError once *deadline* (loop time) passes."""
    if deadline is None:
        return await coro
    remaining = deadline - asyncio.get_running_loop().time()
    if remaining <= 0:
        coro.close()
        raise asyncio.TimeoutError
    return await asyncio.wait_for(coro, remaining)


def _recent_commit(repo: RepositoryRef, detail: CommitDetail, authored_at: str, lines: int) -> RecentCommit:
    return RecentCommit(
        authored_at=authored_at,
        repo=repo.full_name,
        sha=detail.sha[:7],
        message=detail.message.split("\n", 1)[0][:60],
        lines=lines,
    )


async def _aggregate_repo(
    client: GitHubClient,
    username: str,
    repo: RepositoryRef,
    since: str,
    until: str,
    config: FilterConfig,
    limits: RunLimits,
    deadline: float | None,
) -> RepoResult:
    result = RepoResult(repo=repo)

    try:
        commits = await _within_deadline(
            client.list_commits(
                repo.owner_login,
                repo.name,
                author=username,
                since=since,
                until=until,
                page_size=limits.commit_page_size,
                max_commits=limits.max_commits_per_repo,
            ),
            deadline,
        )
    except asyncio.TimeoutError:
        logger.warning("Deadline reached before commits of %s were listed", repo.full_name)
        result.truncated = True
        return result
    except _RECOVERABLE as exc:
        logger.warning("Skipping %s: could not list commits (%s)", repo.full_name, exc)
        return result

    for commit in commits:
        try:
            detail = await _within_deadline(
                client.get_commit_detail(repo.owner_login, repo.name, commit.sha), deadline
            )
        except asyncio.TimeoutError:
            result.truncated = True
            logger.warning("Deadline reached while scanning %s", repo.full_name)
            break
        except _RECOVERABLE as exc:
            logger.warning("Skipping commit %s in %s (%s)", commit.sha[:7], repo.full_name, exc)
            result.skipped_commits += 1
            continue

        summary = summarize_commit(detail, config)
        if not commit_counts(summary, config):
            result.dropped_commits += 1
            continue
        if summary.partially_filtered:
            result.filtered_commits += 1

        authored_at = detail.author_date or commit.author_date
        date = _day_key(authored_at)
        day = result.daily.get(date)
        if day is None:
            day = result.daily[date] = DailyContribution(date=date)
        day.add(summary.additions, summary.deletions)
        result.recent.append(_recent_commit(repo, detail, authored_at, summary.total))

    result.recent = newest_commits(result.recent, limits.recent_commits)
    logger.debug(
        "%s: %d commits listed, %d days with activity",
        repo.full_name, len(commits), len(result.daily),
    )
    return result


async def aggregate_contributions(
    client: GitHubClient,
    username: str,
    repos: list[RepositoryRef],
    since: str,
    until: str,
    config: FilterConfig = DEFAULT_FILTER_CONFIG,
    limits: RunLimits = RunLimits(),
    year_start: str = "",
    year_end: str = "",
) -> ContributionData:
    """Fold the filtered commit deltas of *username* in *repos* into a ContributionData.

    Repositories are scanned concurrently, each into its own day map, and
    the maps are merged at the end; the merge is order-independent so the
    result does not depend on which repository finishes first. Failures
    for a single repository or commit are logged and skipped. Once
    ``limits.deadline_seconds`` elapse, pending requests (including
    rate-limit waits) are abandoned and the partial result is returned.
    """
    loop = asyncio.get_running_loop()
    deadline = None
    if limits.deadline_seconds is not None:
        deadline = loop.time() + limits.deadline_seconds
    semaphore = asyncio.Semaphore(max(1, limits.concurrency))

    async def bounded(repo: RepositoryRef) -> RepoResult:
        async with semaphore:
            if deadline is not None and loop.time() >= deadline:
                return RepoResult(repo=repo, truncated=True)
            return await _aggregate_repo(client, username, repo, since, until, config, limits, deadline)

    results = await asyncio.gather(*(bounded(repo) for repo in repos))

    daily: dict[str, DailyContribution] = {}
    for result in results:
        merge_daily(daily, result.daily)

    data = ContributionData.from_daily(
        username,
        daily,
        filtered_commits=sum(r.filtered_commits for r in results),
        dropped_commits=sum(r.dropped_commits for r in results),
        skipped_commits=sum(r.skipped_commits for r in results),
        repositories=len(repos),
        truncated=any(r.truncated for r in results),
        year_start=year_start,
        year_end=year_end,
        recent_commits=newest_commits(
            (c for r in results for c in r.recent), limits.recent_commits
        ),
    )
    logger.info(
        "Aggregated %s: %d commits, +%d/-%d lines over %d days",
        username, data.total_commits, data.total_lines_added,
        data.total_lines_deleted, len(daily),
    )
    return data


async def fetch_contributions(
    client: GitHubClient,
    username: str,
    config: FilterConfig = DEFAULT_FILTER_CONFIG,
    limits: RunLimits = RunLimits(),
    since: datetime | None = None,
    until: datetime | None = None,
) -> ContributionData:
    """Run discovery and aggregation for *username* over a date window.

    The window defaults to ``limits.days_back`` days before now. Discovery
    failures propagate as :class:`~loc_graph.errors.DiscoveryError`.
    """
    if until is None:
        until = datetime.now(timezone.utc)
    if since is None:
        since = until - timedelta(days=limits.days_back)

    repos = await discover_repositories(client, username, limits)
    return await aggregate_contributions(
        client,
        username,
        repos,
        since=_format_timestamp(since),
        until=_format_timestamp(until),
        config=config,
        limits=limits,
        year_start=since.date().isoformat(),
        year_end=until.date().isoformat(),
    )
