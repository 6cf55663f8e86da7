"""Data models for loc-graph."""

from __future__ import annotations

import heapq
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class FilterConfig:
    exclude_extensions: frozenset[str] = frozenset()
    exclude_paths: frozenset[str] = frozenset()
    max_lines_per_file: int = 2000
    min_lines_per_commit: int = 0


@dataclass(frozen=True)
class RepositoryRef:
    name: str
    owner_login: str
    default_branch_name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner_login}/{self.name}"


@dataclass(frozen=True)
class CommitRef:
    sha: str
    author_date: str


@dataclass(frozen=True)
class CommitFileDelta:
    filename: str
    additions: int
    deletions: int


@dataclass(frozen=True)
class CommitDetail:
    sha: str
    author_date: str
    files: tuple[CommitFileDelta, ...] = ()
    message: str = ""


@dataclass(frozen=True)
class RecentCommit:
    """A counted commit as shown in the recent-commits feed."""

    authored_at: str
    repo: str
    sha: str
    message: str
    lines: int

    @property
    def date(self) -> str:
        return self.authored_at[:10]


def newest_commits(commits: Iterable[RecentCommit], limit: int) -> list[RecentCommit]:
    """The *limit* most recently authored commits, newest first."""
    if limit <= 0:
        return []
    return heapq.nlargest(limit, commits, key=lambda c: (c.authored_at, c.repo, c.sha))


@dataclass
class DailyContribution:
    """Accumulated activity for one calendar day (``YYYY-MM-DD``)."""

    date: str
    lines_added: int = 0
    lines_deleted: int = 0
    total_lines: int = 0
    commits: int = 0

    def add(self, additions: int, deletions: int, commits: int = 1) -> None:
        self.lines_added += additions
        self.lines_deleted += deletions
        self.total_lines = self.lines_added + self.lines_deleted
        self.commits += commits


def merge_daily(
    target: dict[str, DailyContribution], source: dict[str, DailyContribution]
) -> dict[str, DailyContribution]:
    """Fold *source* into *target* by summing entries that share a date.

    Entries of *source* are copied, never aliased, so merging the same
    source twice or into several targets is safe.
    """
    for date, day in source.items():
        existing = target.get(date)
        if existing is None:
            existing = target[date] = DailyContribution(date=date)
        existing.add(day.lines_added, day.lines_deleted, commits=day.commits)
    return target


@dataclass
class ContributionData:
    username: str
    total_lines_added: int
    total_lines_deleted: int
    total_lines: int
    total_commits: int
    filtered_commits: int
    daily_contributions: dict[str, DailyContribution] = field(default_factory=dict)
    year_start: str = ""
    year_end: str = ""
    dropped_commits: int = 0
    skipped_commits: int = 0
    repositories: int = 0
    truncated: bool = False
    recent_commits: list[RecentCommit] = field(default_factory=list)

    @classmethod
    def from_daily(
        cls,
        username: str,
        daily: dict[str, DailyContribution],
        filtered_commits: int = 0,
        **kwargs,
    ) -> ContributionData:
        """Build a result whose totals are derived from *daily*."""
        added = sum(d.lines_added for d in daily.values())
        deleted = sum(d.lines_deleted for d in daily.values())
        return cls(
            username=username,
            total_lines_added=added,
            total_lines_deleted=deleted,
            total_lines=added + deleted,
            total_commits=sum(d.commits for d in daily.values()),
            filtered_commits=filtered_commits,
            daily_contributions=daily,
            **kwargs,
        )

    def sorted_days(self) -> list[DailyContribution]:
        return [self.daily_contributions[k] for k in sorted(self.daily_contributions)]

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> ContributionData:
        values = dict(data)
        values["daily_contributions"] = {
            date: DailyContribution(**day)
            for date, day in (data.get("daily_contributions") or {}).items()
        }
        values["recent_commits"] = [RecentCommit(**c) for c in data.get("recent_commits") or ()]
        return cls(**values)


@dataclass
class StatsData:
    username: str
    total_lines_added: int
    total_lines_deleted: int
    total_lines: int
    total_commits: int
    filtered_commits: int
    contributing_days: int
    longest_streak: int
    current_streak: int
    avg_lines_per_day: float
    avg_lines_per_commit: float
