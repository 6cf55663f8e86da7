"""Summary statistics derived from a ContributionData."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from .models import ContributionData, StatsData


def _active_days(data: ContributionData) -> list[date]:
    """Dates with positive activity, sorted ascending."""
    return sorted(
        date.fromisoformat(key)
        for key, day in data.daily_contributions.items()
        if day.total_lines > 0
    )


def longest_streak(days: list[date]) -> int:
    """Length of the longest run of consecutive calendar days in sorted *days*."""
    longest = run = 0
    previous: date | None = None
    for day in days:
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def current_streak(days: list[date], today: date) -> int:
    """Run of consecutive active days ending at the latest active day on or before *today*."""
    active = {d for d in days if d <= today}
    if not active:
        return 0
    cursor = max(active)
    streak = 0
    while cursor in active:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def compute_stats(data: ContributionData, today: date | None = None) -> StatsData:
    if today is None:
        today = datetime.now(timezone.utc).date()

    days = _active_days(data)
    contributing_days = len(days)
    total_lines = data.total_lines_added + data.total_lines_deleted

    return StatsData(
        username=data.username,
        total_lines_added=data.total_lines_added,
        total_lines_deleted=data.total_lines_deleted,
        total_lines=total_lines,
        total_commits=data.total_commits,
        filtered_commits=data.filtered_commits,
        contributing_days=contributing_days,
        longest_streak=longest_streak(days),
        current_streak=current_streak(days, today),
        avg_lines_per_day=total_lines / contributing_days if contributing_days else 0.0,
        avg_lines_per_commit=total_lines / data.total_commits if data.total_commits else 0.0,
    )
