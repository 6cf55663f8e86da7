"""Orchestrates fetching, aggregation and rendering."""

from __future__ import annotations

import logging
from datetime import datetime

from .aggregator import fetch_contributions
from .config import DEFAULT_FILTER_CONFIG, RunLimits, resolve_token
from .github.client import GitHubClient
from .models import FilterConfig
from .renderer import render_csv, render_json, render_report
from .stats import compute_stats

logger = logging.getLogger(__name__)


async def run(
    username: str,
    token: str | None,
    config: FilterConfig = DEFAULT_FILTER_CONFIG,
    limits: RunLimits = RunLimits(),
    since: datetime | None = None,
    until: datetime | None = None,
    output_format: str = "table",
    output_file: str | None = None,
) -> None:
    """Fetch contributions for *username* and render them in *output_format*."""
    token = resolve_token(token)
    async with GitHubClient(token) as client:
        data = await fetch_contributions(
            client, username, config=config, limits=limits, since=since, until=until
        )

    stats = compute_stats(data)
    logger.info(
        "%s: %d active days, longest streak %d, current streak %d",
        username, stats.contributing_days, stats.longest_streak, stats.current_streak,
    )

    if output_format == "json":
        render_json(data, stats, output_file=output_file)
    elif output_format == "csv":
        render_csv(data, output_file=output_file)
    else:
        render_report(data, stats, output_file=output_file)
