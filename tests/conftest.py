"""Shared fixtures for loc-graph tests."""

from __future__ import annotations

import pytest

from loc_graph.config import make_filter_config
from loc_graph.models import CommitDetail, CommitFileDelta


def _make_detail(sha: str, date: str, *files: tuple[str, int, int], message: str = "") -> CommitDetail:
    return CommitDetail(
        sha=sha,
        author_date=f"{date}T12:00:00Z",
        files=tuple(CommitFileDelta(filename=n, additions=a, deletions=d) for n, a, d in files),
        message=message,
    )


@pytest.fixture
def make_detail():
    return _make_detail


@pytest.fixture
def filter_config():
    return make_filter_config(
        exclude_extensions=["json", "lock", "min.js"],
        exclude_paths=["node_modules/", "vendor/"],
        max_lines_per_file=2000,
        min_lines_per_commit=0,
    )
