"""File-level noise filtering for commit deltas."""

from __future__ import annotations

from .models import CommitFileDelta, FilterConfig


def should_filter(filename: str, config: FilterConfig) -> bool:
    """Return True if *filename* is excluded by path or extension (case-insensitive)."""
    lower = filename.lower()
    if any(path.lower() in lower for path in config.exclude_paths):
        return True
    return any(lower.endswith(f".{ext.lower()}") for ext in config.exclude_extensions)


def file_counts(file: CommitFileDelta, config: FilterConfig) -> bool:
    """Return True if *file* contributes its delta to the commit.

    Files larger than ``max_lines_per_file`` additions are bulk or data
    changes and are dropped like excluded paths.
    """
    if should_filter(file.filename, config):
        return False
    return file.additions <= config.max_lines_per_file
