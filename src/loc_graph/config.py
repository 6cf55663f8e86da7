"""Configuration defaults and environment overrides."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .errors import ConfigurationError
from .models import FilterConfig

DEFAULT_EXCLUDE_EXTENSIONS = (
    "json", "csv", "lock", "svg", "png", "jpg", "jpeg", "gif", "ico",
    "woff", "woff2", "ttf", "eot", "mp3", "mp4", "webm", "pdf",
    "min.js", "min.css", "bundle.js", "chunk.js",
    "xml", "yml", "yaml", "toml", "md", "txt", "log",
    "sql", "sqlite", "db",
)

DEFAULT_EXCLUDE_PATHS = (
    "vendor/", "node_modules/", "dist/", "build/", ".git/",
    "package-lock.json", "yarn.lock", "pnpm-lock.yaml",
    "__pycache__/", ".venv/", "venv/", "env/",
    "pods/", "carthage/",
)


def make_filter_config(
    exclude_extensions: Iterable[str] = DEFAULT_EXCLUDE_EXTENSIONS,
    exclude_paths: Iterable[str] = DEFAULT_EXCLUDE_PATHS,
    max_lines_per_file: int = 2000,
    min_lines_per_commit: int = 0,
) -> FilterConfig:
    """Build a FilterConfig with normalized (stripped, lower-case) patterns."""
    if max_lines_per_file < 0 or min_lines_per_commit < 0:
        raise ConfigurationError("Line thresholds must not be negative")
    return FilterConfig(
        exclude_extensions=frozenset(_normalize(exclude_extensions, strip_dot=True)),
        exclude_paths=frozenset(_normalize(exclude_paths)),
        max_lines_per_file=max_lines_per_file,
        min_lines_per_commit=min_lines_per_commit,
    )


def _normalize(values: Iterable[str], strip_dot: bool = False) -> list[str]:
    result = []
    for value in values:
        value = value.strip().lower()
        if strip_dot:
            value = value.lstrip(".")
        if value:
            result.append(value)
    return result


DEFAULT_FILTER_CONFIG = make_filter_config()


def _split_env(value: str) -> list[str]:
    return [part for part in value.split(",") if part.strip()]


def _int_env(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def filter_config_from_env(environ: Mapping[str, str] | None = None) -> FilterConfig:
    """Build a FilterConfig from the defaults overridden by environment variables."""
    if environ is None:
        environ = os.environ
    extensions = environ.get("EXCLUDE_EXTENSIONS")
    paths = environ.get("EXCLUDE_PATHS")
    return make_filter_config(
        exclude_extensions=_split_env(extensions) if extensions else DEFAULT_EXCLUDE_EXTENSIONS,
        exclude_paths=_split_env(paths) if paths else DEFAULT_EXCLUDE_PATHS,
        max_lines_per_file=_int_env(environ, "MAX_LINES_PER_FILE", 2000),
        min_lines_per_commit=_int_env(environ, "MIN_LINES_PER_COMMIT", 0),
    )


@dataclass(frozen=True)
class RunLimits:
    """Per-run bounds on the amount of upstream work."""

    days_back: int = 365
    max_repos: int = 50
    max_commits_per_repo: int = 200
    repo_page_size: int = 100
    commit_page_size: int = 100
    affiliations: tuple[str, ...] = ("OWNER",)
    concurrency: int = 8
    deadline_seconds: float | None = None
    recent_commits: int = 10


def resolve_token(token: str | None) -> str:
    """Return the API credential or fail before any request is made."""
    if not token or not token.strip():
        raise ConfigurationError(
            "A GitHub token is required. Pass --token or set GITHUB_TOKEN."
        )
    return token.strip()
