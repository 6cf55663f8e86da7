"""Tests for the CLI module."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from click.testing import CliRunner

from loc_graph.cli import _parse_relative_date, _resolve_date, _to_datetime, main
from loc_graph.errors import DiscoveryError


def test_parse_relative_date_days():
    result = _parse_relative_date("7d")
    expected = (datetime.now(timezone.utc) - timedelta(days=7)).strftime("%Y-%m-%d")
    assert result == expected


def test_parse_relative_date_weeks():
    result = _parse_relative_date("2w")
    expected = (datetime.now(timezone.utc) - timedelta(weeks=2)).strftime("%Y-%m-%d")
    assert result == expected


def test_parse_relative_date_years():
    result = _parse_relative_date("1y")
    expected = (datetime.now(timezone.utc) - timedelta(days=365)).strftime("%Y-%m-%d")
    assert result == expected


def test_parse_relative_date_invalid():
    assert _parse_relative_date("abc") is None
    assert _parse_relative_date("10x") is None
    assert _parse_relative_date("") is None
    assert _parse_relative_date("2024-01-01") is None


def test_resolve_date():
    assert _resolve_date(None) is None
    assert _resolve_date("2024-01-15") == "2024-01-15"


def test_to_datetime_is_utc():
    assert _to_datetime("2024-01-15", "--since") == datetime(2024, 1, 15, tzinfo=timezone.utc)
    assert _to_datetime(None, "--since") is None


@patch("loc_graph.cli.asyncio.run")
def test_main_runs_pipeline(mock_asyncio_run):
    runner = CliRunner()
    result = runner.invoke(main, ["alice", "--token", "fake-token"])
    assert result.exit_code == 0
    mock_asyncio_run.assert_called_once()
    mock_asyncio_run.call_args.args[0].close()


@patch("loc_graph.cli.asyncio.run")
@patch("loc_graph.orchestrator.run")
def test_main_builds_config(mock_run, mock_asyncio_run):
    runner = CliRunner()
    result = runner.invoke(main, [
        "alice", "--token", "fake-token",
        "--exclude-extension", "CSV",
        "--exclude-path", "third_party/",
        "--max-lines-per-file", "500",
        "--min-lines-per-commit", "3",
        "--max-repos", "5",
        "--max-commits", "20",
        "--affiliation", "collaborator",
        "--recent-commits", "3",
        "--since", "2024-01-01",
        "--format", "json",
    ])
    assert result.exit_code == 0, result.output
    kwargs = mock_run.call_args.kwargs
    assert kwargs["config"].exclude_extensions == frozenset({"csv"})
    assert kwargs["config"].exclude_paths == frozenset({"third_party/"})
    assert kwargs["config"].max_lines_per_file == 500
    assert kwargs["config"].min_lines_per_commit == 3
    assert kwargs["limits"].max_repos == 5
    assert kwargs["limits"].max_commits_per_repo == 20
    assert kwargs["limits"].affiliations == ("COLLABORATOR",)
    assert kwargs["limits"].recent_commits == 3
    assert kwargs["since"] == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert kwargs["output_format"] == "json"


@patch("loc_graph.cli.asyncio.run")
@patch("loc_graph.orchestrator.run")
def test_main_uses_env_filter_defaults(mock_run, mock_asyncio_run):
    runner = CliRunner(env={"MAX_LINES_PER_FILE": "123"})
    result = runner.invoke(main, ["alice", "--token", "fake-token"])
    assert result.exit_code == 0, result.output
    assert mock_run.call_args.kwargs["config"].max_lines_per_file == 123


@patch("loc_graph.cli.asyncio.run")
def test_main_invalid_date(mock_asyncio_run):
    runner = CliRunner()
    result = runner.invoke(main, ["alice", "--token", "fake-token", "--since", "last tuesday"])
    assert result.exit_code != 0
    mock_asyncio_run.assert_not_called()


@patch("loc_graph.cli.asyncio.run", side_effect=DiscoveryError("Failed to list repositories"))
def test_main_reports_errors(mock_asyncio_run):
    runner = CliRunner()
    result = runner.invoke(main, ["alice", "--token", "fake-token"])
    assert result.exit_code == 1
    assert "Failed to list repositories" in result.output


def test_main_missing_token():
    runner = CliRunner(env={"GITHUB_TOKEN": ""})
    result = runner.invoke(main, ["alice"], catch_exceptions=False)
    assert result.exit_code != 0


def test_main_version():
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
