"""Tests for the file-change filter."""

from __future__ import annotations

from loc_graph.filters import file_counts, should_filter
from loc_graph.models import CommitFileDelta, FilterConfig


def test_should_filter_excluded_extension(filter_config):
    assert should_filter("package.json", filter_config) is True
    assert should_filter("deps/Cargo.lock", filter_config) is True


def test_should_filter_excluded_path(filter_config):
    assert should_filter("web/node_modules/react/index.js", filter_config) is True


def test_should_filter_case_insensitive(filter_config):
    assert should_filter("src/VENDOR/pkg.LOCK", filter_config) is True
    assert should_filter("Data/Config.JSON", filter_config) is True


def test_should_filter_keeps_source_files(filter_config):
    assert should_filter("src/app.py", filter_config) is False
    assert should_filter("README", filter_config) is False


def test_should_filter_compound_extension_only_matches_suffix(filter_config):
    assert should_filter("static/app.min.js", filter_config) is True
    assert should_filter("static/app.js", filter_config) is False


def test_should_filter_extension_needs_dot():
    config = FilterConfig(exclude_extensions=frozenset({"lock"}))
    assert should_filter("padlock", config) is False
    assert should_filter("pad.lock", config) is True


def test_should_filter_uppercase_patterns_in_config():
    config = FilterConfig(exclude_paths=frozenset({"Pods/"}), exclude_extensions=frozenset({"CSV"}))
    assert should_filter("ios/pods/Alamofire.swift", config) is True
    assert should_filter("export.csv", config) is True


def test_should_filter_empty_config():
    assert should_filter("anything/at/all.json", FilterConfig()) is False


def test_file_counts_magnitude_limit(filter_config):
    at_limit = CommitFileDelta("src/big.py", additions=2000, deletions=0)
    over_limit = CommitFileDelta("src/big.py", additions=2001, deletions=0)
    assert file_counts(at_limit, filter_config) is True
    assert file_counts(over_limit, filter_config) is False


def test_file_counts_excluded_name(filter_config):
    assert file_counts(CommitFileDelta("yarn.lock", 3, 1), filter_config) is False
