"""Tests for repository discovery."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from loc_graph.config import RunLimits
from loc_graph.discovery import discover_repositories
from loc_graph.errors import DiscoveryError, GitHubAPIError
from loc_graph.github.client import GitHubClient
from loc_graph.models import RepositoryRef


@pytest.mark.asyncio
async def test_discover_skips_repos_without_default_branch():
    client = AsyncMock(spec=GitHubClient)
    client.list_repositories.return_value = [
        {"name": "fresh", "owner_login": "alice", "default_branch": "main"},
        {"name": "empty", "owner_login": "alice", "default_branch": None},
        {"name": "old", "owner_login": "alice", "default_branch": "master"},
    ]
    repos = await discover_repositories(client, "alice")
    assert repos == [
        RepositoryRef("fresh", "alice", "main"),
        RepositoryRef("old", "alice", "master"),
    ]


@pytest.mark.asyncio
async def test_discover_passes_limits():
    client = AsyncMock(spec=GitHubClient)
    client.list_repositories.return_value = []
    limits = RunLimits(max_repos=7, repo_page_size=5, affiliations=("OWNER", "COLLABORATOR"))
    await discover_repositories(client, "alice", limits)
    client.list_repositories.assert_awaited_once_with(
        "alice", affiliations=("OWNER", "COLLABORATOR"), page_size=5, max_repos=7
    )


@pytest.mark.asyncio
async def test_discover_failure_is_fatal():
    client = AsyncMock(spec=GitHubClient)
    client.list_repositories.side_effect = GitHubAPIError(401, "/graphql", "Bad credentials")
    with pytest.raises(DiscoveryError, match="Bad credentials"):
        await discover_repositories(client, "alice")
