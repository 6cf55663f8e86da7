"""Repository discovery."""

from __future__ import annotations

import logging

from .config import RunLimits
from .errors import DiscoveryError, LocGraphError
from .github.client import GitHubClient
from .models import RepositoryRef

logger = logging.getLogger(__name__)


async def discover_repositories(
    client: GitHubClient, login: str, limits: RunLimits = RunLimits()
) -> list[RepositoryRef]:
    """Return the repositories of *login* worth scanning, most recently pushed first.

    Repositories without a default branch are skipped. Affiliations come
    from ``limits.affiliations`` and at most ``limits.max_repos``
    repositories are requested.
    """
    try:
        nodes = await client.list_repositories(
            login,
            affiliations=limits.affiliations,
            page_size=limits.repo_page_size,
            max_repos=limits.max_repos,
        )
    except LocGraphError as exc:
        raise DiscoveryError(f"Failed to list repositories for {login}: {exc}") from exc

    repos = [
        RepositoryRef(
            name=node["name"],
            owner_login=node["owner_login"],
            default_branch_name=node["default_branch"],
        )
        for node in nodes
        if node.get("default_branch")
    ]
    logger.info("Found %d repositories for %s (%d empty skipped)", len(repos), login, len(nodes) - len(repos))
    return repos
