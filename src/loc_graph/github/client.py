"""Async GitHub REST/GraphQL client built on httpx."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import httpx

from ..errors import GitHubAPIError, GitHubNetworkError, GraphQLError, MalformedResponseError
from ..models import CommitDetail, CommitFileDelta, CommitRef
from .rate_limit import RateLimitMonitor
from .retry import RetryPolicy, call_with_retry

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"

REPOSITORIES_QUERY = """
query UserRepositories($login: String!, $first: Int!, $after: String, $affiliations: [RepositoryAffiliation]) {
  user(login: $login) {
    repositories(first: $first, after: $after, ownerAffiliations: $affiliations,
                 orderBy: {field: PUSHED_AT, direction: DESC}) {
      pageInfo { hasNextPage endCursor }
      nodes {
        name
        owner { login }
        defaultBranchRef { name }
      }
    }
  }
}
"""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message", ""))
    return ""


class GitHubClient:
    """Thin async wrapper over the GitHub API.

    Every call goes through :func:`call_with_retry`, so transient failures
    are retried transparently and 4xx responses raise immediately.
    """

    def __init__(
        self,
        token: str,
        base_url: str = API_BASE,
        timeout: float = 30.0,
        retry_policy: RetryPolicy | None = None,
        rate_limit_threshold: int = 50,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[object]] | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "loc-graph",
            },
            timeout=timeout,
            transport=transport,
        )
        self._retry_policy = retry_policy or RetryPolicy()
        self._rate_limit = RateLimitMonitor(threshold=rate_limit_threshold)
        self._retry_kwargs: dict[str, Any] = {"sleep": sleep} if sleep is not None else {}

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        await self._rate_limit.wait_if_needed()
        response = await self._client.request(method, url, **kwargs)
        self._rate_limit.update(response)
        if response.status_code >= 400:
            raise GitHubAPIError(response.status_code, url, _error_message(response))
        return response

    async def _call(self, method: str, url: str, **kwargs) -> Any:
        async def attempt() -> Any:
            response = await self._send(method, url, **kwargs)
            try:
                return response.json()
            except ValueError as exc:
                raise MalformedResponseError(f"{method} {url} returned a non-JSON body") from exc

        try:
            return await call_with_retry(
                attempt,
                policy=self._retry_policy,
                description=f"{method} {url}",
                **self._retry_kwargs,
            )
        except httpx.HTTPError as exc:
            raise GitHubNetworkError(f"{method} {url} failed: {exc}") from exc

    async def rest(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self._call("GET", path, params=params)

    async def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict:
        payload = await self._call(
            "POST", "/graphql", json={"query": query, "variables": variables or {}}
        )
        if payload.get("errors"):
            raise GraphQLError(payload["errors"])
        return payload.get("data") or {}

    async def list_repositories(
        self,
        login: str,
        affiliations: Sequence[str] = ("OWNER",),
        page_size: int = 100,
        max_repos: int | None = None,
    ) -> list[dict]:
        """List repositories of *login*, most recently pushed first.

        Follows the GraphQL cursor until the last page or until *max_repos*
        repositories were seen. Each item is
        ``{"name", "owner_login", "default_branch"}``; ``default_branch`` is
        None for empty repositories.
        """
        repos: list[dict] = []
        if max_repos is not None and max_repos <= 0:
            return repos
        cursor: str | None = None
        while True:
            first = page_size if max_repos is None else min(page_size, max_repos - len(repos))
            data = await self.graphql(
                REPOSITORIES_QUERY,
                {
                    "login": login,
                    "first": first,
                    "after": cursor,
                    "affiliations": list(affiliations),
                },
            )
            user = data.get("user")
            if user is None:
                raise GraphQLError([{"message": f"Could not resolve user {login!r}"}])
            try:
                connection = user["repositories"]
                for node in connection["nodes"]:
                    branch = node.get("defaultBranchRef")
                    repos.append({
                        "name": node["name"],
                        "owner_login": node["owner"]["login"],
                        "default_branch": branch["name"] if branch else None,
                    })
                page_info = connection["pageInfo"]
            except (KeyError, TypeError, AttributeError) as exc:
                raise MalformedResponseError(f"Unexpected repository payload for {login}") from exc
            if not page_info["hasNextPage"]:
                break
            if max_repos is not None and len(repos) >= max_repos:
                logger.info("Repository cap of %d reached for %s", max_repos, login)
                break
            cursor = page_info["endCursor"]
        return repos

    async def list_commits(
        self,
        owner: str,
        repo: str,
        author: str,
        since: str,
        until: str,
        page_size: int = 100,
        max_commits: int | None = None,
    ) -> list[CommitRef]:
        """List commits by *author* in ``[since, until)``, page by page.

        An empty repository (409 Conflict) has no commits.
        """
        commits: list[CommitRef] = []
        if max_commits is not None and max_commits <= 0:
            return commits
        page = 1
        while True:
            try:
                items = await self.rest(
                    f"/repos/{owner}/{repo}/commits",
                    params={
                        "author": author,
                        "since": since,
                        "until": until,
                        "per_page": page_size,
                        "page": page,
                    },
                )
            except GitHubAPIError as exc:
                if exc.status_code == 409:
                    logger.debug("%s/%s is empty", owner, repo)
                    return commits
                raise
            for item in items:
                try:
                    commits.append(CommitRef(sha=item["sha"], author_date=item["commit"]["author"]["date"]))
                except (KeyError, TypeError) as exc:
                    raise MalformedResponseError(f"Unexpected commit list payload for {owner}/{repo}") from exc
                if max_commits is not None and len(commits) >= max_commits:
                    return commits
            if len(items) < page_size:
                return commits
            page += 1

    async def get_commit_detail(self, owner: str, repo: str, sha: str) -> CommitDetail:
        data = await self.rest(f"/repos/{owner}/{repo}/commits/{sha}")
        try:
            files = tuple(
                CommitFileDelta(
                    filename=f["filename"],
                    additions=f.get("additions") or 0,
                    deletions=f.get("deletions") or 0,
                )
                for f in data.get("files") or ()
            )
            commit = data["commit"]
            return CommitDetail(
                sha=data["sha"],
                author_date=commit["author"]["date"],
                files=files,
                message=commit.get("message") or "",
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise MalformedResponseError(f"Unexpected commit payload for {owner}/{repo}@{sha[:7]}") from exc
