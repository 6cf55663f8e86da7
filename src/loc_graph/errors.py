"""Exception hierarchy for loc-graph."""

from __future__ import annotations


class LocGraphError(Exception):
    """Base class for all loc-graph errors."""


class ConfigurationError(LocGraphError):
    """Missing or invalid configuration, including the API credential."""


class GitHubAPIError(LocGraphError):
    """An HTTP error response from the GitHub API."""

    def __init__(self, status_code: int, url: str, message: str = "") -> None:
        self.status_code = status_code
        self.url = url
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"GitHub API returned {status_code} for {url}{detail}")

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500


class GraphQLError(LocGraphError):
    """A GraphQL response carrying an ``errors`` payload."""

    def __init__(self, errors: list[dict]) -> None:
        self.errors = errors
        messages = "; ".join(e.get("message", "unknown error") for e in errors) or "unknown error"
        super().__init__(f"GraphQL query failed: {messages}")


class DiscoveryError(LocGraphError):
    """Repository discovery failed; the run cannot continue."""


class GitHubNetworkError(LocGraphError):
    """The GitHub API could not be reached after all retries."""


class MalformedResponseError(LocGraphError):
    """A successful response whose body is not the expected JSON shape."""
