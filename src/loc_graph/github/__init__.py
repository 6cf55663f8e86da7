"""GitHub API access: async client, retry policy and rate-limit tracking."""

from .client import GitHubClient
from .rate_limit import RateLimitMonitor
from .retry import RetryPolicy, call_with_retry, is_transient

__all__ = ["GitHubClient", "RateLimitMonitor", "RetryPolicy", "call_with_retry", "is_transient"]
