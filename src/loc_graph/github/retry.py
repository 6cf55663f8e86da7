"""Retry with exponential backoff for transient upstream failures."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx

from ..errors import GitHubAPIError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 5
    base_delay: float = 1.0
    factor: float = 2.0
    max_delay: float = 30.0

    def delay(self, attempt: int) -> float:
        """Backoff before retry number *attempt* (1-based)."""
        return min(self.max_delay, self.base_delay * self.factor ** (attempt - 1))


def is_transient(exc: BaseException) -> bool:
    """Network errors and 5xx responses are worth retrying; 4xx never is."""
    if isinstance(exc, GitHubAPIError):
        return exc.is_server_error
    return isinstance(exc, httpx.TransportError)


async def call_with_retry(
    func: Callable[[], Awaitable[T]],
    policy: RetryPolicy = RetryPolicy(),
    is_retryable: Callable[[BaseException], bool] = is_transient,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    description: str = "request",
) -> T:
    """Await ``func()`` until it succeeds or a non-retryable error occurs.

    When every attempt fails with a retryable error the last one is raised.
    """
    attempt = 1
    while True:
        try:
            return await func()
        except Exception as exc:
            if not is_retryable(exc) or attempt >= policy.max_attempts:
                raise
            wait = policy.delay(attempt)
            logger.warning(
                "%s failed (%s), retry %d/%d in %.1fs",
                description, exc, attempt, policy.max_attempts - 1, wait,
            )
            await sleep(wait)
            attempt += 1
