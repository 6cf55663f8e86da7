"""Primary rate-limit tracking based on GitHub response headers."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """Pause requests when the remaining quota drops to *threshold*."""

    def __init__(self, threshold: int = 50) -> None:
        self.threshold = threshold
        self._remaining: int | None = None
        self._reset_at: float | None = None

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        if remaining is not None:
            try:
                self._remaining = int(remaining)
            except ValueError:
                pass
        if reset is not None:
            try:
                self._reset_at = float(reset)
            except ValueError:
                pass

    async def wait_if_needed(self) -> None:
        if self._remaining is None or self._reset_at is None:
            return
        if self._remaining > self.threshold:
            return
        wait = max(0.0, self._reset_at - time.time()) + 1
        logger.warning(
            "Rate limit low (%d remaining), sleeping %.0fs until reset", self._remaining, wait
        )
        await asyncio.sleep(wait)
        # Quota is unknown until the next response arrives.
        self._remaining = None
