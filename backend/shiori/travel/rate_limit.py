"""Minimum-interval rate limiter for outbound provider requests."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class MinIntervalRateLimiter:
    """Spaces successive requests at least ``min_interval_seconds`` apart.

    The clock and sleeper are injected so tests can drive time by hand.
    State lives on the instance; each owner gets its own limiter.
    """

    def __init__(
        self,
        min_interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._interval = max(0.0, float(min_interval_seconds))
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until the next request is allowed, then claim the slot."""
        async with self._lock:
            if self._last is not None:
                wait = self._last + self._interval - self._clock()
                if wait > 0:
                    logger.debug(f"[rate_limit] waiting {wait:.3f}s")
                    await self._sleep(wait)
            self._last = self._clock()
