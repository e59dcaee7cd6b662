"""Minimum-interval throttle for outbound API calls."""

import asyncio
import time
from typing import Awaitable, Callable


class RateLimiter:
    """Spaces successive ``acquire()`` returns at least ``min_interval`` apart.

    Each instance owns its own last-call timestamp; share one instance
    between every component that talks to the same remote service.
    """

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_millis(cls, interval_ms: int, **kwargs) -> "RateLimiter":
        return cls(interval_ms / 1000.0, **kwargs)

    async def acquire(self) -> None:
        """Suspend until the minimum interval since the previous call has passed."""
        async with self._lock:
            if self._last_call is not None:
                wait = self.min_interval - (self._clock() - self._last_call)
                if wait > 0:
                    await self._sleep(wait)
            self._last_call = self._clock()
