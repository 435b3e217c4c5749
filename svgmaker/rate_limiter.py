"""Client-side sliding window rate limiter.

Admits at most ``capacity`` operations per rolling ``window`` seconds.
Callers that would exceed the limit are suspended until the oldest
admission leaves the window. The limiter never fails; it only delays.
"""

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable

__all__ = ["RateLimiter", "WINDOW_SECONDS"]

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0


class RateLimiter:
    """Sliding window limiter owned by a single client.

    The timestamp deque is only read and written while holding an
    ``asyncio.Lock``, so concurrent ``admit()`` calls from the same event
    loop cannot over-admit. Waiting happens outside the lock and the
    admission check is repeated afterwards.
    """

    def __init__(
        self,
        capacity: int,
        window: float = WINDOW_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the rate limiter.

        Args:
            capacity: Operations admitted per window. 0 disables limiting.
            window: Window length in seconds.
            clock: Monotonic time source (injectable for tests).
            sleep: Coroutine used to suspend callers (injectable for tests).
        """
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        if window <= 0:
            raise ValueError("window must be positive")
        self.capacity = capacity
        self.window = window
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.capacity > 0

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window:
            self._timestamps.popleft()

    def _try_admit(self) -> float:
        """Record an admission if possible.

        Returns:
            0.0 if admitted, otherwise the number of seconds to wait.
        """
        now = self._clock()
        self._prune(now)
        if len(self._timestamps) < self.capacity:
            self._timestamps.append(now)
            return 0.0
        return max(0.0, self.window - (now - self._timestamps[0]))

    async def admit(self) -> None:
        """Block until an operation may proceed, then record it."""
        if not self.enabled:
            return

        while True:
            async with self._lock:
                wait_time = self._try_admit()
            if wait_time == 0.0:
                return
            logger.debug("Rate limit reached. Waiting %.2fs", wait_time)
            await self._sleep(wait_time)

    async def wait_time(self) -> float:
        """Seconds until the next admission would succeed (no side effects)."""
        if not self.enabled:
            return 0.0
        async with self._lock:
            now = self._clock()
            self._prune(now)
            if len(self._timestamps) < self.capacity:
                return 0.0
            return max(0.0, self.window - (now - self._timestamps[0]))

    def __len__(self) -> int:
        return len(self._timestamps)
