"""Fixed-interval gate for spacing out sequential backend probes."""

import asyncio
import time
from typing import Awaitable, Callable, Optional


class IntervalGate:
    """
    Ensures at least `interval` seconds between consecutive passes.
    The first wait() returns immediately; later ones sleep only for the part
    of the interval that has not already elapsed. Clock and sleep are
    injectable so tests can run without real delays.
    """

    def __init__(
        self,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None

    async def wait(self) -> None:
        if self._last is not None:
            remaining = self.interval - (self._clock() - self._last)
            if remaining > 0:
                await self._sleep(remaining)
        self._last = self._clock()

    def reset(self) -> None:
        self._last = None
