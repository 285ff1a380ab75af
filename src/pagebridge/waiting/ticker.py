"""Periodic ticker — rate-limits progress logging during long polls."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any


class PeriodicTicker:
    """Invokes a callback at most once per ``interval``-second bucket.

    A tick fires only when the whole number of elapsed seconds is a positive
    multiple of ``interval`` and that bucket has not fired yet. With an
    interval of 5, ticks at elapsed 4, 5, 6, 9 and 10 fire at 5 and 10.
    """

    def __init__(
        self,
        interval: int = 5,
        start: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError("Ticker interval must be positive")
        self._interval = interval
        self._clock = clock
        self._start = clock() if start is None else start
        self._last_bucket = 0

    @property
    def interval(self) -> int:
        return self._interval

    def elapsed(self) -> float:
        """Seconds since the ticker started."""
        return self._clock() - self._start

    def tick(self, callback: Callable[..., Any], *args: Any, elapsed: float | None = None) -> bool:
        """Fire the callback if the current bucket is due.

        Returns True when the callback was invoked.
        """
        seconds = int(self.elapsed() if elapsed is None else elapsed)
        if seconds <= 0 or seconds % self._interval:
            return False
        bucket = seconds // self._interval
        if bucket <= self._last_bucket:
            return False
        self._last_bucket = bucket
        callback(*args)
        return True
