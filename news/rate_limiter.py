"""
Minimum-interval limiter shared by outbound clients (provider, engines).
"""
from __future__ import annotations

import threading
import time
from typing import Callable, Dict


class RateLimiter:
    def __init__(self, sleep: Callable[[float], None] = time.sleep, clock: Callable[[], float] = time.monotonic) -> None:
        self._intervals: Dict[str, float] = {}
        self._next_allowed: Dict[str, float] = {}
        self._lock = threading.Lock()
        self._sleep = sleep
        self._clock = clock

    def configure(self, key: str, min_interval: float) -> None:
        if min_interval <= 0:
            self._intervals.pop(key, None)
            return
        self._intervals[key] = min_interval

    def wait(self, key: str) -> float:
        """Block until ``key`` may fire again; returns the seconds slept."""
        interval = self._intervals.get(key)
        if interval is None:
            return 0.0
        with self._lock:
            now = self._clock()
            delay = max(0.0, self._next_allowed.get(key, now) - now)
            # reserve the slot before sleeping so concurrent callers queue up behind it
            self._next_allowed[key] = now + delay + interval
        if delay:
            self._sleep(delay)
        return delay
