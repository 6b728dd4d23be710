"""
In-memory fixed-window rate limiter.

Counts requests per key (client IP) inside a window. State lives in the
process only: limits are per worker and reset on restart.
"""

import threading
import time
from typing import Callable, Dict, Tuple


class FixedWindowRateLimiter:
    """Allow at most ``max_requests`` per ``period_seconds`` for each key."""

    def __init__(
        self,
        max_requests: int = 10,
        period_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.period_seconds = period_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        """
        Register a request for ``key``.

        Returns:
            False when the key already used its quota in the current
            window (the request is not counted), True otherwise.
        """
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now - window[1] > self.period_seconds:
                self._windows[key] = (1, now)
                return True

            count, started = window
            if count >= self.max_requests:
                return False

            self._windows[key] = (count + 1, started)
            return True

    def current_count(self, key: str) -> int:
        window = self._windows.get(key)
        return window[0] if window else 0

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
