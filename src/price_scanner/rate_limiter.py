"""Minimum-interval rate limiter for polite scanning."""

from __future__ import annotations

import time
import threading


class RateLimiter:
    """Thread-safe limiter spacing requests evenly over a minute.

    Args:
        requests_per_minute: Maximum requests allowed per minute.
            Zero or less disables limiting.
    """

    def __init__(self, requests_per_minute: int = 0) -> None:
        self._interval = 60.0 / requests_per_minute if requests_per_minute > 0 else 0.0
        self._last_request_time: float = 0.0
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._interval > 0

    def wait(self) -> None:
        """Block until the next request is allowed."""
        if not self.enabled:
            return
        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._interval:
                time.sleep(self._interval - elapsed)
            self._last_request_time = time.monotonic()
