"""In-memory request window used to self-throttle calls to the Snapshot hub."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from snapshotmcp.utils.exceptions import RateLimitExceeded


@dataclass
class RateWindow:
    count: int = 0
    window_start: float = 0.0


class RequestRateLimiter:
    """
    Count-per-window limiter for outbound requests.

    Every acquire() counts, including rejected ones; the window restarts once
    more than `window_seconds` have elapsed since it opened. Not thread-safe:
    callers share it from a single event loop.
    """

    def __init__(
        self,
        *,
        service: str = "snapshot-hub",
        max_requests: int = 50,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._service = service
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock
        self.window = RateWindow(count=0, window_start=clock())

    @property
    def remaining(self) -> int:
        return max(0, self._max_requests - self.window.count)

    def acquire(self) -> None:
        """Count one request; raise RateLimitExceeded past the limit."""
        now = self._clock()
        if now - self.window.window_start > self._window_seconds:
            self.window = RateWindow(count=0, window_start=now)
        self.window.count += 1
        if self.window.count > self._max_requests:
            retry_after = max(0.0, self.window.window_start + self._window_seconds - now)
            raise RateLimitExceeded(
                self._service,
                limit=self._max_requests,
                window_seconds=self._window_seconds,
                retry_after=round(retry_after, 3),
            )
