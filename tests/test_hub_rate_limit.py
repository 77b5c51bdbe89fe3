"""Tests for the outbound request window."""

import pytest

from snapshotmcp.hub.rate_limit import RequestRateLimiter
from snapshotmcp.utils.exceptions import RateLimitExceeded


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_fifty_then_reject():
    clock = FakeClock()
    limiter = RequestRateLimiter(clock=clock)
    for _ in range(50):
        limiter.acquire()
    assert limiter.remaining == 0
    with pytest.raises(RateLimitExceeded) as exc:
        limiter.acquire()
    assert exc.value.details["limit"] == 50
    assert exc.value.details["retry_after"] == 60.0


def test_window_resets_after_elapsed():
    clock = FakeClock()
    limiter = RequestRateLimiter(max_requests=2, window_seconds=60, clock=clock)
    limiter.acquire()
    limiter.acquire()
    clock.now += 60
    with pytest.raises(RateLimitExceeded):
        limiter.acquire()
    clock.now += 0.5
    limiter.acquire()
    assert limiter.window.count == 1
    assert limiter.window.window_start == clock.now


def test_window_start_manipulation_resets():
    limiter = RequestRateLimiter(max_requests=1, clock=FakeClock())
    limiter.acquire()
    limiter.window.window_start -= 61
    limiter.acquire()
    assert limiter.window.count == 1
