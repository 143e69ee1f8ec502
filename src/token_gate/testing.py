"""
Test utilities for token_gate.

Provides a manual clock so limiter behaviour can be driven through a fixed
clock trace instead of real sleeps.
"""

import threading


class ManualClock:
    """Thread-safe clock that only moves when told to.

    Usage:
        clock = ManualClock()
        limiter = Limiter(5, clock=clock)
        limiter.decide("a")
        clock.advance(0.2)  # one token's worth at 5/s
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._lock = threading.Lock()

    def __call__(self) -> float:
        with self._lock:
            return self._now

    def advance(self, seconds: float) -> None:
        """Move the clock by ``seconds``; negative values simulate a regression."""
        with self._lock:
            self._now += seconds

    def set(self, now: float) -> None:
        with self._lock:
            self._now = float(now)

    sleep = advance
