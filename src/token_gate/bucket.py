#!/usr/bin/env python3
"""Per-client token bucket with lazy, time-driven refill."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .constants import TOKEN_COST
from .errors import BucketClosedError

Clock = Callable[[], float]


@dataclass(frozen=True)
class BucketSnapshot:
    """Point-in-time view of a bucket's state."""

    tokens: float
    last_refill: float

    def to_dict(self) -> dict[str, Any]:
        return {"tokens": self.tokens, "last_refill": self.last_refill}


class Bucket:
    """Token bucket for a single client.

    Holds a continuous token balance in ``[0, capacity]`` and the clock
    reading of its last refill. All state is read and written under the
    bucket's own lock. Buckets start full, so a fresh client may burst up
    to ``capacity`` requests.
    """

    __slots__ = ("rate", "capacity", "tokens", "last_refill", "closed", "_clock", "_lock")

    def __init__(self, rate: float, capacity: float, clock: Clock = time.monotonic):
        self.rate = float(rate)
        self.capacity = float(capacity)
        self._clock = clock
        self._lock = threading.Lock()
        self.tokens = self.capacity
        self.last_refill = clock()
        self.closed = False

    def refill_and_consume(self) -> bool:
        """Refill for the time elapsed since the last call, then try to spend one token.

        Returns True if the request is allowed, False if it is denied.

        Raises:
            BucketClosedError: the bucket was pruned from its limiter.
        """
        with self._lock:
            if self.closed:
                raise BucketClosedError("bucket was pruned")

            now = self._clock()
            # Clock regression counts as no elapsed time
            elapsed = now - self.last_refill
            if elapsed > 0:
                self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
                self.last_refill = now

            if self.tokens >= TOKEN_COST:
                self.tokens -= TOKEN_COST
                return True
            return False

    def snapshot(self) -> BucketSnapshot:
        """Read tokens and last refill time together, without refilling."""
        with self._lock:
            return BucketSnapshot(tokens=self.tokens, last_refill=self.last_refill)

    def idle_for(self, now: float) -> float:
        """Seconds since this bucket last saw a decision (caller holds the lock)."""
        return max(0.0, now - self.last_refill)

    def try_close(self, max_idle: float, now: float) -> bool:
        """Close the bucket if it is idle, back at full capacity and not in use.

        Never blocks: a bucket whose lock is held by a caller is left alone.
        Returns True if the bucket was closed.
        """
        if not self._lock.acquire(blocking=False):
            return False
        try:
            idle = self.idle_for(now)
            if idle <= max_idle or self.tokens + idle * self.rate < self.capacity:
                return False
            self.closed = True
            return True
        finally:
            self._lock.release()
