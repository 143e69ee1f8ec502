#!/usr/bin/env python3
"""
Per-client admission control.

The Limiter maps client identifiers to token buckets and answers one
question: may this client make a request right now?

Locking is two-level. The limiter lock guards only the client map (lookup,
insert, prune). Each bucket's lock guards that bucket's numeric state. The
limiter lock is always released before a bucket lock is taken by
``decide``; ``prune`` only try-acquires bucket locks while holding the
limiter lock, so neither path can deadlock.
"""

import logging
import threading
import time
from collections.abc import Hashable

from . import telemetry
from .bucket import Bucket, BucketSnapshot, Clock
from .config.settings import GateSettings, load_settings
from .constants import DEFAULT_PRUNE_IDLE_SECONDS, MIN_RATE
from .errors import BucketClosedError

logger = logging.getLogger(__name__)


class Limiter:
    """Token-bucket rate limiter keyed by client.

    Every client gets an independent bucket that refills at ``n`` tokens per
    second and holds at most ``n`` tokens. ``n <= 0`` is treated as 1.

    Usage:
        limiter = Limiter(10)
        if limiter.decide(api_key):
            handle(request)
        else:
            reject(request)
    """

    def __init__(
        self,
        n: int = MIN_RATE,
        *,
        clock: Clock = time.monotonic,
        prune_idle: float = DEFAULT_PRUNE_IDLE_SECONDS,
    ):
        if n < MIN_RATE:
            logger.warning(f"Rate {n} is not positive, using {MIN_RATE} request(s) per second")
            n = MIN_RATE
        self._rate = float(n)
        self._capacity = float(n)
        self._clock = clock
        self._prune_idle = prune_idle
        self._buckets: dict[Hashable, Bucket] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: GateSettings, *, clock: Clock = time.monotonic) -> "Limiter":
        """Build a limiter from resolved settings."""
        return cls(settings.rate, clock=clock, prune_idle=settings.prune_idle_seconds)

    @property
    def rate(self) -> float:
        """Tokens added per second to every bucket."""
        return self._rate

    @property
    def capacity(self) -> float:
        """Maximum tokens a bucket can hold (equal to the rate)."""
        return self._capacity

    @property
    def client_count(self) -> int:
        """Number of clients with a bucket."""
        with self._lock:
            return len(self._buckets)

    def _resolve(self, client_id: Hashable) -> Bucket:
        """Return the bucket for a client, creating it on first sight."""
        with self._lock:
            bucket = self._buckets.get(client_id)
            if bucket is None:
                bucket = Bucket(self._rate, self._capacity, clock=self._clock)
                self._buckets[client_id] = bucket
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(f"Created bucket for client {client_id!r} ({len(self._buckets)} total)")
            return bucket

    def decide(self, client_id: Hashable) -> bool:
        """Check if a request from ``client_id`` should be allowed.

        Returns True if allowed, False if rate-limited. Never blocks on
        token availability and never raises.
        """
        while True:
            bucket = self._resolve(client_id)
            try:
                allowed = bucket.refill_and_consume()
            except BucketClosedError:
                # Pruned between lookup and consume; the map no longer holds it.
                continue
            telemetry.record_decision(allowed)
            return allowed

    def snapshot(self, client_id: Hashable) -> BucketSnapshot | None:
        """Current state of a client's bucket, or None if the client is unknown.

        Does not create a bucket and does not refill.
        """
        with self._lock:
            bucket = self._buckets.get(client_id)
        if bucket is None:
            return None
        return bucket.snapshot()

    def prune(self, max_idle: float | None = None) -> int:
        """Remove buckets idle for longer than ``max_idle`` seconds.

        ``max_idle`` defaults to the limiter's ``prune_idle`` setting.

        Buckets in use by a concurrent ``decide`` are skipped, as are buckets
        that would not yet have refilled to capacity, so a pruned client that
        returns with a fresh full bucket gains nothing it was not owed.
        Returns the number of buckets removed.
        """
        if max_idle is None:
            max_idle = self._prune_idle

        with telemetry.trace_prune(max_idle) as ctx:
            with self._lock:
                now = self._clock()
                stale = [
                    client_id for client_id, bucket in self._buckets.items() if bucket.try_close(max_idle, now)
                ]
                for client_id in stale:
                    del self._buckets[client_id]
                remaining = len(self._buckets)
            ctx["removed"] = len(stale)

        if stale:
            logger.debug(f"Pruned {len(stale)} idle bucket(s), {remaining} remaining")
        return len(stale)


def create_limiter(settings: GateSettings | None = None, *, clock: Clock = time.monotonic) -> Limiter:
    """Create a limiter from ``settings``, or from the environment when omitted."""
    if settings is None:
        settings = load_settings()
    return Limiter.from_settings(settings, clock=clock)
