#!/usr/bin/env python3
"""
Named admission scenarios.

Each scenario builds its own Limiter, drives it through a fixed request
pattern and returns the verdicts. ``clock`` and ``sleep`` are injected so a
scenario runs identically in real time (``time.monotonic`` / ``time.sleep``)
or against a ``ManualClock``.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .bucket import Clock
from .constants import LABEL_ALLOWED, LABEL_DENIED
from .errors import UnknownScenarioError
from .limiter import Limiter

Sleep = Callable[[float], None]


@dataclass(frozen=True)
class Decision:
    """One verdict produced by a scenario."""

    step: int
    client_id: str
    allowed: bool
    note: str | None = None

    @property
    def label(self) -> str:
        return LABEL_ALLOWED if self.allowed else LABEL_DENIED

    def describe(self) -> str:
        if self.note:
            return f"Request {self.note} for {self.client_id}: {self.label}"
        return f"Request {self.step} for {self.client_id}: {self.label}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"step": self.step, "client_id": self.client_id, "allowed": self.allowed}
        if self.note:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class Scenario:
    name: str
    description: str
    run: Callable[[Clock, Sleep], list[Decision]]


def _burst(limiter: Limiter, client_id: str, count: int, start: int = 1) -> list[Decision]:
    return [Decision(step, client_id, limiter.decide(client_id)) for step in range(start, start + count)]


def run_demo(clock: Clock, sleep: Sleep, rate: int = 3) -> list[Decision]:
    """Walkthrough: clientA paced at 100 ms, a 1 s pause, then clientB back-to-back."""
    limiter = Limiter(rate, clock=clock)
    decisions = []
    for step in range(1, 6):
        decisions.append(Decision(step, "clientA", limiter.decide("clientA")))
        sleep(0.1)

    sleep(1.0)
    decisions.append(Decision(6, "clientA", limiter.decide("clientA"), note="after 1s wait"))

    decisions.extend(_burst(limiter, "clientB", 4))
    return decisions


def run_basic(clock: Clock, sleep: Sleep) -> list[Decision]:
    limiter = Limiter(3, clock=clock)
    return _burst(limiter, "client", 4)


def run_refill(clock: Clock, sleep: Sleep) -> list[Decision]:
    limiter = Limiter(1, clock=clock)
    decisions = _burst(limiter, "client", 2)
    sleep(1.05)
    decisions.append(Decision(3, "client", limiter.decide("client"), note="after 1.05s wait"))
    return decisions


def run_partial_refill(clock: Clock, sleep: Sleep) -> list[Decision]:
    n = 5
    limiter = Limiter(n, clock=clock)
    decisions = _burst(limiter, "client", n + 1)
    sleep(2.0 / n)
    decisions.extend(_burst(limiter, "client", 3, start=n + 2))
    return decisions


def run_isolation(clock: Clock, sleep: Sleep) -> list[Decision]:
    limiter = Limiter(2, clock=clock)
    return _burst(limiter, "clientA", 3) + _burst(limiter, "clientB", 3)


def run_concurrent(clock: Clock, sleep: Sleep, rate: int = 100, callers: int = 200) -> list[Decision]:
    """Many threads released together against one client of a fresh limiter."""
    limiter = Limiter(rate, clock=clock)
    barrier = threading.Barrier(callers)
    verdicts: list[bool | None] = [None] * callers

    def call(index: int) -> None:
        barrier.wait()
        verdicts[index] = limiter.decide("concurrentClient")

    threads = [threading.Thread(target=call, args=(i,)) for i in range(callers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    return [Decision(i + 1, "concurrentClient", bool(v)) for i, v in enumerate(verdicts)]


def run_sanitize(clock: Clock, sleep: Sleep) -> list[Decision]:
    limiter = Limiter(0, clock=clock)
    return _burst(limiter, "clientX", 2)


SCENARIOS: dict[str, Scenario] = {
    s.name: s
    for s in (
        Scenario("demo", "Paced requests, a refill pause and a second client (N=3)", run_demo),
        Scenario("basic", "Three allowed back-to-back, the fourth denied (N=3)", run_basic),
        Scenario("refill", "Drain, wait 1.05s, allowed again (N=1)", run_refill),
        Scenario("partial-refill", "Drain, wait for two tokens, two allowed (N=5)", run_partial_refill),
        Scenario("isolation", "Two clients with independent quotas (N=2)", run_isolation),
        Scenario("concurrent", "200 simultaneous callers on one client (N=100)", run_concurrent),
        Scenario("sanitize", "N=0 behaves as N=1", run_sanitize),
    )
}


def list_scenarios() -> list[str]:
    return list(SCENARIOS)


def get_scenario(name: str) -> Scenario:
    """Look up a scenario by name.

    Raises:
        UnknownScenarioError: no scenario has that name.
    """
    try:
        return SCENARIOS[name]
    except KeyError:
        raise UnknownScenarioError(name, list_scenarios()) from None
