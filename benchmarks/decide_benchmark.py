#!/usr/bin/env python3
"""
In-process benchmark for Limiter.decide.

Measures the admission hot path:
  - single thread, one client (bucket lock uncontended)
  - single thread, many clients (map growth + lookups)
  - many threads, one shared client (bucket lock contention)
  - many threads, one client each (limiter lock contention only)

Run:  python benchmarks/decide_benchmark.py
"""

import gc
import statistics
import threading
import time

from token_gate import Limiter


def _banner(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def _report(name: str, iterations: int, elapsed: float, latencies: list[float] | None = None) -> None:
    ops_per_sec = iterations / elapsed if elapsed > 0 else 0
    print(f"  {name:<40}  {iterations:>8,} ops  {elapsed:>7.3f}s  {ops_per_sec:>10,.0f} ops/s", end="")
    if latencies:
        avg_us = statistics.mean(latencies) * 1_000_000
        p95_us = sorted(latencies)[int(len(latencies) * 0.95)] * 1_000_000
        print(f"  avg={avg_us:.1f}us  p95={p95_us:.1f}us", end="")
    print()


# ============================================================================
# 1. Single-threaded
# ============================================================================
def bench_single_client(n: int = 200_000) -> None:
    _banner("Single thread, one client")
    limiter = Limiter(1_000_000)

    gc.disable()
    latencies = []
    start = time.perf_counter()
    for _ in range(n):
        t0 = time.perf_counter()
        limiter.decide("client")
        latencies.append(time.perf_counter() - t0)
    elapsed = time.perf_counter() - start
    gc.enable()
    _report("decide (same client)", n, elapsed, latencies)


def bench_many_clients(n: int = 200_000, clients: int = 10_000) -> None:
    _banner("Single thread, many clients")
    limiter = Limiter(100)
    keys = [f"client-{i}" for i in range(clients)]

    gc.disable()
    start = time.perf_counter()
    for i in range(n):
        limiter.decide(keys[i % clients])
    elapsed = time.perf_counter() - start
    gc.enable()
    _report(f"decide ({clients:,} clients)", n, elapsed)


# ============================================================================
# 2. Multi-threaded
# ============================================================================
def _threaded(limiter: Limiter, threads: int, per_thread: int, key_for) -> tuple[float, int]:
    barrier = threading.Barrier(threads + 1)
    allowed = [0] * threads

    def worker(index: int) -> None:
        key = key_for(index)
        barrier.wait()
        count = 0
        for _ in range(per_thread):
            if limiter.decide(key):
                count += 1
        allowed[index] = count

    workers = [threading.Thread(target=worker, args=(i,)) for i in range(threads)]
    for w in workers:
        w.start()
    barrier.wait()
    start = time.perf_counter()
    for w in workers:
        w.join()
    return time.perf_counter() - start, sum(allowed)


def bench_shared_client(threads: int = 8, per_thread: int = 25_000) -> None:
    _banner(f"{threads} threads, one shared client")
    rate = 1_000
    limiter = Limiter(rate)
    elapsed, allowed = _threaded(limiter, threads, per_thread, lambda _: "shared")
    _report("decide (shared client)", threads * per_thread, elapsed)
    print(f"  allowed={allowed:,}  bound={rate + rate * elapsed:,.0f}")


def bench_distinct_clients(threads: int = 8, per_thread: int = 25_000) -> None:
    _banner(f"{threads} threads, one client each")
    limiter = Limiter(1_000)
    elapsed, _ = _threaded(limiter, threads, per_thread, lambda i: f"client-{i}")
    _report("decide (distinct clients)", threads * per_thread, elapsed)


def main() -> None:
    print("token_gate in-process benchmark")
    bench_single_client()
    bench_many_clients()
    bench_shared_client()
    bench_distinct_clients()


if __name__ == "__main__":
    main()
