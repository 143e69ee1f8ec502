#!/usr/bin/env python3
"""
Embedding token_gate in a threaded job dispatcher.

Several workers pull jobs tagged with a tenant id from a shared queue. Each
tenant may run 5 jobs per second; over-quota jobs are rejected immediately
instead of being queued. A housekeeping step prunes tenants that went quiet.

Run:  python examples/worker_pool_example.py
"""

import logging
import queue
import threading
import time
from collections import Counter

from token_gate import Limiter

logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

TENANTS = ["acme", "globex", "initech"]


def main() -> None:
    limiter = Limiter(5, prune_idle=1.0)
    jobs: queue.Queue[str | None] = queue.Queue()
    results: Counter[tuple[str, bool]] = Counter()
    results_lock = threading.Lock()

    def worker() -> None:
        while (tenant := jobs.get()) is not None:
            allowed = limiter.decide(tenant)
            with results_lock:
                results[(tenant, allowed)] += 1

    workers = [threading.Thread(target=worker) for _ in range(4)]
    for w in workers:
        w.start()

    # acme floods, globex trickles, initech sends a single burst
    for tick in range(20):
        for _ in range(3):
            jobs.put("acme")
        if tick % 4 == 0:
            jobs.put("globex")
        if tick == 0:
            for _ in range(8):
                jobs.put("initech")
        time.sleep(0.05)

    for _ in workers:
        jobs.put(None)
    for w in workers:
        w.join()

    for tenant in TENANTS:
        print(f"{tenant:<8} allowed={results[(tenant, True)]:>3}  rejected={results[(tenant, False)]:>3}")

    time.sleep(1.5)
    print(f"Pruned {limiter.prune()} idle tenant bucket(s), {limiter.client_count} remaining")


if __name__ == "__main__":
    main()
