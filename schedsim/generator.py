from __future__ import annotations

import random
from typing import List, Optional

from .models import Process


def generate_workload(
    count: int,
    seed: Optional[int] = None,
    max_arrival: int = 10,
    max_burst: int = 10,
    max_priority: int = 5,
) -> List[Process]:
    """
    Build ``count`` random processes named P1..Pn.

    Arrival times fall in [0, max_arrival], bursts in [1, max_burst] and
    priorities in [0, max_priority]. The same seed always yields the same
    workload.
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    if max_arrival < 0 or max_burst < 1 or max_priority < 0:
        raise ValueError("max_arrival and max_priority must be >= 0 and max_burst >= 1")

    rng = random.Random(seed)
    return [
        Process(
            pid=f"P{i}",
            arrival_time=rng.randint(0, max_arrival),
            burst_time=rng.randint(1, max_burst),
            priority=rng.randint(0, max_priority),
        )
        for i in range(1, count + 1)
    ]
