from __future__ import annotations

import math
from typing import Iterable, Sequence

from .models import Number, ResultRow, Statistics, TimelineBlock


def _mean(values: Iterable[Number], n: int) -> float:
    # Sums of large ints can leave float range even when every value fits.
    try:
        return sum(values) / n
    except OverflowError:
        return math.inf


def aggregate(rows: Sequence[ResultRow], timeline: Sequence[TimelineBlock]) -> Statistics:
    """
    Reduce per-process rows and the timeline into averages and span figures.

    Averages divide by max(1, len(rows)) so an empty schedule reports zeros.
    """
    n = max(1, len(rows))
    avg_waiting = _mean((r.waiting for r in rows), n)
    avg_turnaround = _mean((r.turnaround for r in rows), n)

    makespan = timeline[-1].end - timeline[0].start if timeline else 0
    busy_time = sum(b.duration for b in timeline if not b.idle)
    idle_time = sum(b.duration for b in timeline if b.idle)

    throughput = len(rows) / makespan if makespan > 0 else 0.0
    cpu_utilization = busy_time / makespan if makespan > 0 else 0.0

    return Statistics(
        avg_waiting=avg_waiting,
        avg_turnaround=avg_turnaround,
        makespan=makespan,
        busy_time=busy_time,
        idle_time=idle_time,
        cpu_utilization=cpu_utilization,
        throughput=throughput,
    )
