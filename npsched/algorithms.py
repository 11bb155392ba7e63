from __future__ import annotations

import heapq
import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Sequence, Tuple

from .metrics import aggregate
from .models import (
    IDLE_PID,
    CanonicalProcess,
    Number,
    ProcessDescriptor,
    Report,
    ResultRow,
    TimelineBlock,
)
from .normalize import normalize_with_diagnostics

logger = logging.getLogger(__name__)

Schedule = Tuple[List[ResultRow], List[TimelineBlock]]
Engine = Callable[[Sequence[CanonicalProcess]], Schedule]


def _arrival_order(p: CanonicalProcess) -> Tuple[Number, int]:
    return (p.arrival, p.original_index)


def _push_idle(timeline: List[TimelineBlock], start: Number, end: Number) -> None:
    if end > start:
        timeline.append(TimelineBlock(pid=IDLE_PID, start=start, end=end, idle=True))


def _dispatch(p: CanonicalProcess, time: Number, rows: List[ResultRow], timeline: List[TimelineBlock]) -> Number:
    """
    Run p to completion starting at time; returns the completion instant.
    """
    start_time = time
    completion_time = start_time + p.burst

    timeline.append(TimelineBlock(pid=p.pid, start=start_time, end=completion_time))
    rows.append(
        ResultRow(
            pid=p.pid,
            arrival=p.arrival,
            burst=p.burst,
            start=start_time,
            completion=completion_time,
            waiting=start_time - p.arrival,
            turnaround=completion_time - p.arrival,
        )
    )
    return completion_time


def run_fcfs(processes: Sequence[CanonicalProcess]) -> Schedule:
    """
    First-Come First-Serve (non-preemptive).

    Dispatch order is (arrival, original_index); the CPU idles only when the
    next process in that order has not arrived yet.
    """
    time: Number = 0
    rows: List[ResultRow] = []
    timeline: List[TimelineBlock] = []

    for p in sorted(processes, key=_arrival_order):
        if time < p.arrival:
            _push_idle(timeline, time, p.arrival)
            time = p.arrival
        time = _dispatch(p, time, rows, timeline)

    return rows, timeline


def run_sjf(processes: Sequence[CanonicalProcess]) -> Schedule:
    """
    Shortest Job First (non-preemptive).

    Each time the CPU frees up, every process that has arrived by then joins
    the ready heap, and the one with the smallest (burst, arrival,
    original_index) runs to completion. Later arrivals never interrupt it.
    """
    pending: Deque[CanonicalProcess] = deque(sorted(processes, key=_arrival_order))
    ready: List[Tuple[Number, Number, int, CanonicalProcess]] = []

    time: Number = 0
    rows: List[ResultRow] = []
    timeline: List[TimelineBlock] = []

    def admit_arrivals() -> None:
        while pending and pending[0].arrival <= time:
            p = pending.popleft()
            heapq.heappush(ready, (p.burst, p.arrival, p.original_index, p))

    while pending or ready:
        admit_arrivals()

        if not ready:
            next_arrival = pending[0].arrival
            _push_idle(timeline, time, next_arrival)
            time = next_arrival
            admit_arrivals()

        _, _, _, p = heapq.heappop(ready)
        time = _dispatch(p, time, rows, timeline)

    return rows, timeline


ALGORITHMS: Dict[str, Engine] = {
    "fcfs": run_fcfs,
    "sjf": run_sjf,
}

ALGORITHM_LABELS = {
    "fcfs": "FCFS (non-preemptive)",
    "sjf": "SJF (non-preemptive)",
}


def get_engine(name: str) -> Engine:
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from: {', '.join(ALGORITHMS)})")
    return ALGORITHMS[name]


def run_algorithm(name: str, descriptors: Sequence[ProcessDescriptor]) -> Report:
    """
    Normalize raw descriptors, run the named engine and aggregate the result.
    """
    engine = get_engine(name)
    canonical, dropped = normalize_with_diagnostics(descriptors)
    rows, timeline = engine(canonical)

    logger.debug(
        "%s scheduled %d process(es), dropped %d, timeline has %d block(s)",
        name.lower(),
        len(rows),
        len(dropped),
        len(timeline),
    )

    return Report(
        algorithm=ALGORITHM_LABELS[name.lower()],
        rows=rows,
        timeline=timeline,
        stats=aggregate(rows, timeline),
        dropped=dropped,
    )
