from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Union

Number = Union[int, float]

# Synthetic pid carried by timeline blocks where the CPU sits idle.
IDLE_PID = "IDLE"

# Raw input as the caller hands it over: pid / arrival / burst, unvalidated.
ProcessDescriptor = Mapping[str, Any]


@dataclass(frozen=True)
class CanonicalProcess:
    pid: str
    arrival: Number
    burst: Number
    original_index: int


@dataclass(frozen=True)
class DroppedRow:
    """
    A descriptor the normalizer excluded, with the reason it was excluded.
    """

    original_index: int
    descriptor: Any
    reason: str


@dataclass
class ResultRow:
    pid: str
    arrival: Number
    burst: Number
    start: Number
    completion: Number
    waiting: Number
    turnaround: Number


@dataclass
class TimelineBlock:
    """
    One contiguous segment of the execution timeline, either a process
    running or the CPU idling until the next arrival.
    """

    pid: str
    start: Number
    end: Number
    idle: bool = False

    @property
    def duration(self) -> Number:
        return self.end - self.start


@dataclass
class Statistics:
    avg_waiting: float
    avg_turnaround: float
    makespan: Number
    busy_time: Number = 0
    idle_time: Number = 0
    cpu_utilization: float = 0.0
    throughput: float = 0.0


@dataclass
class Report:
    algorithm: str
    rows: List[ResultRow] = field(default_factory=list)
    timeline: List[TimelineBlock] = field(default_factory=list)
    stats: Statistics = field(default_factory=lambda: Statistics(0.0, 0.0, 0))
    dropped: List[DroppedRow] = field(default_factory=list)

    @property
    def avg_waiting(self) -> float:
        return self.stats.avg_waiting

    @property
    def avg_turnaround(self) -> float:
        return self.stats.avg_turnaround

    @property
    def makespan(self) -> Number:
        return self.stats.makespan
