"""
Non-preemptive CPU scheduling simulator.

Turns a list of (pid, arrival, burst) descriptors into per-process results,
an execution timeline with idle gaps, and summary statistics for FCFS and
SJF scheduling.
"""

from .algorithms import ALGORITHMS, get_engine, run_algorithm, run_fcfs, run_sjf
from .metrics import aggregate
from .normalize import normalize, normalize_with_diagnostics

__all__ = [
    "ALGORITHMS",
    "aggregate",
    "get_engine",
    "normalize",
    "normalize_with_diagnostics",
    "run_algorithm",
    "run_fcfs",
    "run_sjf",
]
