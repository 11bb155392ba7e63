import pytest

from npsched.algorithms import ALGORITHMS, get_engine, run_algorithm, run_fcfs, run_sjf
from npsched.models import IDLE_PID
from npsched.normalize import normalize


def _procs(*rows):
    return normalize([{"pid": pid, "arrival": a, "burst": b} for pid, a, b in rows])


def _spans(timeline):
    return [(b.pid, b.start, b.end) for b in timeline]


def test_fcfs_basic_order():
    rows, timeline = run_fcfs(_procs(("P1", 0, 3), ("P2", 2, 6), ("P3", 4, 4)))

    assert [r.pid for r in rows] == ["P1", "P2", "P3"]
    assert [(r.start, r.completion, r.waiting, r.turnaround) for r in rows] == [
        (0, 3, 0, 3),
        (3, 9, 1, 7),
        (9, 13, 5, 9),
    ]
    assert not any(b.idle for b in timeline)


def test_fcfs_idle_before_first_arrival():
    rows, timeline = run_fcfs(_procs(("P1", 2, 3)))

    assert _spans(timeline) == [(IDLE_PID, 0, 2), ("P1", 2, 5)]
    assert timeline[0].idle and not timeline[1].idle
    assert rows[0].waiting == 0


def test_fcfs_idle_gap_between_processes():
    _, timeline = run_fcfs(_procs(("A", 0, 2), ("B", 5, 1)))
    assert _spans(timeline) == [("A", 0, 2), (IDLE_PID, 2, 5), ("B", 5, 6)]


def test_fcfs_ties_use_input_order():
    rows, _ = run_fcfs(_procs(("B", 1, 5), ("A", 1, 1), ("C", 0, 2)))
    assert [r.pid for r in rows] == ["C", "B", "A"]


def test_fcfs_later_short_job_does_not_preempt():
    rows, _ = run_fcfs(_procs(("Long", 0, 10), ("Short", 1, 1)))
    assert rows[1].start == 10


def test_sjf_picks_shortest_ready_job():
    rows, timeline = run_sjf(_procs(("P1", 0, 7), ("P2", 2, 4), ("P3", 4, 1), ("P4", 5, 4)))

    assert _spans(timeline) == [("P1", 0, 7), ("P3", 7, 8), ("P2", 8, 12), ("P4", 12, 16)]
    assert [r.waiting for r in rows] == [0, 3, 6, 7]


def test_sjf_equal_bursts_fall_back_to_arrival_then_input_order():
    rows, _ = run_sjf(_procs(("X", 0, 5), ("B", 2, 3), ("A", 1, 3), ("C", 1, 3)))
    # A and C arrive together before B; A comes first in the input.
    assert [r.pid for r in rows] == ["X", "A", "C", "B"]


def test_sjf_idles_until_next_arrival():
    rows, timeline = run_sjf(_procs(("P1", 0, 2), ("P2", 6, 3), ("P3", 6, 1)))

    assert _spans(timeline) == [("P1", 0, 2), (IDLE_PID, 2, 6), ("P3", 6, 7), ("P2", 7, 10)]
    assert [r.pid for r in rows] == ["P1", "P3", "P2"]


def test_sjf_does_not_wait_for_shorter_future_job():
    rows, _ = run_sjf(_procs(("Long", 0, 8), ("Short", 1, 1)))
    assert [r.pid for r in rows] == ["Long", "Short"]


def test_sjf_handles_fractional_times():
    rows, timeline = run_sjf(_procs(("A", 0.5, 1.5), ("B", 0, 0.25)))

    assert _spans(timeline) == [("B", 0, 0.25), (IDLE_PID, 0.25, 0.5), ("A", 0.5, 2.0)]
    assert rows[1].turnaround == pytest.approx(1.5)


@pytest.mark.parametrize("engine", [run_fcfs, run_sjf])
def test_negative_arrival_is_kept_and_waits_for_clock(engine):
    rows, timeline = engine(_procs(("Early", -2, 3)))

    assert rows[0].arrival == -2
    assert rows[0].start == 0
    assert rows[0].waiting == 2
    assert _spans(timeline) == [("Early", 0, 3)]


@pytest.mark.parametrize("engine", [run_fcfs, run_sjf])
def test_empty_input(engine):
    assert engine([]) == ([], [])


@pytest.mark.parametrize("engine", [run_fcfs, run_sjf])
def test_schedule_invariants(engine):
    procs = _procs(("P1", 3, 2), ("P2", 0, 4), ("P3", 12, 1), ("P4", 1, 1), ("P5", 3, 6), ("P6", 20, 2))
    rows, timeline = engine(procs)

    assert len(rows) == len(procs)
    for r in rows:
        assert r.start >= r.arrival
        assert r.completion == r.start + r.burst
        assert r.waiting == r.start - r.arrival
        assert r.turnaround == r.waiting + r.burst

    completions = [r.completion for r in rows]
    assert completions == sorted(set(completions))

    for left, right in zip(timeline, timeline[1:]):
        assert left.end == right.start
    assert all(b.duration > 0 for b in timeline)
    assert sum(b.duration for b in timeline if not b.idle) == sum(p.burst for p in procs)


def test_sjf_choice_is_minimal_among_arrived_at_each_dispatch():
    procs = _procs(("P1", 0, 5), ("P2", 1, 3), ("P3", 2, 3), ("P4", 2, 1), ("P5", 9, 2), ("P6", 4, 7))
    rows, _ = run_sjf(procs)

    by_pid = {p.pid: p for p in procs}
    dispatched = set()
    for r in rows:
        candidates = [p for p in procs if p.pid not in dispatched and p.arrival <= r.start]
        best = min(candidates, key=lambda p: (p.burst, p.arrival, p.original_index))
        assert by_pid[r.pid] == best
        dispatched.add(r.pid)


def test_fcfs_dispatch_order_matches_arrival_sort():
    procs = _procs(("P1", 4, 1), ("P2", 0, 3), ("P3", 4, 2), ("P4", 1, 1))
    rows, _ = run_fcfs(procs)

    expected = sorted(procs, key=lambda p: (p.arrival, p.original_index))
    assert [r.pid for r in rows] == [p.pid for p in expected]


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_engines_are_repeatable(name):
    procs = _procs(("P1", 0, 7), ("P2", 2, 4), ("P3", 4, 1), ("P4", 5, 4))
    assert get_engine(name)(procs) == get_engine(name)(procs)


def test_get_engine_is_case_insensitive():
    assert get_engine("SJF") is run_sjf
    assert get_engine("Fcfs") is run_fcfs


def test_get_engine_rejects_unknown_name():
    with pytest.raises(ValueError, match="Unknown algorithm"):
        get_engine("rr")


def test_run_algorithm_scenario_a():
    report = run_algorithm(
        "fcfs",
        [
            {"pid": "P1", "arrival": 0, "burst": 3},
            {"pid": "P2", "arrival": 2, "burst": 6},
            {"pid": "P3", "arrival": 4, "burst": 4},
        ],
    )

    assert report.algorithm == "FCFS (non-preemptive)"
    assert report.avg_waiting == pytest.approx(2.0)
    assert report.avg_turnaround == pytest.approx(6.33, abs=0.01)
    assert report.makespan == 13
    assert not report.dropped


def test_run_algorithm_scenario_b():
    report = run_algorithm("fcfs", [{"pid": "P1", "arrival": 2, "burst": 3}])

    assert _spans(report.timeline) == [(IDLE_PID, 0, 2), ("P1", 2, 5)]
    assert report.makespan == 5
    assert report.avg_waiting == 0


@pytest.mark.parametrize("name", list(ALGORITHMS))
@pytest.mark.parametrize(
    "descriptors",
    [
        [],
        [{"pid": "", "arrival": 0, "burst": 5}, {"pid": "P1", "arrival": 0, "burst": 0}],
    ],
)
def test_run_algorithm_empty_report(name, descriptors):
    report = run_algorithm(name, descriptors)

    assert report.rows == []
    assert report.timeline == []
    assert report.avg_waiting == 0
    assert report.avg_turnaround == 0
    assert report.makespan == 0
    assert len(report.dropped) == len(descriptors)


def test_run_algorithm_skips_invalid_rows():
    report = run_algorithm(
        "sjf",
        [
            {"pid": "P1", "arrival": 0, "burst": 2},
            {"pid": "  ", "arrival": 0, "burst": 1},
            {"pid": "P3", "arrival": "soon", "burst": 1},
            {"pid": "P4", "arrival": 1, "burst": -3},
            {"pid": "P5", "arrival": 1, "burst": 1},
        ],
    )

    assert [r.pid for r in report.rows] == ["P1", "P5"]
    assert {b.pid for b in report.timeline} == {"P1", "P5"}
    assert [d.original_index for d in report.dropped] == [1, 2, 3]


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_run_algorithm_tolerates_non_mapping_entries(name):
    report = run_algorithm(name, [{"pid": "A", "arrival": 0, "burst": 1}, None])

    assert [r.pid for r in report.rows] == ["A"]
    assert report.dropped[0].reason == "not a descriptor"


def test_run_algorithm_with_huge_burst_is_dropped_not_fatal():
    report = run_algorithm("fcfs", [{"pid": "A", "arrival": 0, "burst": 10**400}])

    assert report.rows == []
    assert report.makespan == 0
