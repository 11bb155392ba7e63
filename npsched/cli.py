from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .config import settings
from .gantt import build_rich_gantt, fmt_time
from .models import ProcessDescriptor, Report
from .workload_io import SAMPLE_WORKLOAD, load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="npsched",
        description="Non-preemptive CPU scheduling simulator (FCFS, SJF).",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help=f"Logging verbosity (default: {settings.LOG_LEVEL}).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        default=settings.DEFAULT_ALGORITHM,
        choices=list(ALGORITHMS),
        type=str.lower,
        help=f"Algorithm to use (default: {settings.DEFAULT_ALGORITHM}).",
    )
    _add_workload_arguments(run_parser)
    run_parser.add_argument(
        "--width",
        type=int,
        default=settings.GANTT_WIDTH,
        help=f"Width of the timeline strip in cells (default: {settings.GANTT_WIDTH}).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run FCFS and SJF on the same workload and compare their averages.",
    )
    _add_workload_arguments(compare_parser)

    return parser


def _add_workload_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--workload",
        "-w",
        help="Path to JSON or CSV workload file.",
    )
    source.add_argument(
        "--sample",
        action="store_true",
        help="Use the built-in four-process sample workload.",
    )


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _descriptors_from_args(args: argparse.Namespace) -> List[ProcessDescriptor]:
    if args.sample:
        return list(SAMPLE_WORKLOAD)
    return load_workload(Path(args.workload))


def _print_result(report: Report, console: Console, width: int) -> None:
    decimals = settings.DECIMALS

    console.print(f"[bold]Algorithm:[/bold] {report.algorithm}")
    console.print()

    panel, time_marks = build_rich_gantt(report.timeline, width=width)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = ["PID", "Arrival", "Burst", "Start", "Completion", "Waiting", "Turnaround"]

    proc_table = Table(title="Per-process results", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for r in report.rows:
        proc_table.add_row(
            r.pid,
            fmt_time(r.arrival),
            fmt_time(r.burst),
            fmt_time(r.start),
            fmt_time(r.completion),
            fmt_time(r.waiting),
            fmt_time(r.turnaround),
        )

    console.print(proc_table)
    console.print()

    stats = report.stats
    sys_table = Table(title="Summary", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{stats.avg_waiting:.{decimals}f}")
    sys_table.add_row("Avg turnaround", f"{stats.avg_turnaround:.{decimals}f}")
    sys_table.add_row("Makespan", fmt_time(stats.makespan))
    sys_table.add_row("Busy / idle", f"{fmt_time(stats.busy_time)} / {fmt_time(stats.idle_time)}")
    sys_table.add_row("CPU utilization", f"{stats.cpu_utilization*100:.1f}%")
    sys_table.add_row("Throughput (proc/time)", f"{stats.throughput:.3f}")

    console.print(sys_table)

    if report.dropped:
        console.print(f"[dim]{len(report.dropped)} invalid row(s) ignored:[/dim]")
        for d in report.dropped:
            console.print(f"[dim]  row {d.original_index + 1}: {d.reason}[/dim]")


def _print_compare(descriptors: List[ProcessDescriptor], console: Console) -> None:
    decimals = settings.DECIMALS

    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Makespan", justify="right")
    summary_table.add_column("CPU utilization", justify="right")

    for alg in ALGORITHMS:
        report = run_algorithm(alg, descriptors)
        summary_table.add_row(
            report.algorithm,
            f"{report.avg_waiting:.{decimals}f}",
            f"{report.avg_turnaround:.{decimals}f}",
            fmt_time(report.makespan),
            f"{report.stats.cpu_utilization*100:.1f}%",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    console = Console()

    try:
        descriptors = _descriptors_from_args(args)

        if args.command == "run":
            report = run_algorithm(args.algorithm, descriptors)
            _print_result(report, console, width=args.width)
            return 0

        if args.command == "compare":
            _print_compare(descriptors, console)
            return 0
    except (OSError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
