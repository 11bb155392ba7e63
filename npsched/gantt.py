from __future__ import annotations

from typing import Dict, List, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import TimelineBlock


def fmt_time(value) -> str:
    return f"{value:g}" if isinstance(value, float) else str(value)


def block_widths(timeline: Sequence[TimelineBlock], width: int) -> List[int]:
    """
    Terminal cells for each block, proportional to duration / makespan.

    Every block gets at least one cell so short bursts stay visible.
    """
    if not timeline:
        return []

    makespan = timeline[-1].end - timeline[0].start
    if makespan <= 0:
        return [1 for _ in timeline]

    return [max(1, round(b.duration / makespan * width)) for b in timeline]


def build_rich_gantt(timeline: Sequence[TimelineBlock], width: int = 60) -> tuple[Panel, Text]:
    """
    Build a Rich Panel containing a colored timeline strip and a line of
    time marks underneath it. Idle segments are drawn dimmed.
    """
    if not timeline:
        panel = Panel("No execution", title="Timeline")
        return panel, Text("")

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    strip = Text()
    labels = Text()
    time_marks = Text(fmt_time(timeline[0].start))
    cursor = len(time_marks)

    for block, cells in zip(timeline, block_widths(timeline, width)):
        if block.idle:
            strip.append("░" * cells, style="dim")
            labels.append(block.pid[:cells].ljust(cells), style="dim italic")
        else:
            strip.append(" " * cells, style=f"on {pid_color(block.pid)}")
            labels.append(block.pid[:cells].ljust(cells), style="bold")

        cursor += cells
        mark = fmt_time(block.end)
        pad = max(1, cursor - len(time_marks) - len(mark) + 1)
        time_marks.append(" " * pad + mark)

    table = Table.grid(padding=(0, 0))
    table.add_row(strip)
    table.add_row(labels)

    panel = Panel.fit(table, title="Timeline")
    return panel, time_marks
