from __future__ import annotations

from typing import Dict, Iterator, Optional, Sequence, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Job

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]
IDLE_LABEL = "idle"


def timeline_segments(jobs: Sequence[Job]) -> Iterator[Tuple[int, int, Optional[str]]]:
    """
    Yield ``(start, end, pid)`` for every job in time order, with
    ``pid=None`` for the idle gaps between them (including one before the
    first job when the CPU starts idle).
    """
    last_time = 0
    for job in sorted(jobs, key=lambda j: (j.start_time, j.end_time)):
        if job.start_time > last_time:
            yield last_time, job.start_time, None
        yield job.start_time, job.end_time, job.pid
        last_time = job.end_time


def _time_marks(segments) -> str:
    return "0" + "".join(f"{end:>3}" for _, end, _ in segments)


def render_gantt(jobs: Sequence[Job]) -> str:
    """
    Plain-text Gantt chart: '=' marks execution, '.' marks idle time.
    """
    if not jobs:
        return "(no execution)"

    segments = list(timeline_segments(jobs))
    line = "|"
    labels = " "

    for start, end, pid in segments:
        width = max(1, end - start)
        if pid is None:
            line += "." * width
            labels += " " * width
        else:
            line += "=" * width
            labels += pid[:width].ljust(width)

    line += "|"

    return "\n".join(["Gantt Chart:", line, labels.rstrip(), _time_marks(segments)])


def build_rich_gantt(jobs: Sequence[Job]) -> Tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    Idle gaps are drawn as dim dots labelled "idle" when there is room.
    """
    if not jobs:
        return Panel("No execution", title="Gantt Chart"), ""

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    segments = list(timeline_segments(jobs))
    timeline = Text()
    labels = Text()

    for start, end, pid in segments:
        width = max(1, end - start)
        if pid is None:
            timeline.append("·" * width, style="dim")
            label = IDLE_LABEL if width >= len(IDLE_LABEL) else ""
            labels.append(label.ljust(width), style="dim italic")
        else:
            timeline.append(" " * width, style=f"on {pid_color(pid)}")
            labels.append(pid[:width].ljust(width), style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    return Panel.fit(table, title="Gantt Chart"), _time_marks(segments)
