from __future__ import annotations

import itertools
import re
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .errors import EmptyStatistics, InvalidProcess, InvariantViolation

_DIGITS = re.compile(r"(\d+)")


def pid_sort_key(pid: str) -> Tuple[Union[str, int], ...]:
    """
    Natural ordering for pids, so "P2" sorts before "P10".
    """
    parts = _DIGITS.split(pid)
    # re.split keeps text at even indices and the captured digits at odd ones.
    return tuple(int(part) if i % 2 else part for i, part in enumerate(parts))


def assign_pids(processes: Iterable[Process]) -> List[Process]:
    """
    Fill in missing pids as P1, P2, ... skipping every pid already supplied.

    Processes that carry a pid are returned unchanged; the order is kept.
    """
    processes = list(processes)
    taken = {p.pid for p in processes if p.pid is not None}
    counter = itertools.count(1)

    assigned: List[Process] = []
    for p in processes:
        if p.pid is None:
            pid = f"P{next(counter)}"
            while pid in taken:
                pid = f"P{next(counter)}"
            taken.add(pid)
            p = replace(p, pid=pid)
        assigned.append(p)
    return assigned


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Process:
    """
    Immutable description of one schedulable unit of work.

    Lower numeric priority means more urgent; a missing priority is treated
    as the least urgent by every priority-aware policy. A missing pid is
    filled in by ``assign_pids`` when the process joins a run or a workload.
    """

    pid: Optional[str] = None
    arrival_time: int = 0
    burst_time: int = 0
    priority: Optional[int] = None

    def __post_init__(self) -> None:
        if not _is_int(self.burst_time) or self.burst_time <= 0:
            raise InvalidProcess(f"burst_time must be a positive integer, got {self.burst_time!r}")
        if not _is_int(self.arrival_time) or self.arrival_time < 0:
            raise InvalidProcess(f"arrival_time must be a non-negative integer, got {self.arrival_time!r}")
        if self.priority is not None and (not _is_int(self.priority) or self.priority < 0):
            raise InvalidProcess(f"priority must be a non-negative integer, got {self.priority!r}")
        if self.pid is not None and (not isinstance(self.pid, str) or not self.pid):
            raise InvalidProcess(f"pid must be a non-empty string, got {self.pid!r}")


@dataclass
class Task:
    """
    Scheduler-owned bookkeeping for one submitted process.
    """

    process: Process
    seq: int
    remaining: int
    first_start: Optional[int] = None

    @property
    def pid(self) -> str:
        return self.process.pid

    @property
    def arrival_time(self) -> int:
        return self.process.arrival_time

    @property
    def burst_time(self) -> int:
        return self.process.burst_time

    @property
    def priority(self) -> Optional[int]:
        return self.process.priority


@dataclass(frozen=True)
class Job:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: str
    start_time: int
    duration: int

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration


@dataclass(frozen=True)
class ProcessStats:
    pid: str
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: Optional[int] = None

    @classmethod
    def from_completion(cls, process: Process, start_time: int, completion_time: int) -> "ProcessStats":
        turnaround_time = completion_time - process.arrival_time
        return cls(
            pid=process.pid,
            arrival_time=process.arrival_time,
            burst_time=process.burst_time,
            start_time=start_time,
            completion_time=completion_time,
            waiting_time=turnaround_time - process.burst_time,
            turnaround_time=turnaround_time,
            response_time=start_time - process.arrival_time,
            priority=process.priority,
        )


class SchedulingStats:
    """
    Per-process statistics keyed by pid, in completion order.
    """

    def __init__(self) -> None:
        self._stats: Dict[str, ProcessStats] = {}

    def add_process_stats(self, stats: ProcessStats) -> None:
        if stats.pid in self._stats:
            raise InvariantViolation(f"statistics for {stats.pid} recorded twice")
        self._stats[stats.pid] = stats

    def get_process_stats(self, pid: str) -> Optional[ProcessStats]:
        return self._stats.get(pid)

    def __len__(self) -> int:
        return len(self._stats)

    def __iter__(self) -> Iterator[ProcessStats]:
        return iter(self._stats.values())

    def __contains__(self, pid: object) -> bool:
        return pid in self._stats

    def _mean(self, attr: str) -> float:
        if not self._stats:
            raise EmptyStatistics(f"no completed processes to average {attr} over")
        return sum(getattr(s, attr) for s in self._stats.values()) / len(self._stats)

    def average_waiting_time(self) -> float:
        return self._mean("waiting_time")

    def average_turnaround_time(self) -> float:
        return self._mean("turnaround_time")

    def average_response_time(self) -> float:
        return self._mean("response_time")


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    context_switches: int = 0
    starvation_count: int = 0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    jobs: List[Job] = field(default_factory=list)
    stats: SchedulingStats = field(default_factory=SchedulingStats)
    system: Optional[SystemMetrics] = None
