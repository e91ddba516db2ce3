from __future__ import annotations

import logging
from collections import defaultdict, deque
from typing import Deque, Dict, Iterable, List, Optional, Set

from .errors import InvalidProcess, InvariantViolation, SchedulingError
from .metrics import compute_system_metrics
from .models import Job, Process, ProcessStats, ScheduleResult, SchedulingStats, Task, assign_pids
from .policies import SchedulingPolicy, make_policy

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Dispatch loop for a single simulation run.

    Owns the ready queue, the virtual clock, the emitted jobs and the
    statistics. Submit every process, then call ``schedule()`` once.
    """

    def __init__(self, policy: SchedulingPolicy) -> None:
        self.policy = policy
        self.current_time = 0
        self.jobs: List[Job] = []
        self.stats = SchedulingStats()

        self._tasks: List[Task] = []
        self._pids: Set[str] = set()
        self._ready: List[Task] = []
        self._open: Optional[Task] = None
        self._open_start = 0
        self._finished = False

    @property
    def submitted_count(self) -> int:
        return len(self._tasks)

    def submit(self, process: Process) -> None:
        if self._finished:
            raise SchedulingError("cannot submit to a scheduler that has already run")
        if not isinstance(process, Process):
            raise InvalidProcess(f"expected a Process, got {process!r}")
        if process.pid is not None:
            if process.pid in self._pids:
                raise InvalidProcess(f"duplicate pid {process.pid!r} in the same run")
            self._pids.add(process.pid)

        self._tasks.append(Task(process=process, seq=len(self._tasks), remaining=process.burst_time))

    def submit_all(self, processes: Iterable[Process]) -> None:
        for process in processes:
            self.submit(process)

    def schedule(self) -> ScheduleResult:
        if self._finished:
            raise SchedulingError("scheduler has already run")
        self._finished = True

        # Processes submitted without a pid are named once the whole run is known.
        for task, process in zip(self._tasks, assign_pids(t.process for t in self._tasks)):
            task.process = process

        pending: Deque[Task] = deque(sorted(self._tasks, key=lambda t: (t.arrival_time, t.seq)))
        completed = 0

        while completed < len(self._tasks):
            self._admit(pending)

            if not self._ready:
                # CPU idle: jump to the next arrival.
                logger.debug("t=%d: idle until %d", self.current_time, pending[0].arrival_time)
                self._advance(pending[0].arrival_time)
                continue

            task = self.policy.select(self._ready, self.current_time)
            next_arrival = pending[0].arrival_time if pending else None
            length = self.policy.time_slice(task, self.current_time, next_arrival)
            if length <= 0 or length > task.remaining:
                raise InvariantViolation(
                    f"{self.policy!r} chose a slice of {length} for {task.pid} "
                    f"with {task.remaining} remaining"
                )

            self._ready.remove(task)
            self._dispatch(task, length)

            self._advance(self.current_time + length)
            task.remaining -= length
            # New arrivals queue up ahead of a preempted task.
            self._admit(pending)

            if task.remaining == 0:
                self._close_segment()
                stats = ProcessStats.from_completion(task.process, task.first_start, self.current_time)
                self.stats.add_process_stats(stats)
                completed += 1
                logger.debug("t=%d: %s completed", self.current_time, task.pid)
            else:
                self._ready.append(task)
                if not self.policy.preempts_on_arrival:
                    self._close_segment()

        self._verify()
        logger.info(
            "%s finished %d processes at t=%d in %d jobs",
            self.policy.display_name,
            len(self._tasks),
            self.current_time,
            len(self.jobs),
        )
        return ScheduleResult(
            algorithm=self.policy.display_name,
            quantum=self.policy.quantum,
            jobs=list(self.jobs),
            stats=self.stats,
        )

    def _admit(self, pending: Deque[Task]) -> None:
        while pending and pending[0].arrival_time <= self.current_time:
            self._ready.append(pending.popleft())

    def _advance(self, new_time: int) -> None:
        if new_time < self.current_time:
            raise InvariantViolation(f"clock moved backward from {self.current_time} to {new_time}")
        self.current_time = new_time

    def _dispatch(self, task: Task, length: int) -> None:
        if self._open is task:
            # Same task keeps the CPU across an arrival: one segment.
            logger.debug("t=%d: %s continues for %d", self.current_time, task.pid, length)
            return

        if self._open is not None:
            logger.debug("t=%d: preempting %s for %s", self.current_time, self._open.pid, task.pid)
            self._close_segment()

        if task.first_start is None:
            task.first_start = self.current_time
        self._open = task
        self._open_start = self.current_time
        logger.debug("t=%d: run %s for %d", self.current_time, task.pid, length)

    def _close_segment(self) -> None:
        if self._open is None:
            return
        self.jobs.append(
            Job(pid=self._open.pid, start_time=self._open_start, duration=self.current_time - self._open_start)
        )
        self._open = None

    def _verify(self) -> None:
        executed: Dict[str, int] = defaultdict(int)
        for job in self.jobs:
            executed[job.pid] += job.duration

        for task in self._tasks:
            pid = task.pid
            if executed[pid] != task.burst_time:
                raise InvariantViolation(
                    f"{pid} ran for {executed[pid]} but its burst time is {task.burst_time}"
                )
            stats = self.stats.get_process_stats(pid)
            if stats is None or stats.waiting_time < 0:
                raise InvariantViolation(f"invalid statistics for {pid}: {stats!r}")


def run_algorithm(name: str, processes: Iterable[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm on a fresh scheduler and attach
    system metrics to the result.
    """
    scheduler = Scheduler(make_policy(name, quantum))
    scheduler.submit_all(processes)
    result = scheduler.schedule()
    compute_system_metrics(result)
    return result
