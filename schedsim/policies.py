from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Type

from .models import Task, pid_sort_key


def _priority_rank(task: Task) -> float:
    # Treat missing priority as lowest priority.
    return task.priority if task.priority is not None else float("inf")


class SchedulingPolicy(ABC):
    """
    Strategy deciding which ready task runs next and for how long.

    ``select`` receives the ready tasks (arrived, remaining > 0) in
    ready-queue order. ``time_slice`` must return a length between 1 and the
    task's remaining burst.
    """

    name: str = ""
    display_name: str = ""
    preempts_on_arrival: bool = False

    @property
    def quantum(self) -> Optional[int]:
        return None

    @abstractmethod
    def select(self, ready: Sequence[Task], now: int) -> Task:
        ...

    def time_slice(self, task: Task, now: int, next_arrival: Optional[int]) -> int:
        if self.preempts_on_arrival and next_arrival is not None:
            return min(task.remaining, next_arrival - now)
        return task.remaining

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FCFSPolicy(SchedulingPolicy):
    """
    First-Come First-Serve (non-preemptive).
    """

    name = "fcfs"
    display_name = "FCFS"

    def select(self, ready: Sequence[Task], now: int) -> Task:
        return min(ready, key=lambda t: (t.arrival_time, t.seq))


class SJFPolicy(SchedulingPolicy):
    """
    Shortest Job First (non-preemptive).

    Among ready tasks choose the smallest burst time (tie-breaker: earlier
    arrival, then the lowest pid in natural order, so P2 precedes P10).
    """

    name = "sjf"
    display_name = "SJF (non-preemptive)"

    def select(self, ready: Sequence[Task], now: int) -> Task:
        return min(ready, key=lambda t: (t.remaining, t.arrival_time, pid_sort_key(t.pid)))


class SRTFPolicy(SJFPolicy):
    """
    Shortest Remaining Time First (preemptive SJF).

    Runs until completion or the next arrival, whichever comes first, and
    re-evaluates there.
    """

    name = "srtf"
    display_name = "SRTF"
    preempts_on_arrival = True


class PriorityPolicy(SchedulingPolicy):
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority; ties break by
    earlier arrival, then submission order.
    """

    name = "priority"
    display_name = "Priority (static)"

    def select(self, ready: Sequence[Task], now: int) -> Task:
        return min(ready, key=lambda t: (_priority_rank(t), t.arrival_time, t.seq))


class PreemptivePriorityPolicy(PriorityPolicy):
    """
    Priority scheduling re-evaluated at every arrival. A newcomer only takes
    the CPU when its priority is strictly better than the running task's.
    """

    name = "ppriority"
    display_name = "Priority (preemptive)"
    preempts_on_arrival = True


class RoundRobinPolicy(SchedulingPolicy):
    """
    Round Robin scheduling with a fixed time quantum.
    """

    name = "rr"
    display_name = "Round Robin"

    def __init__(self, quantum: Optional[int] = None) -> None:
        if quantum is None or quantum <= 0:
            raise ValueError("Round Robin requires a positive quantum (use --quantum)")
        self._quantum = quantum

    @property
    def quantum(self) -> Optional[int]:
        return self._quantum

    def select(self, ready: Sequence[Task], now: int) -> Task:
        # The scheduler keeps the ready list in circular order.
        return ready[0]

    def time_slice(self, task: Task, now: int, next_arrival: Optional[int]) -> int:
        return min(self._quantum, task.remaining)

    def __repr__(self) -> str:
        return f"RoundRobinPolicy(quantum={self._quantum})"


POLICIES: Dict[str, Type[SchedulingPolicy]] = {
    policy.name: policy
    for policy in (
        FCFSPolicy,
        SJFPolicy,
        SRTFPolicy,
        PriorityPolicy,
        PreemptivePriorityPolicy,
        RoundRobinPolicy,
    )
}


def make_policy(name: str, quantum: Optional[int] = None) -> SchedulingPolicy:
    """
    Build the policy registered under ``name``. Quantum is only used by
    round-robin.
    """
    key = name.lower()
    if key not in POLICIES:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(POLICIES)})")

    policy_cls = POLICIES[key]
    if policy_cls is RoundRobinPolicy:
        return RoundRobinPolicy(quantum)
    return policy_cls()
