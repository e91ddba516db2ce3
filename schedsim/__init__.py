"""
CPU scheduling policy simulator.

Runs FCFS, SJF, SRTF, priority (static and preemptive) and round-robin
scheduling over a set of processes in virtual time and reports the job
timeline with per-process and aggregate statistics.
"""

from .errors import EmptyStatistics, InvalidProcess, InvariantViolation, SchedulingError
from .models import Job, Process, ProcessStats, ScheduleResult, SchedulingStats
from .policies import POLICIES, SchedulingPolicy, make_policy
from .scheduler import Scheduler, run_algorithm

__all__ = [
    "EmptyStatistics",
    "InvalidProcess",
    "InvariantViolation",
    "Job",
    "POLICIES",
    "Process",
    "ProcessStats",
    "ScheduleResult",
    "Scheduler",
    "SchedulingError",
    "SchedulingPolicy",
    "SchedulingStats",
    "make_policy",
    "run_algorithm",
]
