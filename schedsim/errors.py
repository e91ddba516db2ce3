from __future__ import annotations


class SchedulingError(Exception):
    """
    Base class for every error raised by the simulator.
    """


class InvalidProcess(SchedulingError, ValueError):
    """
    A process was rejected at construction or submission: non-positive
    burst, negative arrival or priority, or a pid already used in the run.
    """


class EmptyStatistics(SchedulingError):
    """
    Averages were requested before any process completed.
    """


class InvariantViolation(SchedulingError):
    """
    The dispatch loop or a policy produced an impossible schedule.
    """
