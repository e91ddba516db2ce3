from __future__ import annotations

from typing import Dict

from .errors import EmptyStatistics
from .models import ScheduleResult, SchedulingStats, SystemMetrics


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput, CPU utilization and context switches given
    populated per-process statistics and jobs.
    """
    if not result.stats:
        system = SystemMetrics(cpu_busy_time=0, idle_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(s.completion_time for s in result.stats)
    cpu_busy_time = sum(job.duration for job in result.jobs)

    throughput = len(result.stats) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    ordered = sorted(result.jobs, key=lambda j: j.start_time)
    context_switches = sum(1 for prev, cur in zip(ordered, ordered[1:]) if prev.pid != cur.pid)

    # Starvation is flagged for processes whose waiting time is more than
    # 2x the average waiting time.
    avg_wait = result.stats.average_waiting_time()
    starvation_count = sum(1 for s in result.stats if s.waiting_time > 2 * avg_wait)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        idle_time=makespan - cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        context_switches=context_switches,
        starvation_count=starvation_count,
    )
    result.system = system
    return system


def summarize_process_metrics(stats: SchedulingStats) -> Dict[str, float]:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not stats:
        raise EmptyStatistics("no completed processes to summarize")

    return {
        "avg_waiting": stats.average_waiting_time(),
        "avg_turnaround": stats.average_turnaround_time(),
        "avg_response": stats.average_response_time(),
    }
