import dataclasses

import pytest

from schedsim.errors import EmptyStatistics, InvalidProcess, InvariantViolation
from schedsim.models import Job, Process, ProcessStats, SchedulingStats, assign_pids, pid_sort_key


def test_process_rejects_non_positive_burst():
    with pytest.raises(InvalidProcess):
        Process("P1", arrival_time=0, burst_time=0)
    with pytest.raises(InvalidProcess):
        Process("P1", arrival_time=0, burst_time=-3)
    # missing burst time falls back to 0 and is rejected too
    with pytest.raises(InvalidProcess):
        Process("P1", arrival_time=0)


def test_process_rejects_bad_fields():
    with pytest.raises(InvalidProcess):
        Process("P1", arrival_time=-1, burst_time=2)
    with pytest.raises(InvalidProcess):
        Process("P1", arrival_time=0, burst_time=2, priority=-1)
    with pytest.raises(InvalidProcess):
        Process("P1", arrival_time=0, burst_time=True)
    with pytest.raises(InvalidProcess):
        Process("", arrival_time=0, burst_time=2)


def test_invalid_process_is_a_value_error():
    with pytest.raises(ValueError):
        Process("P1", arrival_time=0, burst_time=0)


def test_missing_pid_left_for_assignment():
    assert Process(arrival_time=0, burst_time=1).pid is None


def test_assign_pids_skips_supplied_ids():
    procs = assign_pids(
        [
            Process(arrival_time=0, burst_time=1),
            Process("P1", arrival_time=0, burst_time=2),
            Process(arrival_time=1, burst_time=3),
            Process("P3", arrival_time=1, burst_time=1),
            Process(arrival_time=2, burst_time=1),
        ]
    )
    assert [p.pid for p in procs] == ["P2", "P1", "P4", "P3", "P5"]
    assert procs[2].burst_time == 3


def test_assign_pids_is_reproducible():
    procs = [Process(arrival_time=0, burst_time=1), Process(arrival_time=0, burst_time=2)]
    assert assign_pids(procs) == assign_pids(procs)
    assert [p.pid for p in procs] == [None, None]


def test_pid_sort_key_is_natural():
    pids = ["P10", "P2", "P1", "B", "A", "P11", "P9"]
    assert sorted(pids, key=pid_sort_key) == ["A", "B", "P1", "P2", "P9", "P10", "P11"]


def test_process_is_immutable():
    p = Process("P1", arrival_time=0, burst_time=2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.burst_time = 5


def test_job_end_time():
    assert Job(pid="P1", start_time=3, duration=4).end_time == 7


def test_process_stats_from_completion():
    p = Process("P2", arrival_time=1, burst_time=3, priority=1)
    s = ProcessStats.from_completion(p, start_time=5, completion_time=8)
    assert s.turnaround_time == 7
    assert s.waiting_time == 4
    assert s.response_time == 4
    assert s.priority == 1


def test_scheduling_stats_lookup_and_averages():
    stats = SchedulingStats()
    stats.add_process_stats(ProcessStats.from_completion(Process("A", arrival_time=0, burst_time=5), 0, 5))
    stats.add_process_stats(ProcessStats.from_completion(Process("B", arrival_time=1, burst_time=3), 5, 8))

    assert len(stats) == 2
    assert [s.pid for s in stats] == ["A", "B"]
    assert stats.get_process_stats("B").completion_time == 8
    assert stats.get_process_stats("C") is None
    assert stats.average_waiting_time() == pytest.approx(2.0)
    assert stats.average_turnaround_time() == pytest.approx(6.0)
    assert stats.average_response_time() == pytest.approx(2.0)


def test_empty_statistics_fail_explicitly():
    stats = SchedulingStats()
    with pytest.raises(EmptyStatistics):
        stats.average_waiting_time()
    with pytest.raises(EmptyStatistics):
        stats.average_turnaround_time()
    with pytest.raises(EmptyStatistics):
        stats.average_response_time()


def test_stats_written_once_per_pid():
    stats = SchedulingStats()
    p = Process("A", arrival_time=0, burst_time=1)
    stats.add_process_stats(ProcessStats.from_completion(p, 0, 1))
    with pytest.raises(InvariantViolation):
        stats.add_process_stats(ProcessStats.from_completion(p, 0, 1))
