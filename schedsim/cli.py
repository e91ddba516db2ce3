from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .errors import SchedulingError
from .gantt import build_rich_gantt
from .generator import generate_workload
from .metrics import summarize_process_metrics
from .models import Process, ScheduleResult, pid_sort_key
from .policies import POLICIES
from .scheduler import run_algorithm
from .workload_io import load_workload, save_workload

QUANTUM_ALGORITHMS = {"rr"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, Priority, preemptive Priority, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log a summary of each run.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every dispatch decision.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(POLICIES)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(POLICIES),
        help=f"Algorithms to compare (default: {' '.join(POLICIES)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum used for RR when included (default: 2).",
    )

    generate_parser = subparsers.add_parser("generate", help="Write a random workload file.")
    generate_parser.add_argument("--count", "-n", type=int, required=True, help="Number of processes.")
    generate_parser.add_argument(
        "--output",
        "-o",
        required=True,
        help="Destination .json or .csv file.",
    )
    generate_parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible workload.")
    generate_parser.add_argument("--max-arrival", type=int, default=10, help="Latest arrival time (default: 10).")
    generate_parser.add_argument("--max-burst", type=int, default=10, help="Longest burst time (default: 10).")
    generate_parser.add_argument("--max-priority", type=int, default=5, help="Largest priority value (default: 5).")

    return parser


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.jobs)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
        "Priority",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for s in sorted(result.stats, key=lambda s: (s.arrival_time, pid_sort_key(s.pid))):
        proc_table.add_row(
            s.pid,
            str(s.arrival_time),
            str(s.burst_time),
            str(s.start_time),
            str(s.completion_time),
            str(s.waiting_time),
            str(s.turnaround_time),
            str(s.response_time),
            "" if s.priority is None else str(s.priority),
        )

    console.print(proc_table)
    console.print()

    if not result.stats:
        return

    summary = summarize_process_metrics(result.stats)
    if result.system:
        system = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
        sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
        sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
        sys_table.add_row("Makespan", str(system.makespan))
        sys_table.add_row("Idle time", str(system.idle_time))
        sys_table.add_row("Throughput (proc/time)", f"{system.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{system.cpu_utilization*100:.1f}%")
        sys_table.add_row("Context switches", str(system.context_switches))
        sys_table.add_row("Starvation count", str(system.starvation_count))

        console.print(sys_table)


def _print_comparison(processes: List[Process], algorithms: List[str], quantum: int, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for alg in algorithms:
        q = quantum if alg.lower() in QUANTUM_ALGORITHMS else None
        result = run_algorithm(alg, processes, quantum=q)
        summary = summarize_process_metrics(result.stats)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
        )

    console.print(summary_table)


def _configure_logging(args: argparse.Namespace) -> None:
    if args.debug:
        logging.basicConfig(format="%(levelname)s: %(message)s", level=logging.DEBUG)
    elif args.verbose:
        logging.basicConfig(format="%(levelname)s: %(message)s", level=logging.INFO)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    console = Console()

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            _print_result(result, console)
            return 0

        if args.command == "compare":
            processes = load_workload(Path(args.workload))
            _print_comparison(processes, args.algorithms, args.quantum, console)
            return 0

        if args.command == "generate":
            processes = generate_workload(
                args.count,
                seed=args.seed,
                max_arrival=args.max_arrival,
                max_burst=args.max_burst,
                max_priority=args.max_priority,
            )
            path = save_workload(processes, args.output)
            console.print(f"Wrote {len(processes)} processes to [green]{path}[/green]")
            return 0
    except (SchedulingError, ValueError, OSError) as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
