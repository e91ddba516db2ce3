from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List

from .models import Process, assign_pids

FIELDS = ["pid", "arrival_time", "burst_time", "priority"]


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    Rows without a pid are named P1, P2, ... skipping pids used elsewhere in
    the file.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return assign_pids(_load_json(path))
    if suffix == ".csv":
        return assign_pids(_load_csv(path))

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def save_workload(processes: Iterable[Process], path: str | Path) -> Path:
    """
    Write processes to a JSON or CSV file readable by ``load_workload``.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    rows = [_process_to_mapping(p) for p in processes]

    if suffix == ".json":
        with path.open("w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2)
            f.write("\n")
    elif suffix == ".csv":
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=FIELDS)
            writer.writeheader()
            for row in rows:
                writer.writerow({k: "" if v is None else v for k, v in row.items()})
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    return path


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    processes: List[Process] = []
    for entry in raw:
        processes.append(_process_from_mapping(entry))

    return processes


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping) -> Process:
    try:
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    pid_val = mapping.get("pid")
    pid = str(pid_val) if pid_val not in (None, "") else None

    priority_val = mapping.get("priority")
    try:
        priority = int(priority_val) if priority_val not in (None, "") else None
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid priority in process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )


def _process_to_mapping(process: Process) -> dict:
    return {
        "pid": process.pid,
        "arrival_time": process.arrival_time,
        "burst_time": process.burst_time,
        "priority": process.priority,
    }
