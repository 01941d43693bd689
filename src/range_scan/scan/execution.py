"""Execution planning for scanning the splits of one file."""

import os
import sys
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass

# Environment variable forcing an execution policy.
RS_EXECUTOR_ENV = "RS_EXECUTOR"

_POOLS: dict[str, type[Executor]] = {
    "threads": ThreadPoolExecutor,
    "processes": ProcessPoolExecutor,
}
POLICIES = ("serial", *_POOLS)


@dataclass(frozen=True, slots=True)
class ExecutionPlan:
    """How the producers of one scan are run."""

    policy: str
    workers: int
    reason: str

    @property
    def executor_class(self) -> type[Executor] | None:
        """Pool class to run splits on, or None to scan them in the calling thread."""
        return _POOLS.get(self.policy)


def is_gil_enabled() -> bool:
    """Check if GIL is enabled."""
    try:
        return sys._is_gil_enabled()
    except AttributeError:
        return True


def plan_execution(split_count: int, workers: int | None = None) -> ExecutionPlan:
    """
    Decide how many workers scan the splits, and on which kind of pool.

    Priority:
    1. Zero or one split, or a single worker, is scanned serially: a pool
       would only add startup cost.
    2. RS_EXECUTOR env var ("serial", "threads" or "processes") forces a policy.
    3. Auto-select based on GIL status (disabled -> threads, enabled -> processes).

    The worker count defaults to the CPU count and never exceeds the number of
    splits, since each worker drives one producer at a time.
    """
    if workers is not None and workers <= 0:
        raise ValueError(f"workers must be positive, got {workers}")

    override = os.environ.get(RS_EXECUTOR_ENV, "").strip().lower()
    if override and override not in POLICIES:
        raise ValueError(f"{RS_EXECUTOR_ENV} must be one of {', '.join(POLICIES)}, got {override!r}")

    limit = workers if workers is not None else (os.cpu_count() or 1)
    worker_count = max(1, min(limit, split_count))

    if split_count <= 1:
        return ExecutionPlan("serial", 1, f"{split_count} split(s)")
    if worker_count == 1:
        return ExecutionPlan("serial", 1, "single worker")

    if override:
        count = 1 if override == "serial" else worker_count
        return ExecutionPlan(override, count, f"{RS_EXECUTOR_ENV}={override}")

    if is_gil_enabled():
        return ExecutionPlan("processes", worker_count, "GIL enabled")
    return ExecutionPlan("threads", worker_count, "GIL disabled")
