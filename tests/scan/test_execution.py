"""Tests for execution planning of multi-split scans."""

from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor

import pytest

from range_scan.scan import execution


class TestPlanExecution:
    """Test cases for plan_execution."""

    def test_single_split_is_scanned_serially(self, monkeypatch) -> None:
        """Test that a forced pool is not started for one split."""
        monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "processes")
        plan = execution.plan_execution(1, workers=8)
        assert plan.policy == "serial"
        assert plan.workers == 1
        assert plan.executor_class is None

    def test_no_splits_is_serial(self) -> None:
        assert execution.plan_execution(0).policy == "serial"

    def test_single_worker_is_serial(self, monkeypatch) -> None:
        monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "threads")
        plan = execution.plan_execution(16, workers=1)
        assert plan.policy == "serial"
        assert plan.reason == "single worker"

    def test_workers_capped_at_split_count(self, monkeypatch) -> None:
        monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "threads")
        assert execution.plan_execution(3, workers=32).workers == 3
        assert execution.plan_execution(50, workers=4).workers == 4

    def test_default_workers_follow_cpu_count(self, monkeypatch) -> None:
        monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "threads")
        monkeypatch.setattr(execution.os, "cpu_count", lambda: 6)
        assert execution.plan_execution(100).workers == 6
        assert execution.plan_execution(4).workers == 4

    def test_env_forces_pool_kind(self, monkeypatch) -> None:
        monkeypatch.setenv(execution.RS_EXECUTOR_ENV, " Threads ")
        assert execution.plan_execution(4, workers=2).executor_class is ThreadPoolExecutor

        monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "processes")
        plan = execution.plan_execution(4, workers=2)
        assert plan.executor_class is ProcessPoolExecutor
        assert plan.reason == "RS_EXECUTOR=processes"

    def test_env_serial_uses_one_worker(self, monkeypatch) -> None:
        monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "serial")
        plan = execution.plan_execution(10, workers=4)
        assert (plan.policy, plan.workers) == ("serial", 1)

    def test_unknown_env_policy_fails(self, monkeypatch) -> None:
        monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "fibers")
        with pytest.raises(ValueError, match="RS_EXECUTOR"):
            execution.plan_execution(4, workers=2)

    def test_auto_policy_follows_gil(self, monkeypatch) -> None:
        monkeypatch.delenv(execution.RS_EXECUTOR_ENV, raising=False)

        monkeypatch.setattr(execution, "is_gil_enabled", lambda: True)
        assert execution.plan_execution(4, workers=2).policy == "processes"

        monkeypatch.setattr(execution, "is_gil_enabled", lambda: False)
        assert execution.plan_execution(4, workers=2).policy == "threads"

    def test_rejects_non_positive_workers(self) -> None:
        with pytest.raises(ValueError):
            execution.plan_execution(4, workers=0)
