"""Tests for whole-file parallel scanning."""

import logging
import tempfile
from pathlib import Path

import pytest

from range_scan.scan import execution
from range_scan.scan.cast import FieldType
from range_scan.scan.scan_file import scan_file, scan_split
from range_scan.scan.types import ScanOptions, Split

LINES = [f"{i}|node_{i}|{i * 0.5}" for i in range(200)]


@pytest.fixture
def data_path():
    with tempfile.NamedTemporaryFile(
        mode="w", suffix=".txt", delete=False, encoding="utf-8"
    ) as f:
        f.write("\n".join(LINES) + "\n")
        path = f.name
    try:
        yield path
    finally:
        Path(path).unlink()


def _expected() -> list[tuple[str, ...]]:
    return [tuple(line.split("|")) for line in LINES]


@pytest.mark.parametrize("mode", ["serial", "threads", "processes"])
def test_scan_file_matches_single_range(data_path: str, monkeypatch, mode: str) -> None:
    monkeypatch.setenv(execution.RS_EXECUTOR_ENV, mode)
    records = scan_file(data_path, num_splits=7, options=ScanOptions(separator="|"), workers=2)
    assert records == _expected()


def test_scan_file_with_split_size(data_path: str, monkeypatch) -> None:
    monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "serial")
    records = scan_file(data_path, split_size=13, options=ScanOptions(separator="|"))
    assert records == _expected()


def test_scan_file_with_schema_and_projection(data_path: str, monkeypatch) -> None:
    monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "threads")
    options = ScanOptions(
        separator="|",
        projection=[2, 0],
        schema=[FieldType.INTEGER, FieldType.STRING, FieldType.DOUBLE],
    )
    records = scan_file(data_path, num_splits=5, options=options)
    assert records == [(i * 0.5, i) for i in range(200)]


def test_scan_file_default_split_count(data_path: str, monkeypatch) -> None:
    monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "serial")
    assert scan_file(data_path, options=ScanOptions(separator="|")) == _expected()


def test_scan_file_empty_file(monkeypatch) -> None:
    monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "serial")
    with tempfile.NamedTemporaryFile(mode="wb", delete=False) as f:
        path = f.name
    try:
        assert scan_file(path, num_splits=4) == []
    finally:
        Path(path).unlink()


def test_scan_split(data_path: str) -> None:
    records = scan_split(Split(data_path, 0, 1), ScanOptions(separator="|"))
    assert records == [("0", "node_0", "0.0")]


def test_single_split_runs_serially(data_path: str, monkeypatch, caplog) -> None:
    """Test that a one-split scan does not start the forced process pool."""
    monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "processes")
    caplog.set_level(logging.INFO, logger="range_scan.scan.scan_file")
    records = scan_file(data_path, num_splits=1, options=ScanOptions(separator="|"), workers=4)
    assert records == _expected()
    assert "executor=serial" in caplog.text


def test_unknown_executor_policy_fails(data_path: str, monkeypatch) -> None:
    monkeypatch.setenv(execution.RS_EXECUTOR_ENV, "fibers")
    with pytest.raises(ValueError, match="RS_EXECUTOR"):
        scan_file(data_path, num_splits=4, options=ScanOptions(separator="|"))
