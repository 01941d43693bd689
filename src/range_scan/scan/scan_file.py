import logging
import os
import time
from functools import partial
from pathlib import Path

from range_scan.planner.splits import plan_splits
from range_scan.scan.execution import plan_execution
from range_scan.scan.producer import RangeScanProducer
from range_scan.scan.types import Record, ScanOptions, Split
from range_scan.storage import Storage

logger = logging.getLogger(__name__)

# Each process receives 4 splits per task.
PROCESS_POOL_CHUNKSIZE = 4


def scan_split(split: Split, options: ScanOptions, storage: Storage | None = None) -> list[Record]:
    """Scan one split to completion and return its records in file order."""
    producer = RangeScanProducer.from_options(split, options, storage)
    try:
        producer.initialize()
        return list(producer)
    finally:
        producer.dispose()


def scan_file(
    location: str,
    num_splits: int | None = None,
    split_size: int | None = None,
    options: ScanOptions | None = None,
    workers: int | None = None,
    storage: Storage | None = None,
) -> list[Record]:
    """
    Scan a whole file as a set of splits processed in parallel.

    1. Plan contiguous splits covering the file
    2. Scan each split with its own producer on the selected executor
    3. Concatenate the per-split records in split order

    The result equals a single-range scan of the file. When neither num_splits
    nor split_size is given, one split per CPU is planned.
    """
    total_start = time.perf_counter()
    if options is None:
        options = ScanOptions()
    if num_splits is None and split_size is None:
        num_splits = os.cpu_count() or 1

    splits = plan_splits(location, num_splits=num_splits, split_size=split_size, storage=storage)

    plan = plan_execution(len(splits), workers)

    logger.info(
        "Starting: file=%s, splits=%d, workers=%d, executor=%s (%s)",
        Path(location).name,
        len(splits),
        plan.workers,
        plan.policy,
        plan.reason,
    )

    if not splits:
        logger.info("Result: empty file (total %.2fs)", time.perf_counter() - total_start)
        return []

    scan = partial(scan_split, options=options, storage=storage)
    records: list[Record] = []

    executor_class = plan.executor_class
    if executor_class is None:
        for split_records in map(scan, splits):
            records.extend(split_records)
    else:
        with executor_class(max_workers=plan.workers) as executor:
            if plan.policy == "processes":
                results = executor.map(scan, splits, chunksize=PROCESS_POOL_CHUNKSIZE)
            else:
                results = executor.map(scan, splits)
            for split_records in results:
                records.extend(split_records)

    total_time = time.perf_counter() - total_start
    logger.info("Result: %d records from %d splits (total %.2fs)", len(records), len(splits), total_time)
    return records
