"""Division of a file into contiguous byte-range splits."""

from itertools import pairwise

from range_scan.scan.types import Split
from range_scan.storage import LocalStorage, Storage


def plan_splits(
    location: str,
    num_splits: int | None = None,
    split_size: int | None = None,
    storage: Storage | None = None,
    host: str | None = None,
) -> list[Split]:
    """
    Divide a file into contiguous, non-overlapping splits covering every byte.

    Exactly one of num_splits and split_size must be given. Split boundaries
    ignore record boundaries; the producers reconcile records across them.

    Args:
        location: File to divide.
        num_splits: Number of splits of near-equal size (capped at the file size).
        split_size: Maximum size of each split in bytes.
        storage: Storage used to look up the file size (local files by default).
        host: Storage authority recorded on every split.

    Returns:
        Splits in file order. An empty file yields no splits.
    """
    if (num_splits is None) == (split_size is None):
        raise ValueError("exactly one of num_splits and split_size must be given")
    if num_splits is not None and num_splits <= 0:
        raise ValueError(f"num_splits must be positive, got {num_splits}")
    if split_size is not None and split_size <= 0:
        raise ValueError(f"split_size must be positive, got {split_size}")

    if storage is None:
        storage = LocalStorage()
    file_size = storage.size(location)
    if file_size == 0:
        return []

    if num_splits is not None:
        count = min(num_splits, file_size)
        # Spread the remainder over the first splits so sizes differ by at most one byte.
        base, extra = divmod(file_size, count)
        bounds = [0]
        for i in range(count):
            bounds.append(bounds[-1] + base + (1 if i < extra else 0))
    else:
        bounds = list(range(0, file_size, split_size)) + [file_size]

    return [Split(location, start, end, host) for start, end in pairwise(bounds)]
