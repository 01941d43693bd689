"""Shared constants and metadata structures for block reading."""

from dataclasses import dataclass

# 1MB buffer for efficient I/O.
BUFFER_SIZE = 1024 * 1024

# Read size once the nominal end of the range has been passed.
OVERFLOW_READ_SIZE = 64 * 1024

LINE_BREAK = b"\n"
CARRIAGE_RETURN = b"\r"


@dataclass
class ReaderStats:
    """Statistics collected by a BufferedBlockReader."""

    records_read: int = 0
    bytes_consumed: int = 0
    overflow_bytes: int = 0
