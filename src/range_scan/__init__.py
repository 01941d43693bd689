"""Range Scan - Read byte-range splits of delimited text files as typed records."""

from range_scan.errors import FieldCastError, ScanError, ScanStateError
from range_scan.planner.splits import plan_splits
from range_scan.reader.block_reader import BufferedBlockReader
from range_scan.scan.cast import FieldType
from range_scan.scan.producer import RangeScanProducer
from range_scan.scan.scan_file import scan_file, scan_split
from range_scan.scan.types import END_OF_RANGE, ScanOptions, Split, TupleProducer
from range_scan.storage import LocalStorage, Storage

__all__ = [
    "END_OF_RANGE",
    "BufferedBlockReader",
    "FieldCastError",
    "FieldType",
    "LocalStorage",
    "RangeScanProducer",
    "ScanError",
    "ScanOptions",
    "ScanStateError",
    "Split",
    "Storage",
    "TupleProducer",
    "plan_splits",
    "scan_file",
    "scan_split",
]
