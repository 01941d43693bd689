"""Shared type definitions for range scanning."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, TypeAlias

from range_scan.reader.types import BUFFER_SIZE
from range_scan.scan.cast import FieldType

Record: TypeAlias = tuple[Any, ...]


class EndOfRange(Enum):
    """Sentinel returned by a producer once its range holds no more records."""

    END_OF_RANGE = "end_of_range"

    def __repr__(self) -> str:
        return "END_OF_RANGE"


END_OF_RANGE = EndOfRange.END_OF_RANGE


class ProducerState(Enum):
    CREATED = "created"
    INITIALIZED = "initialized"
    PRODUCING = "producing"
    DISPOSED = "disposed"


@dataclass(frozen=True, slots=True)
class Split:
    """A half-open byte range [start_offset, end_offset) of one file."""

    location: str
    start_offset: int
    end_offset: int
    host: str | None = None

    @property
    def length(self) -> int:
        return self.end_offset - self.start_offset


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """How the records of a split are decoded, projected and typed."""

    separator: str = ","
    projection: Sequence[int] | None = None
    schema: Sequence[FieldType] | None = None
    encoding: str = "utf-8"
    buffer_size: int = BUFFER_SIZE
    crlf: bool = False


class TupleProducer(Protocol):
    """Pull-based source of records driven by the surrounding engine."""

    def initialize(self) -> None: ...

    def has_next(self) -> bool: ...

    def next(self) -> Record | EndOfRange: ...

    def dispose(self) -> None: ...
