"""Record producer for one byte-range split of a delimited file."""

import logging
from collections.abc import Iterator, Sequence
from typing import Self

from range_scan.errors import ScanStateError
from range_scan.reader.block_reader import BufferedBlockReader
from range_scan.reader.types import BUFFER_SIZE
from range_scan.scan.cast import FieldType, build_record
from range_scan.scan.types import (
    END_OF_RANGE,
    EndOfRange,
    ProducerState,
    Record,
    ScanOptions,
    Split,
)
from range_scan.storage import LocalStorage, Storage

logger = logging.getLogger(__name__)


class RangeScanProducer:
    """
    Produce typed records from one split of a delimited text file.

    Lifecycle: initialize() -> has_next()/next() ... -> dispose().

    A split that does not start at byte 0 drops its first record, which is either
    a fragment or a record starting exactly at the offset. In both cases the
    previous split reads past its own end offset to return it.
    """

    def __init__(
        self,
        split: Split,
        separator: str = ",",
        projection: Sequence[int] | None = None,
        schema: Sequence[FieldType] | None = None,
        storage: Storage | None = None,
        encoding: str = "utf-8",
        buffer_size: int = BUFFER_SIZE,
        crlf: bool = False,
    ):
        self.split = split
        self.separator = separator
        self.projection = projection
        self.schema = schema
        self.encoding = encoding
        self.buffer_size = buffer_size
        self.crlf = crlf
        self._storage = storage if storage is not None else LocalStorage()
        self._reader: BufferedBlockReader | None = None
        self._state = ProducerState.CREATED

    @classmethod
    def from_options(
        cls, split: Split, options: ScanOptions, storage: Storage | None = None
    ) -> Self:
        return cls(
            split,
            separator=options.separator,
            projection=options.projection,
            schema=options.schema,
            storage=storage,
            encoding=options.encoding,
            buffer_size=options.buffer_size,
            crlf=options.crlf,
        )

    @property
    def state(self) -> ProducerState:
        return self._state

    def initialize(self) -> None:
        """Open the split's file at its start offset and drop a leading partial record."""
        if self._state is not ProducerState.CREATED:
            raise ScanStateError(f"cannot initialize a producer in state {self._state.name}")

        split = self.split
        stream = self._storage.open(split.location)
        try:
            stream.seek(split.start_offset)
            reader = BufferedBlockReader(
                stream,
                split.length,
                self.separator,
                encoding=self.encoding,
                buffer_size=self.buffer_size,
                crlf=self.crlf,
            )
        except BaseException:
            stream.close()
            raise

        self._reader = reader
        self._state = ProducerState.INITIALIZED

        try:
            if split.start_offset > 0:
                reader.skip_line()
        except BaseException:
            # __exit__ does not run when __enter__ raises.
            self.dispose()
            raise

        logger.debug(
            "Initialized %s [%d, %d), skipped %d leading bytes",
            split.location,
            split.start_offset,
            split.end_offset,
            reader.consumed,
        )

    def has_next(self) -> bool:
        return self._require_reader().has_next()

    def next(self) -> Record | EndOfRange:
        """
        Return the next record of the split, or END_OF_RANGE once it is exhausted.

        Raises:
            FieldCastError: If a kept field does not match its declared type.
        """
        reader = self._require_reader()
        fields = reader.read_line()
        if fields is None:
            return END_OF_RANGE

        self._state = ProducerState.PRODUCING
        return build_record(fields, self.projection, self.schema)

    def dispose(self) -> None:
        """Release the reader and its stream. Safe to call more than once."""
        if self._state is ProducerState.DISPOSED:
            return

        self._state = ProducerState.DISPOSED
        reader, self._reader = self._reader, None
        if reader is None:
            return

        stats = reader.stats
        logger.debug(
            "Disposed %s [%d, %d): records=%d, consumed=%d, overflow=%d",
            self.split.location,
            self.split.start_offset,
            self.split.end_offset,
            stats.records_read,
            stats.bytes_consumed,
            stats.overflow_bytes,
        )
        reader.close()

    def __enter__(self) -> Self:
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def __iter__(self) -> Iterator[Record]:
        while True:
            record = self.next()
            if record is END_OF_RANGE:
                return
            yield record

    def _require_reader(self) -> BufferedBlockReader:
        if self._reader is None:
            raise ScanStateError(f"producer is {self._state.name.lower()}, not initialized")
        return self._reader
