"""Buffered reader that turns a bounded byte range into delimited records."""

from typing import BinaryIO, Self

from range_scan.reader.types import (
    BUFFER_SIZE,
    CARRIAGE_RETURN,
    LINE_BREAK,
    OVERFLOW_READ_SIZE,
    ReaderStats,
)


class BufferedBlockReader:
    """
    Read separator-delimited records from a stream bounded to a byte budget.

    The stream must already be positioned at the start of the range; the reader
    never seeks. A record may start while at most ``range_length`` bytes have
    been consumed. Once started it is read up to its line break even past the
    budget (boundary overflow), and after such a record the reader reports no
    more records. Together with the leading-record skip done by the caller for
    ranges that do not start at byte 0, every record of a file is returned by
    exactly one of a set of contiguous ranges.

    With crlf=True a carriage return just before the line break is treated as
    part of the terminator; otherwise it stays in the last field.
    """

    def __init__(
        self,
        stream: BinaryIO,
        range_length: int,
        separator: str,
        encoding: str = "utf-8",
        buffer_size: int = BUFFER_SIZE,
        crlf: bool = False,
    ):
        if len(separator) != 1:
            raise ValueError(f"separator must be a single character, got {separator!r}")
        if separator == "\n" or (crlf and separator == "\r"):
            raise ValueError(f"separator {separator!r} is part of the line terminator")
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")

        self._stream = stream
        self._range_length = range_length
        self._separator = separator
        self._encoding = encoding
        self._buffer_size = buffer_size
        self._crlf = crlf

        self._buffer = bytearray()
        self._cursor = 0
        # Bytes pulled from the stream vs. bytes handed out as records.
        self._fetched = 0
        self._consumed = 0
        self._eof = False
        self._exhausted = range_length <= 0
        self._closed = False

        self.stats = ReaderStats()

    @property
    def consumed(self) -> int:
        """Number of bytes of the range handed out so far, line breaks included."""
        return self._consumed

    @property
    def closed(self) -> bool:
        return self._closed

    def has_next(self) -> bool:
        """Return True if the next read_line() call will produce a record."""
        self._check_open()

        if self._exhausted:
            return False

        # Peek so that a trailing line break at end of file is not reported as a record.
        if self._cursor >= len(self._buffer) and not self._fill():
            self._exhausted = True
            return False

        return True

    def read_line(self) -> list[str] | None:
        """
        Read the next record and split it into fields.

        Returns:
            The record's fields in source order, or None when the range holds no
            more records. An empty line yields [""].
        """
        raw = self._read_record()
        if raw is None:
            return None
        return raw.decode(self._encoding).split(self._separator)

    def skip_line(self) -> bool:
        """
        Consume the next record without decoding it.

        Used to drop a truncated leading record, which may begin in the middle of
        a multi-byte character.

        Returns:
            True if a record was consumed, False if the range was already empty.
        """
        return self._read_record() is not None

    def close(self) -> None:
        """Close the underlying stream. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._buffer.clear()
        self._cursor = 0
        self._stream.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("read from a closed BufferedBlockReader")

    def _read_record(self) -> bytes | None:
        """Return the raw bytes of the next record without its line terminator."""
        if not self.has_next():
            return None

        search_from = self._cursor
        while True:
            idx = self._buffer.find(LINE_BREAK, search_from)
            if idx != -1:
                raw = bytes(self._buffer[self._cursor : idx])
                self._consumed += idx + 1 - self._cursor
                self._cursor = idx + 1
                break

            # Filling compacts the buffer, so remember how much was already searched.
            scanned = len(self._buffer) - self._cursor
            if not self._fill():
                # Last record of the stream has no line break.
                raw = bytes(self._buffer[self._cursor :])
                self._consumed += len(raw)
                self._cursor = len(self._buffer)
                break
            search_from = self._cursor + scanned

        if self._crlf and raw.endswith(CARRIAGE_RETURN):
            raw = raw[:-1]

        self.stats.records_read += 1
        self.stats.bytes_consumed = self._consumed
        if self._consumed > self._range_length:
            self.stats.overflow_bytes = self._consumed - self._range_length
            self._exhausted = True

        return raw

    def _fill(self) -> bool:
        """Append the next chunk of the stream to the buffer. Returns False at end of stream."""
        if self._eof:
            return False

        remaining = self._range_length - self._fetched
        if remaining > 0:
            size = min(remaining, self._buffer_size)
        else:
            size = min(OVERFLOW_READ_SIZE, self._buffer_size)

        chunk = self._stream.read(size)
        if not chunk:
            self._eof = True
            return False

        if self._cursor:
            del self._buffer[: self._cursor]
            self._cursor = 0
        self._buffer += chunk
        self._fetched += len(chunk)
        return True
