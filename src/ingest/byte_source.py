"""Random-access byte sources for range-based ingestion.

This module hides whether a report lives in memory or on disk.
Every reader works on half-open ``[start, end)`` byte ranges.
"""

from __future__ import annotations

import threading
from pathlib import Path
from types import TracebackType
from typing import BinaryIO, Protocol

from core.constants import LINE_TERMINATOR, NEWLINE_SCAN_BLOCK_BYTES
from core.errors import PivotIngestError


class ByteSource(Protocol):
    """Read-only random access over the bytes of one report."""

    @property
    def size(self) -> int:
        """Total number of bytes."""
        ...

    def read(self, start: int, end: int) -> bytes:
        """Read bytes in ``[start, end)``."""
        ...

    def find_newline(self, start: int, end: int) -> int:
        """Return the offset of the first newline in ``[start, end)`` or -1."""
        ...


class MemoryByteSource:
    """Byte source over a fully loaded file buffer."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    @property
    def size(self) -> int:
        return len(self._data)

    def read(self, start: int, end: int) -> bytes:
        return self._data[start:end]

    def find_newline(self, start: int, end: int) -> int:
        return self._data.find(LINE_TERMINATOR, start, end)


class FileByteSource:
    """Byte source over one shared file handle.

    Seek and read happen under a single lock so concurrent tasks can
    share the handle without reading each other's positions.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.Lock()
        try:
            self._handle: BinaryIO = path.open("rb")
            self._size = path.stat().st_size
        except OSError as error:
            raise PivotIngestError(
                f"Failed to open report at {path}: {error}. Check the path and permissions."
            ) from error

    def __enter__(self) -> "FileByteSource":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def size(self) -> int:
        return self._size

    def close(self) -> None:
        """Close the underlying file handle."""
        self._handle.close()

    def read(self, start: int, end: int) -> bytes:
        """Read bytes in ``[start, end)`` from disk.

        Raises:
            PivotIngestError: If the read fails or returns fewer bytes.
        """
        if end <= start:
            return b""
        try:
            with self._lock:
                self._handle.seek(start)
                payload = self._handle.read(end - start)
        except OSError as error:
            raise PivotIngestError(
                f"Failed to read bytes {start}-{end} of {self._path}: {error}."
            ) from error
        if len(payload) != end - start:
            raise PivotIngestError(
                f"Short read on {self._path}: expected {end - start} bytes at offset "
                f"{start}, got {len(payload)}. The file may have changed during load."
            )
        return payload

    def find_newline(self, start: int, end: int) -> int:
        position = start
        while position < end:
            block_end = min(end, position + NEWLINE_SCAN_BLOCK_BYTES)
            index = self.read(position, block_end).find(LINE_TERMINATOR)
            if index != -1:
                return position + index
            position = block_end
        return -1


def align_to_line_start(source: ByteSource, position: int, limit: int) -> int:
    """Move an offset forward to the start of the next line.

    Args:
        source: Byte source being scanned.
        position: Candidate offset.
        limit: Offset that must not be passed.

    Returns:
        Smallest offset at or after position that begins a line, capped
        at limit. Offsets right after a newline are already aligned.
    """
    if position <= 0:
        return 0
    if position >= limit:
        return limit
    if source.read(position - 1, position) == LINE_TERMINATOR:
        return position
    newline_index = source.find_newline(position, limit)
    if newline_index == -1:
        return limit
    return newline_index + 1


def align_to_previous_line_start(source: ByteSource, position: int, floor: int) -> int:
    """Move an offset back to the start of the line containing it.

    Args:
        source: Byte source being scanned.
        position: Candidate offset.
        floor: Offset that must not be passed, itself a line start.

    Returns:
        Largest offset in ``(floor, position]`` that begins a line, or
        floor when no newline lies in ``[floor, position)``.
    """
    block_end = position
    while block_end > floor:
        block_start = max(floor, block_end - NEWLINE_SCAN_BLOCK_BYTES)
        index = source.read(block_start, block_end).rfind(LINE_TERMINATOR)
        if index != -1:
            return block_start + index + 1
        block_end = block_start
    return floor
