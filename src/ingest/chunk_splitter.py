"""Line-aligned chunk planning.

This module cuts a report body into contiguous byte ranges whose
boundaries always fall right after a line terminator.
"""

from __future__ import annotations

from core.errors import PivotConfigError
from core.types import ByteRange
from ingest.byte_source import ByteSource


def plan_chunks(source: ByteSource, start: int, chunk_size: int) -> list[ByteRange]:
    """Split ``[start, source.size)`` into line-aligned chunks.

    Every chunk except the last ends right after the first newline at or
    after ``chunk.start + chunk_size``; the last chunk ends at the file
    size. Chunks are contiguous and never overlap.

    Args:
        source: Report bytes.
        start: Offset of the first data line, right after the header.
        chunk_size: Target chunk size in bytes.

    Returns:
        Ordered chunk ranges; empty when there is no data after start.

    Raises:
        PivotConfigError: If chunk_size is not positive.
    """
    if chunk_size <= 0:
        raise PivotConfigError(f"Chunk size must be a positive byte count, got {chunk_size}.")
    total_size = source.size
    chunks: list[ByteRange] = []
    position = start
    while position < total_size:
        target = position + chunk_size
        if target >= total_size:
            chunk_end = total_size
        else:
            newline_index = source.find_newline(target, total_size)
            chunk_end = total_size if newline_index == -1 else newline_index + 1
        chunks.append(ByteRange(start=position, end=chunk_end))
        position = chunk_end
    return chunks
