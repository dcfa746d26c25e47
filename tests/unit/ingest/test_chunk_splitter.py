"""Unit tests for line-aligned chunk planning."""

from __future__ import annotations

import pytest

from core.errors import PivotConfigError
from ingest.byte_source import MemoryByteSource
from ingest.chunk_splitter import plan_chunks


def _payload() -> bytes:
    lines = ["Genes\tFile.Name\tPrecursor.Id\tPrecursor.Normalised"]
    for index in range(60):
        lines.append(f"G{index % 7}\trun_{index % 3}.raw\tPEP{index}\t{index * 1.5}")
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.mark.parametrize("chunk_size", [1, 7, 64, 333, 10_000])
def test_plan_chunks_covers_body_without_gaps_or_overlaps(chunk_size: int) -> None:
    """Chunks should tile the body exactly and end after line terminators."""
    payload = _payload()
    source = MemoryByteSource(payload)
    header_end = payload.index(b"\n") + 1

    chunks = plan_chunks(source, header_end, chunk_size)

    assert chunks[0].start == header_end and chunks[-1].end == len(payload)
    assert all(left.end == right.start for left, right in zip(chunks, chunks[1:]))
    assert all(payload[chunk.end - 1 : chunk.end] == b"\n" for chunk in chunks[:-1])
    assert b"".join(payload[chunk.start : chunk.end] for chunk in chunks) == payload[header_end:]


def test_plan_chunks_extends_last_chunk_to_unterminated_line() -> None:
    """A final line without a newline should stay in the last chunk."""
    payload = b"h\nalpha\nbeta"
    chunks = plan_chunks(MemoryByteSource(payload), 2, 3)

    assert [(chunk.start, chunk.end) for chunk in chunks] == [(2, 8), (8, 12)]


def test_plan_chunks_returns_nothing_for_header_only_file() -> None:
    """A file without data lines should produce no chunks."""
    payload = b"Genes\tFile.Name\n"

    assert plan_chunks(MemoryByteSource(payload), len(payload), 16) == []


def test_plan_chunks_rejects_non_positive_size() -> None:
    """Chunk size must be positive."""
    with pytest.raises(PivotConfigError):
        plan_chunks(MemoryByteSource(b"h\n"), 2, 0)
