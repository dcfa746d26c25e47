"""Unit tests for byte sources and line alignment."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import PivotIngestError
from ingest.byte_source import (
    FileByteSource,
    MemoryByteSource,
    align_to_line_start,
    align_to_previous_line_start,
)

_PAYLOAD = b"head\nalpha\nbeta\ngamma"


def test_align_keeps_offset_after_newline() -> None:
    """Offsets that already start a line should not move."""
    source = MemoryByteSource(_PAYLOAD)

    assert align_to_line_start(source, 5, len(_PAYLOAD)) == 5


def test_align_moves_mid_line_offset_to_next_line() -> None:
    """Offsets inside a line should move past its terminator."""
    source = MemoryByteSource(_PAYLOAD)

    assert align_to_line_start(source, 7, len(_PAYLOAD)) == 11


def test_align_caps_at_limit_without_newline() -> None:
    """Offsets inside the final unterminated line should snap to the limit."""
    source = MemoryByteSource(_PAYLOAD)

    assert align_to_line_start(source, 18, len(_PAYLOAD)) == len(_PAYLOAD)


def test_align_back_finds_start_of_current_line() -> None:
    """Offsets inside a line should move back to just after the previous newline."""
    source = MemoryByteSource(_PAYLOAD)

    assert align_to_previous_line_start(source, 13, 0) == 11


def test_align_back_returns_floor_without_newline() -> None:
    """A line that starts at the floor should leave the floor unchanged."""
    source = MemoryByteSource(_PAYLOAD)

    assert align_to_previous_line_start(source, 9, 5) == 5


def test_file_source_matches_memory_source(tmp_path: Path) -> None:
    """File and memory sources should read and scan the same bytes."""
    report_path = tmp_path / "payload.tsv"
    report_path.write_bytes(_PAYLOAD)
    memory_source = MemoryByteSource(_PAYLOAD)

    with FileByteSource(report_path) as file_source:
        observed = (file_source.read(5, 15), file_source.find_newline(6, file_source.size))

    assert observed == (memory_source.read(5, 15), memory_source.find_newline(6, len(_PAYLOAD)))


def test_file_source_raises_for_missing_file(tmp_path: Path) -> None:
    """Opening a missing file should be a load-aborting error."""
    with pytest.raises(PivotIngestError):
        FileByteSource(tmp_path / "missing.tsv")


def test_file_source_raises_for_short_read(tmp_path: Path) -> None:
    """Reading past the end of a file should fail instead of truncating."""
    report_path = tmp_path / "payload.tsv"
    report_path.write_bytes(_PAYLOAD)

    with FileByteSource(report_path) as file_source:
        with pytest.raises(PivotIngestError):
            file_source.read(0, len(_PAYLOAD) + 10)
