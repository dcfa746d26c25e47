"""Unit tests for header column resolution."""

from __future__ import annotations

import pytest

from core.errors import PivotIngestError
from core.types import ColumnLayout, ColumnNames
from ingest.byte_source import MemoryByteSource
from ingest.header import read_column_layout, resolve_column_layout


def test_read_column_layout_finds_columns_by_name() -> None:
    """Required columns should be located by label, not position."""
    header = b"Genes\tQ.Value\tPrecursor.Normalised\tFile.Name\tPrecursor.Id\r\nrow\n"

    layout, header_end = read_column_layout(MemoryByteSource(header), ColumnNames(), "utf-8")

    assert (layout, header_end) == (
        ColumnLayout(group_index=0, source_index=3, series_index=4, value_index=2),
        header.index(b"\n") + 1,
    )


def test_read_column_layout_accepts_header_without_terminator() -> None:
    """A header-only file without a newline should end at the file size."""
    header = b"Genes\tFile.Name\tPrecursor.Id\tPrecursor.Normalised"

    _, header_end = read_column_layout(MemoryByteSource(header), ColumnNames(), "utf-8")

    assert header_end == len(header)


def test_read_column_layout_raises_for_empty_source() -> None:
    """An empty report should abort the load."""
    with pytest.raises(PivotIngestError, match="empty"):
        read_column_layout(MemoryByteSource(b""), ColumnNames(), "utf-8")


def test_resolve_column_layout_lists_missing_columns() -> None:
    """Every missing label should be named in the error."""
    with pytest.raises(PivotIngestError, match="Precursor.Id, Precursor.Normalised"):
        resolve_column_layout(["Genes", "File.Name"], ColumnNames())


def test_resolve_column_layout_is_case_sensitive() -> None:
    """Header labels should match exactly."""
    with pytest.raises(PivotIngestError):
        resolve_column_layout(
            ["genes", "File.Name", "Precursor.Id", "Precursor.Normalised"], ColumnNames()
        )


def test_resolve_column_layout_uses_first_duplicate() -> None:
    """Duplicated labels should resolve to their first position."""
    layout = resolve_column_layout(
        ["Genes", "File.Name", "Precursor.Id", "Precursor.Normalised", "Genes"], ColumnNames()
    )

    assert layout.group_index == 0
