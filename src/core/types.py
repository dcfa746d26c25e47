"""Shared typed models.

This module defines immutable data models used by ingest, store,
query, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.constants import (
    DEFAULT_GROUP_COLUMN,
    DEFAULT_SERIES_COLUMN,
    DEFAULT_SOURCE_COLUMN,
    DEFAULT_VALUE_COLUMN,
)

LoadMode = Literal["memory", "chunked"]
SUPPORTED_LOAD_MODES: tuple[LoadMode, ...] = ("memory", "chunked")
DEFAULT_LOAD_MODE: LoadMode = "memory"


@dataclass(frozen=True)
class Record:
    """One parsed report line.

    Attributes:
        original_source_id: Raw source-identifier field, e.g. a run file path.
        source_alias: Short deduplicated display name for the source.
        series_id: Series identifier, e.g. a precursor id.
        value: Parsed numeric value, ``0.0`` when unparseable.
        group_key: Group field, e.g. a gene name.
    """

    original_source_id: str
    source_alias: str
    series_id: str
    value: float
    group_key: str


@dataclass(frozen=True)
class ColumnNames:
    """Header labels used to locate the four required columns.

    Attributes:
        group: Group/gene column label.
        source: Source-identifier column label.
        series: Series-identifier column label.
        value: Numeric value column label.
    """

    group: str = DEFAULT_GROUP_COLUMN
    source: str = DEFAULT_SOURCE_COLUMN
    series: str = DEFAULT_SERIES_COLUMN
    value: str = DEFAULT_VALUE_COLUMN


@dataclass(frozen=True)
class ColumnLayout:
    """Zero-based positions of the required columns in the header."""

    group_index: int
    source_index: int
    series_index: int
    value_index: int


@dataclass(frozen=True)
class ByteRange:
    """Half-open byte span ``[start, end)`` of the input file."""

    start: int
    end: int

    @property
    def length(self) -> int:
        """Return the number of bytes covered by the range."""
        return self.end - self.start


@dataclass(frozen=True)
class LoadSummary:
    """Outcome of one successful file load.

    Attributes:
        source_path: Resolved input file path.
        mode: Load mode used for ingestion.
        record_count: Number of records in the frozen store.
        alias_count: Number of distinct original source identifiers.
        chunk_count: Number of top-level chunks planned.
        leaf_count: Number of leaf ranges parsed.
        elapsed_seconds: Wall-clock load duration.
    """

    source_path: str
    mode: LoadMode
    record_count: int
    alias_count: int
    chunk_count: int
    leaf_count: int
    elapsed_seconds: float
