"""Load orchestration for tab-separated reports.

This module coordinates header parsing, chunk planning, and parallel
ingestion for both the in-memory and the chunked load modes.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from core.config import PivotConfig
from core.errors import PivotIngestError
from core.logging_config import get_logger
from core.types import SUPPORTED_LOAD_MODES, ByteRange, LoadMode, LoadSummary
from ingest.alias_registry import AliasRegistry
from ingest.byte_source import ByteSource, FileByteSource, MemoryByteSource
from ingest.chunk_splitter import plan_chunks
from ingest.header import read_column_layout
from ingest.line_classifier import LineClassifier
from ingest.parallel_engine import ParallelIngestEngine
from store.record_store import RecordStore

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class LoadResult:
    """Frozen record store and alias registry produced by one load."""

    store: RecordStore
    registry: AliasRegistry
    summary: LoadSummary


@dataclass(frozen=True)
class _IngestCounts:
    chunk_count: int
    leaf_count: int


@dataclass(frozen=True)
class _ParsedHeader:
    body_start: int
    classifier: LineClassifier


def load_records(path: str, mode: LoadMode, config: PivotConfig) -> LoadResult:
    """Load a report into a new frozen record store.

    Args:
        path: Report file path.
        mode: ``memory`` reads the whole file first; ``chunked`` streams
            line-aligned chunks from disk.
        config: Runtime configuration.

    Returns:
        Load result with store, registry, and summary.

    Raises:
        PivotIngestError: If the file is missing, empty, lacks required
            columns, cannot be read, or the mode is unknown.
    """
    if mode not in SUPPORTED_LOAD_MODES:
        raise PivotIngestError(
            f"Unsupported load mode '{mode}'. Use one of: {', '.join(SUPPORTED_LOAD_MODES)}."
        )
    source_path = Path(path).expanduser().resolve()
    if not source_path.is_file():
        raise PivotIngestError(
            f"Failed to load report at {source_path}: file does not exist. "
            "Provide an existing tab-separated file."
        )
    _LOGGER.info("load_started", source_path=str(source_path), mode=mode)
    started_at = time.perf_counter()
    store = RecordStore()
    registry = AliasRegistry()
    try:
        if mode == "memory":
            counts = _load_in_memory(source_path, config, store, registry)
        else:
            counts = _load_chunked(source_path, config, store, registry)
    except PivotIngestError as error:
        _LOGGER.error("load_failed", source_path=str(source_path), mode=mode, error=str(error))
        raise
    store.freeze()
    summary = LoadSummary(
        source_path=str(source_path),
        mode=mode,
        record_count=len(store),
        alias_count=len(registry),
        chunk_count=counts.chunk_count,
        leaf_count=counts.leaf_count,
        elapsed_seconds=time.perf_counter() - started_at,
    )
    _log_load_completion(summary)
    return LoadResult(store=store, registry=registry, summary=summary)


def _load_in_memory(
    source_path: Path,
    config: PivotConfig,
    store: RecordStore,
    registry: AliasRegistry,
) -> _IngestCounts:
    """Read the whole report, then parse its body in one parallel pass."""
    try:
        payload = source_path.read_bytes()
    except OSError as error:
        raise PivotIngestError(
            f"Failed to read report at {source_path}: {error}. Check file permissions."
        ) from error
    source = MemoryByteSource(payload)
    parsed_header = _parse_header(source, config, registry, source_path)
    body = ByteRange(start=parsed_header.body_start, end=source.size)
    leaf_count = _ingest_ranges(source, (body,), config, parsed_header.classifier, store)
    return _IngestCounts(chunk_count=1 if body.length > 0 else 0, leaf_count=leaf_count)


def _load_chunked(
    source_path: Path,
    config: PivotConfig,
    store: RecordStore,
    registry: AliasRegistry,
) -> _IngestCounts:
    """Stream line-aligned chunks of the report through the engine."""
    with FileByteSource(source_path) as source:
        parsed_header = _parse_header(source, config, registry, source_path)
        chunks = plan_chunks(source, parsed_header.body_start, config.chunk_size_bytes)
        _LOGGER.info(
            "chunks_planned",
            source_path=str(source_path),
            chunk_count=len(chunks),
            chunk_size_bytes=config.chunk_size_bytes,
        )
        leaf_count = _ingest_ranges(source, chunks, config, parsed_header.classifier, store)
    return _IngestCounts(chunk_count=len(chunks), leaf_count=leaf_count)


def _parse_header(
    source: ByteSource,
    config: PivotConfig,
    registry: AliasRegistry,
    source_path: Path,
) -> _ParsedHeader:
    """Parse the header and bind a classifier to its column layout."""
    layout, header_end = read_column_layout(source, config.columns, config.encoding)
    _LOGGER.info(
        "header_resolved",
        source_path=str(source_path),
        group_index=layout.group_index,
        source_index=layout.source_index,
        series_index=layout.series_index,
        value_index=layout.value_index,
    )
    return _ParsedHeader(body_start=header_end, classifier=LineClassifier(layout, registry))


def _ingest_ranges(
    source: ByteSource,
    ranges: Sequence[ByteRange],
    config: PivotConfig,
    classifier: LineClassifier,
    store: RecordStore,
) -> int:
    """Run the parallel engine over ranges in order and count leaves."""
    leaf_count = 0
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        engine = ParallelIngestEngine(
            source=source,
            classifier=classifier,
            store=store,
            leaf_threshold=config.leaf_threshold_bytes,
            executor=executor,
            encoding=config.encoding,
        )
        for chunk_index, byte_range in enumerate(ranges):
            leaf_count += engine.ingest(byte_range)
            _LOGGER.debug(
                "chunk_ingested",
                chunk_index=chunk_index,
                start=byte_range.start,
                end=byte_range.end,
                record_count=len(store),
            )
    return leaf_count


def _log_load_completion(summary: LoadSummary) -> None:
    """Log load completion with contextual metadata."""
    _LOGGER.info(
        "load_completed",
        source_path=summary.source_path,
        mode=summary.mode,
        record_count=summary.record_count,
        alias_count=summary.alias_count,
        chunk_count=summary.chunk_count,
        leaf_count=summary.leaf_count,
        elapsed_seconds=round(summary.elapsed_seconds, 3),
    )
