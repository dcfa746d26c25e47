"""Fork/join ingestion over byte ranges.

This module recursively halves a byte range at line boundaries until
ranges fall below the leaf threshold, then parses leaves in parallel.
Split tasks hand their children back to the coordinator instead of
waiting on them, so a bounded worker pool never deadlocks.
"""

from __future__ import annotations

from concurrent.futures import FIRST_COMPLETED, Executor, Future, wait

from core.constants import CARRIAGE_RETURN, LINE_TERMINATOR
from core.types import ByteRange, Record
from ingest.byte_source import ByteSource, align_to_line_start, align_to_previous_line_start
from ingest.line_classifier import LineClassifier
from store.record_store import RecordStore


class ParallelIngestEngine:
    """Parse line-aligned byte ranges into a shared record store."""

    def __init__(
        self,
        source: ByteSource,
        classifier: LineClassifier,
        store: RecordStore,
        leaf_threshold: int,
        executor: Executor,
        encoding: str,
    ) -> None:
        self._source = source
        self._classifier = classifier
        self._store = store
        self._leaf_threshold = leaf_threshold
        self._executor = executor
        self._encoding = encoding

    def ingest(self, byte_range: ByteRange) -> int:
        """Parse every line of a range and wait for all tasks to finish.

        Args:
            byte_range: Range whose start and end lie on line boundaries.

        Returns:
            Number of leaf ranges parsed.

        Raises:
            PivotIngestError: If any range cannot be read.
        """
        if byte_range.length <= 0:
            return 0
        leaf_count = 0
        pending: set[Future[tuple[ByteRange, ...]]] = {
            self._executor.submit(self._run_task, byte_range)
        }
        try:
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    child_ranges = future.result()
                    if not child_ranges:
                        leaf_count += 1
                    for child_range in child_ranges:
                        pending.add(self._executor.submit(self._run_task, child_range))
        finally:
            _cancel_outstanding(pending)
        return leaf_count

    def _run_task(self, byte_range: ByteRange) -> tuple[ByteRange, ...]:
        """Parse a leaf range or return its two halves for scheduling."""
        if byte_range.length < self._leaf_threshold:
            self._parse_leaf(byte_range)
            return ()
        target = byte_range.start + byte_range.length // 2
        midpoint = align_to_line_start(self._source, target, byte_range.end)
        if midpoint >= byte_range.end:
            # The last line covers the upper half; split before it instead.
            midpoint = align_to_previous_line_start(self._source, target, byte_range.start)
        if midpoint <= byte_range.start or midpoint >= byte_range.end:
            # One line spans the whole range.
            self._parse_leaf(byte_range)
            return ()
        return (
            ByteRange(start=byte_range.start, end=midpoint),
            ByteRange(start=midpoint, end=byte_range.end),
        )

    def _parse_leaf(self, byte_range: ByteRange) -> None:
        start = align_to_line_start(self._source, byte_range.start, byte_range.end)
        payload = self._source.read(start, byte_range.end)
        records: list[Record] = []
        for raw_line in payload.split(LINE_TERMINATOR):
            if raw_line.endswith(CARRIAGE_RETURN):
                raw_line = raw_line[:-1]
            record = self._classifier.classify(raw_line.decode(self._encoding, errors="replace"))
            if record is not None:
                records.append(record)
        self._store.extend(records)


def _cancel_outstanding(pending: set[Future[tuple[ByteRange, ...]]]) -> None:
    """Cancel queued tasks and wait for running ones after a failure."""
    if not pending:
        return
    for future in pending:
        future.cancel()
    wait(pending)
