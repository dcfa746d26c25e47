"""Append-only in-memory record store.

This module collects records from concurrent ingest tasks and, once
frozen, serves them read-only with a group-key index for queries.
"""

from __future__ import annotations

import threading
from typing import Iterable

from core.errors import PivotInternalError
from core.types import Record


class RecordStore:
    """Thread-shared record sequence filled once during ingestion."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[Record] = []
        self._frozen = False
        self._group_index: dict[str, tuple[Record, ...]] = {}
        self._frozen_records: tuple[Record, ...] = ()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    @property
    def is_frozen(self) -> bool:
        """Whether ingestion has completed and the store is read-only."""
        return self._frozen

    def append(self, record: Record) -> None:
        """Append one record.

        Raises:
            PivotInternalError: If the store is already frozen.
        """
        self.extend((record,))

    def extend(self, records: Iterable[Record]) -> None:
        """Append a batch of records under a single lock acquisition.

        Args:
            records: Records parsed by one ingest task.

        Raises:
            PivotInternalError: If the store is already frozen.
        """
        batch = list(records)
        with self._lock:
            if self._frozen:
                raise PivotInternalError(
                    "Record store is frozen; records cannot be added after ingestion completes."
                )
            self._records.extend(batch)

    def freeze(self) -> None:
        """Mark the store read-only and build the group-key index."""
        with self._lock:
            if self._frozen:
                return
            grouped: dict[str, list[Record]] = {}
            for record in self._records:
                grouped.setdefault(record.group_key, []).append(record)
            self._group_index = {key: tuple(rows) for key, rows in grouped.items()}
            self._frozen_records = tuple(self._records)
            self._frozen = True

    def get_all(self) -> tuple[Record, ...]:
        """Return every stored record in insertion order."""
        with self._lock:
            if self._frozen:
                return self._frozen_records
            return tuple(self._records)

    def records_for_group(self, group_key: str) -> tuple[Record, ...]:
        """Return records whose group key matches exactly.

        Uses the group index once frozen and a linear scan before that.
        """
        with self._lock:
            if self._frozen:
                return self._group_index.get(group_key, ())
            return tuple(record for record in self._records if record.group_key == group_key)

    def group_keys(self) -> set[str]:
        """Return all distinct group keys."""
        with self._lock:
            if self._frozen:
                return set(self._group_index)
            return {record.group_key for record in self._records}
