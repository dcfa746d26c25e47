"""Python SDK for report sessions.

This module exposes a per-load session handle that owns one loaded
report, its alias registry, and the queries front ends call.
"""

from __future__ import annotations

import threading
from typing import Sequence

from core.config import PivotConfig
from core.errors import PivotStateError
from core.logging_config import get_logger
from core.types import DEFAULT_LOAD_MODE, LoadMode, LoadSummary, Record
from ingest.pipeline import LoadResult, load_records
from query import pivot_queries

_LOGGER = get_logger(__name__)


class PivotSession:
    """Primary SDK entry point for one loaded report.

    Sessions are independent: each owns its own records and aliases,
    so several reports can be loaded side by side.
    """

    def __init__(self, config: PivotConfig | None = None) -> None:
        """Create an empty session.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or PivotConfig.from_env()
        self._load_lock = threading.Lock()
        self._result: LoadResult | None = None

    @property
    def config(self) -> PivotConfig:
        """Configuration used for loading."""
        return self._config

    @property
    def is_loaded(self) -> bool:
        """Whether a report has been loaded successfully."""
        return self._result is not None

    def load(self, path: str, mode: LoadMode = DEFAULT_LOAD_MODE) -> LoadSummary:
        """Load a report once.

        After the first successful load, further calls return the
        original summary without reading anything, whatever the
        arguments. A failed load leaves the session empty.

        Args:
            path: Report file path.
            mode: ``memory`` or ``chunked``.

        Returns:
            Summary of the load that populated this session.

        Raises:
            PivotIngestError: If the report cannot be loaded.
        """
        with self._load_lock:
            if self._result is not None:
                _LOGGER.info(
                    "load_skipped",
                    requested_path=path,
                    loaded_path=self._result.summary.source_path,
                )
                return self._result.summary
            self._result = load_records(path, mode, self._config)
            return self._result.summary

    def summary(self) -> LoadSummary:
        """Return the summary of the successful load."""
        return self._require_result().summary

    def records(self) -> tuple[Record, ...]:
        """Return every loaded record."""
        return self._require_result().store.get_all()

    def alias_mapping(self) -> dict[str, str]:
        """Return a copy of the original-source-id to alias mapping."""
        return self._require_result().registry.snapshot()

    def distinct_series_ids(self, group_key: str) -> set[str]:
        """Return distinct series ids for a group.

        Args:
            group_key: Exact group key.

        Returns:
            Unordered set of series ids.
        """
        return pivot_queries.distinct_series_ids(self._require_result().store, group_key)

    def pivot(
        self,
        group_key: str,
        series_ids: Sequence[str],
        source_aliases: Sequence[str],
    ) -> dict[tuple[str, str], float]:
        """Return a series-by-alias value grid for one group.

        Args:
            group_key: Exact group key.
            series_ids: Requested series ids.
            source_aliases: Requested source aliases.

        Returns:
            Mapping of ``(series_id, alias)`` to value, ``0.0`` when absent.
        """
        return pivot_queries.pivot(
            self._require_result().store, group_key, series_ids, source_aliases
        )

    def source_aliases(self, group_key: str | None = None) -> set[str]:
        """Return source aliases overall or for one group."""
        return pivot_queries.source_aliases(self._require_result().store, group_key)

    def group_keys(self) -> set[str]:
        """Return every loaded group key."""
        return pivot_queries.group_keys(self._require_result().store)

    def _require_result(self) -> LoadResult:
        result = self._result
        if result is None:
            raise PivotStateError("No report loaded in this session. Call load() first.")
        return result
