"""Distinct-value and pivot queries.

This module answers the lookups a chart front end needs: which series
exist for a group, and the value of every requested series/alias cell.
"""

from __future__ import annotations

from typing import Sequence

from core.constants import DEFAULT_VALUE
from store.record_store import RecordStore


def distinct_series_ids(store: RecordStore, group_key: str) -> set[str]:
    """Return distinct series ids recorded for a group.

    Args:
        store: Loaded record store.
        group_key: Exact group key, e.g. a gene name.

    Returns:
        Unordered set of series ids; empty for unknown groups.
    """
    return {record.series_id for record in store.records_for_group(group_key)}


def pivot(
    store: RecordStore,
    group_key: str,
    series_ids: Sequence[str],
    source_aliases: Sequence[str],
) -> dict[tuple[str, str], float]:
    """Build a series-by-alias value grid for one group.

    Every requested ``(series_id, alias)`` pair appears in the result.
    Pairs without a matching record get ``0.0``. When duplicate rows
    match the same pair, the last record in store order wins.

    Args:
        store: Loaded record store.
        group_key: Exact group key.
        series_ids: Requested series ids in display order.
        source_aliases: Requested source aliases in display order.

    Returns:
        Mapping keyed by ``(series_id, alias)`` in series-major order.
    """
    wanted_series = set(series_ids)
    wanted_aliases = set(source_aliases)
    observed: dict[tuple[str, str], float] = {}
    for record in store.records_for_group(group_key):
        if record.series_id in wanted_series and record.source_alias in wanted_aliases:
            observed[(record.series_id, record.source_alias)] = record.value
    return {
        (series_id, alias): observed.get((series_id, alias), DEFAULT_VALUE)
        for series_id in series_ids
        for alias in source_aliases
    }


def source_aliases(store: RecordStore, group_key: str | None = None) -> set[str]:
    """Return source aliases present overall or within one group."""
    records = store.get_all() if group_key is None else store.records_for_group(group_key)
    return {record.source_alias for record in records}


def group_keys(store: RecordStore) -> set[str]:
    """Return every group key present in the store."""
    return store.group_keys()
