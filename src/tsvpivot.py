"""Public SDK surface for tsvpivot.

This module provides a stable import path for library users.
It re-exports the session handle, config, and typed models.
"""

from __future__ import annotations

from core.config import PivotConfig
from core.errors import (
    PivotConfigError,
    PivotError,
    PivotIngestError,
    PivotInternalError,
    PivotStateError,
)
from core.types import (
    SUPPORTED_LOAD_MODES,
    ColumnNames,
    LoadMode,
    LoadSummary,
    Record,
)
from ingest.alias_registry import AliasRegistry, extract_base_name
from store.session_sdk import PivotSession

__all__ = [
    "AliasRegistry",
    "ColumnNames",
    "LoadMode",
    "LoadSummary",
    "PivotConfig",
    "PivotConfigError",
    "PivotError",
    "PivotIngestError",
    "PivotInternalError",
    "PivotSession",
    "PivotStateError",
    "Record",
    "SUPPORTED_LOAD_MODES",
    "extract_base_name",
]
