"""Line classification for report rows.

This module turns one raw tab-separated line into a typed record.
Short or blank rows are skipped and bad numbers default to zero.
"""

from __future__ import annotations

import re

from core.constants import DEFAULT_VALUE, FIELD_DELIMITER
from core.errors import PivotInternalError
from core.types import ColumnLayout, Record
from ingest.alias_registry import AliasRegistry

_DECIMAL_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|nan|inf|infinity)",
    re.IGNORECASE | re.ASCII,
)


def parse_value(text: str) -> float:
    """Parse a locale-independent base-10 number.

    Args:
        text: Raw value field.

    Returns:
        Parsed float, or ``0.0`` when the field is not a decimal number.
    """
    candidate = text.strip()
    if not _DECIMAL_PATTERN.fullmatch(candidate):
        return DEFAULT_VALUE
    return float(candidate)


class LineClassifier:
    """Classifier bound to one column layout and alias registry."""

    def __init__(self, layout: ColumnLayout, registry: AliasRegistry | None) -> None:
        self._layout = layout
        self._registry = registry

    def classify(self, line: str) -> Record | None:
        """Classify one raw line.

        Args:
            line: Line text without its terminator.

        Returns:
            Parsed record, or None for blank and too-short rows.

        Raises:
            PivotInternalError: If no alias registry was provided.
        """
        if not line.strip():
            return None
        fields = line.split(FIELD_DELIMITER)
        layout = self._layout
        if len(fields) <= layout.group_index:
            return None
        original_source_id = _field_or_empty(fields, layout.source_index)
        series_id = _field_or_empty(fields, layout.series_index)
        value = (
            parse_value(fields[layout.value_index])
            if len(fields) > layout.value_index
            else DEFAULT_VALUE
        )
        return Record(
            original_source_id=original_source_id,
            source_alias=self._resolve_alias(original_source_id),
            series_id=series_id,
            value=value,
            group_key=fields[layout.group_index],
        )

    def _resolve_alias(self, original_source_id: str) -> str:
        if self._registry is None:
            raise PivotInternalError(
                "Alias registry is not initialized; a classifier must be built with a registry."
            )
        return self._registry.resolve(original_source_id)


def _field_or_empty(fields: list[str], index: int) -> str:
    return fields[index] if len(fields) > index else ""
