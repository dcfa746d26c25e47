"""Header parsing for tab-separated reports.

This module locates the four required columns by exact header name.
Column positions are resolved once per load and shared by all tasks.
"""

from __future__ import annotations

from core.constants import CARRIAGE_RETURN, FIELD_DELIMITER
from core.errors import PivotIngestError
from core.types import ColumnLayout, ColumnNames
from ingest.byte_source import ByteSource


def read_column_layout(
    source: ByteSource,
    columns: ColumnNames,
    encoding: str,
) -> tuple[ColumnLayout, int]:
    """Parse the header line and resolve required column positions.

    Args:
        source: Report bytes.
        columns: Header labels to locate.
        encoding: Text encoding of the report.

    Returns:
        Column layout and the offset right after the header line.

    Raises:
        PivotIngestError: If the report is empty or a column is missing.
    """
    if source.size == 0:
        raise PivotIngestError("Report is empty. Provide a file with a header line.")
    newline_index = source.find_newline(0, source.size)
    header_end = source.size if newline_index == -1 else newline_index + 1
    raw_header = source.read(0, header_end).rstrip(b"\n").rstrip(CARRIAGE_RETURN)
    header_fields = raw_header.decode(encoding, errors="replace").split(FIELD_DELIMITER)
    return resolve_column_layout(header_fields, columns), header_end


def resolve_column_layout(header_fields: list[str], columns: ColumnNames) -> ColumnLayout:
    """Resolve column indices from parsed header fields.

    Args:
        header_fields: Header labels in file order.
        columns: Required column labels.

    Returns:
        Layout with the first position of every required label.

    Raises:
        PivotIngestError: If any required label is absent.
    """
    required = (columns.group, columns.source, columns.series, columns.value)
    missing = [name for name in required if name not in header_fields]
    if missing:
        raise PivotIngestError(
            f"Required columns not found in header: {', '.join(missing)}. "
            "Check the report format or configure the column names."
        )
    return ColumnLayout(
        group_index=header_fields.index(columns.group),
        source_index=header_fields.index(columns.source),
        series_index=header_fields.index(columns.series),
        value_index=header_fields.index(columns.value),
    )
