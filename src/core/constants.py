"""Core constants used across tsvpivot modules.

This module centralizes tuning defaults and report column labels.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_GROUP_COLUMN = "Genes"
DEFAULT_SOURCE_COLUMN = "File.Name"
DEFAULT_SERIES_COLUMN = "Precursor.Id"
DEFAULT_VALUE_COLUMN = "Precursor.Normalised"
DEFAULT_CHUNK_SIZE_BYTES = 1024 * 1024 * 1024
DEFAULT_LEAF_THRESHOLD_BYTES = 1024 * 1024
DEFAULT_ENCODING = "utf-8"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_VALUE = 0.0
FIELD_DELIMITER = "\t"
LINE_TERMINATOR = b"\n"
CARRIAGE_RETURN = b"\r"
NEWLINE_SCAN_BLOCK_BYTES = 64 * 1024
SLOT_MARKER = "_Slot"
