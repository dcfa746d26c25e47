"""Runtime configuration model for tsvpivot.

This module owns all environment variable and YAML config parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Mapping, cast

import yaml

from core.constants import (
    DEFAULT_CHUNK_SIZE_BYTES,
    DEFAULT_ENCODING,
    DEFAULT_GROUP_COLUMN,
    DEFAULT_LEAF_THRESHOLD_BYTES,
    DEFAULT_SERIES_COLUMN,
    DEFAULT_SOURCE_COLUMN,
    DEFAULT_VALUE_COLUMN,
)
from core.errors import PivotConfigError
from core.types import ColumnNames

_INTEGER_KEYS = ("chunk_size_bytes", "leaf_threshold_bytes", "max_workers")
_ROOT_KEYS = (*_INTEGER_KEYS, "encoding", "columns")
_COLUMN_KEYS = ("group", "source", "series", "value")


@dataclass(frozen=True)
class PivotConfig:
    """Validated runtime configuration.

    Attributes:
        chunk_size_bytes: Target size of top-level chunks in chunked mode.
        leaf_threshold_bytes: Ranges smaller than this are parsed directly.
        max_workers: Worker thread count for parallel ingestion.
        encoding: Text encoding of the input file.
        columns: Header labels of the four required columns.
    """

    chunk_size_bytes: int
    leaf_threshold_bytes: int
    max_workers: int
    encoding: str
    columns: ColumnNames

    @classmethod
    def from_env(cls) -> "PivotConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            PivotConfigError: If environment values are invalid.
        """
        columns = ColumnNames(
            group=os.getenv("TSVPIVOT_GROUP_COLUMN", DEFAULT_GROUP_COLUMN),
            source=os.getenv("TSVPIVOT_SOURCE_COLUMN", DEFAULT_SOURCE_COLUMN),
            series=os.getenv("TSVPIVOT_SERIES_COLUMN", DEFAULT_SERIES_COLUMN),
            value=os.getenv("TSVPIVOT_VALUE_COLUMN", DEFAULT_VALUE_COLUMN),
        )
        return cls(
            chunk_size_bytes=_parse_positive_int(
                "TSVPIVOT_CHUNK_SIZE_BYTES",
                os.getenv("TSVPIVOT_CHUNK_SIZE_BYTES", str(DEFAULT_CHUNK_SIZE_BYTES)),
            ),
            leaf_threshold_bytes=_parse_positive_int(
                "TSVPIVOT_LEAF_THRESHOLD_BYTES",
                os.getenv("TSVPIVOT_LEAF_THRESHOLD_BYTES", str(DEFAULT_LEAF_THRESHOLD_BYTES)),
            ),
            max_workers=_parse_positive_int(
                "TSVPIVOT_MAX_WORKERS",
                os.getenv("TSVPIVOT_MAX_WORKERS", str(_default_worker_count())),
            ),
            encoding=_validate_encoding(
                "TSVPIVOT_ENCODING", os.getenv("TSVPIVOT_ENCODING", DEFAULT_ENCODING)
            ),
            columns=columns,
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "PivotConfig":
        """Build config from a YAML file layered over environment defaults.

        Args:
            config_path: Path to a YAML mapping of config overrides.

        Returns:
            A validated config object.

        Raises:
            PivotConfigError: If the file is missing, malformed, or invalid.
        """
        payload = _load_yaml_mapping(config_path)
        return apply_overrides(cls.from_env(), payload)


def apply_overrides(config: PivotConfig, overrides: Mapping[str, object]) -> PivotConfig:
    """Return a copy of config with validated overrides applied.

    Args:
        config: Base configuration.
        overrides: Mapping using the YAML config keys.

    Returns:
        Updated configuration.

    Raises:
        PivotConfigError: If a key is unknown or a value has the wrong type.
    """
    unknown_keys = sorted(set(overrides) - set(_ROOT_KEYS))
    if unknown_keys:
        raise PivotConfigError(
            f"Unsupported config keys: {', '.join(unknown_keys)}. "
            f"Supported keys are: {', '.join(_ROOT_KEYS)}."
        )
    updated = config
    for key in _INTEGER_KEYS:
        if key in overrides:
            updated = replace(updated, **{key: _expect_positive_int(key, overrides[key])})
    if "encoding" in overrides:
        encoding = _expect_string("encoding", overrides["encoding"])
        updated = replace(updated, encoding=_validate_encoding("encoding", encoding))
    if "columns" in overrides:
        updated = replace(updated, columns=_parse_columns(updated.columns, overrides["columns"]))
    return updated


def _default_worker_count() -> int:
    return max(1, os.cpu_count() or 1)


def _load_yaml_mapping(config_path: str) -> Mapping[str, object]:
    config_file = Path(config_path).expanduser().resolve()
    if not config_file.exists():
        raise PivotConfigError(
            f"Config file does not exist at {config_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(config_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise PivotConfigError(
            f"Failed to read config at {config_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise PivotConfigError(
            f"Failed to parse YAML config at {config_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise PivotConfigError(f"Config file at {config_file} is empty.")
    if not isinstance(payload, Mapping):
        raise PivotConfigError(
            f"Invalid config at {config_file}: expected mapping, got {type(payload).__name__}."
        )
    return cast(Mapping[str, object], payload)


def _parse_columns(current: ColumnNames, value: object) -> ColumnNames:
    if not isinstance(value, Mapping):
        raise PivotConfigError(
            f"Invalid columns config: expected mapping, got {type(value).__name__}."
        )
    unknown_keys = sorted(str(key) for key in value if key not in _COLUMN_KEYS)
    if unknown_keys:
        raise PivotConfigError(
            f"Unsupported column keys: {', '.join(unknown_keys)}. "
            f"Supported keys are: {', '.join(_COLUMN_KEYS)}."
        )
    updates = {key: _expect_string(f"columns.{key}", value[key]) for key in value}
    return replace(current, **updates)


def _parse_positive_int(name: str, raw_value: str) -> int:
    """Parse a positive integer environment value.

    Args:
        name: Environment variable name for error messages.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        PivotConfigError: If value is not a positive integer.
    """
    try:
        parsed = int(raw_value)
    except ValueError as error:
        raise PivotConfigError(
            f"Invalid {name} value: expected integer, got '{raw_value}'. "
            f"Set {name} to a positive number."
        ) from error
    if parsed <= 0:
        raise PivotConfigError(
            f"Invalid {name} value: expected positive integer, got {parsed}."
        )
    return parsed


def _expect_positive_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise PivotConfigError(f"Invalid {name} value: expected positive integer, got {value!r}.")
    return value


def _expect_string(name: str, value: object) -> str:
    if not isinstance(value, str) or not value:
        raise PivotConfigError(f"Invalid {name} value: expected non-empty string, got {value!r}.")
    return value


def _validate_encoding(name: str, encoding: str) -> str:
    """Check that an encoding exists and keeps tab and newline as single ASCII bytes.

    Args:
        name: Setting name for error messages.
        encoding: Codec name.

    Returns:
        The codec name unchanged.

    Raises:
        PivotConfigError: If the codec is unknown or cannot be split on byte delimiters.
    """
    try:
        codecs.lookup(encoding)
        delimiters = "\t\n".encode(encoding)
    except (LookupError, UnicodeError) as error:
        raise PivotConfigError(
            f"Invalid {name} value: unknown or unusable encoding '{encoding}'. "
            "Use an ASCII-compatible codec such as utf-8 or latin-1."
        ) from error
    if delimiters != b"\t\n":
        raise PivotConfigError(
            f"Invalid {name} value: encoding '{encoding}' does not store tab and newline "
            "as single ASCII bytes. Use an ASCII-compatible codec such as utf-8 or latin-1."
        )
    return encoding
