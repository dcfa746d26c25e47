"""Unit tests for report load orchestration."""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from pathlib import Path

import pytest

from core.config import PivotConfig
from core.errors import PivotIngestError
from ingest.pipeline import load_records
from tests.fixture_paths import fixture_path, report_row, write_report


def _config(**overrides: int) -> PivotConfig:
    return replace(PivotConfig.from_env(), **overrides)


def test_load_records_counts_only_valid_lines() -> None:
    """Blank and too-short lines should be skipped, malformed values kept."""
    result = load_records(str(fixture_path("report_small.tsv")), "memory", _config())

    assert result.summary.record_count == 5


def test_load_records_freezes_store() -> None:
    """A finished load should leave the store read-only."""
    result = load_records(str(fixture_path("report_small.tsv")), "chunked", _config())

    assert result.store.is_frozen


def test_load_records_assigns_aliases_in_file_order_for_single_leaf() -> None:
    """Colliding base names should be suffixed when one leaf parses the file."""
    result = load_records(str(fixture_path("report_small.tsv")), "memory", _config())

    assert sorted(result.registry.snapshot().values()) == ["CTRL_F_2", "PLC_M_1", "PLC_M_1(1)"]


def test_memory_and_chunked_modes_match(tmp_path: Path) -> None:
    """Both load modes should produce the same records for any chunking."""
    rows = []
    for index in range(400):
        source = f"2024{index % 9:04d}_Run{index % 9}_Slot1-{index % 9}.d"
        rows.append(report_row(source, f"G{index % 4}", f"PEP{index}", f"{index / 3:.4f}"))
    report_path = write_report(tmp_path, rows)

    in_memory = load_records(str(report_path), "memory", _config(max_workers=1))
    chunked = load_records(
        str(report_path),
        "chunked",
        _config(chunk_size_bytes=997, leaf_threshold_bytes=61, max_workers=6),
    )

    def as_multiset(result) -> Counter:
        return Counter(
            (
                record.original_source_id,
                record.source_alias,
                record.series_id,
                record.value,
                record.group_key,
            )
            for record in result.store.get_all()
        )

    assert as_multiset(chunked) == as_multiset(in_memory)


def test_chunked_load_reports_chunk_count(tmp_path: Path) -> None:
    """Chunked mode should plan several chunks for a small chunk size."""
    rows = [report_row("run.raw", "G1", f"PEP{index}", "1.0") for index in range(50)]
    report_path = write_report(tmp_path, rows)

    result = load_records(str(report_path), "chunked", _config(chunk_size_bytes=128))

    assert result.summary.chunk_count > 1


def test_load_records_accepts_header_only_file(tmp_path: Path) -> None:
    """A header without data lines should load zero records."""
    report_path = write_report(tmp_path, [])

    result = load_records(str(report_path), "chunked", _config())

    assert result.summary.record_count == 0


def test_load_records_raises_for_missing_column() -> None:
    """Reports without a required column should abort the load."""
    with pytest.raises(PivotIngestError, match="Precursor.Id"):
        load_records(str(fixture_path("report_missing_series.tsv")), "memory", _config())


@pytest.mark.parametrize("mode", ["memory", "chunked"])
def test_load_records_raises_for_empty_file(tmp_path: Path, mode: str) -> None:
    """Empty reports should abort the load in both modes."""
    report_path = tmp_path / "empty.tsv"
    report_path.write_bytes(b"")

    with pytest.raises(PivotIngestError, match="empty"):
        load_records(str(report_path), mode, _config())  # type: ignore[arg-type]


def test_load_records_raises_for_missing_file(tmp_path: Path) -> None:
    """A missing path should be a load error."""
    with pytest.raises(PivotIngestError):
        load_records(str(tmp_path / "absent.tsv"), "memory", _config())


def test_load_records_rejects_unknown_mode() -> None:
    """Only the supported load modes should be accepted."""
    with pytest.raises(PivotIngestError):
        load_records(str(fixture_path("report_small.tsv")), "stream", _config())  # type: ignore[arg-type]
