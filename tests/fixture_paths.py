"""Shared fixture path helpers for tests."""

from __future__ import annotations

from pathlib import Path

REPORT_HEADER = "\t".join(
    ["Protein.Group", "File.Name", "Genes", "Precursor.Id", "Precursor.Normalised"]
)


def fixture_path(relative_path: str) -> Path:
    """Resolve a fixture path relative to tests/fixtures.

    Args:
        relative_path: Path under fixtures root.

    Returns:
        Absolute fixture path.
    """
    tests_root = Path(__file__).resolve().parent
    return tests_root / "fixtures" / relative_path


def report_row(source: str, gene: str, series: str, value: str, protein: str = "P1") -> str:
    """Build one data line in the default report column order."""
    return "\t".join([protein, source, gene, series, value])


def write_report(directory: Path, rows: list[str], name: str = "report.tsv") -> Path:
    """Write a report with the default header and the given data rows.

    Args:
        directory: Target directory, usually pytest's tmp_path.
        rows: Data lines without terminators.
        name: Report file name.

    Returns:
        Written report path.
    """
    report_path = directory / name
    report_path.write_bytes(("\n".join([REPORT_HEADER, *rows]) + "\n").encode("utf-8"))
    return report_path
