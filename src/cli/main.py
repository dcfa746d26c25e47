"""tsvpivot CLI entry points.
This module exposes report load and query commands.
It maps argparse commands onto session SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Sequence

from core.config import PivotConfig, apply_overrides
from core.errors import PivotError
from core.types import DEFAULT_LOAD_MODE, SUPPORTED_LOAD_MODES
from store.session_sdk import PivotSession


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="tsvpivot", description="tsvpivot report CLI")
    parser.add_argument("--config", help="Optional YAML config file")
    parser.add_argument(
        "--mode",
        default=DEFAULT_LOAD_MODE,
        choices=SUPPORTED_LOAD_MODES,
        help="Load the whole file first or stream it in chunks",
    )
    parser.add_argument("--workers", type=int, help="Override worker thread count")
    parser.add_argument("--chunk-size", type=int, help="Override chunk size in bytes")
    parser.add_argument("--leaf-threshold", type=int, help="Override leaf range size in bytes")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_summary_command(subparsers)
    _add_genes_command(subparsers)
    _add_series_command(subparsers)
    _add_aliases_command(subparsers)
    _add_pivot_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tsvpivot CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        session = _build_session(args)
        session.load(args.path, args.mode)
        return _dispatch(parser, session, args)
    except PivotError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


def _dispatch(
    parser: argparse.ArgumentParser,
    session: PivotSession,
    args: argparse.Namespace,
) -> int:
    if args.command == "summary":
        return _run_summary_command(session)
    if args.command == "genes":
        return _run_genes_command(session)
    if args.command == "series":
        return _run_series_command(session, args)
    if args.command == "aliases":
        return _run_aliases_command(session)
    if args.command == "pivot":
        return _run_pivot_command(session, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_session(args: argparse.Namespace) -> PivotSession:
    """Build a session from env or YAML config plus CLI overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Empty session.
    """
    config = PivotConfig.from_yaml(args.config) if args.config else PivotConfig.from_env()
    overrides: dict[str, object] = {}
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.chunk_size is not None:
        overrides["chunk_size_bytes"] = args.chunk_size
    if args.leaf_threshold is not None:
        overrides["leaf_threshold_bytes"] = args.leaf_threshold
    return PivotSession(apply_overrides(config, overrides))


def _run_summary_command(session: PivotSession) -> int:
    summary = session.summary()
    print(f"source_path={summary.source_path}")
    print(f"mode={summary.mode}")
    print(f"record_count={summary.record_count}")
    print(f"alias_count={summary.alias_count}")
    print(f"chunk_count={summary.chunk_count}")
    print(f"leaf_count={summary.leaf_count}")
    print(f"elapsed_seconds={summary.elapsed_seconds:.3f}")
    return 0


def _run_genes_command(session: PivotSession) -> int:
    for group_key in sorted(session.group_keys()):
        print(group_key)
    return 0


def _run_series_command(session: PivotSession, args: argparse.Namespace) -> int:
    for series_id in sorted(session.distinct_series_ids(args.gene)):
        print(series_id)
    return 0


def _run_aliases_command(session: PivotSession) -> int:
    mapping = session.alias_mapping()
    for original, alias in sorted(mapping.items(), key=lambda item: (item[1], item[0])):
        print(f"{original}\t{alias}")
    return 0


def _run_pivot_command(session: PivotSession, args: argparse.Namespace) -> int:
    """Handle pivot command.

    Prints one header row of aliases, then one row per series id.

    Args:
        session: Loaded session.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    series_ids = args.series or sorted(session.distinct_series_ids(args.gene))
    aliases = args.aliases or sorted(session.source_aliases(args.gene))
    grid = session.pivot(args.gene, series_ids, aliases)
    print("\t".join(["series", *aliases]))
    for series_id in series_ids:
        cells = [repr(grid[(series_id, alias)]) for alias in aliases]
        print("\t".join([series_id, *cells]))
    return 0


def _add_summary_command(subparsers: Any) -> None:
    """Register summary subcommand."""
    parser = subparsers.add_parser("summary", help="Load a report and print load statistics")
    parser.add_argument("path", help="Tab-separated report file")


def _add_genes_command(subparsers: Any) -> None:
    """Register genes subcommand."""
    parser = subparsers.add_parser("genes", help="List distinct group keys")
    parser.add_argument("path", help="Tab-separated report file")


def _add_series_command(subparsers: Any) -> None:
    """Register series subcommand."""
    parser = subparsers.add_parser("series", help="List distinct series ids for a gene")
    parser.add_argument("path", help="Tab-separated report file")
    parser.add_argument("--gene", required=True, help="Group key, e.g. a gene name")


def _add_aliases_command(subparsers: Any) -> None:
    """Register aliases subcommand."""
    parser = subparsers.add_parser("aliases", help="List original source ids and aliases")
    parser.add_argument("path", help="Tab-separated report file")


def _add_pivot_command(subparsers: Any) -> None:
    """Register pivot subcommand."""
    parser = subparsers.add_parser("pivot", help="Print a series-by-alias value table")
    parser.add_argument("path", help="Tab-separated report file")
    parser.add_argument("--gene", required=True, help="Group key, e.g. a gene name")
    parser.add_argument("--series", nargs="+", help="Series ids; defaults to all for the gene")
    parser.add_argument("--aliases", nargs="+", help="Source aliases; defaults to all for the gene")
