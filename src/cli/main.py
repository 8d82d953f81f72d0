"""Accrual CLI entry points.

This module exposes commands that export and inspect saved sessions.
It maps argparse commands onto DataStore calls.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Sequence

from core.config import AccrualConfig
from core.constants import DEFAULT_EXPORT_FORMAT, SUPPORTED_EXPORT_FORMATS
from core.errors import AccrualError, AccrualExportError
from core.logging_config import configure_cli_logging
from store.data_store import DataStore
from store.session_io import read_session_file


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="accrual", description="Accrual session CLI")
    parser.add_argument("--config", help="YAML settings file layered over ACCRUAL_* env vars")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Structured log level written to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_export_command(subparsers)
    _add_columns_command(subparsers)
    _add_filename_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Accrual CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging(args.log_level)
    try:
        store = _load_store(args.config, Path(args.session))
        if args.command == "export":
            return _run_export_command(store, args)
        if args.command == "columns":
            return _run_columns_command(store, args)
        if args.command == "filename":
            return _run_filename_command(store, args)
    except AccrualError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _load_store(config_path: str | None, session_path: Path) -> DataStore:
    """Build a store hydrated from a saved session.

    Args:
        config_path: Optional YAML settings path.
        session_path: Session JSON path.

    Returns:
        Hydrated data store.
    """
    config = AccrualConfig.from_file(config_path) if config_path else AccrualConfig.from_env()
    store = DataStore(config=config)
    store.hydrate_snapshot(read_session_file(session_path.expanduser().resolve()))
    return store


def _run_export_command(store: DataStore, args: argparse.Namespace) -> int:
    """Handle export command.

    Args:
        store: Hydrated store.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    clean = not args.raw
    if args.format == "csv":
        text = store.export_csv(args.separator, clean)
    elif args.format == "json":
        text = store.export_json(clean)
    else:
        text = store.export_jsonl(clean)
    if args.output is None:
        print(text)
        return 0
    output_path = Path(args.output).expanduser().resolve()
    if output_path.is_dir():
        output_path = output_path / store.make_filename(extension=args.format)
    try:
        output_path.write_text(text, encoding="utf-8")
    except OSError as error:
        raise AccrualExportError(
            f"Failed to write export at {output_path}: {error}. "
            "Check that the directory exists and is writable."
        ) from error
    print(output_path)
    return 0


def _run_columns_command(store: DataStore, args: argparse.Namespace) -> int:
    for column in store.keys(include_state=args.include_state):
        print(column)
    return 0


def _run_filename_command(store: DataStore, args: argparse.Namespace) -> int:
    print(store.make_filename(prefix=args.prefix, extension=args.extension))
    return 0


def _add_export_command(subparsers: Any) -> None:
    """Register export subcommand."""
    parser = subparsers.add_parser("export", help="Export a saved session's table")
    parser.add_argument("session", help="Session JSON file with 'data' and 'state'")
    parser.add_argument(
        "--format",
        default=DEFAULT_EXPORT_FORMAT,
        choices=SUPPORTED_EXPORT_FORMATS,
        help="Output format",
    )
    parser.add_argument("--separator", help="CSV column separator")
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Keep columns whose names start with an underscore",
    )
    parser.add_argument(
        "--output",
        help="Output file, or a directory to receive a suggested filename; stdout if omitted",
    )


def _add_columns_command(subparsers: Any) -> None:
    """Register columns subcommand."""
    parser = subparsers.add_parser("columns", help="List columns in canonical order")
    parser.add_argument("session", help="Session JSON file with 'data' and 'state'")
    parser.add_argument(
        "--include-state",
        action="store_true",
        help="Include columns that only appear in the state",
    )


def _add_filename_command(subparsers: Any) -> None:
    """Register filename subcommand."""
    parser = subparsers.add_parser("filename", help="Suggest an export filename")
    parser.add_argument("session", help="Session JSON file with 'data' and 'state'")
    parser.add_argument("--prefix", help="Filename prefix")
    parser.add_argument("--extension", default="csv", help="File extension without dot")
