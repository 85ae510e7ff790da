"""csv_to_mtx CLI entry points.
This module exposes the convert and inspect commands.
It maps argparse commands onto pipeline calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any, Sequence

from cli.inspect_command import add_inspect_command, run_inspect_command
from core.config import MtxConfig, parse_csv_delimiter
from core.errors import MtxError
from ingest.pipeline import build_request, run_conversion


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="csv_to_mtx",
        description="Convert origin-destination CSV flows into MTX matrix files",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_convert_command(subparsers)
    add_inspect_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the csv_to_mtx CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "convert":
        return _run_convert_command(args)
    if args.command == "inspect":
        return run_inspect_command(args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(delimiter: str | None) -> MtxConfig:
    """Build runtime config with optional delimiter override.

    Args:
        delimiter: Optional CSV delimiter override.

    Returns:
        Validated config.
    """
    config = MtxConfig.from_env()
    if delimiter is not None:
        config = replace(config, csv_delimiter=parse_csv_delimiter(delimiter))
    return config


def _run_convert_command(args: argparse.Namespace) -> int:
    """Handle convert command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    try:
        config = _build_config(args.delimiter)
        request = build_request(args.input_path, args.output_path, args.zone_path)
        result = run_conversion(request, config)
    except MtxError as error:
        print(f"error={error}")
        return 1
    print(f"output_path={result.output_path}")
    print(f"layout={result.layout}")
    print(f"zone_count={result.zone_count}")
    print(f"triple_count={result.triple_count}")
    print(f"dropped_reference_count={result.dropped_reference_count}")
    print(f"compressed={str(result.compressed).lower()}")
    return 0


def _add_convert_command(subparsers: Any) -> None:
    """Register convert subcommand."""
    parser = subparsers.add_parser("convert", help="Convert a flow CSV into an MTX file")
    parser.add_argument("input_path", help="Sparse (origin,destination,value) or rectangular CSV")
    parser.add_argument("output_path", help="Output .mtx path; a .gz suffix enables gzip")
    parser.add_argument(
        "zone_path",
        nargs="?",
        default=None,
        help="Optional zone list CSV with a header row and zone ids in the first column",
    )
    parser.add_argument("--delimiter", help="Override MTX_CSV_DELIMITER for this command")
