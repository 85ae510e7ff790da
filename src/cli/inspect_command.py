"""Inspect command wiring for the csv_to_mtx CLI."""

from __future__ import annotations

import argparse
from typing import Any

from core.errors import MtxError
from store.mtx_writer import read_mtx_file


def add_inspect_command(subparsers: Any) -> None:
    """Register inspect subcommand."""
    parser = subparsers.add_parser("inspect", help="Print header and zone summary of an MTX file")
    parser.add_argument("mtx_path", help="MTX container path (.gz is decompressed)")


def run_inspect_command(args: argparse.Namespace) -> int:
    """Print container header fields as key=value rows."""
    try:
        contents = read_mtx_file(args.mtx_path)
    except MtxError as error:
        print(f"error={error}")
        return 1
    header = contents.header
    print(f"magic=0x{header.magic:08X}")
    print(f"version={header.version}")
    print(f"type={header.type_tag}")
    print(f"dimensions={header.dimensions}")
    print(f"origin_count={header.origin_count}")
    print(f"destination_count={header.destination_count}")
    if contents.origin_zones:
        print(f"first_zone={contents.origin_zones[0]}")
        print(f"last_zone={contents.origin_zones[-1]}")
    print(f"matrix_total={float(contents.matrix.sum(dtype='float64'))}")
    return 0
