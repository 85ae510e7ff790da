"""Flow table readers for ingestion.

This module loads origin-destination flows from CSV files. The layout
(sparse triples or rectangular cross-tab) is decided once from the
first non-blank row; each layout has its own row parser that yields
only validated triples.
"""

from __future__ import annotations

import csv
import re
from pathlib import Path
from typing import Iterable, Iterator

import numpy as np

from core.config import MtxConfig
from core.constants import SPARSE_FIELD_COUNT, ZONE_ID_MAX, ZONE_ID_MIN
from core.errors import MtxIngestError
from core.logging_config import get_logger
from core.types import FlowReadResult, FlowTriple, InputLayout

_LOGGER = get_logger(__name__)
_ZONE_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)
_UNDECODABLE = "\ufffd"


class _DropCounter:
    """Mutable tally of rows and cells filtered out while parsing."""

    def __init__(self) -> None:
        self.rows = 0
        self.cells = 0


def read_flow_triples(input_path: str | Path, config: MtxConfig) -> FlowReadResult:
    """Load flow triples from a sparse or rectangular CSV file.

    Args:
        input_path: Path to the CSV file.
        config: Runtime configuration for the CSV delimiter.

    Returns:
        Detected layout, triples in file order, and drop counters.

    Raises:
        MtxIngestError: If the file cannot be opened or read.
    """
    source_path = Path(input_path).expanduser()
    drops = _DropCounter()
    try:
        with source_path.open("r", encoding="utf-8-sig", errors="replace", newline="") as handle:
            rows = iter_csv_rows(handle, config.csv_delimiter)
            first_row = next(rows, None)
            if first_row is None:
                layout: InputLayout = "empty"
                triples: tuple[FlowTriple, ...] = ()
            else:
                layout = detect_layout(first_row)
                triples = tuple(_parse_layout(layout, first_row, rows, drops))
    except (OSError, csv.Error) as error:
        raise MtxIngestError(
            f"Failed to read flow table at {source_path}: {error}. "
            "Provide an existing, readable CSV file."
        ) from error
    _LOGGER.info(
        "flow_table_read",
        input_path=str(source_path),
        layout=layout,
        triple_count=len(triples),
    )
    if drops.rows or drops.cells:
        _LOGGER.debug(
            "flow_table_entries_dropped",
            input_path=str(source_path),
            dropped_rows=drops.rows,
            dropped_cells=drops.cells,
        )
    return FlowReadResult(
        layout=layout,
        triples=triples,
        dropped_rows=drops.rows,
        dropped_cells=drops.cells,
    )


def detect_layout(first_row: list[str]) -> InputLayout:
    """Classify a table by the width of its first row.

    Args:
        first_row: Fields of the first non-blank row.

    Returns:
        ``"sparse"`` for exactly three fields, else ``"rectangular"``.
    """
    if len(first_row) == SPARSE_FIELD_COUNT:
        return "sparse"
    return "rectangular"


def iter_csv_rows(lines: Iterable[str], delimiter: str) -> Iterator[list[str]]:
    """Yield non-blank CSV rows.

    Args:
        lines: Text lines or open text handle.
        delimiter: Field delimiter.

    Returns:
        Iterator over rows that contain at least one field.
    """
    for row in csv.reader(lines, delimiter=delimiter):
        if row:
            yield row


def parse_zone_id(text: str) -> int | None:
    """Parse a 32-bit signed zone id, returning None when invalid.

    Only an optional sign and ASCII digits are accepted; whitespace and
    digit-group underscores are rejected.
    """
    if _ZONE_ID_PATTERN.fullmatch(text) is None:
        return None
    value = int(text)
    if not ZONE_ID_MIN <= value <= ZONE_ID_MAX:
        return None
    return value


def parse_float32(text: str) -> float | None:
    """Parse a flow value rounded to float32, returning None when invalid.

    Accepts ASCII decimal and exponent notation plus ``inf``, ``infinity``
    and ``nan`` in any case; whitespace and underscores are rejected.
    """
    if _FLOAT_PATTERN.fullmatch(text) is None:
        return None
    value = float(text)
    with np.errstate(over="ignore"):
        return float(np.float32(value))


def _parse_layout(
    layout: InputLayout,
    first_row: list[str],
    rows: Iterator[list[str]],
    drops: _DropCounter,
) -> Iterator[FlowTriple]:
    if layout == "sparse":
        yield from _iter_sparse_triples(first_row, rows, drops)
    else:
        yield from _iter_rectangular_triples(first_row, rows, drops)


def _iter_sparse_triples(
    first_row: list[str],
    rows: Iterator[list[str]],
    drops: _DropCounter,
) -> Iterator[FlowTriple]:
    """Yield triples from ``origin,destination,value`` rows.

    The first row is data, not a header. Zero values are kept.
    """
    for row in _chain_first(first_row, rows):
        triple = _parse_sparse_row(row)
        if triple is None:
            drops.rows += 1
            continue
        yield triple


def _parse_sparse_row(row: list[str]) -> FlowTriple | None:
    if len(row) != SPARSE_FIELD_COUNT:
        return None
    origin = parse_zone_id(row[0])
    destination = parse_zone_id(row[1])
    value = parse_float32(row[2])
    if origin is None or destination is None or value is None:
        return None
    return FlowTriple(origin=origin, destination=destination, value=value)


def _iter_rectangular_triples(
    header_row: list[str],
    rows: Iterator[list[str]],
    drops: _DropCounter,
) -> Iterator[FlowTriple]:
    """Yield non-zero triples from a cross-tab table.

    The header lists destination ids after a label cell. Non-numeric
    header entries are dropped and the remaining ids are matched to
    value columns by position. Rows holding undecodable bytes are
    dropped whole.
    """
    parsed_header = (parse_zone_id(field) for field in header_row[1:])
    destinations = [zone_id for zone_id in parsed_header if zone_id is not None]
    if not destinations:
        return
    for row in rows:
        origin = parse_zone_id(row[0])
        if origin is None or any(_UNDECODABLE in field for field in row):
            drops.rows += 1
            continue
        for column_index, field in enumerate(row[1:]):
            value = parse_float32(field) if column_index < len(destinations) else None
            if value is None:
                drops.cells += 1
                continue
            if value != 0.0:
                yield FlowTriple(origin=origin, destination=destinations[column_index], value=value)


def _chain_first(first_row: list[str], rows: Iterator[list[str]]) -> Iterator[list[str]]:
    yield first_row
    yield from rows
