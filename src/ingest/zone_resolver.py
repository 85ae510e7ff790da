"""Zone set resolution.

This module decides the ordered zone list that labels both matrix
axes, either from a zone authority file or from the flows themselves.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from core.config import MtxConfig
from core.errors import MtxIngestError
from core.logging_config import get_logger
from core.types import FlowTriple
from ingest.input_reader import iter_csv_rows, parse_zone_id

_LOGGER = get_logger(__name__)


def resolve_zones(
    triples: Iterable[FlowTriple],
    zone_path: str | Path | None,
    config: MtxConfig,
) -> tuple[int, ...]:
    """Resolve the ordered zone set for a conversion.

    Args:
        triples: Flow triples read from the input table.
        zone_path: Optional zone authority CSV.
        config: Runtime configuration for the CSV delimiter.

    Returns:
        Ascending zone ids; the matrix dimension is their count.

    Raises:
        MtxIngestError: If the zone authority file cannot be read.
    """
    if zone_path is not None:
        zones = read_zone_authority(zone_path, config)
        source = "authority"
    else:
        zones = extract_zones(triples)
        source = "flows"
    _LOGGER.info("zones_resolved", zone_count=len(zones), source=source)
    return zones


def read_zone_authority(zone_path: str | Path, config: MtxConfig) -> tuple[int, ...]:
    """Read zone ids from the first column of an authority file.

    The first row is a header and is skipped. Rows whose first field is
    not an integer are dropped. Duplicates are kept as listed.

    Args:
        zone_path: Zone authority CSV path.
        config: Runtime configuration for the CSV delimiter.

    Returns:
        Sorted zone ids.

    Raises:
        MtxIngestError: If the file cannot be opened or read.
    """
    authority_path = Path(zone_path).expanduser()
    zones: list[int] = []
    try:
        with authority_path.open("r", encoding="utf-8-sig", errors="replace", newline="") as handle:
            rows = iter_csv_rows(handle, config.csv_delimiter)
            next(rows, None)
            for row in rows:
                zone_id = parse_zone_id(row[0])
                if zone_id is not None:
                    zones.append(zone_id)
    except (OSError, csv.Error) as error:
        raise MtxIngestError(
            f"Failed to read zone authority at {authority_path}: {error}. "
            "Provide an existing CSV with a header row and zone ids in the first column."
        ) from error
    return tuple(sorted(zones))


def extract_zones(triples: Iterable[FlowTriple]) -> tuple[int, ...]:
    """Collect the distinct origins and destinations of the flows.

    Args:
        triples: Flow triples in any order.

    Returns:
        Strictly ascending zone ids.
    """
    zone_ids: set[int] = set()
    for triple in triples:
        zone_ids.add(triple.origin)
        zone_ids.add(triple.destination)
    return tuple(sorted(zone_ids))

