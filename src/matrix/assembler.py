"""Dense origin-destination matrix assembly.

This module ranks zones and writes flow values into a zero-filled
``n x n`` float32 array indexed by origin and destination rank.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from core.logging_config import get_logger
from core.types import FlowTriple, MatrixAssembly

_LOGGER = get_logger(__name__)


def build_zone_index(zones: Sequence[int]) -> dict[int, int]:
    """Map zone ids to their rank.

    Args:
        zones: Ordered zone ids.

    Returns:
        Zone id to rank mapping; a repeated id keeps its last rank.
    """
    return {zone_id: rank for rank, zone_id in enumerate(zones)}


def allocate_matrix(zone_count: int) -> np.ndarray:
    """Allocate a zero-filled row-major float32 matrix."""
    return np.zeros((zone_count, zone_count), dtype=np.float32)


def assemble_matrix(triples: Iterable[FlowTriple], zones: Sequence[int]) -> MatrixAssembly:
    """Write flow triples into a dense zone-ranked matrix.

    Triples are applied in order and overwrite earlier values for the
    same cell. Triples whose origin or destination is not a known zone
    are skipped.

    Args:
        triples: Flow triples.
        zones: Ordered zone ids labelling both axes.

    Returns:
        Assembled matrix with applied and dropped counts.
    """
    zone_index = build_zone_index(zones)
    matrix = allocate_matrix(len(zones))
    applied_count = 0
    dropped_count = 0
    for triple in triples:
        origin_rank = zone_index.get(triple.origin)
        destination_rank = zone_index.get(triple.destination)
        if origin_rank is None or destination_rank is None:
            dropped_count += 1
            continue
        matrix[origin_rank, destination_rank] = triple.value
        applied_count += 1
    _LOGGER.info(
        "matrix_assembled",
        zone_count=len(zones),
        applied_count=applied_count,
        dropped_count=dropped_count,
    )
    return MatrixAssembly(
        zones=tuple(zones),
        matrix=matrix,
        applied_count=applied_count,
        dropped_count=dropped_count,
    )
