"""Shared typed models.

This module defines immutable data models passed between the reader,
resolver, assembler, and serializer stages to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import numpy as np

InputLayout = Literal["sparse", "rectangular", "empty"]


@dataclass(frozen=True)
class FlowTriple:
    """One origin-destination observation.

    Attributes:
        origin: Origin zone id.
        destination: Destination zone id.
        value: Flow value, already rounded to float32 precision.
    """

    origin: int
    destination: int
    value: float


@dataclass(frozen=True)
class FlowReadResult:
    """Triples read from one input file.

    Attributes:
        layout: Layout detected from the first row.
        triples: Validated triples in file order.
        dropped_rows: Rows skipped because a key field failed to parse.
        dropped_cells: Rectangular cells skipped as unparseable or out of range.
    """

    layout: InputLayout
    triples: tuple[FlowTriple, ...]
    dropped_rows: int = 0
    dropped_cells: int = 0


@dataclass(frozen=True)
class MatrixAssembly:
    """Dense matrix assembled from triples.

    Attributes:
        zones: Ordered zone ids labelling both matrix axes.
        matrix: Row-major ``(n, n)`` float32 array.
        applied_count: Triples written into the matrix.
        dropped_count: Triples whose origin or destination is not a known zone.
    """

    zones: tuple[int, ...]
    matrix: np.ndarray
    applied_count: int
    dropped_count: int

    @property
    def zone_count(self) -> int:
        """Matrix dimension ``n``."""
        return len(self.zones)


@dataclass(frozen=True)
class MtxHeader:
    """Fixed 24-byte MTX container header.

    Attributes:
        magic: Container magic number.
        version: Format version.
        type_tag: Value type tag (1 = float32).
        dimensions: Number of matrix dimensions.
        origin_count: Origin index size.
        destination_count: Destination index size.
    """

    magic: int
    version: int
    type_tag: int
    dimensions: int
    origin_count: int
    destination_count: int


@dataclass(frozen=True)
class MtxContents:
    """Decoded MTX container.

    Attributes:
        header: Parsed header fields.
        origin_zones: Origin axis zone ids.
        destination_zones: Destination axis zone ids.
        matrix: ``(origin_count, destination_count)`` float32 array.
    """

    header: MtxHeader
    origin_zones: tuple[int, ...]
    destination_zones: tuple[int, ...]
    matrix: np.ndarray


@dataclass(frozen=True)
class ConversionRequest:
    """Input parameters for one CSV to MTX conversion.

    Attributes:
        input_path: Sparse or rectangular CSV file.
        output_path: Destination container, gzip-compressed for ``.gz`` paths.
        zone_path: Optional zone authority CSV with a header row.
    """

    input_path: Path
    output_path: Path
    zone_path: Path | None = None


@dataclass(frozen=True)
class ConversionResult:
    """Summary of one finished conversion.

    Attributes:
        output_path: Written container path.
        layout: Detected input layout.
        zone_count: Matrix dimension.
        triple_count: Triples read from the input.
        applied_count: Triples written into the matrix.
        dropped_reference_count: Triples referencing unknown zones.
        dropped_rows: Input rows skipped during parsing.
        dropped_cells: Rectangular cells skipped during parsing.
        compressed: Whether the output was gzip-compressed.
    """

    output_path: Path
    layout: InputLayout
    zone_count: int
    triple_count: int
    applied_count: int
    dropped_reference_count: int
    dropped_rows: int
    dropped_cells: int
    compressed: bool
