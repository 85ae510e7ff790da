"""Conversion orchestration for CSV to MTX runs.

This module coordinates flow reading, zone resolution, matrix
assembly, and container writes for a single batch conversion.
"""

from __future__ import annotations

from pathlib import Path

from core.config import MtxConfig
from core.logging_config import get_logger
from core.types import ConversionRequest, ConversionResult
from ingest.input_reader import read_flow_triples
from ingest.zone_resolver import resolve_zones
from matrix.assembler import assemble_matrix
from store.mtx_writer import is_compressed_path, write_mtx_file

_LOGGER = get_logger(__name__)


class ConversionPipelineRunner:
    """Runner for one CSV to MTX conversion.

    Stages run strictly forward: reader, resolver, assembler, writer.
    Any fatal I/O error propagates and no result is returned.
    """

    def __init__(self, request: ConversionRequest, config: MtxConfig) -> None:
        self._request = request
        self._config = config

    def run(self) -> ConversionResult:
        """Execute the conversion and return its summary."""
        read_result = read_flow_triples(self._request.input_path, self._config)
        zones = resolve_zones(read_result.triples, self._request.zone_path, self._config)
        assembly = assemble_matrix(read_result.triples, zones)
        output_path = write_mtx_file(
            self._request.output_path, assembly.zones, assembly.matrix, self._config
        )
        result = ConversionResult(
            output_path=output_path,
            layout=read_result.layout,
            zone_count=assembly.zone_count,
            triple_count=len(read_result.triples),
            applied_count=assembly.applied_count,
            dropped_reference_count=assembly.dropped_count,
            dropped_rows=read_result.dropped_rows,
            dropped_cells=read_result.dropped_cells,
            compressed=is_compressed_path(output_path),
        )
        _log_conversion_completion(self._request, result)
        return result


def run_conversion(request: ConversionRequest, config: MtxConfig) -> ConversionResult:
    """Convert a flow CSV into an MTX container.

    Args:
        request: Input, output, and optional zone authority paths.
        config: Runtime configuration.

    Returns:
        Summary of the written container.

    Raises:
        MtxIngestError: If the input or zone file cannot be read.
        MtxWriteError: If the output cannot be written.
    """
    return ConversionPipelineRunner(request, config).run()


def build_request(
    input_path: str | Path,
    output_path: str | Path,
    zone_path: str | Path | None = None,
) -> ConversionRequest:
    """Build a conversion request from raw path values."""
    return ConversionRequest(
        input_path=Path(input_path).expanduser(),
        output_path=Path(output_path).expanduser(),
        zone_path=Path(zone_path).expanduser() if zone_path is not None else None,
    )


def _log_conversion_completion(request: ConversionRequest, result: ConversionResult) -> None:
    """Log conversion completion with contextual metadata."""
    _LOGGER.info(
        "conversion_completed",
        input_path=str(request.input_path),
        output_path=str(result.output_path),
        zone_path=str(request.zone_path) if request.zone_path is not None else None,
        layout=result.layout,
        zone_count=result.zone_count,
        triple_count=result.triple_count,
        applied_count=result.applied_count,
        dropped_reference_count=result.dropped_reference_count,
        dropped_rows=result.dropped_rows,
        dropped_cells=result.dropped_cells,
        compressed=result.compressed,
    )
