"""Public SDK surface for csv-to-mtx.

This module provides a stable import path for library users.
It re-exports the conversion entry point and typed models.
"""

from __future__ import annotations

from core.config import MtxConfig
from core.types import (
    ConversionRequest,
    ConversionResult,
    FlowReadResult,
    FlowTriple,
    MatrixAssembly,
    MtxContents,
    MtxHeader,
)
from ingest.input_reader import read_flow_triples
from ingest.pipeline import build_request, run_conversion
from ingest.zone_resolver import resolve_zones
from matrix.assembler import assemble_matrix
from store.mtx_writer import read_mtx_file, write_mtx_file

__all__ = [
    "ConversionRequest",
    "ConversionResult",
    "FlowReadResult",
    "FlowTriple",
    "MatrixAssembly",
    "MtxConfig",
    "MtxContents",
    "MtxHeader",
    "assemble_matrix",
    "build_request",
    "read_flow_triples",
    "read_mtx_file",
    "resolve_zones",
    "run_conversion",
    "write_mtx_file",
]
