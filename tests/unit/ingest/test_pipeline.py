"""Unit tests for conversion orchestration."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from core.config import MtxConfig
from core.errors import MtxIngestError
from ingest.pipeline import build_request, run_conversion
from store.mtx_writer import read_mtx_file
from tests.fixture_paths import fixture_path


def test_run_conversion_sparse_example(tmp_path: Path, mtx_config: MtxConfig) -> None:
    """Sparse rows should produce the documented 2 x 2 matrix."""
    request = build_request(fixture_path("flows/sparse_basic.csv"), tmp_path / "out.mtx")

    result = run_conversion(request, mtx_config)
    contents = read_mtx_file(result.output_path)

    assert result.zone_count == 2 and result.layout == "sparse"
    assert contents.origin_zones == (1, 2)
    assert contents.matrix.reshape(-1).tolist() == [2.0, 0.0, 3.0, 0.0]
    assert (contents.header.origin_count, contents.header.destination_count) == (2, 2)


def test_run_conversion_with_zone_authority(tmp_path: Path, mtx_config: MtxConfig) -> None:
    """Authority zones should fix the dimension and drop unknown flows."""
    input_path = tmp_path / "flows.csv"
    input_path.write_text("99,1,5.0\n1,2,4.0\n", encoding="utf-8")
    request = build_request(input_path, tmp_path / "out.mtx", fixture_path("zones/zones.csv"))

    result = run_conversion(request, mtx_config)
    contents = read_mtx_file(result.output_path)

    assert result.zone_count == 3 and result.dropped_reference_count == 1
    expected = np.zeros((3, 3), dtype=np.float32)
    expected[0, 1] = 4.0
    assert np.array_equal(contents.matrix, expected)


def test_run_conversion_reports_compression(tmp_path: Path, mtx_config: MtxConfig) -> None:
    """Gzip output should be flagged in the result."""
    request = build_request(
        fixture_path("flows/rectangular_basic.csv"), tmp_path / "out.mtx.gz"
    )

    result = run_conversion(request, mtx_config)

    assert result.compressed is True and result.zone_count == 3
    assert result.dropped_cells == 2


def test_run_conversion_missing_input_writes_nothing(
    tmp_path: Path, mtx_config: MtxConfig
) -> None:
    """A missing input should abort before any output is created."""
    output_path = tmp_path / "out.mtx"
    request = build_request(tmp_path / "missing.csv", output_path)

    with pytest.raises(MtxIngestError):
        run_conversion(request, mtx_config)

    assert output_path.exists() is False
