"""Unit tests for zone set resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import MtxConfig
from core.errors import MtxIngestError
from core.types import FlowTriple
from ingest.zone_resolver import extract_zones, read_zone_authority, resolve_zones
from tests.fixture_paths import fixture_path


def test_extract_zones_is_sorted_and_unique() -> None:
    """Zones derived from flows should be strictly ascending."""
    triples = [FlowTriple(30, 10, 1.0), FlowTriple(10, 20, 2.0), FlowTriple(20, 30, 0.0)]

    zones = extract_zones(triples)

    assert zones == (10, 20, 30)
    assert all(left < right for left, right in zip(zones, zones[1:]))


def test_extract_zones_ignores_triple_order() -> None:
    """Reordering the flows should not change the zone set."""
    triples = [FlowTriple(5, 1, 1.0), FlowTriple(3, 5, 1.0), FlowTriple(1, 9, 1.0)]

    assert extract_zones(triples) == extract_zones(list(reversed(triples)))


def test_read_zone_authority_skips_header_and_bad_rows(mtx_config: MtxConfig) -> None:
    """Authority ids should be read from the first column and sorted."""
    zones = read_zone_authority(fixture_path("zones/zones.csv"), mtx_config)

    assert zones == (1, 2, 3)


def test_read_zone_authority_keeps_duplicates(tmp_path: Path, mtx_config: MtxConfig) -> None:
    """Duplicate authority ids are trusted as listed."""
    zone_path = tmp_path / "zones.csv"
    zone_path.write_text("zone\n4\n2\n4\n", encoding="utf-8")

    assert read_zone_authority(zone_path, mtx_config) == (2, 4, 4)


def test_resolve_zones_prefers_authority(mtx_config: MtxConfig) -> None:
    """An authority file should replace zones derived from flows."""
    triples = [FlowTriple(99, 1, 5.0)]

    zones = resolve_zones(triples, fixture_path("zones/zones.csv"), mtx_config)

    assert zones == (1, 2, 3)


def test_resolve_zones_without_authority_uses_flows(mtx_config: MtxConfig) -> None:
    """Without an authority the flow endpoints define the zones."""
    zones = resolve_zones([FlowTriple(2, 7, 1.0)], None, mtx_config)

    assert zones == (2, 7)


def test_read_zone_authority_raises_for_missing_file(
    tmp_path: Path, mtx_config: MtxConfig
) -> None:
    """A missing authority file is fatal."""
    with pytest.raises(MtxIngestError):
        read_zone_authority(tmp_path / "missing.csv", mtx_config)


def test_read_zone_authority_drops_padded_and_underscored_ids(
    tmp_path: Path, mtx_config: MtxConfig
) -> None:
    """Authority ids must be plain ASCII integers."""
    zone_path = tmp_path / "zones.csv"
    zone_path.write_text("zone\n1_0\n 4\n6\n", encoding="utf-8")

    assert read_zone_authority(zone_path, mtx_config) == (6,)
