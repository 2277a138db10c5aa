"""Shared pytest fixtures for the Municipal GIS Viewer test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from municipal_gis.core.config import ViewerConfig

# ---------------------------------------------------------------------------
# Reference coordinates
# ---------------------------------------------------------------------------

# Downtown Seattle in WGS 84 (lon, lat).
SEATTLE_LON_LAT = (-122.33, 47.60)

# Approximate Washington State Plane North (US ft) positions around Seattle.
STATE_PLANE_RING = [
    [1_270_000.0, 220_000.0],
    [1_272_000.0, 220_000.0],
    [1_272_000.0, 222_000.0],
    [1_270_000.0, 222_000.0],
    [1_270_000.0, 220_000.0],
]

ZONING_FILE = "public/data/zoning.geojson"


def make_feature(
    geometry: dict[str, Any] | None,
    properties: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a GeoJSON feature."""
    return {"type": "Feature", "geometry": geometry, "properties": properties or {}}


def make_collection(*features: dict[str, Any], **members: Any) -> dict[str, Any]:
    """Build a GeoJSON FeatureCollection with optional extra top-level members."""
    return {"type": "FeatureCollection", "features": list(features), **members}


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


@pytest.fixture()
def geographic_collection() -> dict[str, Any]:
    """A small WGS 84 collection with one feature of each supported type."""
    return make_collection(
        make_feature({"type": "Point", "coordinates": [-122.33, 47.60]}, {"count": "3"}),
        make_feature(
            {
                "type": "Polygon",
                "coordinates": [
                    [[-122.34, 47.61], [-122.32, 47.61], [-122.32, 47.62], [-122.34, 47.61]]
                ],
            },
            {"count": 2},
        ),
        make_feature(
            {"type": "LineString", "coordinates": [[-122.30, 47.60], [-122.31, 47.61]]},
        ),
    )


@pytest.fixture()
def state_plane_collection() -> dict[str, Any]:
    """A State Plane zoning export, tagged with its CRS as ArcGIS writes it."""
    return make_collection(
        make_feature(
            {"type": "Polygon", "coordinates": [STATE_PLANE_RING]},
            {"BASE_ZONE": "NC2", "ZONELUT": "NC2-40"},
        ),
        crs={"type": "name", "properties": {"name": "urn:ogc:def:crs:EPSG::2926"}},
    )


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture()
def data_root(tmp_path: Path, state_plane_collection: dict[str, Any]) -> Path:
    """A data root containing the zoning export at its registry path."""
    target = tmp_path / ZONING_FILE
    target.parent.mkdir(parents=True)
    target.write_text(json.dumps(state_plane_collection), encoding="utf-8")
    return tmp_path


@pytest.fixture()
def viewer_config(data_root: Path) -> ViewerConfig:
    """Viewer configuration pointing at the temporary data root."""
    return ViewerConfig(data_root=str(data_root))
