"""Coordinate normalisation and heatmap reduction.

The two composable transforms at the centre of the viewer:
- **reproject**: detect State Plane data and reproject it to WGS 84
- **heatmap**: reduce features to weighted points for density rendering

Both are pure functions over decoded GeoJSON. Only a payload that is not
a FeatureCollection raises; individual bad features are skipped or
passed through so one malformed feature never aborts a collection.
"""

from municipal_gis.geo.heatmap import (
    DEFAULT_WEIGHT,
    aggregate_layers,
    build_point_collection,
    extract_points,
    parse_weight,
)
from municipal_gis.geo.reproject import (
    map_positions,
    needs_reprojection,
    normalize_collection,
    reproject,
)
from municipal_gis.geo.validation import (
    StructuralError,
    crs_name,
    first_position,
    validate_feature_collection,
)

__all__ = [
    "DEFAULT_WEIGHT",
    "StructuralError",
    "aggregate_layers",
    "build_point_collection",
    "crs_name",
    "extract_points",
    "first_position",
    "map_positions",
    "needs_reprojection",
    "normalize_collection",
    "parse_weight",
    "reproject",
    "validate_feature_collection",
]
