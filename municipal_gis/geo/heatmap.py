"""Heatmap point reduction.

Reduces feature collections (already in WGS 84) to one weighted point per
feature and wraps the result as a minimal Point FeatureCollection for a
density layer.

Point selection by geometry type:
- ``Point``: the position itself.
- ``Polygon``: unweighted mean of the outer ring's vertices. The closing
  vertex counts, holes are ignored. This is a vertex mean, not an area
  centroid.
- ``MultiPolygon``: the same rule applied to the first member only.
- Everything else (lines, multipoints, missing or malformed geometry) is
  skipped without error.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from municipal_gis.geo.validation import FEATURE_COLLECTION
from municipal_gis.models.geometry import GeometryType, MalformedGeometryError, is_position
from municipal_gis.models.heatmap import WeightedPoint

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from municipal_gis.models.layer import LayerConfig

logger = logging.getLogger("municipal_gis.geo.heatmap")

DEFAULT_WEIGHT = 1.0

# Leading decimal literal, as accepted by a lenient float parse ("7.5 trees" -> 7.5).
_NUMERIC_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_points(
    collection: Mapping[str, Any],
    weight_property: str | None = None,
) -> list[WeightedPoint]:
    """Extract one weighted point per supported feature, in input order.

    Args:
        collection: A GeoJSON FeatureCollection in WGS 84.
        weight_property: Feature property holding the weight. Missing,
            empty, or non-numeric values fall back to ``1``.

    Returns:
        Points for Point, Polygon and MultiPolygon features. Skipped
        features leave no placeholder.
    """
    features = collection.get("features")
    if not isinstance(features, list):
        return []

    points: list[WeightedPoint] = []
    skipped = 0
    for feature in features:
        point = _feature_point(feature, weight_property)
        if point is None:
            skipped += 1
            continue
        points.append(point)

    logger.debug(
        "Extracted heatmap points | points=%d | skipped=%d | weight_property=%s",
        len(points),
        skipped,
        weight_property or "-",
    )
    return points


def build_point_collection(points: Iterable[WeightedPoint | Mapping[str, Any]]) -> dict[str, Any]:
    """Wrap weighted points as a Point FeatureCollection.

    Each point becomes a feature with coordinates ``[lng, lat]`` and
    properties containing only ``weight``.
    """
    features = []
    for raw in points:
        point = raw if isinstance(raw, WeightedPoint) else WeightedPoint.from_dict(dict(raw))
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [point.lng, point.lat]},
                "properties": {"weight": point.weight},
            }
        )
    return {"type": FEATURE_COLLECTION, "features": features}


def aggregate_layers(
    layers: Iterable[LayerConfig],
    weight_property: str | None = None,
) -> dict[str, Any] | None:
    """Merge the points of every visible layer that has data.

    Points are concatenated in layer order with no deduplication and no
    weight merging.

    Returns:
        A Point FeatureCollection, or ``None`` if no layer contributed a point.
    """
    merged: list[WeightedPoint] = []
    contributing = 0
    for layer in layers:
        if not layer.visible or layer.data is None:
            continue
        points = extract_points(layer.data, weight_property)
        if points:
            contributing += 1
        merged.extend(points)

    if not merged:
        return None

    logger.info(
        "Heatmap aggregated | layers=%d | points=%d",
        contributing,
        len(merged),
    )
    return build_point_collection(merged)


def parse_weight(value: object) -> float:
    """Coerce a property value to a heatmap weight.

    Numbers are used as-is; strings are read up to the end of their
    leading decimal literal. Missing, empty, non-numeric, non-finite,
    zero, or negative values give ``1.0``.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_WEIGHT
    try:
        if isinstance(value, int | float):
            number = float(value)
        else:
            match = _NUMERIC_PREFIX.match(str(value))
            if match is None:
                return DEFAULT_WEIGHT
            number = float(match.group())
    except OverflowError:
        return DEFAULT_WEIGHT

    if not math.isfinite(number) or number <= 0:
        return DEFAULT_WEIGHT
    return number


# ---------------------------------------------------------------------------
# Geometry-specific point selection
# ---------------------------------------------------------------------------


def _point_position(coords: Any) -> tuple[float, float]:
    if not is_position(coords):
        msg = "Point has no position"
        raise MalformedGeometryError(msg)
    return (_as_float(coords[0]), _as_float(coords[1]))


def _as_float(value: float) -> float:
    try:
        return float(value)
    except OverflowError as exc:
        msg = "coordinate is out of floating-point range"
        raise MalformedGeometryError(msg) from exc


def _polygon_position(coords: Any) -> tuple[float, float]:
    if not isinstance(coords, list) or not coords:
        msg = "Polygon has no rings"
        raise MalformedGeometryError(msg)
    return _vertex_mean(coords[0])


def _multipolygon_position(coords: Any) -> tuple[float, float]:
    if not isinstance(coords, list) or not coords:
        msg = "MultiPolygon has no members"
        raise MalformedGeometryError(msg)
    return _polygon_position(coords[0])


_POSITION_EXTRACTORS: dict[GeometryType, Callable[[Any], tuple[float, float]]] = {
    GeometryType.POINT: _point_position,
    GeometryType.POLYGON: _polygon_position,
    GeometryType.MULTI_POLYGON: _multipolygon_position,
}


def _vertex_mean(ring: Any) -> tuple[float, float]:
    """Arithmetic mean of a ring's vertices as ``(lng, lat)``."""
    if not isinstance(ring, list) or not ring:
        msg = "ring is empty"
        raise MalformedGeometryError(msg)
    sum_lng = 0.0
    sum_lat = 0.0
    for vertex in ring:
        if not is_position(vertex):
            msg = f"ring vertex is not a position: {vertex!r}"
            raise MalformedGeometryError(msg)
        sum_lng += _as_float(vertex[0])
        sum_lat += _as_float(vertex[1])
    return (sum_lng / len(ring), sum_lat / len(ring))


def _feature_point(feature: Any, weight_property: str | None) -> WeightedPoint | None:
    """Reduce one feature to a weighted point, or ``None`` to skip it."""
    if not isinstance(feature, Mapping):
        return None
    geometry = feature.get("geometry")
    if not isinstance(geometry, Mapping):
        return None

    geometry_type = GeometryType.from_geojson(geometry.get("type"))
    extractor = _POSITION_EXTRACTORS.get(geometry_type) if geometry_type else None
    if extractor is None:
        return None

    try:
        lng, lat = extractor(geometry.get("coordinates"))
    except MalformedGeometryError as exc:
        logger.warning(
            "Skipping malformed %s geometry | id=%s | reason=%s",
            geometry_type.geojson_name,  # type: ignore[union-attr]
            feature.get("id", "-"),
            exc,
        )
        return None

    weight = DEFAULT_WEIGHT
    if weight_property:
        properties = feature.get("properties")
        if isinstance(properties, Mapping):
            weight = parse_weight(properties.get(weight_property))

    return WeightedPoint(lat=lat, lng=lng, weight=weight)
