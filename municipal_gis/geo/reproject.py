"""Coordinate reprojection for feature collections.

Transforms every position of every feature from a projected CRS (by
default Washington State Plane North, ``EPSG:2926``) to WGS 84
(``EPSG:4326``) and decides whether a collection needs that at all.

Dispatch is keyed on the declared geometry type: each type has a fixed
nesting depth, and positions are only expected at that depth. A feature
whose coordinates disagree with its declared type is passed through
unchanged rather than guessed at.

Trailing position elements (elevation, measure) are carried over as the
same objects, so they are bit-identical after reprojection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from municipal_gis.core.constants import (
    PROJECTED_MAGNITUDE_THRESHOLD,
    STATE_PLANE_CRS,
    STATE_PLANE_EPSG_CODE,
    WGS84_CRS,
)
from municipal_gis.core.projection import ProjectionContext, default_projection_context
from municipal_gis.geo.validation import (
    FEATURE_COLLECTION,
    crs_name,
    first_position,
    validate_feature_collection,
)
from municipal_gis.models.geometry import GeometryType, MalformedGeometryError, is_position

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger("municipal_gis.geo.reproject")

# Top-level members that no longer describe the data after reprojection.
_STALE_MEMBERS = frozenset({"crs", "bbox"})


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def needs_reprojection(
    collection: Mapping[str, Any],
    *,
    threshold: float = PROJECTED_MAGNITUDE_THRESHOLD,
) -> bool:
    """Decide whether *collection* is expressed in the State Plane CRS.

    A collection needs reprojection if its CRS tag names ``2926``, or,
    failing that, if the first position of its first feature has an
    absolute x or y above *threshold*. Geographic degrees never exceed
    180 / 90, so large magnitudes indicate projected feet or metres.
    """
    name = crs_name(collection)
    if name and STATE_PLANE_EPSG_CODE in name.lower():
        return True

    position = first_position(collection)
    if position is None:
        return False
    x, y = position[0], position[1]
    return abs(x) > threshold or abs(y) > threshold


# ---------------------------------------------------------------------------
# Reprojection
# ---------------------------------------------------------------------------


def reproject(
    collection: Mapping[str, Any],
    source_crs: str = STATE_PLANE_CRS,
    target_crs: str = WGS84_CRS,
    *,
    context: ProjectionContext | None = None,
) -> dict[str, Any]:
    """Return a copy of *collection* with every position reprojected.

    Args:
        collection: A GeoJSON FeatureCollection.
        source_crs: CRS the positions are currently expressed in.
        target_crs: CRS to transform them to.
        context: Projection definitions; defaults to the process-wide
            State Plane / WGS 84 context.

    Returns:
        A new FeatureCollection. Features without geometry or coordinates,
        with an unknown geometry type, or whose coordinates do not match
        their declared type are returned unchanged. The ``crs`` and
        ``bbox`` members are dropped; other top-level members are kept.

    Raises:
        StructuralError: If *collection* is not a FeatureCollection.
        UnsupportedCRSError: If either CRS is not defined in *context*.
    """
    validate_feature_collection(collection, stage="reproject")
    context = context or default_projection_context()
    transformer = context.transformer(source_crs, target_crs)

    def transform(x: float, y: float) -> tuple[float, float]:
        return transformer.transform(x, y)  # type: ignore[no-any-return]

    features = [_reproject_feature(f, transform) for f in collection["features"]]

    result = {k: v for k, v in collection.items() if k not in _STALE_MEMBERS}
    result["type"] = FEATURE_COLLECTION
    result["features"] = features

    logger.debug(
        "Reprojected collection | features=%d | from=%s | to=%s",
        len(features),
        source_crs,
        target_crs,
    )
    return result


def normalize_collection(
    collection: Mapping[str, Any],
    *,
    context: ProjectionContext | None = None,
    threshold: float = PROJECTED_MAGNITUDE_THRESHOLD,
    source_crs: str = STATE_PLANE_CRS,
    target_crs: str = WGS84_CRS,
) -> tuple[dict[str, Any], bool]:
    """Reproject *collection* to WGS 84 only if detection says it is projected.

    Returns:
        ``(collection, transformed)``. When no transform is needed the
        input is returned as-is (including any CRS tag).

    Raises:
        StructuralError: If *collection* is not a FeatureCollection.
    """
    validate_feature_collection(collection, stage="normalize")
    if not needs_reprojection(collection, threshold=threshold):
        return dict(collection), False

    logger.info(
        "Transforming coordinates | from=%s | to=%s | features=%d | crs_tag=%s",
        source_crs,
        target_crs,
        len(collection["features"]),
        crs_name(collection) or "-",
    )
    return reproject(collection, source_crs, target_crs, context=context), True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _reproject_feature(
    feature: Any,
    transform: Callable[[float, float], tuple[float, float]],
) -> Any:
    """Reproject one feature, or return it unchanged if it has no usable geometry."""
    if not isinstance(feature, dict):
        return feature
    geometry = feature.get("geometry")
    if not isinstance(geometry, dict) or geometry.get("coordinates") is None:
        return feature

    geometry_type = GeometryType.from_geojson(geometry.get("type"))
    if geometry_type is None:
        logger.debug("Passing through feature with geometry type %r", geometry.get("type"))
        return feature

    try:
        coords = map_positions(geometry["coordinates"], geometry_type.depth, transform)
    except MalformedGeometryError as exc:
        logger.warning(
            "Passing through malformed %s geometry | id=%s | reason=%s",
            geometry_type.geojson_name,
            feature.get("id", "-"),
            exc,
        )
        return feature

    return {**feature, "geometry": {**geometry, "coordinates": coords}}


def map_positions(
    coords: Any,
    depth: int,
    transform: Callable[[float, float], tuple[float, float]],
) -> list[Any]:
    """Apply *transform* to every position of a coordinate structure.

    Args:
        coords: Nested coordinate lists.
        depth: Number of list levels above a position (``GeometryType.depth``).
        transform: Maps ``(x, y)`` to ``(x', y')``.

    Raises:
        MalformedGeometryError: If a position is not found exactly at *depth*.
    """
    if depth == 0:
        if not is_position(coords):
            msg = f"expected a position, got {coords!r}"
            raise MalformedGeometryError(msg)
        x, y, *rest = coords
        try:
            new_x, new_y = transform(x, y)
        except OverflowError as exc:
            msg = "coordinate is out of floating-point range"
            raise MalformedGeometryError(msg) from exc
        return [new_x, new_y, *rest]

    if not isinstance(coords, list | tuple):
        msg = f"expected a list at depth {depth}, got {type(coords).__name__}"
        raise MalformedGeometryError(msg)
    return [map_positions(c, depth - 1, transform) for c in coords]
