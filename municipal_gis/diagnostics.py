"""Layer diagnostics for the viewer's debug panel.

Summarises the loaded layers (counts, first geometry type, extent) and
flags common data problems so a blank map can be explained without
opening the browser console.

Issue labels:
- ``"Invalid type"``: payload ``type`` is not ``"FeatureCollection"``
- ``"No features array"``: ``features`` is missing or not a list
- ``"Empty features"``: the collection has no features
- ``"No geometry"``: a visible, otherwise healthy layer whose first
  feature has no geometry
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from municipal_gis.models.geometry import GeometryType
from municipal_gis.models.layer import LayerConfig

logger = logging.getLogger("municipal_gis.diagnostics")

ISSUE_INVALID_TYPE = "Invalid type"
ISSUE_NO_FEATURES_ARRAY = "No features array"
ISSUE_EMPTY_FEATURES = "Empty features"
ISSUE_NO_GEOMETRY = "No geometry"


class LayerDiagnostics(BaseModel):
    """Per-layer summary.

    Attributes:
        id: Layer id.
        name: Display name.
        visible: Whether the layer is drawn.
        has_data: Whether the layer's dataset loaded.
        feature_count: Number of features (0 without data).
        first_geometry_type: Geometry type of the first feature, if any.
        bounds: ``[min_lon, min_lat, max_lon, max_lat]`` over all readable
            geometries, or ``None``.
        issues: Data problem labels.
    """

    id: str
    name: str
    visible: bool
    has_data: bool
    feature_count: int = 0
    first_geometry_type: str | None = None
    bounds: list[float] | None = None
    issues: list[str] = Field(default_factory=list)


class ViewerDiagnostics(BaseModel):
    """Viewer-wide summary across all layers."""

    total_layers: int = 0
    layers_with_data: int = 0
    visible_layers: int = 0
    total_features: int = 0
    heatmap_enabled: bool = False
    layers: list[LayerDiagnostics] = Field(default_factory=list)


def diagnose_layers(
    layers: Iterable[LayerConfig],
    *,
    heatmap_enabled: bool = False,
) -> ViewerDiagnostics:
    """Build the viewer summary for *layers*."""
    details = [diagnose_layer(layer) for layer in layers]
    summary = ViewerDiagnostics(
        total_layers=len(details),
        layers_with_data=sum(1 for d in details if d.has_data),
        visible_layers=sum(1 for d in details if d.visible and d.has_data),
        total_features=sum(d.feature_count for d in details),
        heatmap_enabled=heatmap_enabled,
        layers=details,
    )
    flagged = [d.id for d in details if d.issues]
    if flagged:
        logger.warning("Layers with data issues: %s", ", ".join(flagged))
    return summary


def diagnose_layer(layer: LayerConfig) -> LayerDiagnostics:
    """Summarise one layer."""
    data = layer.data
    if data is None:
        return LayerDiagnostics(id=layer.id, name=layer.name, visible=layer.visible, has_data=False)

    issues = find_issues(data, visible=layer.visible)
    features = data.get("features")
    features = features if isinstance(features, list) else []

    first_type = None
    if features and isinstance(features[0], Mapping):
        geometry = features[0].get("geometry")
        if isinstance(geometry, Mapping):
            first_type = geometry.get("type")

    return LayerDiagnostics(
        id=layer.id,
        name=layer.name,
        visible=layer.visible,
        has_data=True,
        feature_count=len(features),
        first_geometry_type=first_type if isinstance(first_type, str) else None,
        bounds=collection_bounds(features),
        issues=issues,
    )


def find_issues(data: Mapping[str, Any], *, visible: bool) -> list[str]:
    """Return the data problem labels for a loaded payload."""
    issues: list[str] = []
    if data.get("type") != "FeatureCollection":
        issues.append(ISSUE_INVALID_TYPE)
    features = data.get("features")
    if not isinstance(features, list):
        issues.append(ISSUE_NO_FEATURES_ARRAY)
    elif not features:
        issues.append(ISSUE_EMPTY_FEATURES)

    if visible and not issues:
        first = features[0]  # type: ignore[index]
        if not isinstance(first, Mapping) or not first.get("geometry"):
            issues.append(ISSUE_NO_GEOMETRY)
    return issues


def collection_bounds(features: list[Any]) -> list[float] | None:
    """Combined bounds of all readable geometries, or ``None`` if there are none.

    Geometries shapely cannot build (unsupported types, malformed
    coordinates) are ignored.
    """
    from shapely.errors import GEOSException
    from shapely.geometry import shape

    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    found = False
    for feature in features:
        geometry = feature.get("geometry") if isinstance(feature, Mapping) else None
        if not isinstance(geometry, Mapping):
            continue
        if GeometryType.from_geojson(geometry.get("type")) is None:
            continue
        try:
            geom = shape(geometry)
        except (GEOSException, ValueError, TypeError, IndexError, KeyError, AttributeError):
            continue
        if geom.is_empty:
            continue
        x0, y0, x1, y1 = geom.bounds
        min_x, min_y = min(min_x, x0), min(min_y, y0)
        max_x, max_y = max(max_x, x1), max(max_y, y1)
        found = True

    if not found:
        return None
    return [min_x, min_y, max_x, max_y]
