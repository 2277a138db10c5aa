"""Layer colouring rules.

Zoning layers are coloured by their base zone code. The palette groups
codes by land-use family (residential blues and greens, commercial
oranges, industrial greys, mixed-use purples).

A layer's paint colour is chosen in priority order:
1. a colour property already carried by the features (``fill``, ``stroke``, ...)
2. a MapLibre ``match`` expression over the layer's ``color_property``
3. the single layer colour
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from municipal_gis.models.layer import LayerConfig

ZONING_COLORS: dict[str, str] = {
    # Residential
    "LR1": "#e3f2fd",
    "LR2": "#90caf9",
    "LR3": "#42a5f5",
    "MR": "#1e88e5",
    "HR": "#1565c0",
    "NC1": "#c8e6c9",
    "NC2": "#81c784",
    "NC3": "#4caf50",
    "SF": "#fff9c4",
    "RSL": "#fff59d",
    # Commercial
    "NC": "#ffccbc",
    "C1": "#ffab91",
    "C2": "#ff7043",
    "DMR": "#f48fb1",
    # Industrial
    "IG1": "#b0bec5",
    "IG2": "#78909c",
    "IC": "#546e7a",
    # Mixed use
    "SM": "#ce93d8",
    "PM": "#ba68c8",
}

# Feature properties that already carry a colour, in lookup order.
COLOR_PROPERTY_NAMES: tuple[str, ...] = (
    "fill",
    "fillColor",
    "stroke",
    "strokeColor",
    "color",
    "marker-color",
)


def detect_color_property(collection: Mapping[str, Any]) -> str | None:
    """Name of the colour property set on the first feature, if any."""
    features = collection.get("features")
    if not isinstance(features, list) or not features:
        return None
    first = features[0]
    properties = first.get("properties") if isinstance(first, Mapping) else None
    if not isinstance(properties, Mapping):
        return None
    for name in COLOR_PROPERTY_NAMES:
        if properties.get(name):
            return name
    return None


def data_driven_color_expression(color_property: str, default: str) -> list[Any]:
    """MapLibre ``match`` expression colouring by *color_property*."""
    expression: list[Any] = ["match", ["get", color_property]]
    for code, color in ZONING_COLORS.items():
        expression.extend([code, color])
    expression.append(default)
    return expression


def layer_fill_color(layer: LayerConfig) -> str | list[Any]:
    """Paint value for *layer*: feature colour, data-driven match, or layer colour."""
    carried = detect_color_property(layer.data) if layer.data is not None else None
    if carried:
        return ["get", carried]
    if layer.use_data_driven_colors and layer.color_property:
        return data_driven_color_expression(layer.color_property, layer.color)
    return layer.color


def layer_style(layer: LayerConfig) -> dict[str, Any]:
    """Serialise the presentation state of *layer* for the map widget."""
    return {
        "id": layer.id,
        "name": layer.name,
        "visible": layer.visible,
        "hasData": layer.has_data,
        "opacity": layer.opacity,
        "fillColor": layer_fill_color(layer),
    }
