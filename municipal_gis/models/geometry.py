"""GeoJSON geometry types and payload shapes.

The viewer works on decoded GeoJSON (plain dicts and lists) because that
is what both the feature services return and the map widget consumes.
This module gives those payloads names and encodes, per geometry type,
the nesting depth of its coordinate structure so transforms can dispatch
on the declared type instead of probing array shapes.

Depths:
    ``Point`` 0 (one position), ``MultiPoint`` / ``LineString`` 1,
    ``MultiLineString`` / ``Polygon`` 2, ``MultiPolygon`` 3.
"""

from __future__ import annotations

import enum
from typing import Any, NotRequired, TypedDict

Position = list[float]


class GeometryDict(TypedDict):
    """A GeoJSON geometry object."""

    type: str
    coordinates: Any


class FeatureDict(TypedDict):
    """A GeoJSON feature object."""

    type: str
    geometry: GeometryDict | None
    properties: dict[str, Any] | None


class CrsProperties(TypedDict, total=False):
    name: str


class CrsTag(TypedDict, total=False):
    type: str
    properties: CrsProperties


class FeatureCollectionDict(TypedDict):
    """A GeoJSON feature collection, optionally carrying a legacy CRS tag."""

    type: str
    features: list[FeatureDict]
    crs: NotRequired[CrsTag]


class GeometryType(enum.Enum):
    """Geometry types found in municipal open-data feeds.

    Each member carries the nesting depth of its coordinate structure
    (number of list levels above a single position).
    """

    POINT = ("Point", 0)
    MULTI_POINT = ("MultiPoint", 1)
    LINE_STRING = ("LineString", 1)
    MULTI_LINE_STRING = ("MultiLineString", 2)
    POLYGON = ("Polygon", 2)
    MULTI_POLYGON = ("MultiPolygon", 3)

    def __init__(self, geojson_name: str, depth: int) -> None:
        self.geojson_name = geojson_name
        self.depth = depth

    @classmethod
    def from_geojson(cls, name: object) -> GeometryType | None:
        """Look up a member by its GeoJSON ``type`` string; ``None`` if unknown."""
        for member in cls:
            if member.geojson_name == name:
                return member
        return None


class MalformedGeometryError(ValueError):
    """Coordinates do not match the nesting depth of the declared type.

    Internal signal: callers catch it per feature and skip or pass the
    feature through, so one bad feature never aborts a collection.
    """


def is_position(value: object) -> bool:
    """Whether *value* is a position: a list whose first two items are numbers."""
    return (
        isinstance(value, list | tuple)
        and len(value) >= 2
        and _is_number(value[0])
        and _is_number(value[1])
    )


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)
