"""Structural validation for untrusted GeoJSON payloads.

Responsibilities:
- Check the FeatureCollection envelope (``type`` literal, ``features`` list)
- Read the optional legacy CRS tag
- Locate the first position of a collection (used by CRS detection)

Only the envelope is validated here. Individual features are checked
lazily by the transforms, which skip or pass through bad features
instead of failing the whole collection.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from municipal_gis.core.exceptions import ContractError
from municipal_gis.models.geometry import is_position

FEATURE_COLLECTION = "FeatureCollection"


class StructuralError(ContractError):
    """Raised when a payload is not a GeoJSON FeatureCollection."""

    default_stage = "validate"
    default_code = "INVALID_FEATURE_COLLECTION"


def validate_feature_collection(payload: object, *, stage: str = "") -> dict[str, Any]:
    """Return *payload* if it is a FeatureCollection with a features list.

    Args:
        payload: Decoded JSON of unknown shape.
        stage: Stage name recorded on the raised error.

    Raises:
        StructuralError: If ``type`` is not ``"FeatureCollection"`` or
            ``features`` is not a list.
    """
    if not isinstance(payload, Mapping) or payload.get("type") != FEATURE_COLLECTION:
        found = payload.get("type") if isinstance(payload, Mapping) else type(payload).__name__
        msg = f"Expected a GeoJSON FeatureCollection, got {found!r}"
        raise StructuralError(msg, stage=stage)
    if not isinstance(payload.get("features"), list):
        msg = "FeatureCollection has no features array"
        raise StructuralError(msg, stage=stage)
    return payload  # type: ignore[return-value]


def crs_name(collection: Mapping[str, Any]) -> str:
    """Return ``crs.properties.name`` or ``""`` when the tag is absent."""
    crs = collection.get("crs")
    if not isinstance(crs, Mapping):
        return ""
    props = crs.get("properties")
    if not isinstance(props, Mapping):
        return ""
    name = props.get("name")
    return name if isinstance(name, str) else ""


def first_position(collection: Mapping[str, Any]) -> list[float] | None:
    """Return the first position of the first feature, or ``None``.

    Descends the first element of each nesting level until it reaches a
    list whose first item is a number.
    """
    features = collection.get("features")
    if not isinstance(features, list) or not features:
        return None
    first = features[0]
    if not isinstance(first, Mapping):
        return None
    geometry = first.get("geometry")
    if not isinstance(geometry, Mapping):
        return None

    coords = geometry.get("coordinates")
    while isinstance(coords, list) and coords and isinstance(coords[0], list):
        coords = coords[0]
    return coords if is_position(coords) else None
