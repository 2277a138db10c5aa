"""Data model for a heatmap sample.

A ``WeightedPoint`` is the unit produced by reducing a feature to a
single location for density rendering. It keeps no reference back to
the feature it came from.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WeightedPoint:
    """A single weighted location in WGS 84.

    Attributes:
        lat: Latitude in degrees.
        lng: Longitude in degrees.
        weight: Relative intensity. Defaults to ``1.0``.
    """

    lat: float
    lng: float
    weight: float = 1.0

    def to_dict(self) -> dict[str, float]:
        """Serialise to a plain dict."""
        return {"lat": self.lat, "lng": self.lng, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> WeightedPoint:
        """Deserialise from a plain dict; ``weight`` defaults to ``1.0``.

        Raises:
            TypeError: If ``lat`` or ``lng`` is missing or not numeric.
        """
        try:
            lat = float(data["lat"])  # type: ignore[arg-type]
            lng = float(data["lng"])  # type: ignore[arg-type]
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"WeightedPoint requires numeric lat/lng, got {data!r}"
            raise TypeError(msg) from exc
        weight = float(data.get("weight", 1.0))  # type: ignore[arg-type]
        return cls(lat=lat, lng=lng, weight=weight)
