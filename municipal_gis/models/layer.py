"""Data model for a map layer.

A ``LayerConfig`` pairs a registry dataset with its loaded features and
the presentation state the viewer tracks (visibility, colour, opacity).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from municipal_gis.core.constants import DEFAULT_LAYER_OPACITY


@dataclass(frozen=True, slots=True)
class LayerConfig:
    """A single map layer.

    Attributes:
        id: Dataset id the layer was built from.
        name: Display name.
        visible: Whether the layer is drawn (and contributes to the heatmap).
        color: Single fill/stroke colour.
        opacity: Fill opacity in ``[0, 1]``.
        data: Loaded feature collection, or ``None`` if loading failed.
        color_property: Property used for data-driven colouring.
        use_data_driven_colors: Colour by ``color_property``.
    """

    id: str
    name: str
    visible: bool = True
    color: str = "#10b981"
    opacity: float = DEFAULT_LAYER_OPACITY
    data: dict[str, Any] | None = None
    color_property: str = ""
    use_data_driven_colors: bool = False

    @property
    def has_data(self) -> bool:
        return self.data is not None

    def with_visibility(self, visible: bool) -> LayerConfig:
        """Return a copy with ``visible`` replaced."""
        return replace(self, visible=visible)
