"""Data model for a registry dataset.

A ``Dataset`` describes where a layer's features come from (a local
GeoJSON file or a remote feature-service query) and how the layer is
presented by default.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

SOURCE_FILE = "file"
SOURCE_URL = "url"


class DatasetCategory(enum.Enum):
    """Grouping used by the dataset picker."""

    ZONING = "zoning"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Dataset:
    """A single entry in the dataset registry.

    Attributes:
        id: Stable identifier used in API query strings.
        name: Display name.
        description: One-line description.
        color: Default layer colour (hex).
        default_visible: Whether the layer is visible when first added.
        category: Picker grouping.
        url: Remote feature-service query returning GeoJSON.
        file_path: Local GeoJSON path, relative to ``ViewerConfig.data_root``.
        heatmap_weight: Property used as heatmap weight, if any.
        color_property: Property used for data-driven colouring.
        use_data_driven_colors: Colour features by ``color_property``
            instead of the single layer colour.
    """

    id: str
    name: str
    description: str = ""
    color: str = "#10b981"
    default_visible: bool = False
    category: DatasetCategory = DatasetCategory.OTHER
    url: str = ""
    file_path: str = ""
    heatmap_weight: str = ""
    color_property: str = ""
    use_data_driven_colors: bool = False

    @property
    def source_kind(self) -> str:
        """``"file"`` when a local path is set, else ``"url"``, else ``""``.

        A local file takes precedence over a URL.
        """
        if self.file_path:
            return SOURCE_FILE
        if self.url:
            return SOURCE_URL
        return ""

    def to_dict(self) -> dict[str, object]:
        """Serialise for the dataset listing endpoint."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "defaultVisible": self.default_visible,
            "category": self.category.value,
            "url": self.url,
            "filePath": self.file_path,
            "heatmapWeight": self.heatmap_weight,
            "colorProperty": self.color_property,
            "useDataDrivenColors": self.use_data_driven_colors,
        }
