"""Data models and schemas.

Defines the data structures used throughout the viewer backend:
- GeometryType: Supported GeoJSON geometry types and their nesting depth
- WeightedPoint: Heatmap sample extracted from a feature
- Dataset: Registry entry describing a layer's data source
- LayerConfig: Loaded layer with presentation state
"""

from municipal_gis.models.dataset import Dataset, DatasetCategory
from municipal_gis.models.geometry import (
    FeatureCollectionDict,
    FeatureDict,
    GeometryDict,
    GeometryType,
    MalformedGeometryError,
)
from municipal_gis.models.heatmap import WeightedPoint
from municipal_gis.models.layer import LayerConfig

__all__ = [
    "Dataset",
    "DatasetCategory",
    "FeatureCollectionDict",
    "FeatureDict",
    "GeometryDict",
    "GeometryType",
    "LayerConfig",
    "MalformedGeometryError",
    "WeightedPoint",
]
