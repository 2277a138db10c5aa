"""Dataset source adapters.

Implements the source-agnostic adapter pattern (Strategy pattern):
- DatasetSource: Abstract base class defining the interface
- LocalFileSource: GeoJSON exports on disk (reprojected when needed)
- FeatureServiceSource: Live ArcGIS feature-service queries via httpx

The source is selected from the registry entry, so adding a dataset
never requires code changes here.
"""

from municipal_gis.sources.base import (
    DatasetConfigError,
    DatasetFetchError,
    DatasetReadError,
    DatasetSource,
    DatasetSourceError,
)
from municipal_gis.sources.factory import get_source

__all__ = [
    "DatasetConfigError",
    "DatasetFetchError",
    "DatasetReadError",
    "DatasetSource",
    "DatasetSourceError",
    "get_source",
]
