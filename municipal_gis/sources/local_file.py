"""Local GeoJSON file source.

Reads a registry dataset's ``file_path`` (relative to
``ViewerConfig.data_root``) and normalises its coordinates. Municipal
exports are frequently left in Washington State Plane feet; those are
detected and reprojected to WGS 84 here, and the stale CRS tag is dropped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from municipal_gis.geo.reproject import normalize_collection
from municipal_gis.models.dataset import SOURCE_FILE
from municipal_gis.sources.base import DatasetReadError, DatasetSource

if TYPE_CHECKING:
    from municipal_gis.models.dataset import Dataset

logger = logging.getLogger("municipal_gis.sources.local_file")

_READ_HINT = "Check that the file exists at the specified path"


class LocalFileSource(DatasetSource):
    """Load a dataset from a GeoJSON file on disk."""

    kind = SOURCE_FILE

    def resolve_path(self, dataset: Dataset) -> Path:
        """Absolute path of the dataset's file under the data root."""
        return Path(self.config.data_root) / dataset.file_path

    def load(self, dataset: Dataset) -> dict[str, Any]:
        """Read, decode, and normalise the dataset's GeoJSON file.

        Raises:
            DatasetReadError: If the file cannot be read or is not valid JSON.
            StructuralError: If the JSON is not a FeatureCollection.
        """
        path = self.resolve_path(dataset)
        details = {"filePath": dataset.file_path, "hint": _READ_HINT}
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read local file: {exc}"
            raise DatasetReadError(dataset.id, msg, details=details) from exc

        try:
            payload = json.loads(text)
        except ValueError as exc:
            msg = f"Failed to read local file: invalid JSON ({exc})"
            raise DatasetReadError(dataset.id, msg, details=details) from exc

        normalized, transformed = normalize_collection(
            payload,
            context=self._context,
            threshold=self.config.projected_magnitude_threshold,
            source_crs=self.config.source_crs,
            target_crs=self.config.target_crs,
        )
        if transformed:
            logger.info(
                "Transformed coordinates for %s from %s to %s",
                dataset.id,
                self.config.source_crs,
                self.config.target_crs,
            )
        return normalized
