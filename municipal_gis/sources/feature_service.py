"""Remote ArcGIS feature-service source.

Queries a registry dataset's ``url`` with ``httpx`` and returns the
decoded GeoJSON body. Feature services are asked for ``f=geojson``,
which they already serve in WGS 84, so no reprojection is applied.

No retries: a failed request surfaces as ``DatasetFetchError`` carrying
the upstream status, and the caller decides what "no data" means.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from municipal_gis.models.dataset import SOURCE_URL
from municipal_gis.sources.base import DatasetFetchError, DatasetSource

if TYPE_CHECKING:
    from municipal_gis.models.dataset import Dataset

logger = logging.getLogger("municipal_gis.sources.feature_service")


class FeatureServiceSource(DatasetSource):
    """Load a dataset from a remote GeoJSON endpoint."""

    kind = SOURCE_URL

    def load(self, dataset: Dataset) -> dict[str, Any]:
        """Fetch and decode the dataset's remote GeoJSON.

        Raises:
            DatasetFetchError: On network failure, a non-2xx response, or
                a body that is not JSON.
        """
        url = dataset.url
        headers = {
            "Accept": "application/json",
            "User-Agent": self.config.fetch_user_agent,
        }
        try:
            with httpx.Client(
                timeout=self.config.fetch_timeout_s, follow_redirects=True
            ) as client:
                response = client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            msg = f"Failed to fetch data: {exc}"
            raise DatasetFetchError(dataset.id, msg, details={"url": url}) from exc

        if response.is_error:
            msg = f"Failed to fetch data: {response.reason_phrase}"
            raise DatasetFetchError(
                dataset.id,
                msg,
                status_code=response.status_code,
                details={"url": url},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            msg = "Failed to fetch data: response is not valid JSON"
            raise DatasetFetchError(dataset.id, msg, details={"url": url}) from exc

        logger.debug(
            "Fetched remote dataset | id=%s | status=%d | bytes=%d",
            dataset.id,
            response.status_code,
            len(response.content),
        )
        return payload  # type: ignore[no-any-return]
