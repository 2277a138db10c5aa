"""DatasetSource abstract base class.

Defines the contract every dataset source must implement. The dataset
service interacts exclusively with this interface; it never knows which
concrete source (local file, remote feature service) is behind it.

Each concrete source returns decoded GeoJSON. Envelope validation is
done by the caller so every source is held to the same contract.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

from municipal_gis.core.exceptions import PermanentError, TransientError

if TYPE_CHECKING:
    from municipal_gis.core.config import ViewerConfig
    from municipal_gis.core.projection import ProjectionContext
    from municipal_gis.models.dataset import Dataset


class DatasetSource(abc.ABC):
    """Abstract base class for dataset sources.

    The constructor receives the ``ViewerConfig`` carrying the data root,
    fetch timeout, and CRS settings, plus the projection context used by
    sources that normalise coordinates.

    Example usage::

        source = get_source(dataset, config)
        payload = source.load(dataset)
    """

    #: Source kind this adapter serves (``"file"`` / ``"url"``).
    kind: str = ""

    def __init__(
        self,
        config: ViewerConfig,
        context: ProjectionContext | None = None,
    ) -> None:
        self._config = config
        self._context = context

    @property
    def config(self) -> ViewerConfig:
        """Return the viewer configuration (read-only)."""
        return self._config

    @abc.abstractmethod
    def load(self, dataset: Dataset) -> dict[str, Any]:
        """Load *dataset* and return its decoded GeoJSON payload.

        Raises:
            DatasetSourceError: On read, fetch, or decode failures.
        """


# ---------------------------------------------------------------------------
# Source exceptions
# ---------------------------------------------------------------------------


class DatasetSourceError(PermanentError):
    """Base exception for dataset source errors.

    Attributes:
        status_code: HTTP status the API should answer with.
        details: Extra response fields (file path, upstream URL, hint).
    """

    default_stage = "load_dataset"
    default_code = "DATASET_SOURCE_FAILED"
    default_status_code = 500

    def __init__(
        self,
        dataset_id: str,
        message: str,
        *,
        status_code: int | None = None,
        details: dict[str, str] | None = None,
        retryable: bool = False,
    ) -> None:
        self.status_code = status_code or self.default_status_code
        self.details = dict(details or {})
        super().__init__(message, dataset_id=dataset_id, retryable=retryable)

    def __str__(self) -> str:
        return f"[{self.dataset_id}] {self.message}"


class DatasetConfigError(DatasetSourceError):
    """Registry entry has neither a file path nor a URL."""

    default_code = "DATASET_MISCONFIGURED"
    default_status_code = 400


class DatasetReadError(DatasetSourceError):
    """Local GeoJSON file could not be read or decoded."""

    default_code = "DATASET_READ_FAILED"


class DatasetFetchError(DatasetSourceError, TransientError):
    """Remote feature service failed or returned an unusable response."""

    default_code = "DATASET_FETCH_FAILED"
    default_status_code = 502

    def __init__(
        self,
        dataset_id: str,
        message: str,
        *,
        status_code: int | None = None,
        details: dict[str, str] | None = None,
    ) -> None:
        super().__init__(
            dataset_id,
            message,
            status_code=status_code,
            details=details,
            retryable=True,
        )
