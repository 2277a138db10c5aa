"""Source factory — selects the dataset source for a registry entry.

The factory maintains a registry of known sources keyed by source kind
(``"file"`` or ``"url"``, see ``Dataset.source_kind``). A dataset with a
local ``file_path`` is always read from disk, even if it also has a URL.

Usage::

    from municipal_gis.sources.factory import get_source

    source = get_source(dataset, config)
    payload = source.load(dataset)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from municipal_gis.models.dataset import SOURCE_FILE, SOURCE_URL
from municipal_gis.sources.base import DatasetConfigError, DatasetSource

if TYPE_CHECKING:
    from collections.abc import Callable

    from municipal_gis.core.config import ViewerConfig
    from municipal_gis.core.projection import ProjectionContext
    from municipal_gis.models.dataset import Dataset

logger = logging.getLogger(__name__)

_CONFIG_HINT = "Add either a url or filePath to this dataset in the dataset registry"

# ---------------------------------------------------------------------------
# Lazy-import source registry
# ---------------------------------------------------------------------------

# Each entry maps a source kind to a callable that returns the source
# *class*, so httpx is only imported when a remote dataset is loaded.

_SOURCE_REGISTRY: dict[str, Callable[[], type[DatasetSource]]] = {}


def _register_builtin_sources() -> None:
    """Register the built-in sources (lazy import thunks)."""

    def _local_file() -> type[DatasetSource]:
        from municipal_gis.sources.local_file import LocalFileSource

        return LocalFileSource

    def _feature_service() -> type[DatasetSource]:
        from municipal_gis.sources.feature_service import FeatureServiceSource

        return FeatureServiceSource

    _SOURCE_REGISTRY[SOURCE_FILE] = _local_file
    _SOURCE_REGISTRY[SOURCE_URL] = _feature_service


def _ensure_registry() -> None:
    """Initialise the source registry once (idempotent)."""
    if not _SOURCE_REGISTRY:
        _register_builtin_sources()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_source(
    dataset: Dataset,
    config: ViewerConfig,
    *,
    context: ProjectionContext | None = None,
) -> DatasetSource:
    """Create the source that serves *dataset*.

    Raises:
        DatasetConfigError: If the dataset has neither a file path nor a URL.
    """
    _ensure_registry()

    kind = dataset.source_kind
    if not kind:
        msg = "Dataset has neither URL nor filePath configured"
        raise DatasetConfigError(dataset.id, msg, details={"hint": _CONFIG_HINT})

    source_cls = _SOURCE_REGISTRY[kind]()
    logger.debug("Selected %s source for dataset %s", source_cls.kind, dataset.id)
    return source_cls(config, context)

