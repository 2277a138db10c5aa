"""Dataset loading service.

Ties the registry, the sources, and envelope validation together:

- ``load_dataset``: strict server-side load; every failure raises a
  ``GisError`` subclass the API maps to a status code.
- ``fetch_layer``: lenient client-side load; any failure is logged and
  becomes ``None`` ("layer has no data"), never a retry.
- ``load_layers``: builds ``LayerConfig`` records for a dataset selection.
- ``encode_payload`` / ``cache_headers``: serialise a payload once and derive
  its ``Cache-Control`` from the encoded size.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from municipal_gis.core.exceptions import GisError, ValidationError
from municipal_gis.datasets import get_dataset
from municipal_gis.geo.validation import validate_feature_collection
from municipal_gis.models.layer import LayerConfig
from municipal_gis.sources.factory import get_source

if TYPE_CHECKING:
    from collections.abc import Iterable

    from municipal_gis.core.config import ViewerConfig
    from municipal_gis.core.projection import ProjectionContext
    from municipal_gis.sources.base import DatasetSource

logger = logging.getLogger("municipal_gis.services.datasets")


class DatasetNotFoundError(ValidationError):
    """Raised when a dataset id is not in the registry."""

    default_stage = "load_dataset"
    default_code = "DATASET_NOT_FOUND"


def load_dataset(
    dataset_id: str,
    config: ViewerConfig,
    *,
    source: DatasetSource | None = None,
    context: ProjectionContext | None = None,
) -> dict[str, Any]:
    """Load a registry dataset as a validated WGS 84 FeatureCollection.

    Args:
        dataset_id: Registry id (e.g. ``"zoning"``).
        config: Viewer configuration.
        source: Override the source picked by the factory (tests, tools).
        context: Projection context for sources that reproject.

    Raises:
        DatasetNotFoundError: If *dataset_id* is not registered.
        DatasetSourceError: If the source cannot produce a payload.
        StructuralError: If the payload is not a FeatureCollection.
    """
    dataset = get_dataset(dataset_id)
    if dataset is None:
        msg = f"Dataset {dataset_id} not found"
        raise DatasetNotFoundError(msg, dataset_id=dataset_id)

    source = source or get_source(dataset, config, context=context)
    payload = source.load(dataset)
    collection = validate_feature_collection(payload, stage="load_dataset")

    logger.info("Loaded %s: %d features", dataset_id, len(collection["features"]))
    return collection


def fetch_layer(
    dataset_id: str,
    config: ViewerConfig,
    *,
    context: ProjectionContext | None = None,
) -> dict[str, Any] | None:
    """Load a dataset, returning ``None`` instead of raising on failure."""
    try:
        return load_dataset(dataset_id, config, context=context)
    except GisError as exc:
        logger.error("Failed to fetch dataset %s | %s", dataset_id, exc.to_error_dict())
        return None


def load_layers(
    dataset_ids: Iterable[str],
    config: ViewerConfig,
    *,
    context: ProjectionContext | None = None,
) -> list[LayerConfig]:
    """Build layers for the selected datasets, in selection order.

    Unknown ids are dropped. A dataset that fails to load still yields a
    layer, with ``data=None``.
    """
    layers: list[LayerConfig] = []
    for dataset_id in dataset_ids:
        dataset = get_dataset(dataset_id)
        if dataset is None:
            logger.warning("Ignoring unknown dataset id: %s", dataset_id)
            continue
        layers.append(
            LayerConfig(
                id=dataset.id,
                name=dataset.name,
                visible=dataset.default_visible,
                color=dataset.color,
                data=fetch_layer(dataset.id, config, context=context),
                color_property=dataset.color_property,
                use_data_driven_colors=dataset.use_data_driven_colors,
            )
        )
    return layers


def encode_payload(payload: object) -> bytes:
    """Serialise *payload* as compact UTF-8 JSON."""
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def cache_headers(size_bytes: int, config: ViewerConfig) -> dict[str, str]:
    """Return ``Cache-Control`` headers for a response body of *size_bytes*.

    Bodies under ``config.cache_max_bytes`` are shared-cacheable with
    stale-while-revalidate; larger ones are never stored.
    """
    if size_bytes < config.cache_max_bytes:
        value = (
            f"public, s-maxage={config.cache_max_age_s}, "
            f"stale-while-revalidate={config.cache_stale_while_revalidate_s}"
        )
    else:
        value = "no-store"
    return {"Cache-Control": value}
