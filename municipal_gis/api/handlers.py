"""Transport-neutral HTTP handlers.

Each handler takes the request's query parameters and returns an
``ApiResponse``; ``function_app.py`` only converts that into an Azure
Functions ``HttpResponse``. Keeping the status mapping here lets it be
tested without the Functions runtime.

Status mapping for ``/api/seattle-data``:
- 400: ``datasetId`` missing, or the dataset has no source configured
- 404: unknown dataset
- 500: local file unreadable, or payload is not a FeatureCollection
- upstream status (502 on network failure): remote fetch failed

Domain failures carry the taxonomy ``code`` and ``category`` next to the
human-readable ``error``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from municipal_gis.datasets import list_datasets
from municipal_gis.diagnostics import diagnose_layers
from municipal_gis.geo.heatmap import aggregate_layers, build_point_collection
from municipal_gis.geo.validation import StructuralError
from municipal_gis.services.datasets import (
    DatasetNotFoundError,
    cache_headers,
    encode_payload,
    load_dataset,
    load_layers,
)
from municipal_gis.sources.base import DatasetSourceError
from municipal_gis.styling import layer_style

if TYPE_CHECKING:
    from collections.abc import Mapping

    from municipal_gis.core.config import ViewerConfig
    from municipal_gis.core.exceptions import GisError
    from municipal_gis.core.projection import ProjectionContext

logger = logging.getLogger("municipal_gis.api.handlers")

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_NO_STORE = {"Cache-Control": "no-store"}


@dataclass(frozen=True, slots=True)
class ApiResponse:
    """A JSON response before transport encoding.

    Attributes:
        status_code: HTTP status.
        body: JSON-serialisable body.
        headers: Extra response headers.
        encoded: Pre-serialised body, set when the handler already had to
            encode it (e.g. to size it for caching).
    """

    status_code: int
    body: Any
    headers: dict[str, str] = field(default_factory=dict)
    encoded: bytes | None = field(default=None, repr=False, compare=False)

    def render(self) -> bytes:
        """Return the UTF-8 JSON body, serialising at most once."""
        if self.encoded is not None:
            return self.encoded
        return encode_payload(self.body)


def _error(status_code: int, message: str, **extra: object) -> ApiResponse:
    return ApiResponse(status_code, {"error": message, **extra})


def _domain_error(status_code: int, exc: GisError, **extra: object) -> ApiResponse:
    error = exc.to_error_dict()
    return _error(
        status_code,
        exc.message,
        code=error["code"],
        category=error["category"],
        **extra,
    )


def parse_dataset_ids(raw: str | None) -> list[str]:
    """Split a comma-separated ``datasets`` parameter, dropping blanks and repeats."""
    if not raw:
        return []
    ids: list[str] = []
    for part in raw.split(","):
        dataset_id = part.strip()
        if dataset_id and dataset_id not in ids:
            ids.append(dataset_id)
    return ids


def get_dataset_data(
    params: Mapping[str, str],
    config: ViewerConfig,
    *,
    context: ProjectionContext | None = None,
) -> ApiResponse:
    """``GET /api/seattle-data?datasetId=<id>`` — serve one dataset."""
    dataset_id = params.get("datasetId", "")
    if not dataset_id:
        return _error(400, "datasetId parameter is required")

    try:
        collection = load_dataset(dataset_id, config, context=context)
    except DatasetNotFoundError as exc:
        return _domain_error(404, exc)
    except DatasetSourceError as exc:
        logger.error("Failed to load dataset %s | code=%s | %s", dataset_id, exc.code, exc.message)
        return _domain_error(exc.status_code, exc, **exc.details)
    except StructuralError as exc:
        return _error(500, "Invalid GeoJSON structure", code=exc.code, category=exc.category)
    except Exception:
        logger.exception("Error fetching dataset %s", dataset_id)
        return _error(500, "Internal server error")

    encoded = encode_payload(collection)
    logger.info(
        "Returning %s: %d features, %.2fKB",
        dataset_id,
        len(collection["features"]),
        len(encoded) / 1024,
    )
    return ApiResponse(200, collection, cache_headers(len(encoded), config), encoded=encoded)


def get_dataset_list() -> ApiResponse:
    """``GET /api/datasets`` — the dataset registry."""
    return ApiResponse(200, {"datasets": [d.to_dict() for d in list_datasets()]})


def get_layers(
    params: Mapping[str, str],
    config: ViewerConfig,
    *,
    context: ProjectionContext | None = None,
) -> ApiResponse:
    """``GET /api/layers?datasets=a,b`` — paint settings for the selected layers.

    Colours follow the map's priority: a colour property carried by the
    features, then data-driven colouring, then the single layer colour.
    """
    dataset_ids = parse_dataset_ids(params.get("datasets"))
    if not dataset_ids:
        return _error(400, "datasets parameter is required")

    styles = [layer_style(layer) for layer in load_layers(dataset_ids, config, context=context)]
    return ApiResponse(200, {"layers": styles}, dict(_NO_STORE))


def get_heatmap(
    params: Mapping[str, str],
    config: ViewerConfig,
    *,
    context: ProjectionContext | None = None,
) -> ApiResponse:
    """``GET /api/heatmap?datasets=a,b&weight=<property>`` — merged heatmap points.

    Every requested dataset is treated as visible. Datasets that fail to
    load contribute nothing. An empty FeatureCollection is returned when
    no dataset contributes a point.
    """
    dataset_ids = parse_dataset_ids(params.get("datasets"))
    if not dataset_ids:
        return _error(400, "datasets parameter is required")

    layers = [
        layer.with_visibility(True) for layer in load_layers(dataset_ids, config, context=context)
    ]
    heatmap = aggregate_layers(layers, params.get("weight") or None)
    if heatmap is None:
        heatmap = build_point_collection([])
    return ApiResponse(200, heatmap, dict(_NO_STORE))


def get_diagnostics(
    params: Mapping[str, str],
    config: ViewerConfig,
    *,
    context: ProjectionContext | None = None,
) -> ApiResponse:
    """``GET /api/diagnostics?datasets=a,b&heatmap=true`` — debug summary."""
    dataset_ids = parse_dataset_ids(params.get("datasets"))
    heatmap_enabled = params.get("heatmap", "").lower() in _TRUE_VALUES
    layers = load_layers(dataset_ids, config, context=context)
    summary = diagnose_layers(layers, heatmap_enabled=heatmap_enabled)
    return ApiResponse(200, summary.model_dump(), dict(_NO_STORE))
