"""Azure Functions entry point — Municipal GIS Viewer API.

This module registers the HTTP functions the browser viewer calls,
using the Python v2 programming model.

All business logic lives in the municipal_gis package. This file is purely
the wiring layer between Azure Functions bindings and application code.
"""

from __future__ import annotations

import logging

import azure.functions as func

from municipal_gis.api.handlers import (
    ApiResponse,
    get_dataset_data,
    get_dataset_list,
    get_diagnostics,
    get_heatmap,
    get_layers,
)
from municipal_gis.core.config import ViewerConfig
from municipal_gis.core.projection import default_projection_context

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

logger = logging.getLogger("municipal_gis.function_app")

# Built once per worker; both are immutable.
CONFIG = ViewerConfig.from_env()
PROJECTION_CONTEXT = default_projection_context()


def _to_http_response(response: ApiResponse) -> func.HttpResponse:
    """Encode an ``ApiResponse`` as a JSON ``HttpResponse``."""
    return func.HttpResponse(
        response.render(),
        status_code=response.status_code,
        headers=response.headers,
        mimetype="application/json",
    )


# ---------------------------------------------------------------------------
# HTTP: Dataset passthrough
# ---------------------------------------------------------------------------


@app.function_name("seattle_data")
@app.route(route="seattle-data", methods=["GET"])
def seattle_data(req: func.HttpRequest) -> func.HttpResponse:
    """Return one dataset as WGS 84 GeoJSON.

    Local State Plane exports are reprojected on the way out; remote
    feature services are passed through.
    """
    response = get_dataset_data(req.params, CONFIG, context=PROJECTION_CONTEXT)
    logger.info(
        "seattle-data | dataset=%s | status=%d",
        req.params.get("datasetId", ""),
        response.status_code,
    )
    return _to_http_response(response)


@app.function_name("datasets")
@app.route(route="datasets", methods=["GET"])
def datasets(req: func.HttpRequest) -> func.HttpResponse:
    """Return the dataset registry for the dataset picker."""
    return _to_http_response(get_dataset_list())


# ---------------------------------------------------------------------------
# HTTP: Layers, heatmap and diagnostics
# ---------------------------------------------------------------------------


@app.function_name("layers")
@app.route(route="layers", methods=["GET"])
def layers(req: func.HttpRequest) -> func.HttpResponse:
    """Return paint settings for the requested datasets."""
    return _to_http_response(get_layers(req.params, CONFIG, context=PROJECTION_CONTEXT))


@app.function_name("heatmap")
@app.route(route="heatmap", methods=["GET"])
def heatmap(req: func.HttpRequest) -> func.HttpResponse:
    """Return the merged heatmap point collection for the requested datasets."""
    return _to_http_response(get_heatmap(req.params, CONFIG, context=PROJECTION_CONTEXT))


@app.function_name("diagnostics")
@app.route(route="diagnostics", methods=["GET"])
def diagnostics(req: func.HttpRequest) -> func.HttpResponse:
    """Return the debug-panel summary for the requested datasets."""
    return _to_http_response(get_diagnostics(req.params, CONFIG, context=PROJECTION_CONTEXT))
