"""HTTP handlers behind the Azure Functions routes."""

from municipal_gis.api.handlers import (
    ApiResponse,
    get_dataset_data,
    get_dataset_list,
    get_diagnostics,
    get_heatmap,
    get_layers,
    parse_dataset_ids,
)

__all__ = [
    "ApiResponse",
    "get_dataset_data",
    "get_dataset_list",
    "get_diagnostics",
    "get_heatmap",
    "get_layers",
    "parse_dataset_ids",
]
