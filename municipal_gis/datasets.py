"""Dataset registry.

Static list of the municipal datasets the viewer can load. Zoning is
served from a local GeoJSON export in State Plane coordinates; the
remaining layers are queried live from the city's ArcGIS feature
services, which already return WGS 84 GeoJSON.
"""

from __future__ import annotations

from municipal_gis.models.dataset import Dataset, DatasetCategory

_ARCGIS_BASE = "https://services.arcgis.com/ZOyb2t4B0UYuYNYH/arcgis/rest/services"
_GEOJSON_QUERY = "FeatureServer/0/query?outFields=*&where=1%3D1&f=geojson"


def _feature_service_url(service: str) -> str:
    return f"{_ARCGIS_BASE}/{service}/{_GEOJSON_QUERY}"


SEATTLE_DATASETS: tuple[Dataset, ...] = (
    Dataset(
        id="zoning",
        name="Zoning Districts",
        description="Seattle zoning districts and land use designations",
        file_path="public/data/zoning.geojson",
        color="#3b82f6",
        default_visible=False,
        category=DatasetCategory.ZONING,
        color_property="BASE_ZONE",
        use_data_driven_colors=True,
    ),
    Dataset(
        id="trees",
        name="Trees",
        description="Seattle trees",
        url=_feature_service_url("SDOT_Trees_CDL"),
        color="#10b981",
        default_visible=False,
    ),
    Dataset(
        id="curb-ramps",
        name="Curb Ramps",
        description="Seattle curb ramps",
        url=_feature_service_url("Curb_Ramps_CDL"),
        color="#10b981",
        default_visible=True,
    ),
    Dataset(
        id="one-way-streets",
        name="One-Way Streets",
        description="Seattle one-way streets",
        url=_feature_service_url("One_Way_Streets_CDL"),
        color="#10b981",
        default_visible=True,
    ),
)

_BY_ID = {dataset.id: dataset for dataset in SEATTLE_DATASETS}


def get_dataset(dataset_id: str) -> Dataset | None:
    """Return the registry entry for *dataset_id*, or ``None``."""
    return _BY_ID.get(dataset_id)


def list_datasets() -> list[Dataset]:
    """Return all registry entries in display order."""
    return list(SEATTLE_DATASETS)
