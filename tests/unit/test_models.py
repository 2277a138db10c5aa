"""Tests for the viewer data models."""

from __future__ import annotations

import dataclasses

import pytest

from municipal_gis.models import (
    Dataset,
    DatasetCategory,
    GeometryType,
    LayerConfig,
    WeightedPoint,
)
from municipal_gis.models.geometry import is_position


class TestGeometryType:
    """Declared type to nesting depth."""

    @pytest.mark.parametrize(
        ("name", "depth"),
        [
            ("Point", 0),
            ("MultiPoint", 1),
            ("LineString", 1),
            ("MultiLineString", 2),
            ("Polygon", 2),
            ("MultiPolygon", 3),
        ],
    )
    def test_depths(self, name: str, depth: int) -> None:
        member = GeometryType.from_geojson(name)
        assert member is not None
        assert member.geojson_name == name
        assert member.depth == depth

    @pytest.mark.parametrize("name", ["GeometryCollection", "point", "", None, 3])
    def test_unknown(self, name: object) -> None:
        assert GeometryType.from_geojson(name) is None


class TestIsPosition:
    @pytest.mark.parametrize(
        "value",
        [[1, 2], [1.5, -2.5], (0, 0), [1, 2, 3], [1, 2, "m"]],
    )
    def test_positions(self, value: object) -> None:
        assert is_position(value)

    @pytest.mark.parametrize(
        "value",
        [[1], [], [[1, 2]], ["1", "2"], [True, 1], None, 5, {"x": 1, "y": 2}],
    )
    def test_non_positions(self, value: object) -> None:
        assert not is_position(value)


class TestWeightedPoint:
    def test_defaults(self) -> None:
        assert WeightedPoint(lat=1, lng=2).weight == 1.0

    def test_frozen(self) -> None:
        point = WeightedPoint(lat=1, lng=2)
        with pytest.raises(dataclasses.FrozenInstanceError):
            point.lat = 3  # type: ignore[misc]

    def test_dict_round_trip(self) -> None:
        point = WeightedPoint(lat=47.6, lng=-122.33, weight=4)
        assert point.to_dict() == {"lat": 47.6, "lng": -122.33, "weight": 4}
        assert WeightedPoint.from_dict(point.to_dict()) == point

    def test_from_dict_coerces(self) -> None:
        point = WeightedPoint.from_dict({"lat": "47.6", "lng": -122, "weight": "2"})
        assert point == WeightedPoint(lat=47.6, lng=-122.0, weight=2.0)

    @pytest.mark.parametrize(
        "data", [{}, {"lat": 1}, {"lat": "x", "lng": 1}, {"lat": None, "lng": 1}]
    )
    def test_from_dict_rejects(self, data: dict[str, object]) -> None:
        with pytest.raises(TypeError, match="numeric lat/lng"):
            WeightedPoint.from_dict(data)


class TestDataset:
    """Registry entry semantics."""

    def test_file_source(self) -> None:
        assert Dataset(id="z", name="Z", file_path="data/z.geojson").source_kind == "file"

    def test_url_source(self) -> None:
        assert Dataset(id="t", name="T", url="https://example.com/q").source_kind == "url"

    def test_file_takes_precedence(self) -> None:
        ds = Dataset(id="z", name="Z", url="https://example.com/q", file_path="z.geojson")
        assert ds.source_kind == "file"

    def test_no_source(self) -> None:
        assert Dataset(id="x", name="X").source_kind == ""

    def test_to_dict_uses_camel_case(self) -> None:
        ds = Dataset(
            id="zoning",
            name="Zoning",
            category=DatasetCategory.ZONING,
            default_visible=True,
            color_property="BASE_ZONE",
            use_data_driven_colors=True,
        )
        d = ds.to_dict()
        assert d["id"] == "zoning"
        assert d["category"] == "zoning"
        assert d["defaultVisible"] is True
        assert d["colorProperty"] == "BASE_ZONE"
        assert d["useDataDrivenColors"] is True
        assert "default_visible" not in d


class TestLayerConfig:
    def test_has_data(self) -> None:
        assert not LayerConfig(id="a", name="A").has_data
        empty = {"type": "FeatureCollection", "features": []}
        assert LayerConfig(id="a", name="A", data=empty).has_data

    def test_with_visibility_returns_copy(self) -> None:
        layer = LayerConfig(id="a", name="A", visible=False)
        shown = layer.with_visibility(True)
        assert shown.visible is True
        assert layer.visible is False
        assert shown.id == "a"

    def test_default_opacity(self) -> None:
        assert LayerConfig(id="a", name="A").opacity == 0.6
