"""Unit tests for heatmap point reduction.

Covers:
- Point, Polygon, MultiPolygon reduction
- Skipping of unsupported and malformed geometry
- Weight coercion from feature properties
- Point FeatureCollection output
- Multi-layer aggregation
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from municipal_gis.geo.heatmap import (
    DEFAULT_WEIGHT,
    aggregate_layers,
    build_point_collection,
    extract_points,
    parse_weight,
)
from municipal_gis.models.heatmap import WeightedPoint
from municipal_gis.models.layer import LayerConfig
from tests.conftest import make_collection, make_feature

SQUARE = [[0, 0], [2, 0], [2, 2], [0, 2], [0, 0]]


def _point(lng: float, lat: float, **props: Any) -> dict[str, Any]:
    return make_feature({"type": "Point", "coordinates": [lng, lat]}, props)


# ===========================================================================
# extract_points
# ===========================================================================


class TestExtractPoints:
    """One weighted point per supported feature."""

    def test_point(self) -> None:
        points = extract_points(make_collection(_point(-122.33, 47.60)))
        assert points == [WeightedPoint(lat=47.60, lng=-122.33, weight=1.0)]

    def test_polygon_vertex_mean_counts_closing_vertex(self) -> None:
        fc = make_collection(make_feature({"type": "Polygon", "coordinates": [SQUARE]}))
        (point,) = extract_points(fc)
        # Five vertices, (0,0) counted twice: 4/5 on each axis.
        assert point.lng == pytest.approx(0.8)
        assert point.lat == pytest.approx(0.8)

    def test_polygon_holes_ignored(self) -> None:
        hole = [[10, 10], [11, 10], [11, 11], [10, 10]]
        fc = make_collection(make_feature({"type": "Polygon", "coordinates": [SQUARE, hole]}))
        (point,) = extract_points(fc)
        assert point.lng == pytest.approx(0.8)

    def test_multipolygon_uses_first_member(self) -> None:
        far = [[[50, 50], [51, 50], [51, 51], [50, 50]]]
        fc = make_collection(make_feature({"type": "MultiPolygon", "coordinates": [[SQUARE], far]}))
        (point,) = extract_points(fc)
        assert point.lng == pytest.approx(0.8)
        assert point.lat == pytest.approx(0.8)

    def test_unsupported_types_skipped(self) -> None:
        fc = make_collection(
            _point(1, 2),
            make_feature({"type": "LineString", "coordinates": [[0, 0], [1, 1]]}),
            make_feature({"type": "MultiPoint", "coordinates": [[0, 0], [1, 1]]}),
            make_feature({"type": "MultiLineString", "coordinates": [[[0, 0], [1, 1]]]}),
            make_feature({"type": "Polygon", "coordinates": [SQUARE]}),
        )
        points = extract_points(fc)
        assert len(points) == 2
        assert (points[0].lng, points[0].lat) == (1, 2)
        assert points[1].lng == pytest.approx(0.8)

    def test_order_preserved(self) -> None:
        fc = make_collection(_point(3, 3), _point(1, 1), _point(2, 2))
        assert [p.lng for p in extract_points(fc)] == [3, 1, 2]

    @pytest.mark.parametrize(
        "feature",
        [
            make_feature(None),
            {"type": "Feature", "properties": {}},
            "not a feature",
            make_feature({"type": "Point"}),
            make_feature({"type": "Point", "coordinates": []}),
            make_feature({"type": "Polygon", "coordinates": []}),
            make_feature({"type": "Polygon", "coordinates": [[]]}),
            make_feature({"type": "Polygon", "coordinates": [[1, 2]]}),
            make_feature({"type": "MultiPolygon", "coordinates": []}),
        ],
    )
    def test_unusable_feature_skipped(self, feature: Any) -> None:
        fc = make_collection(feature, _point(5, 6))
        points = extract_points(fc)
        assert points == [WeightedPoint(lat=6, lng=5)]

    def test_malformed_polygon_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        fc = make_collection(make_feature({"type": "Polygon", "coordinates": [["x"]]}))
        with caplog.at_level(logging.WARNING, logger="municipal_gis.geo.heatmap"):
            assert extract_points(fc) == []
        assert "Skipping malformed Polygon" in caplog.text

    @pytest.mark.parametrize(
        "geometry",
        [
            {"type": "Point", "coordinates": [10**400, 0]},
            {"type": "Polygon", "coordinates": [[[0, 0], [10**400, 0], [0, 0]]]},
        ],
    )
    def test_out_of_range_coordinates_skipped(self, geometry: dict[str, Any]) -> None:
        fc = make_collection(make_feature(geometry), _point(5, 6))
        assert extract_points(fc) == [WeightedPoint(lat=6, lng=5)]

    def test_collection_without_features(self) -> None:
        assert extract_points({"type": "FeatureCollection"}) == []

    def test_empty_collection(self) -> None:
        assert extract_points(make_collection()) == []


class TestWeights:
    """Weight taken from the configured property."""

    def test_numeric_string(self) -> None:
        (point,) = extract_points(make_collection(_point(0, 0, count="7")), "count")
        assert point.weight == 7

    def test_non_numeric_string(self) -> None:
        (point,) = extract_points(make_collection(_point(0, 0, count="abc")), "count")
        assert point.weight == 1

    def test_missing_property(self) -> None:
        (point,) = extract_points(make_collection(_point(0, 0)), "count")
        assert point.weight == DEFAULT_WEIGHT

    def test_huge_integer_weight(self) -> None:
        fc = make_collection(_point(0, 0, count=10**400), _point(1, 1, count=3))
        points = extract_points(fc, "count")
        assert [p.weight for p in points] == [DEFAULT_WEIGHT, 3.0]

    def test_no_weight_property_ignores_values(self) -> None:
        (point,) = extract_points(make_collection(_point(0, 0, count="7")))
        assert point.weight == 1

    def test_null_properties(self) -> None:
        feature = {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}}
        feature["properties"] = None
        (point,) = extract_points(make_collection(feature), "count")
        assert point.weight == 1

    def test_mixed_fixture(self, geographic_collection: dict[str, Any]) -> None:
        points = extract_points(geographic_collection, "count")
        assert [p.weight for p in points] == [3, 2]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (7, 7.0),
            (2.5, 2.5),
            ("7", 7.0),
            ("7.5 trees", 7.5),
            ("  12", 12.0),
            (".5", 0.5),
            ("1e2", 100.0),
            ("abc", 1.0),
            ("", 1.0),
            (None, 1.0),
            (True, 1.0),
            (0, 1.0),
            ("0", 1.0),
            (-3, 1.0),
            ("-3", 1.0),
            (float("nan"), 1.0),
            (float("inf"), 1.0),
            ("Infinity", 1.0),
            ([3], 1.0),
            (10**400, 1.0),
            ("9" * 400, 1.0),
        ],
    )
    def test_parse_weight(self, value: object, expected: float) -> None:
        assert parse_weight(value) == expected


# ===========================================================================
# build_point_collection
# ===========================================================================


class TestBuildPointCollection:
    """Point FeatureCollection output."""

    def test_single_point(self) -> None:
        fc = build_point_collection([WeightedPoint(lat=1, lng=2, weight=3)])
        assert fc == {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": [2, 1]},
                    "properties": {"weight": 3},
                }
            ],
        }

    def test_accepts_mappings(self) -> None:
        fc = build_point_collection([{"lat": 1, "lng": 2}])
        feature = fc["features"][0]
        assert feature["geometry"]["coordinates"] == [2.0, 1.0]
        assert feature["properties"] == {"weight": 1.0}

    def test_rejects_mapping_without_position(self) -> None:
        with pytest.raises(TypeError):
            build_point_collection([{"weight": 2}])

    def test_empty(self) -> None:
        assert build_point_collection([]) == {"type": "FeatureCollection", "features": []}

    def test_preserves_order_and_length(self) -> None:
        points = [WeightedPoint(lat=i, lng=-i) for i in range(5)]
        fc = build_point_collection(points)
        assert [f["geometry"]["coordinates"][1] for f in fc["features"]] == [0, 1, 2, 3, 4]


# ===========================================================================
# aggregate_layers
# ===========================================================================


class TestAggregateLayers:
    """Visible layers merged in order."""

    @staticmethod
    def _layer(
        layer_id: str, data: dict[str, Any] | None, *, visible: bool = True
    ) -> LayerConfig:
        return LayerConfig(id=layer_id, name=layer_id, visible=visible, data=data)

    def test_concatenates_in_layer_order(self) -> None:
        first = self._layer("a", make_collection(_point(1, 1), _point(2, 2)))
        second = self._layer("b", make_collection(_point(3, 3)))
        fc = aggregate_layers([first, second])
        assert fc is not None
        coords = [f["geometry"]["coordinates"] for f in fc["features"]]
        assert coords == [[1, 1], [2, 2], [3, 3]]

    def test_no_deduplication(self) -> None:
        same = make_collection(_point(1, 1))
        fc = aggregate_layers([self._layer("a", same), self._layer("b", same)])
        assert fc is not None
        assert len(fc["features"]) == 2

    def test_hidden_layers_excluded(self) -> None:
        shown = self._layer("a", make_collection(_point(1, 1)))
        hidden = self._layer("b", make_collection(_point(2, 2)), visible=False)
        fc = aggregate_layers([shown, hidden])
        assert fc is not None
        assert len(fc["features"]) == 1

    def test_layers_without_data_excluded(self) -> None:
        loaded = self._layer("b", make_collection(_point(1, 1)))
        fc = aggregate_layers([self._layer("a", None), loaded])
        assert fc is not None
        assert len(fc["features"]) == 1

    def test_none_when_nothing_contributes(self) -> None:
        lines = make_collection(
            make_feature({"type": "LineString", "coordinates": [[0, 0], [1, 1]]})
        )
        assert aggregate_layers([]) is None
        assert aggregate_layers([self._layer("a", lines)]) is None
        hidden = self._layer("a", make_collection(_point(1, 1)), visible=False)
        assert aggregate_layers([hidden]) is None

    def test_weight_property_applied(self) -> None:
        fc = aggregate_layers(
            [self._layer("a", make_collection(_point(1, 1, count="4")))],
            weight_property="count",
        )
        assert fc is not None
        assert fc["features"][0]["properties"]["weight"] == 4
