"""Tests for the geometry data model.

Covers:
- GeometryType parsing at the GeoJSON boundary
- GeometryFamily grouping and multi-part promotion
- from_dict / to_dict copy semantics
- The ABSENT marker
"""

from __future__ import annotations

import pytest

from rfs_feed.core.exceptions import InputShapeError
from rfs_feed.models.geometry import (
    ABSENT,
    Geometry,
    GeometryFamily,
    GeometryType,
    parse_geometry_type,
)


class TestParseGeometryType:
    """The closed set of GeoJSON kinds."""

    @pytest.mark.parametrize("kind", [t.value for t in GeometryType])
    def test_every_geojson_kind_parses(self, kind: str) -> None:
        assert parse_geometry_type({"type": kind}).value == kind

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(InputShapeError, match="must be a mapping"):
            parse_geometry_type(["Point"])

    def test_missing_type_rejected(self) -> None:
        with pytest.raises(InputShapeError, match="missing its 'type'"):
            parse_geometry_type({"coordinates": [0, 0]})

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(InputShapeError, match="Unknown geometry type 'Circle'"):
            parse_geometry_type({"type": "Circle"})

    def test_type_is_case_sensitive(self) -> None:
        with pytest.raises(InputShapeError):
            parse_geometry_type({"type": "point"})


class TestGeometryFamily:
    """Single- and multi-part kinds share a family."""

    def test_point_family(self) -> None:
        assert Geometry(GeometryType.POINT).family is GeometryFamily.POINT
        assert Geometry(GeometryType.MULTI_POINT).family is GeometryFamily.POINT

    def test_line_family(self) -> None:
        assert Geometry(GeometryType.LINE_STRING).family is GeometryFamily.LINE
        assert Geometry(GeometryType.MULTI_LINE_STRING).family is GeometryFamily.LINE

    def test_polygon_family(self) -> None:
        assert Geometry(GeometryType.POLYGON).family is GeometryFamily.POLYGON
        assert Geometry(GeometryType.MULTI_POLYGON).family is GeometryFamily.POLYGON

    def test_collection_is_other(self) -> None:
        gc = Geometry(GeometryType.GEOMETRY_COLLECTION)
        assert gc.family is GeometryFamily.OTHER
        assert gc.is_collection is True
        assert gc.is_multi_part is False


class TestParts:
    """parts() and multi() are inverse views of a multi-part geometry."""

    def test_single_part(self) -> None:
        assert Geometry(GeometryType.POINT, [1, 2]).parts() == [[1, 2]]

    def test_multi_part(self) -> None:
        multi = Geometry(GeometryType.MULTI_POINT, [[1, 2], [3, 4]])
        assert multi.parts() == [[1, 2], [3, 4]]

    def test_malformed_multi_coordinates_have_no_parts(self) -> None:
        assert Geometry(GeometryType.MULTI_POLYGON, 5).parts() == []
        assert Geometry(GeometryType.MULTI_POLYGON).parts() == []

    def test_collection_has_no_parts(self) -> None:
        with pytest.raises(TypeError):
            Geometry(GeometryType.GEOMETRY_COLLECTION).parts()

    def test_multi_builds_family_type(self) -> None:
        multi = Geometry.multi(GeometryFamily.LINE, [[[0, 0], [1, 1]]])
        assert multi.type is GeometryType.MULTI_LINE_STRING
        assert multi.coordinates == [[[0, 0], [1, 1]]]

    def test_multi_rejects_other(self) -> None:
        with pytest.raises(ValueError, match="no multi-part form"):
            Geometry.multi(GeometryFamily.OTHER, [])


class TestSerialisation:
    """from_dict / to_dict."""

    def test_round_trip_nested_collection(self) -> None:
        data = {
            "type": "GeometryCollection",
            "geometries": [
                {"type": "Point", "coordinates": [0, 0]},
                {"type": "GeometryCollection", "geometries": []},
            ],
        }
        assert Geometry.from_dict(data).to_dict() == data

    def test_from_dict_does_not_alias_input(self) -> None:
        data = {"type": "LineString", "coordinates": [[0, 0], [1, 1]]}
        geometry = Geometry.from_dict(data)
        data["coordinates"][0][0] = 99
        assert geometry.coordinates == [[0, 0], [1, 1]]

    def test_tuples_become_lists(self) -> None:
        geometry = Geometry.from_dict({"type": "Point", "coordinates": (1.5, 2.5)})
        assert geometry.to_dict() == {"type": "Point", "coordinates": [1.5, 2.5]}

    def test_missing_coordinates_kept_as_none(self) -> None:
        assert Geometry.from_dict({"type": "Point"}).to_dict() == {
            "type": "Point",
            "coordinates": None,
        }

    def test_malformed_member_rejected(self) -> None:
        with pytest.raises(InputShapeError):
            Geometry.from_dict({"type": "GeometryCollection", "geometries": [{"type": "Nope"}]})

    def test_geometries_must_be_a_list(self) -> None:
        with pytest.raises(InputShapeError, match="must be a list"):
            Geometry.from_dict({"type": "GeometryCollection", "geometries": "Point"})

    def test_geometry_is_frozen(self) -> None:
        geometry = Geometry(GeometryType.POINT, [0, 0])
        with pytest.raises(AttributeError):
            geometry.type = GeometryType.POLYGON  # type: ignore[misc]


class TestAbsent:
    """The ABSENT marker."""

    def test_singleton(self) -> None:
        assert type(ABSENT)() is ABSENT

    def test_falsy_and_distinct_from_none(self) -> None:
        assert not ABSENT
        assert ABSENT is not None

    def test_repr(self) -> None:
        assert repr(ABSENT) == "ABSENT"
