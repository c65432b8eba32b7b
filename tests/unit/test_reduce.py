"""Tests for type reduction.

Covers:
- Uniform families promoted to their multi-part type
- Mixed families collapsed into a minimal GeometryCollection
- Point / Line / Polygon member order
"""

from __future__ import annotations

import pytest

from rfs_feed.activities.normalize_geometry import merge_family, reduce_geometries
from rfs_feed.models.geometry import Geometry, GeometryType

POINT_A = Geometry(GeometryType.POINT, [1, 1])
POINT_B = Geometry(GeometryType.POINT, [2, 2])
LINE = Geometry(GeometryType.LINE_STRING, [[0, 0], [1, 1]])
POLYGON = Geometry(GeometryType.POLYGON, [[[0, 0], [1, 0], [1, 1], [0, 0]]])


class TestUniform:
    """One family."""

    def test_empty(self) -> None:
        assert reduce_geometries([]) is None

    def test_single_entry_returned_as_is(self) -> None:
        assert reduce_geometries([LINE]) is LINE

    def test_points_promoted_to_multipoint(self) -> None:
        assert reduce_geometries([POINT_A, POINT_B]) == Geometry(
            GeometryType.MULTI_POINT, [[1, 1], [2, 2]]
        )

    def test_lines_promoted_to_multilinestring(self) -> None:
        reduced = reduce_geometries([LINE, LINE])
        assert reduced is not None
        assert reduced.type is GeometryType.MULTI_LINE_STRING
        assert reduced.coordinates == [LINE.coordinates, LINE.coordinates]

    def test_point_and_multipoint_concatenated(self) -> None:
        multi = Geometry(GeometryType.MULTI_POINT, [[3, 3], [4, 4]])
        assert reduce_geometries([POINT_A, multi]) == Geometry(
            GeometryType.MULTI_POINT, [[1, 1], [3, 3], [4, 4]]
        )


class TestMixed:
    """Several families."""

    def test_point_and_line(self) -> None:
        reduced = reduce_geometries([LINE, POINT_A])
        assert reduced == Geometry(GeometryType.GEOMETRY_COLLECTION, geometries=(POINT_A, LINE))

    def test_point_point_polygon(self) -> None:
        reduced = reduce_geometries([POINT_A, POINT_B, POLYGON])
        assert reduced is not None
        assert reduced.type is GeometryType.GEOMETRY_COLLECTION
        assert [g.type for g in reduced.geometries] == [
            GeometryType.MULTI_POINT,
            GeometryType.POLYGON,
        ]

    def test_canonical_family_order(self) -> None:
        reduced = reduce_geometries([POLYGON, LINE, POINT_A])
        assert reduced is not None
        assert [g.type for g in reduced.geometries] == [
            GeometryType.POINT,
            GeometryType.LINE_STRING,
            GeometryType.POLYGON,
        ]

    def test_collections_follow_families(self) -> None:
        nested = Geometry(GeometryType.GEOMETRY_COLLECTION, geometries=(POINT_B,))
        reduced = reduce_geometries([nested, POINT_A])
        assert reduced is not None
        assert reduced.geometries == (POINT_A, nested)


class TestMergeFamily:
    """merge_family()."""

    def test_single_member(self) -> None:
        assert merge_family([POLYGON]) is POLYGON

    def test_family_mismatch_rejected(self) -> None:
        with pytest.raises(ValueError, match="Cannot merge"):
            merge_family([POINT_A, LINE])
