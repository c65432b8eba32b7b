"""GeoJSON output helpers: winding order and coordinate precision.

Both helpers return new geometry mappings; the input is never mutated.
"""

from __future__ import annotations

from typing import Any


def rewind_geometry(geometry: dict[str, Any] | None) -> dict[str, Any] | None:
    """Enforce RFC 7946 winding: exterior rings counter-clockwise, holes clockwise.

    Raises:
        ValueError, TypeError: If a polygon's rings cannot be built.
    """
    if geometry is None:
        return None
    geometry_type = geometry.get("type")
    if geometry_type == "GeometryCollection":
        return {
            **geometry,
            "geometries": [rewind_geometry(g) for g in geometry.get("geometries") or []],
        }
    coordinates = geometry.get("coordinates")
    if geometry_type == "Polygon" and coordinates:
        return {**geometry, "coordinates": _rewind_polygon(coordinates)}
    if geometry_type == "MultiPolygon" and coordinates:
        return {**geometry, "coordinates": [_rewind_polygon(p) for p in coordinates]}
    return dict(geometry)


def _rewind_polygon(rings: list[Any]) -> list[Any]:
    from shapely.geometry import Polygon, mapping
    from shapely.geometry.polygon import orient

    oriented = orient(Polygon(rings[0], rings[1:]), sign=1.0)
    return _as_lists(mapping(oriented)["coordinates"])


def round_coordinates(geometry: dict[str, Any] | None, precision: int) -> dict[str, Any] | None:
    """Round every coordinate value to ``precision`` decimal places."""
    if geometry is None:
        return None
    if geometry.get("type") == "GeometryCollection":
        return {
            **geometry,
            "geometries": [
                round_coordinates(g, precision) for g in geometry.get("geometries") or []
            ],
        }
    return {**geometry, "coordinates": _round(geometry.get("coordinates"), precision)}


def _as_lists(value: Any) -> Any:
    if isinstance(value, list | tuple):
        return [_as_lists(v) for v in value]
    return value


def _round(value: Any, precision: int) -> Any:
    if isinstance(value, list | tuple):
        return [_round(v, precision) for v in value]
    if isinstance(value, float):
        return round(value, precision)
    return value
