"""Polygon union with optional sliver suppression.

The feed splits a single fire ground into several polygons that share
artificial borders.  ``unify_polygons`` merges them back with an exact
planar union (shapely / GEOS overlay).  With ``avoid_slivers`` every
part is grown by a small metric margin before the union and the result
is shrunk by the same margin, closing hairline gaps between borders
that almost, but not exactly, coincide.

A union that fails, or runs past its ``UnionBudget``, never fails the
feature: the failure is reported to the diagnostics channel and the
parts are returned unmerged as a MultiPolygon.  Parts that shapely
cannot build are left out of that MultiPolygon and reported too.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rfs_feed.activities.normalize_geometry._buffer import geodesic_buffer
from rfs_feed.activities.normalize_geometry._degenerate import polygon_area, polygon_rings
from rfs_feed.core.constants import DEFAULT_SLIVER_BUFFER_M
from rfs_feed.core.exceptions import (
    BudgetExceededError,
    DegenerateGeometryError,
    InputShapeError,
    UnionComputationError,
)
from rfs_feed.models.geometry import Geometry, GeometryFamily, GeometryType

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shapely.geometry import Polygon
    from shapely.geometry.base import BaseGeometry

    from rfs_feed.core.diagnostics import Diagnostics
    from rfs_feed.core.exceptions import PipelineError

logger = logging.getLogger("rfs_feed.activities.normalize_geometry")


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UnionBudget:
    """Optional limits on one feature's union.

    Attributes:
        timeout_s: Wall-clock seconds the union may take (``None`` = unbounded).
        max_vertices: Total input vertices accepted (``None`` = unbounded).
    """

    timeout_s: float | None = None
    max_vertices: int | None = None

    def __post_init__(self) -> None:
        if self.timeout_s is not None and self.timeout_s < 0:
            msg = f"UnionBudget.timeout_s must be >= 0, got {self.timeout_s}"
            raise ValueError(msg)
        if self.max_vertices is not None and self.max_vertices < 0:
            msg = f"UnionBudget.max_vertices must be >= 0, got {self.max_vertices}"
            raise ValueError(msg)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def unify_polygons(
    polygons: Sequence[Geometry],
    *,
    avoid_slivers: bool = False,
    sliver_buffer_m: float = DEFAULT_SLIVER_BUFFER_M,
    budget: UnionBudget | None = None,
    diagnostics: Diagnostics | None = None,
) -> Geometry | None:
    """Merge Polygon/MultiPolygon entries into one Polygon or MultiPolygon.

    Args:
        polygons: Polygon-family geometries in flattened order.
        avoid_slivers: Apply buffer-union-unbuffer with ``sliver_buffer_m``.
        sliver_buffer_m: Grow/shrink margin in metres.
        budget: Optional time / vertex limits for the union.
        diagnostics: Receives a ``UnionComputationError`` (or
            ``BudgetExceededError``) when the fallback path is taken.

    Returns:
        A lone entry unchanged; otherwise the union as a ``Polygon`` (one
        connected region) or ``MultiPolygon`` (several).  On failure, the
        usable parts kept separate as a ``MultiPolygon``, or ``None``
        when no part is usable.

    Raises:
        ValueError: If ``polygons`` is empty or holds a non-polygon.
    """
    if not polygons:
        msg = "unify_polygons requires at least one polygon"
        raise ValueError(msg)
    for polygon in polygons:
        if polygon.family is not GeometryFamily.POLYGON:
            msg = f"unify_polygons accepts Polygon/MultiPolygon only, got {polygon.type.value}"
            raise ValueError(msg)

    if len(polygons) == 1:
        return polygons[0]

    try:
        merged = _union(
            polygons,
            avoid_slivers=avoid_slivers,
            sliver_buffer_m=sliver_buffer_m,
            budget=budget,
        )
    except UnionComputationError as exc:
        _report(exc, diagnostics)
        return _unmerged(
            polygons,
            avoid_slivers=avoid_slivers,
            sliver_buffer_m=sliver_buffer_m,
            diagnostics=diagnostics,
        )

    logger.debug(
        "Unioned polygons | inputs=%d | result=%s | avoid_slivers=%s",
        len(polygons),
        merged.type.value,
        avoid_slivers,
    )
    return merged


# ---------------------------------------------------------------------------
# Union
# ---------------------------------------------------------------------------


def _union(
    polygons: Sequence[Geometry],
    *,
    avoid_slivers: bool,
    sliver_buffer_m: float,
    budget: UnionBudget | None,
) -> Geometry:
    """Exact union of ``polygons``.  Raises ``UnionComputationError``."""
    try:
        if budget is not None and budget.max_vertices is not None:
            vertices = sum(_vertex_count(p) for p in polygons)
            if vertices > budget.max_vertices:
                msg = f"Union input has {vertices} vertices, budget is {budget.max_vertices}"
                raise BudgetExceededError(msg)

        shapes = [_to_shape(p) for p in polygons]
        if avoid_slivers:
            shapes = [geodesic_buffer(s, sliver_buffer_m) for s in shapes]
        merged = _union_shapes(shapes, budget)
        if avoid_slivers:
            merged = geodesic_buffer(merged, -sliver_buffer_m)
        return from_shape(merged)
    except UnionComputationError:
        raise
    except Exception as exc:
        msg = f"Polygon union failed for {len(polygons)} polygon(s): {exc}"
        raise UnionComputationError(msg) from exc


def _union_shapes(shapes: list[BaseGeometry], budget: UnionBudget | None) -> BaseGeometry:
    from shapely.ops import unary_union

    if budget is None or budget.timeout_s is None:
        return unary_union(shapes)

    # Incremental so the deadline can be checked between steps.
    deadline = time.monotonic() + budget.timeout_s
    merged = shapes[0]
    for shape in shapes[1:]:
        merged = merged.union(shape)
        if time.monotonic() > deadline:
            msg = f"Union exceeded its {budget.timeout_s:g} s time budget"
            raise BudgetExceededError(msg)
    return merged


def _unmerged(
    polygons: Sequence[Geometry],
    *,
    avoid_slivers: bool,
    sliver_buffer_m: float,
    diagnostics: Diagnostics | None,
) -> Geometry | None:
    """Fallback: every usable polygon part kept as its own part of a MultiPolygon."""
    parts: list[Any] = []
    for polygon in polygons:
        if avoid_slivers:
            polygon = _buffer_corrected(polygon, sliver_buffer_m, diagnostics)
        polygon_parts = polygon.parts()
        if not polygon_parts:
            msg = f"{polygon.type.value} without polygon parts dropped from unmerged fallback"
            _report(InputShapeError(msg, stage="union"), diagnostics)
        for part in polygon_parts:
            try:
                rings = polygon_rings(part)
                area = polygon_area(Geometry(type=GeometryType.POLYGON, coordinates=rings))
            except DegenerateGeometryError as exc:
                error = InputShapeError(
                    f"Unusable polygon part dropped from unmerged fallback: {exc.message}",
                    stage="union",
                )
                error.__cause__ = exc
                _report(error, diagnostics)
                continue
            if area == 0:
                msg = "Zero-area polygon part dropped from unmerged fallback"
                _report(InputShapeError(msg, stage="union"), diagnostics)
                continue
            parts.append(rings)
    if not parts:
        return None
    return Geometry.multi(GeometryFamily.POLYGON, parts)


def _buffer_corrected(
    polygon: Geometry,
    sliver_buffer_m: float,
    diagnostics: Diagnostics | None,
) -> Geometry:
    try:
        grown = geodesic_buffer(_to_shape(polygon), sliver_buffer_m)
        return from_shape(geodesic_buffer(grown, -sliver_buffer_m))
    except Exception as exc:
        error = UnionComputationError(f"Buffer correction failed, polygon kept as published: {exc}")
        error.__cause__ = exc
        _report(error, diagnostics)
        return polygon


def _report(error: PipelineError, diagnostics: Diagnostics | None) -> None:
    if diagnostics is not None:
        diagnostics.report(error)
    else:
        logger.warning(
            "Polygon union fell back to unmerged parts | code=%s | %s", error.code, error.message
        )


# ---------------------------------------------------------------------------
# Shapely conversion
# ---------------------------------------------------------------------------


def _to_shape(geometry: Geometry) -> BaseGeometry:
    from shapely.geometry import shape

    return shape(geometry.to_dict())


def from_shape(merged: BaseGeometry) -> Geometry:
    """Convert a shapely (multi)polygon result into a canonical ``Geometry``.

    Rings follow RFC 7946 orientation, carry no repeated or exactly
    collinear vertices, and start at their lowest ``(x, y)`` vertex;
    parts are ordered by that vertex.

    Raises:
        UnionComputationError: If the result holds no polygonal area.
    """
    parts = [rings for p in _polygonal_parts(merged) if (rings := _polygon_rings(p))]
    if not parts:
        msg = f"Polygon operation produced no polygonal area ({merged.geom_type})"
        raise UnionComputationError(msg)
    parts.sort(key=lambda rings: tuple(rings[0][0]))
    if len(parts) == 1:
        return Geometry(type=GeometryType.POLYGON, coordinates=parts[0])
    return Geometry(type=GeometryType.MULTI_POLYGON, coordinates=parts)


def _polygonal_parts(shape: BaseGeometry) -> list[Polygon]:
    if shape.is_empty:
        return []
    if shape.geom_type == "Polygon":
        return [shape]  # type: ignore[list-item]
    if shape.geom_type in ("MultiPolygon", "GeometryCollection"):
        parts: list[Polygon] = []
        for member in shape.geoms:  # type: ignore[attr-defined]
            parts.extend(_polygonal_parts(member))
        return parts
    return []


def _polygon_rings(polygon: Polygon) -> list[list[list[float]]]:
    exterior = canonical_ring(list(polygon.exterior.coords), counter_clockwise=True)
    if exterior is None:
        return []
    holes = [canonical_ring(list(ring.coords), counter_clockwise=False) for ring in polygon.interiors]
    return [exterior, *(hole for hole in holes if hole is not None)]


def canonical_ring(
    coords: list[Any],
    *,
    counter_clockwise: bool,
) -> list[list[float]] | None:
    """Return a closed, oriented, simplified copy of a ring.

    Returns ``None`` when fewer than three distinct, non-collinear
    vertices remain.
    """
    points = [[float(v) for v in c] for c in coords]
    if len(points) > 1 and points[0][:2] == points[-1][:2]:
        points.pop()

    changed = True
    while changed and len(points) >= 3:
        changed = False
        for i in range(len(points)):
            prev, cur, nxt = points[i - 1], points[i], points[(i + 1) % len(points)]
            if cur[:2] == prev[:2] or _cross(prev, cur, nxt) == 0:
                del points[i]
                changed = True
                break
    if len(points) < 3:
        return None

    if _is_ccw(points) != counter_clockwise:
        points.reverse()
    start = min(range(len(points)), key=lambda i: (points[i][0], points[i][1]))
    points = points[start:] + points[:start]
    return [*points, list(points[0])]


def _is_ccw(points: list[list[float]]) -> bool:
    from shapely.geometry import LinearRing

    return bool(LinearRing(points).is_ccw)


def _cross(a: list[float], b: list[float], c: list[float]) -> float:
    return (b[0] - a[0]) * (c[1] - b[1]) - (b[1] - a[1]) * (c[0] - b[0])


def _vertex_count(polygon: Geometry) -> int:
    return sum(len(ring) for part in polygon.parts() for ring in (part or []))
