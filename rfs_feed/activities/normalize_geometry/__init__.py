"""Geometry normalisation activity: composable pipeline.

Reduces a feature's geometry, however deeply nested and however mixed,
to the simplest faithful representation.

The pipeline is split into focused stages, run strictly in order:
- **_flatten**: nested GeometryCollections → flat list of primitives
- **_degenerate**: drop zero-area polygons, parts and holes left by the
  upstream renderer
- **_union**: merge polygons split along artificial borders (shapely),
  optionally with buffer-union-unbuffer sliver suppression (pyproj)
- **_reduce**: uniform lists → multi-part geometry, mixed lists →
  minimal GeometryCollection in Point / Line / Polygon order

Guarantees:
- Pure: input is never mutated and nothing is cached between calls
- Graceful degradation: malformed members are dropped, a failed union
  keeps the parts unmerged; neither raises (both are reported to the
  diagnostics channel)
- Idempotent: normalising a normalised geometry returns it unchanged
- An empty result is ``None`` (an explicit null geometry)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rfs_feed.activities.normalize_geometry._buffer import geodesic_buffer
from rfs_feed.activities.normalize_geometry._degenerate import (
    drop_degenerate_polygons,
    polygon_area,
)
from rfs_feed.activities.normalize_geometry._flatten import flatten_geometry
from rfs_feed.activities.normalize_geometry._reduce import (
    FAMILY_ORDER,
    merge_family,
    reduce_geometries,
)
from rfs_feed.activities.normalize_geometry._union import (
    UnionBudget,
    canonical_ring,
    from_shape,
    unify_polygons,
)
from rfs_feed.core.constants import DEFAULT_MAX_FLATTEN_DEPTH, DEFAULT_SLIVER_BUFFER_M
from rfs_feed.models.geometry import ABSENT, Geometry, GeometryFamily

if TYPE_CHECKING:
    from rfs_feed.core.config import FeedConfig
    from rfs_feed.core.diagnostics import Diagnostics

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "FAMILY_ORDER",
    "UnionBudget",
    "budget_from_config",
    "canonical_ring",
    "drop_degenerate_polygons",
    "flatten_geometry",
    "from_shape",
    "geodesic_buffer",
    "merge_family",
    "normalize_geojson",
    "normalize_geometry",
    "polygon_area",
    "reduce_geometries",
    "unify_polygons",
]


def normalize_geometry(
    geometry: object,
    *,
    avoid_slivers: bool = False,
    sliver_buffer_m: float = DEFAULT_SLIVER_BUFFER_M,
    budget: UnionBudget | None = None,
    max_depth: int = DEFAULT_MAX_FLATTEN_DEPTH,
    diagnostics: Diagnostics | None = None,
) -> Geometry | None:
    """Normalise one feature geometry.

    Args:
        geometry: A ``Geometry``, a GeoJSON geometry mapping, ``None``
            or ``ABSENT``.
        avoid_slivers: Grow polygons by ``sliver_buffer_m`` metres before
            the union and shrink the result afterwards.
        sliver_buffer_m: Grow/shrink margin in metres.
        budget: Optional time / vertex limits for the polygon union.
        max_depth: Deepest GeometryCollection nesting followed.
        diagnostics: Receives every recovered problem.

    Returns:
        The normalised geometry, or ``None`` when nothing with extent
        remains (absent, null, empty, or only degenerate polygons).
    """
    flat = drop_degenerate_polygons(
        flatten_geometry(geometry, max_depth=max_depth, diagnostics=diagnostics)
    )
    entries = [entry for entry in flat if entry is not None]
    if not entries:
        return None
    if len(entries) == 1:
        return entries[0]

    polygons = [entry for entry in entries if entry.family is GeometryFamily.POLYGON]
    reduced = [entry for entry in entries if entry.family is not GeometryFamily.POLYGON]
    if polygons:
        merged = unify_polygons(
            polygons,
            avoid_slivers=avoid_slivers,
            sliver_buffer_m=sliver_buffer_m,
            budget=budget,
            diagnostics=diagnostics,
        )
        if merged is not None:
            reduced.append(merged)
    return reduce_geometries(reduced)


def normalize_geojson(
    geometry: Any = ABSENT,
    *,
    config: FeedConfig | None = None,
    diagnostics: Diagnostics | None = None,
) -> dict[str, Any] | None:
    """GeoJSON-in / GeoJSON-out wrapper around ``normalize_geometry``.

    Options are taken from ``config`` (defaults when ``None``).
    """
    from rfs_feed.core.config import FeedConfig

    config = config or FeedConfig()
    normalized = normalize_geometry(
        geometry,
        avoid_slivers=config.avoid_slivers,
        sliver_buffer_m=config.sliver_buffer_m,
        budget=budget_from_config(config),
        max_depth=config.max_flatten_depth,
        diagnostics=diagnostics,
    )
    return normalized.to_dict() if normalized is not None else None


def budget_from_config(config: FeedConfig) -> UnionBudget | None:
    """Build the union budget described by ``config`` (``None`` when unbounded)."""
    timeout_s = config.union_timeout_s or None
    max_vertices = config.union_max_vertices or None
    if timeout_s is None and max_vertices is None:
        return None
    return UnionBudget(timeout_s=timeout_s, max_vertices=max_vertices)
