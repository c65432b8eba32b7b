"""Flattening of nested GeometryCollections.

Upstream exports wrap a single logical shape in one or more levels of
GeometryCollection.  ``flatten_geometry`` turns any such tree into the
ordered list of its primitive leaves (pre-order, left to right).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from rfs_feed.core.constants import DEFAULT_MAX_FLATTEN_DEPTH
from rfs_feed.core.exceptions import InputShapeError
from rfs_feed.models.geometry import ABSENT, Geometry, GeometryType, parse_geometry_type

if TYPE_CHECKING:
    from rfs_feed.core.diagnostics import Diagnostics

logger = logging.getLogger("rfs_feed.activities.normalize_geometry")


def flatten_geometry(
    geometry: object,
    *,
    max_depth: int = DEFAULT_MAX_FLATTEN_DEPTH,
    diagnostics: Diagnostics | None = None,
) -> list[Geometry | None]:
    """Expand GeometryCollections into a flat list of primitive geometries.

    Args:
        geometry: A ``Geometry``, a GeoJSON geometry mapping, ``None``
            (explicit null geometry) or ``ABSENT`` (no geometry member).
        max_depth: Deepest collection nesting followed; members below it
            are dropped.
        diagnostics: Receives an ``InputShapeError`` for every malformed
            member that was dropped.

    Returns:
        ``[]`` for ``ABSENT`` or an empty collection, ``[None]`` for an
        explicit null, otherwise the primitive leaves in pre-order.
        ``None`` members of a collection are kept as ``None`` leaves.
    """
    if geometry is ABSENT:
        return []
    flat: list[Geometry | None] = []
    _flatten_into(geometry, flat, depth=0, max_depth=max_depth, diagnostics=diagnostics)
    return flat


def _flatten_into(
    node: object,
    flat: list[Geometry | None],
    *,
    depth: int,
    max_depth: int,
    diagnostics: Diagnostics | None,
) -> None:
    if node is None:
        flat.append(None)
        return

    try:
        if isinstance(node, Geometry):
            geometry_type = node.type
            members: object = node.geometries
        else:
            geometry_type = parse_geometry_type(node)
            members = node.get("geometries") if isinstance(node, Mapping) else None

        if geometry_type is not GeometryType.GEOMETRY_COLLECTION:
            flat.append(node if isinstance(node, Geometry) else Geometry.from_dict(node))
            return

        if not members:
            return
        if not isinstance(members, list | tuple):
            msg = f"GeometryCollection geometries must be a list, got {type(members).__name__}"
            raise InputShapeError(msg)
        if depth >= max_depth:
            msg = f"GeometryCollection nested deeper than {max_depth} levels; members dropped"
            raise InputShapeError(msg)
    except InputShapeError as exc:
        _report(exc, diagnostics)
        return

    for member in members:
        _flatten_into(
            member,
            flat,
            depth=depth + 1,
            max_depth=max_depth,
            diagnostics=diagnostics,
        )


def _report(error: InputShapeError, diagnostics: Diagnostics | None) -> None:
    if diagnostics is not None:
        diagnostics.report(error)
    else:
        logger.warning("Dropped malformed geometry member | %s", error.message)
