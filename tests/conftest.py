"""Shared pytest fixtures for the RFS feed cleaner test suite."""

from __future__ import annotations

from typing import Any

import pytest

from rfs_feed.core.diagnostics import Diagnostics

# ---------------------------------------------------------------------------
# Geometry builders
# ---------------------------------------------------------------------------


def square(x: float, y: float, size: float = 1.0) -> dict[str, Any]:
    """Counter-clockwise axis-aligned square Polygon with its lower-left corner at (x, y)."""
    return {
        "type": "Polygon",
        "coordinates": [
            [[x, y], [x + size, y], [x + size, y + size], [x, y + size], [x, y]],
        ],
    }


def collection(*geometries: Any) -> dict[str, Any]:
    """GeometryCollection holding ``geometries`` in order."""
    return {"type": "GeometryCollection", "geometries": list(geometries)}


def point(x: float, y: float) -> dict[str, Any]:
    return {"type": "Point", "coordinates": [x, y]}


# ---------------------------------------------------------------------------
# Geometry fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def touching_squares() -> dict[str, Any]:
    """Two unit squares sharing the edge x=1 (one fire ground split in two)."""
    return collection(square(0, 0), square(1, 0))


@pytest.fixture()
def collapsed_polygon() -> dict[str, Any]:
    """Polygon whose vertices all coincide, as left by the upstream renderer."""
    return {"type": "Polygon", "coordinates": [[[2, 2], [2, 2], [2, 2], [2, 2]]]}


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


@pytest.fixture()
def diagnostics() -> Diagnostics:
    """A fresh diagnostics collector."""
    return Diagnostics(correlation_id="test-feature")


# ---------------------------------------------------------------------------
# Feed fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def incident_properties() -> dict[str, Any]:
    """Properties of one major-incidents feed item, as published."""
    return {
        "title": "Mount Example",
        "link": "http://www.rfs.nsw.gov.au/fire-information/fires-near-me",
        "category": "Advice",
        "guid": "https://incidents.rfs.nsw.gov.au/api/v1/incidents/370551",
        "guid_isPermaLink": "true",
        "pubDate": "3/01/2018 5:20:00 AM",
        "description": (
            "ALERT LEVEL: Advice <br />LOCATION: Mount Example Rd, Exampleville "
            "<br />COUNCIL AREA: Example <br />STATUS: Under control "
            "<br />TYPE: Bush Fire <br />FIRE: Yes <br />SIZE: 10 ha "
            "<br />RESPONSIBLE AGENCY: Rural Fire Service <br />UPDATED: 3 Jan 2018 16:20"
        ),
    }


@pytest.fixture()
def incident_feature(incident_properties: dict[str, Any]) -> dict[str, Any]:
    """A feed feature whose polygon is split into two touching halves."""
    return {
        "type": "Feature",
        "properties": incident_properties,
        "geometry": collection(point(0.5, 0.5), square(0, 0), square(1, 0)),
    }
