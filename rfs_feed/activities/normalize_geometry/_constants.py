"""Shared constants for geometry normalisation."""

from __future__ import annotations

# Minimum coordinates in a closed linear ring (3 distinct + closing = 4)
MIN_RING_POINTS = 4

# Segments per quarter circle when buffering rounded corners
BUFFER_QUAD_SEGS = 8

# Distance units accepted by geodesic_buffer, in metres
METRES_PER_UNIT: dict[str, float] = {
    "meters": 1.0,
    "metres": 1.0,
    "kilometers": 1000.0,
    "kilometres": 1000.0,
}
