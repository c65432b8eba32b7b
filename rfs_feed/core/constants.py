"""Shared feed constants, the single source of truth.

Centralises the feed's fixed vocabulary (status and alert-level values,
date formats, the feed timezone) and geometry processing defaults.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Feed timezone and date formats
# ---------------------------------------------------------------------------

DEFAULT_FEED_TIMEZONE: str = "Australia/Sydney"
"""Local timezone of every naive timestamp published by the feed."""

PUB_DATE_FORMAT: str = "%d/%m/%Y %I:%M:%S %p"
"""``pubDate`` values, e.g. ``"3/01/2018 5:20:00 AM"``."""

UPDATED_DATE_FORMAT: str = "%d %b %Y %H:%M"
"""``UPDATED`` description entries, e.g. ``"3 Jan 2018 16:20"``."""

HAZARD_REDUCTION_DATE_FORMAT: str = "%d/%m/%Y"
"""Hazard reduction start/end dates, e.g. ``"18/10/2020"``."""

# ---------------------------------------------------------------------------
# Feature ordering (higher index is drawn first, i.e. underneath)
# ---------------------------------------------------------------------------

STATUS_SORT_INDEX: dict[str, int] = {
    "Out of control": 0,
    "Being controlled": 1,
    "Under control": 3,
}
DEFAULT_STATUS_SORT_INDEX: int = 4

ALERT_LEVEL_SORT_INDEX: dict[str, int] = {
    "Emergency Warning": 0,
    "Watch and Act": 1,
    "Advice": 2,
    "Not Applicable": 3,
}
DEFAULT_ALERT_LEVEL_SORT_INDEX: int = 4

# ---------------------------------------------------------------------------
# Property values
# ---------------------------------------------------------------------------

GENERIC_INCIDENT_LINK: str = "http://www.rfs.nsw.gov.au/fire-information/fires-near-me"
"""Link attached to every incident; carries no per-incident information."""

# ---------------------------------------------------------------------------
# Geometry processing defaults
# ---------------------------------------------------------------------------

DEFAULT_SLIVER_BUFFER_M: float = 25.0
"""Grow/shrink margin (metres) used by buffer-union-unbuffer."""

DEFAULT_MAX_FLATTEN_DEPTH: int = 64
"""Maximum GeometryCollection nesting depth followed by the flattener."""

MAX_FLATTEN_DEPTH_LIMIT: int = 256
"""Largest ``RFS_MAX_FLATTEN_DEPTH`` accepted by the configuration."""

MAX_COORDINATE_PRECISION: int = 15
"""Largest meaningful number of decimal places for a float64 coordinate."""
