"""Feed cleaner configuration loaded from environment variables.

All configuration values have sensible defaults; the environment is
the source of truth when the cleaner runs as a scheduled job.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range.  This catches bad configuration at startup
    instead of halfway through a feed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rfs_feed.core.constants import (
    DEFAULT_FEED_TIMEZONE,
    DEFAULT_MAX_FLATTEN_DEPTH,
    DEFAULT_SLIVER_BUFFER_M,
    MAX_COORDINATE_PRECISION,
    MAX_FLATTEN_DEPTH_LIMIT,
)
from rfs_feed.core.exceptions import PipelineError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


class ConfigValidationError(PipelineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class FeedConfig:
    """Immutable feed cleaner configuration.

    Attributes:
        avoid_slivers: Grow polygons before union and shrink afterwards
            to close hairline gaps between split parts.
        sliver_buffer_m: Grow/shrink margin in metres.
        union_timeout_s: Time budget for one feature's union in seconds
            (``0`` disables the guard).
        union_max_vertices: Vertex budget for one feature's union
            (``0`` disables the guard).
        max_flatten_depth: Deepest GeometryCollection nesting followed
            (1 to 256).
        avoid_geometry_collections: Explode GeometryCollections into one
            feature per member.
        coordinate_precision: Decimal places kept in output coordinates
            (``None`` keeps full precision).
        feed_timezone: IANA timezone of the feed's naive timestamps.
        max_workers: Features normalised concurrently (``1`` is serial).
    """

    avoid_slivers: bool = False
    sliver_buffer_m: float = DEFAULT_SLIVER_BUFFER_M
    union_timeout_s: float = 0.0
    union_max_vertices: int = 0
    max_flatten_depth: int = DEFAULT_MAX_FLATTEN_DEPTH
    avoid_geometry_collections: bool = False
    coordinate_precision: int | None = None
    feed_timezone: str = DEFAULT_FEED_TIMEZONE
    max_workers: int = 1

    @classmethod
    def from_env(cls) -> FeedConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range, a boolean
                is not recognised, or the timezone is unknown.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``RFS_SLIVER_BUFFER_M=abc``).
        """
        precision_raw = os.getenv("RFS_COORDINATE_PRECISION", "").strip()
        config = cls(
            avoid_slivers=_env_bool("RFS_AVOID_SLIVERS", default=False),
            sliver_buffer_m=float(os.getenv("RFS_SLIVER_BUFFER_M", str(DEFAULT_SLIVER_BUFFER_M))),
            union_timeout_s=float(os.getenv("RFS_UNION_TIMEOUT_S", "0")),
            union_max_vertices=int(os.getenv("RFS_UNION_MAX_VERTICES", "0")),
            max_flatten_depth=int(
                os.getenv("RFS_MAX_FLATTEN_DEPTH", str(DEFAULT_MAX_FLATTEN_DEPTH))
            ),
            avoid_geometry_collections=_env_bool(
                "RFS_AVOID_GEOMETRY_COLLECTIONS", default=False
            ),
            coordinate_precision=int(precision_raw) if precision_raw else None,
            feed_timezone=os.getenv("RFS_FEED_TIMEZONE", DEFAULT_FEED_TIMEZONE),
            max_workers=int(os.getenv("RFS_MAX_WORKERS", "1")),
        )
        _validate(config)
        return config


def _env_bool(key: str, *, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigValidationError(key, raw, "must be a boolean (true/false)")


def _validate(config: FeedConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.sliver_buffer_m <= 0:
        raise ConfigValidationError(
            "RFS_SLIVER_BUFFER_M",
            config.sliver_buffer_m,
            "must be > 0 (metres)",
        )

    if config.union_timeout_s < 0:
        raise ConfigValidationError(
            "RFS_UNION_TIMEOUT_S",
            config.union_timeout_s,
            "must be >= 0 (seconds, 0 disables the guard)",
        )

    if config.union_max_vertices < 0:
        raise ConfigValidationError(
            "RFS_UNION_MAX_VERTICES",
            config.union_max_vertices,
            "must be >= 0 (0 disables the guard)",
        )

    if not 1 <= config.max_flatten_depth <= MAX_FLATTEN_DEPTH_LIMIT:
        raise ConfigValidationError(
            "RFS_MAX_FLATTEN_DEPTH",
            config.max_flatten_depth,
            f"must be between 1 and {MAX_FLATTEN_DEPTH_LIMIT}",
        )

    if config.coordinate_precision is not None and not (
        0 <= config.coordinate_precision <= MAX_COORDINATE_PRECISION
    ):
        raise ConfigValidationError(
            "RFS_COORDINATE_PRECISION",
            config.coordinate_precision,
            f"must be between 0 and {MAX_COORDINATE_PRECISION} (decimal places)",
        )

    if config.max_workers < 1:
        raise ConfigValidationError(
            "RFS_MAX_WORKERS",
            config.max_workers,
            "must be >= 1",
        )

    try:
        ZoneInfo(config.feed_timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigValidationError(
            "RFS_FEED_TIMEZONE",
            config.feed_timezone,
            "must be a known IANA timezone",
        ) from exc
