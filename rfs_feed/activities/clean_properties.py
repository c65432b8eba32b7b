"""Feature property cleaning activity.

The major-incidents feed overloads a single HTML-ish ``description``
string with most of an incident's attributes and publishes naive local
timestamps.  ``clean_properties`` unpacks and simplifies them:

- ``description`` ``"KEY: Value <br />KEY 2: Value2"`` → ``key``, ``key-2``
- ``pubDate`` and the ``UPDATED`` entry → ISO 8601 with offset
- ``category`` → ``alert-level`` (the unpacked duplicate is dropped)
- ``fire`` → bool; ``guid_isPermaLink`` and the generic link dropped

Unparseable dates and conflicting duplicates are reported to the
diagnostics channel; they never fail the feature.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from rfs_feed.core.constants import (
    DEFAULT_FEED_TIMEZONE,
    GENERIC_INCIDENT_LINK,
    PUB_DATE_FORMAT,
    UPDATED_DATE_FORMAT,
)
from rfs_feed.core.exceptions import PropertyConflictError, PropertyParseError
from rfs_feed.utils.helpers import to_iso_datetime

if TYPE_CHECKING:
    from rfs_feed.core.diagnostics import Diagnostics

logger = logging.getLogger("rfs_feed.activities.clean_properties")

_LINE_BREAK = re.compile(r" *<br ?/?> *", re.IGNORECASE)
# A colon followed by a digit is part of the key ("UPDATE AS AT 11:12PM: ...").
_KEY_VALUE = re.compile(r"^(.+?):(?!\d) ?(.*)$")
_FIRST_COLON = re.compile(r"^([^:]*): ?(.*)$")
_WHITESPACE = re.compile(r"\s+")
_YES = re.compile(r"yes", re.IGNORECASE)


def clean_properties(
    properties: dict[str, Any] | None,
    *,
    timezone: str = DEFAULT_FEED_TIMEZONE,
    diagnostics: Diagnostics | None = None,
) -> dict[str, Any]:
    """Return a cleaned copy of a feature's properties.

    Args:
        properties: Upstream properties (not mutated).
        timezone: IANA timezone of the feed's naive timestamps.
        diagnostics: Receives parse failures and property conflicts.
    """
    cleaned: dict[str, Any] = dict(properties or {})

    if cleaned.get("pubDate"):
        cleaned["pub-date"] = _iso_or_keep(
            cleaned.pop("pubDate"), PUB_DATE_FORMAT, "pubDate", timezone, diagnostics
        )

    description = cleaned.get("description")
    if description and not isinstance(description, str):
        _report(
            PropertyParseError(
                f"description is a {type(description).__name__}, not a string; "
                "kept as published"
            ),
            diagnostics,
        )
    elif description:
        unpacked = unpack_description(
            cleaned.pop("description"), timezone=timezone, diagnostics=diagnostics
        )
        # ALERT LEVEL duplicates "category"; category wins.
        alert_level = unpacked.pop("alert-level", None)
        if alert_level is not None and "category" in cleaned and alert_level != cleaned["category"]:
            _report(
                PropertyConflictError(
                    f"category {cleaned['category']!r} differs from "
                    f"ALERT LEVEL {alert_level!r}; category kept"
                ),
                diagnostics,
            )
        cleaned.update(unpacked)

    if "category" in cleaned:
        cleaned["alert-level"] = cleaned.pop("category")

    cleaned.pop("guid_isPermaLink", None)

    if "fire" in cleaned and not isinstance(cleaned["fire"], bool):
        cleaned["fire"] = bool(_YES.search(str(cleaned["fire"])))

    if cleaned.get("link") == GENERIC_INCIDENT_LINK:
        del cleaned["link"]

    return cleaned


def unpack_description(
    description: object,
    *,
    timezone: str = DEFAULT_FEED_TIMEZONE,
    diagnostics: Diagnostics | None = None,
) -> dict[str, str]:
    """Unpack ``"KEY1: Value1 <br />KEY 2: Value2"`` into ``{"key1": ..., "key-2": ...}``.

    Keys are lower-cased with whitespace runs replaced by ``-``.  The
    ``UPDATED`` entry is converted to ISO 8601.  Lines without a colon
    are ignored, and anything but a non-empty string unpacks to ``{}``.
    """
    if not description or not isinstance(description, str):
        return {}

    unpacked: dict[str, str] = {}
    for line in _LINE_BREAK.split(description):
        match = _KEY_VALUE.match(line) or _FIRST_COLON.match(line)
        if match is None:
            continue
        key, value = match.group(1), match.group(2)
        if key.strip() == "UPDATED":
            value = _iso_or_keep(value, UPDATED_DATE_FORMAT, "UPDATED", timezone, diagnostics)
        unpacked[_WHITESPACE.sub("-", key.strip()).lower()] = value
    return unpacked


def _iso_or_keep(
    value: Any,
    fmt: str,
    name: str,
    timezone: str,
    diagnostics: Diagnostics | None,
) -> Any:
    try:
        return to_iso_datetime(str(value), fmt, timezone=timezone)
    except ValueError as exc:
        error = PropertyParseError(f"Cannot parse {name} {value!r}; value kept as published")
        error.__cause__ = exc
        _report(error, diagnostics)
        return value


def _report(error: PropertyParseError | PropertyConflictError, diagnostics: Diagnostics | None) -> None:
    if diagnostics is not None:
        diagnostics.report(error)
    else:
        logger.warning("Property cleaning issue | code=%s | %s", error.code, error.message)
