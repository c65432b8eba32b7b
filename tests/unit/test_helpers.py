"""Tests for shared helpers: feed date parsing and incident ids."""

from __future__ import annotations

import pytest

from rfs_feed.core.constants import PUB_DATE_FORMAT, UPDATED_DATE_FORMAT
from rfs_feed.utils.helpers import (
    extract_incident_id,
    parse_local_datetime,
    to_iso_date,
    to_iso_datetime,
)


class TestLocalDates:
    """Naive feed timestamps in Australia/Sydney."""

    def test_parse_is_timezone_aware(self) -> None:
        parsed = parse_local_datetime("3/01/2018 5:20:00 AM", PUB_DATE_FORMAT)
        assert parsed.utcoffset() is not None
        assert parsed.utcoffset().total_seconds() == 11 * 3600  # type: ignore[union-attr]

    def test_iso_datetime(self) -> None:
        assert to_iso_datetime("3 Jun 2018 16:20", UPDATED_DATE_FORMAT) == "2018-06-03T16:20:00+10:00"

    def test_iso_date(self) -> None:
        assert to_iso_date("18/10/2020", "%d/%m/%Y") == "2020-10-18"

    def test_surrounding_whitespace_ignored(self) -> None:
        assert to_iso_datetime(" 3 Jan 2018 16:20 ", UPDATED_DATE_FORMAT).startswith("2018-01-03")

    def test_mismatch_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_local_datetime("2018-01-03", PUB_DATE_FORMAT)


class TestExtractIncidentId:
    """extract_incident_id()."""

    def test_guid_url(self) -> None:
        assert extract_incident_id("https://incidents.rfs.nsw.gov.au/api/v1/incidents/370551") == "370551"

    def test_trailing_slash(self) -> None:
        assert extract_incident_id("https://example/incidents/42/") == "42"

    def test_no_digits(self) -> None:
        assert extract_incident_id("https://example/incidents/") is None

    def test_non_string(self) -> None:
        assert extract_incident_id(None) is None
        assert extract_incident_id(370551) is None
