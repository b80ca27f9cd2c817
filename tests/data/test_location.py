"""Tests for free-text location parsing and ZIP enrichment."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from homecalc.data.location import parse_location, resolve_location, state_abbreviation
from homecalc.errors import ExternalUnavailable, NotFound
from homecalc.models.location import ParsedLocation, ZipLocation


class TestStateAbbreviation:
    @pytest.mark.parametrize("text, expected", [
        ("Texas", "TX"),
        ("texas", "TX"),
        ("ny", "NY"),
        (" West Virginia ", "WV"),
        ("District of Columbia", "DC"),
        ("Atlantis", None),
    ])
    def test_lookup(self, text, expected):
        assert state_abbreviation(text) == expected


class TestParseLocation:
    def test_city_state_zip(self):
        assert parse_location("Austin, TX 78701") == ParsedLocation(state="TX", city="Austin", zip_code="78701")

    def test_full_state_name(self):
        parsed = parse_location("Salt Lake City, Utah")
        assert parsed.state == "UT"
        assert parsed.city == "Salt Lake City"
        assert parsed.zip_code is None

    def test_longest_state_name_wins(self):
        assert parse_location("Charleston, West Virginia").state == "WV"

    def test_zip_plus_four(self):
        parsed = parse_location("12345-6789")
        assert parsed.zip_code == "12345-6789"
        assert parsed.state is None
        assert parsed.city is None

    def test_lowercase_words_are_not_states(self):
        parsed = parse_location("homes in Boise, ID")
        assert parsed.state == "ID"
        assert parsed.city == "homes in Boise"

    def test_empty(self):
        assert parse_location("") == ParsedLocation()


class TestResolveLocation:
    def _client(self, **kwargs) -> MagicMock:
        client = MagicMock()
        client.lookup = AsyncMock(**kwargs)
        return client

    async def test_fills_county(self):
        client = self._client(return_value=ZipLocation(
            zip_code="78701", city="Austin", state="TX", county="Travis",
        ))
        parsed = await resolve_location("Austin, TX 78701", zip_client=client)
        assert parsed == ParsedLocation(state="TX", city="Austin", zip_code="78701", county="Travis")

    async def test_fills_missing_city_and_state(self):
        client = self._client(return_value=ZipLocation(zip_code="78701", city="Austin", state="TX"))
        parsed = await resolve_location("78701-1234", zip_client=client)
        assert parsed.city == "Austin"
        assert parsed.state == "TX"
        assert parsed.zip_code == "78701"
        client.lookup.assert_awaited_once_with("78701")

    async def test_no_zip_skips_lookup(self):
        client = self._client()
        parsed = await resolve_location("Austin, TX", zip_client=client)
        assert parsed.county is None
        client.lookup.assert_not_awaited()

    @pytest.mark.parametrize("error", [NotFound("ZIP code not found"), ExternalUnavailable("down")])
    async def test_failed_lookup_keeps_parse(self, error):
        client = self._client(side_effect=error)
        parsed = await resolve_location("Austin, TX 78701", zip_client=client)
        assert parsed == ParsedLocation(state="TX", city="Austin", zip_code="78701")
