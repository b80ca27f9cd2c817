"""Tests for ZIP code lookup, with both providers served by httpx.MockTransport."""

import asyncio

import httpx
import pytest

from homecalc.data.geocode import ZipCodeClient, validate_zip
from homecalc.errors import ExternalUnavailable, InvalidInput, LookupTimeout, NotFound

NINJAS_PAYLOAD = [{
    "zip_code": "78701",
    "city": "Austin",
    "state": "TX",
    "county": "Travis",
    "timezone": "America/Chicago",
    "lat": "30.2713",
    "lon": "-97.7426",
}]

ZIPPOPOTAMUS_PAYLOAD = {
    "post code": "78701",
    "country": "United States",
    "places": [{
        "place name": "Austin",
        "state": "Texas",
        "state abbreviation": "TX",
        "latitude": "30.2713",
        "longitude": "-97.7426",
    }],
}


def make_client(ninjas=None, zippopotamus=None, api_key="test-key", timeout=None):
    """ZipCodeClient whose providers are answered by the given handlers.

    A handler takes the request and returns a response or a coroutine that
    produces one. The default answers with the canned payload, and every
    request is recorded in ``client.requests``.
    """
    requests = []

    async def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.host == "api.api-ninjas.com":
            response = ninjas(request) if ninjas else httpx.Response(200, json=NINJAS_PAYLOAD)
        else:
            response = zippopotamus(request) if zippopotamus else httpx.Response(200, json=ZIPPOPOTAMUS_PAYLOAD)
        if isinstance(response, httpx.Response):
            return response
        return await response

    client = ZipCodeClient(api_key=api_key, timeout=timeout, transport=httpx.MockTransport(handler))
    client.requests = requests
    return client


def _hosts(client) -> list[str]:
    return [r.url.host for r in client.requests]


class TestValidateZip:
    @pytest.mark.parametrize("zip_code", [None, ""])
    def test_required(self, zip_code):
        with pytest.raises(InvalidInput, match="required"):
            validate_zip(zip_code)

    @pytest.mark.parametrize("zip_code", ["1234", "123456", "abcde", "78701-1234"])
    def test_format(self, zip_code):
        with pytest.raises(InvalidInput, match="format"):
            validate_zip(zip_code)

    def test_valid(self):
        assert validate_zip("02134") == "02134"


class TestLookup:
    async def test_invalid_zip_makes_no_request(self):
        client = make_client()
        with pytest.raises(InvalidInput):
            await client.lookup("7870")
        assert client.requests == []

    async def test_primary_provider(self):
        client = make_client()
        location = await client.lookup("78701")
        assert location.county == "Travis"
        assert location.city == "Austin"
        assert location.state == "TX"
        assert location.lat == pytest.approx(30.2713)
        assert _hosts(client) == ["api.api-ninjas.com"]
        assert client.requests[0].headers["X-Api-Key"] == "test-key"

    async def test_no_key_uses_fallback(self):
        client = make_client(api_key="")
        location = await client.lookup("78701")
        assert location.county is None
        assert location.city == "Austin"
        assert location.lon == pytest.approx(-97.7426)
        assert _hosts(client) == ["api.zippopotam.us"]

    async def test_primary_error_falls_through(self):
        client = make_client(ninjas=lambda r: httpx.Response(500))
        location = await client.lookup("78701")
        assert location.county is None
        assert _hosts(client) == ["api.api-ninjas.com", "api.zippopotam.us"]

    async def test_primary_empty_falls_through(self):
        client = make_client(ninjas=lambda r: httpx.Response(200, json=[]))
        location = await client.lookup("78701")
        assert location.state == "TX"
        assert len(client.requests) == 2

    async def test_primary_timeout_falls_through(self):
        def timeout(request):
            raise httpx.ReadTimeout("slow", request=request)

        client = make_client(ninjas=timeout)
        location = await client.lookup("78701")
        assert location.city == "Austin"

    async def test_not_found(self):
        client = make_client(api_key="", zippopotamus=lambda r: httpx.Response(404, json={}))
        with pytest.raises(NotFound, match="ZIP code not found"):
            await client.lookup("00000")

    async def test_no_places_is_not_found(self):
        client = make_client(api_key="", zippopotamus=lambda r: httpx.Response(200, json={"places": []}))
        with pytest.raises(NotFound):
            await client.lookup("00000")

    async def test_fallback_timeout(self):
        def timeout(request):
            raise httpx.ConnectTimeout("slow", request=request)

        client = make_client(api_key="", zippopotamus=timeout)
        with pytest.raises(LookupTimeout, match="timeout"):
            await client.lookup("78701")

    async def test_fallback_connection_error(self):
        def refused(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(api_key="", zippopotamus=refused)
        with pytest.raises(ExternalUnavailable) as exc_info:
            await client.lookup("78701")
        assert not isinstance(exc_info.value, LookupTimeout)

    async def test_both_providers_fail(self):
        def refused(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(ninjas=lambda r: httpx.Response(503), zippopotamus=refused)
        with pytest.raises(ExternalUnavailable):
            await client.lookup("78701")


async def _stall(request):
    await asyncio.sleep(1)
    return httpx.Response(200, json=ZIPPOPOTAMUS_PAYLOAD)


class TestOverallTimeout:
    async def test_slow_fallback_is_a_timeout(self):
        client = make_client(api_key="", zippopotamus=_stall, timeout=0.05)
        with pytest.raises(LookupTimeout):
            await client.lookup("78701")

    async def test_slow_primary_falls_through(self):
        client = make_client(ninjas=_stall, timeout=0.05)
        location = await client.lookup("78701")
        assert location.city == "Austin"
        assert _hosts(client) == ["api.api-ninjas.com", "api.zippopotam.us"]
