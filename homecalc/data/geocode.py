"""ZIP code lookup via API Ninjas (paid, returns county) with Zippopotamus fallback (free, no county)."""

import asyncio
import logging
import re

import httpx

from homecalc.config import settings
from homecalc.data.cache import cached
from homecalc.errors import ExternalUnavailable, InvalidInput, LookupTimeout, NotFound
from homecalc.models.location import ZipLocation

logger = logging.getLogger(__name__)

API_NINJAS_URL = "https://api.api-ninjas.com/v1/zipcode"
ZIPPOPOTAMUS_URL = "https://api.zippopotam.us/us"

ZIP_PATTERN = re.compile(r"^\d{5}$")
ZIP_TTL_SECONDS = 30 * 86400


def validate_zip(zip_code: str | None) -> str:
    if not zip_code:
        raise InvalidInput("ZIP code is required")
    if not ZIP_PATTERN.match(zip_code):
        raise InvalidInput("Invalid ZIP code format")
    return zip_code


class ZipCodeClient:
    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.api_ninjas_key
        self.timeout = timeout or settings.external_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    @cached("zip:ninjas", ttl_seconds=ZIP_TTL_SECONDS)
    async def _fetch_primary(self, zip_code: str) -> dict | None:
        async with self._client() as client:
            resp = await client.get(
                API_NINJAS_URL,
                params={"zip": zip_code},
                headers={"X-Api-Key": self.api_key, "Accept": "application/json"},
            )
            resp.raise_for_status()
            data = resp.json()
        return data[0] if data else None

    @cached("zip:zippopotamus", ttl_seconds=ZIP_TTL_SECONDS)
    async def _fetch_fallback(self, zip_code: str) -> dict | None:
        async with self._client() as client:
            resp = await client.get(f"{ZIPPOPOTAMUS_URL}/{zip_code}")
            if resp.status_code != 200:
                logger.info("Zippopotamus returned %s for %s", resp.status_code, zip_code)
                return None
            data = resp.json()

        places = data.get("places") or []
        if not places:
            return None
        place = places[0]
        return {
            "zip_code": zip_code,
            "city": place["place name"],
            "state": place["state abbreviation"],
            "county": None,
            "timezone": None,
            "lat": place.get("latitude"),
            "lon": place.get("longitude"),
        }

    async def lookup(self, zip_code: str | None) -> ZipLocation:
        """Resolve a 5-digit ZIP to city, state and (when available) county.

        Raises:
            InvalidInput: malformed ZIP; no request is made.
            LookupTimeout: the fallback provider timed out.
            NotFound: no provider has the ZIP.
            ExternalUnavailable: the fallback provider failed otherwise.
        """
        zip_code = validate_zip(zip_code)

        if self.api_key:
            try:
                data = await asyncio.wait_for(self._fetch_primary(zip_code), self.timeout)
                if data:
                    logger.debug("API Ninjas resolved %s to county %s", zip_code, data.get("county"))
                    return ZipLocation(**{**data, "zip_code": zip_code})
                logger.warning("API Ninjas has no data for %s, trying Zippopotamus", zip_code)
            except (httpx.HTTPError, asyncio.TimeoutError, ValueError, KeyError) as e:
                logger.warning("API Ninjas lookup failed for %s, trying Zippopotamus: %s", zip_code, e)
        else:
            logger.info("No API Ninjas key configured, using Zippopotamus (no county data)")

        try:
            data = await asyncio.wait_for(self._fetch_fallback(zip_code), self.timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise LookupTimeout("Request timeout - external service unavailable") from e
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error("Zippopotamus lookup failed for %s: %s", zip_code, e)
            raise ExternalUnavailable("ZIP code lookup failed") from e

        if data is None:
            raise NotFound("ZIP code not found")
        return ZipLocation(**data)
