from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from homecalc.api.app import app
from homecalc.api.deps import get_tax_resolver, get_zip_client
from homecalc.config import settings
from homecalc.data.geocode import ZipCodeClient
from homecalc.data.tax_resolver import PropertyTaxResolver


@pytest.fixture
def estimator(austin_result):
    est = MagicMock()
    est.estimate = AsyncMock(return_value=austin_result)
    return est


@pytest.fixture
def zip_handler():
    """Replace ``zip_handler.response`` to change what the ZIP provider answers."""
    class Handler:
        response = httpx.Response(200, json={
            "places": [{
                "place name": "Austin",
                "state abbreviation": "TX",
                "latitude": "30.2713",
                "longitude": "-97.7426",
            }],
        })

        def __call__(self, request):
            if isinstance(self.response, Exception):
                raise self.response
            return self.response

    return Handler()


@pytest.fixture
def client(monkeypatch, tax_cache, estimator, zip_handler):
    monkeypatch.setattr(settings, "cache_sweep_interval_hours", 0)
    app.dependency_overrides[get_tax_resolver] = lambda: PropertyTaxResolver(cache=tax_cache, estimator=estimator)
    app.dependency_overrides[get_zip_client] = lambda: ZipCodeClient(
        api_key="", transport=httpx.MockTransport(zip_handler)
    )
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
