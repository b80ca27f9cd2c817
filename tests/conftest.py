"""Shared fixtures.

Redis is never reached in tests: the cache decorator sees it as unavailable
and calls straight through.
"""

from unittest.mock import AsyncMock, patch

import pytest

from homecalc.data.tax_cache import PropertyTaxCache
from homecalc.models.property_tax import (
    Exemption,
    LocationQuery,
    PropertyTaxResult,
    TaxDetails,
    TaxExemptions,
)


@pytest.fixture(autouse=True)
def no_redis():
    with patch(
        "homecalc.data.cache.get_redis",
        new_callable=AsyncMock,
        side_effect=ConnectionError("redis disabled in tests"),
    ):
        yield


@pytest.fixture
def tmp_db(tmp_path):
    return str(tmp_path / "property_tax_cache.db")


@pytest.fixture
def tax_cache(tmp_db):
    return PropertyTaxCache(tmp_db)


@pytest.fixture
def austin_query() -> LocationQuery:
    """Travis County primary residence, $450K, no special exemptions."""
    return LocationQuery(
        state="TX",
        zip_code="78701",
        city="Austin",
        county="Travis",
        is_primary_residence=True,
        home_value=450000,
    )


@pytest.fixture
def austin_result() -> PropertyTaxResult:
    return PropertyTaxResult(
        headline_rate=0.0198,
        applicable_rate=0.0154,
        exemptions=TaxExemptions(
            homestead=Exemption(amount=100000, description="Homestead exemption"),
        ),
        estimated_annual_tax=6930.0,
        details=TaxDetails(
            assessed_value=450000,
            exemption_total=100000,
            taxable_value=350000,
            jurisdiction="Travis, TX",
        ),
        confidence=0.9,
        sources=["AI Parallel Search", "Travis Central Appraisal District"],
    )
