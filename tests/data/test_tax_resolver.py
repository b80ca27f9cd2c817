"""Tests for the cache-aside property tax resolver."""

import sqlite3
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from homecalc.data.tax_cache import cache_key
from homecalc.data.tax_resolver import PropertyTaxResolver, ttl_for
from homecalc.engine.property_tax import fallback_result
from homecalc.errors import ExternalUnavailable, LookupTimeout
from homecalc.models.property_tax import LocationQuery


@pytest.fixture
def estimator(austin_result):
    est = MagicMock()
    est.estimate = AsyncMock(return_value=austin_result)
    return est


@pytest.fixture
def resolver(tax_cache, estimator):
    return PropertyTaxResolver(cache=tax_cache, estimator=estimator)


class TestResolve:
    async def test_miss_calls_estimator_and_caches(self, resolver, estimator, tax_cache, austin_query, austin_result):
        result = await resolver.resolve(austin_query)
        assert result == austin_result
        estimator.estimate.assert_awaited_once_with(austin_query)
        assert tax_cache.lookup(cache_key(austin_query)) is not None

    async def test_hit_skips_estimator(self, resolver, estimator, austin_query, austin_result):
        await resolver.resolve(austin_query)
        again = await resolver.resolve(austin_query)
        assert again == austin_result
        assert estimator.estimate.await_count == 1

    async def test_same_bucket_is_a_hit(self, resolver, estimator, austin_query):
        await resolver.resolve(austin_query)
        await resolver.resolve(austin_query.model_copy(update={"home_value": 455000}))
        assert estimator.estimate.await_count == 1

    async def test_estimator_failure_falls_back(self, resolver, estimator, tax_cache, austin_query):
        estimator.estimate.side_effect = ExternalUnavailable("boom")
        result = await resolver.resolve(austin_query)
        assert result.sources == ["Fallback calculation"]
        assert result.confidence == 0.3
        record = tax_cache.lookup(cache_key(austin_query))
        assert record.expires_at - record.last_updated == timedelta(days=1)

    async def test_estimator_timeout_falls_back(self, resolver, estimator, austin_query):
        estimator.estimate.side_effect = LookupTimeout("slow")
        result = await resolver.resolve(austin_query)
        assert result.is_fallback

    async def test_cache_read_failure_is_a_miss(self, resolver, estimator, tax_cache, austin_query, austin_result):
        with patch.object(tax_cache, "lookup", side_effect=sqlite3.OperationalError("locked")):
            result = await resolver.resolve(austin_query)
        assert result == austin_result
        estimator.estimate.assert_awaited_once()

    async def test_cache_write_failure_still_returns(self, resolver, tax_cache, austin_query, austin_result):
        with patch.object(tax_cache, "upsert", side_effect=sqlite3.OperationalError("disk full")):
            assert await resolver.resolve(austin_query) == austin_result


class TestTTL:
    def test_plain_rate(self, austin_query, austin_result):
        assert ttl_for(austin_query, austin_result) == timedelta(days=365)

    def test_special_exemptions(self, austin_result):
        query = LocationQuery(state="TX", zip_code="78701", is_veteran=True)
        assert ttl_for(query, austin_result) == timedelta(days=180)

    def test_fallback(self, austin_query):
        assert ttl_for(austin_query, fallback_result(austin_query)) == timedelta(days=1)


class TestRecommend:
    async def test_high_confidence_ai(self, resolver, austin_query):
        rec = await resolver.recommend(austin_query)
        assert rec.confidence == "high"
        assert rec.estimated_annual_tax == 6930.0

    async def test_ai_unavailable(self, resolver, estimator, austin_query):
        estimator.estimate.side_effect = ExternalUnavailable("boom")
        rec = await resolver.recommend(austin_query)
        assert rec.confidence == "low"
        assert rec.estimated_annual_tax == 6300.0


class TestUnreadableRows:
    @pytest.mark.parametrize("stored", ['{"headline_rate": 0.01}', "not json"])
    async def test_bad_row_is_a_miss_and_is_overwritten(
        self, resolver, estimator, tax_cache, tmp_db, austin_query, austin_result, stored
    ):
        tax_cache.upsert(austin_query, austin_result, timedelta(days=365))
        with sqlite3.connect(tmp_db) as conn:
            conn.execute("UPDATE property_tax_cache SET result_json = ?", (stored,))

        result = await resolver.resolve(austin_query)
        assert result == austin_result
        estimator.estimate.assert_awaited_once_with(austin_query)
        assert tax_cache.lookup(cache_key(austin_query)).to_result() == austin_result
