"""Property tax resolver: cache first, then the AI estimator, then the state formula.

Flow: query → cache key → cache lookup → AI estimate → state formula fallback → upsert
"""

import logging
import sqlite3
from datetime import timedelta

from homecalc.config import settings
from homecalc.data.tax_cache import PropertyTaxCache, cache_key
from homecalc.data.tax_estimator import PropertyTaxEstimator
from homecalc.engine.property_tax import fallback_result, recommend_property_tax
from homecalc.errors import ExternalUnavailable
from homecalc.models.property_tax import LocationQuery, PropertyTaxResult, TaxRecommendation

logger = logging.getLogger(__name__)


def ttl_for(query: LocationQuery, result: PropertyTaxResult) -> timedelta:
    """Fallback results are short-lived; exemption lookups age faster than plain rates."""
    if result.is_fallback:
        return timedelta(days=settings.fallback_ttl_days)
    if query.has_special_exemptions:
        return timedelta(days=settings.exemption_ttl_days)
    return timedelta(days=settings.tax_rate_ttl_days)


class PropertyTaxResolver:
    def __init__(
        self,
        cache: PropertyTaxCache | None = None,
        estimator: PropertyTaxEstimator | None = None,
    ):
        self.cache = cache or PropertyTaxCache(settings.tax_cache_db_path, settings.tax_cache_max_entries)
        self.estimator = estimator or PropertyTaxEstimator()

    def _cached(self, key: str) -> PropertyTaxResult | None:
        try:
            record = self.cache.lookup(key)
        except sqlite3.Error as e:
            logger.warning("Property tax cache read failed, treating as miss: %s", e)
            return None
        except ValueError as e:
            # Undecodable or outdated row; the next upsert overwrites it
            logger.warning("Unreadable property tax cache row %s, treating as miss: %s", key, e)
            return None
        return record.to_result() if record else None

    def _store(self, query: LocationQuery, result: PropertyTaxResult) -> None:
        try:
            self.cache.upsert(query, result, ttl_for(query, result))
        except sqlite3.Error as e:
            logger.warning("Property tax cache write failed: %s", e)

    async def resolve(self, query: LocationQuery) -> PropertyTaxResult:
        """Return a property tax estimate for a query.

        Never raises for external failures: an unavailable estimator yields
        the low-confidence state formula result.
        """
        key = cache_key(query)
        cached = self._cached(key)
        if cached is not None:
            logger.debug("Property tax cache hit: %s", key)
            return cached

        try:
            result = await self.estimator.estimate(query)
            logger.info("AI property tax estimate for %s: %.4f", query.jurisdiction, result.applicable_rate)
        except ExternalUnavailable as e:
            logger.warning("Falling back to state formula for %s: %s", query.jurisdiction, e)
            result = fallback_result(query)

        self._store(query, result)
        return result

    async def recommend(self, query: LocationQuery) -> TaxRecommendation:
        result = await self.resolve(query)
        return recommend_property_tax(query, result)
