"""Periodic expiry sweep for the property tax cache.

Lookups already skip expired rows; the sweep only reclaims space.
"""

import asyncio
import logging
import sqlite3

from homecalc.data.tax_cache import PropertyTaxCache

logger = logging.getLogger(__name__)


def sweep_once(cache: PropertyTaxCache) -> int:
    try:
        return cache.sweep_expired()
    except sqlite3.Error as e:
        logger.warning("Property tax cache sweep failed: %s", e)
        return 0


async def run_sweeper(cache: PropertyTaxCache, interval_hours: float) -> None:
    """Sweep every ``interval_hours`` until cancelled."""
    logger.info("Property tax cache sweep scheduled every %s hours", interval_hours)
    while True:
        await asyncio.sleep(interval_hours * 3600)
        sweep_once(cache)
