"""Tests for the periodic cache sweep."""

import asyncio
import sqlite3
from datetime import timedelta
from unittest.mock import patch

from homecalc.data.sweeper import run_sweeper, sweep_once
from homecalc.models.property_tax import LocationQuery


def _fill(cache, result):
    cache.upsert(LocationQuery(state="TX", zip_code="78701"), result, timedelta(seconds=-1))
    cache.upsert(LocationQuery(state="TX", zip_code="78702"), result, timedelta(days=365))


def test_sweep_once(tax_cache, austin_result):
    _fill(tax_cache, austin_result)
    assert sweep_once(tax_cache) == 1
    assert tax_cache.stats().total == 1


def test_sweep_once_survives_database_error(tax_cache):
    with patch.object(tax_cache, "sweep_expired", side_effect=sqlite3.OperationalError("locked")):
        assert sweep_once(tax_cache) == 0


async def test_run_sweeper_until_cancelled(tax_cache, austin_result):
    _fill(tax_cache, austin_result)
    task = asyncio.create_task(run_sweeper(tax_cache, interval_hours=0.00001))
    await asyncio.sleep(0.2)
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    assert tax_cache.stats().total == 1
