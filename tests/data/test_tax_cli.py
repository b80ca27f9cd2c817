"""Tests for the property tax CLI."""

import sys
from datetime import timedelta

from homecalc.config import settings
from homecalc.data.tax_cli import main


async def test_stats(monkeypatch, capsys, tmp_db, tax_cache, austin_query, austin_result):
    tax_cache.upsert(austin_query, austin_result, timedelta(days=365))
    monkeypatch.setattr(sys, "argv", ["homecalc-tax", "--stats", "--db", tmp_db])
    await main()
    out = capsys.readouterr().out
    assert "Total entries:    1" in out
    assert "TX: 1" in out


async def test_clear(monkeypatch, capsys, tmp_db, tax_cache, austin_query, austin_result):
    tax_cache.upsert(austin_query, austin_result, timedelta(days=365))
    monkeypatch.setattr(sys, "argv", ["homecalc-tax", "--clear", "--db", tmp_db])
    await main()
    assert "Cleared 1 entries" in capsys.readouterr().out


async def test_lookup_without_api_key_uses_formula(monkeypatch, capsys, tmp_db):
    monkeypatch.setattr(settings, "anthropic_api_key", "")
    monkeypatch.setattr(sys, "argv", ["homecalc-tax", "TX", "--city", "Austin", "--value", "300000", "--db", tmp_db])
    await main()
    out = capsys.readouterr().out
    assert "Property Tax: Austin, TX" in out
    assert "Fallback calculation" in out
    assert "$3,600" in out
