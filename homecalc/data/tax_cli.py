"""CLI for the property tax resolver and its cache.

Usage:
    python -m homecalc.data.tax_cli TX --zip 78701 --value 450000 --over-65
    python -m homecalc.data.tax_cli UT --city "Salt Lake City" --no-primary
    python -m homecalc.data.tax_cli --stats
    python -m homecalc.data.tax_cli --sweep
    python -m homecalc.data.tax_cli --clear
"""

import argparse
import asyncio
import logging

from homecalc.config import settings
from homecalc.data.tax_cache import PropertyTaxCache
from homecalc.data.tax_resolver import PropertyTaxResolver
from homecalc.models.property_tax import LocationQuery


def print_result(query, result, recommendation) -> None:
    print(f"\n{'=' * 60}")
    print(f"  Property Tax: {query.jurisdiction}")
    print(f"{'=' * 60}")
    print(f"  Headline rate:    {result.headline_rate:.4%}")
    print(f"  Applicable rate:  {result.applicable_rate:.4%}")
    print(f"  Annual tax:       ${result.estimated_annual_tax:,.0f}")
    print(f"  Assessed value:   ${result.details.assessed_value:,.0f}")
    print(f"  Exemptions:       ${result.details.exemption_total:,.0f}")
    print(f"  Confidence:       {result.confidence:.0%}")
    print(f"  Sources:          {', '.join(result.sources)}")
    print()

    for name, exemption in result.exemptions.model_dump(exclude_none=True).items():
        print(f"    {name:>10}: {exemption['description']}")
    print()
    print(f"  Recommended:      ${recommendation.estimated_annual_tax:,.0f}/yr "
          f"(${recommendation.monthly_tax:,.0f}/mo, {recommendation.confidence}, {recommendation.source})")
    print()


def print_stats(stats) -> None:
    print(f"\n{'=' * 60}")
    print(f"  Property Tax Cache")
    print(f"{'=' * 60}")
    print(f"  Total entries:    {stats.total}")
    print(f"  Active:           {stats.active}")
    print(f"  Expired:          {stats.expired}")
    print()
    if stats.by_state:
        print("  Entries by state:")
        for state, count in sorted(stats.by_state.items()):
            print(f"    {state:>4}: {count}")
    print()


async def main() -> None:
    parser = argparse.ArgumentParser(description="Property tax estimation CLI")
    parser.add_argument("state", nargs="?", help="Two-letter state code")
    parser.add_argument("--zip", dest="zip_code", help="5-digit ZIP code")
    parser.add_argument("--city", help="City name")
    parser.add_argument("--county", help="County name")
    parser.add_argument("--value", type=float, help="Home value in dollars")
    parser.add_argument("--no-primary", action="store_true", help="Not a primary residence")
    parser.add_argument("--over-65", action="store_true", help="Owner is 65 or older")
    parser.add_argument("--veteran", action="store_true", help="Owner is a veteran")
    parser.add_argument("--disabled", action="store_true", help="Owner is disabled")
    parser.add_argument("--stats", action="store_true", help="Show cache statistics")
    parser.add_argument("--sweep", action="store_true", help="Delete expired cache entries")
    parser.add_argument("--clear", action="store_true", help="Delete all cache entries")
    parser.add_argument("--db", default=settings.tax_cache_db_path, help="SQLite database path")

    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level)
    cache = PropertyTaxCache(args.db, settings.tax_cache_max_entries)

    if args.stats:
        print_stats(cache.stats())
        return
    if args.sweep:
        print(f"Swept {cache.sweep_expired()} expired entries")
        return
    if args.clear:
        print(f"Cleared {cache.clear()} entries")
        return

    if not args.state:
        parser.error("state is required (unless using --stats, --sweep or --clear)")

    query = LocationQuery(
        state=args.state.upper(),
        zip_code=args.zip_code,
        city=args.city,
        county=args.county,
        is_primary_residence=not args.no_primary,
        is_over_65=args.over_65 or None,
        is_veteran=args.veteran or None,
        is_disabled=args.disabled or None,
        home_value=args.value,
    )
    resolver = PropertyTaxResolver(cache=cache)
    result = await resolver.resolve(query)
    recommendation = await resolver.recommend(query)
    print_result(query, result, recommendation)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
