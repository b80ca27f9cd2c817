"""Homeowners insurance rate tables (2025).

State averages are annual premium dollars per $1,000 of dwelling coverage.
County adjustments scale the state average for metro areas; counties not
listed use 1.0.
"""

import re
from decimal import Decimal
from types import MappingProxyType

NATIONAL_AVERAGE_PER_THOUSAND = Decimal("5.3")

STATE_RATES_PER_THOUSAND: MappingProxyType[str, Decimal] = MappingProxyType({
    "FL": Decimal("14.1"), "TX": Decimal("11.4"), "LA": Decimal("13.0"),
    "OK": Decimal("10.9"), "KS": Decimal("9.7"), "AL": Decimal("8.5"),
    "MS": Decimal("8.1"), "CA": Decimal("6.5"), "NY": Decimal("4.9"),
    "NJ": Decimal("4.5"), "CT": Decimal("4.3"), "MA": Decimal("4.9"),
    "PA": Decimal("4.0"), "OH": Decimal("3.6"), "IL": Decimal("4.2"),
    "MI": Decimal("3.9"), "UT": Decimal("2.9"), "ID": Decimal("2.5"),
    "WY": Decimal("3.2"), "NH": Decimal("3.4"), "VT": Decimal("3.7"),
})

COUNTY_ADJUSTMENTS: MappingProxyType[str, Decimal] = MappingProxyType({
    # California
    "Los Angeles, CA": Decimal("1.25"), "San Diego, CA": Decimal("1.20"),
    "Orange, CA": Decimal("1.22"), "San Francisco, CA": Decimal("1.30"),
    "Alameda, CA": Decimal("1.25"), "Santa Clara, CA": Decimal("1.28"),
    "Sacramento, CA": Decimal("1.15"), "Riverside, CA": Decimal("1.18"),
    "San Bernardino, CA": Decimal("1.15"), "Ventura, CA": Decimal("1.20"),
    # Texas
    "Harris, TX": Decimal("1.20"), "Dallas, TX": Decimal("1.18"),
    "Tarrant, TX": Decimal("1.15"), "Bexar, TX": Decimal("1.12"),
    "Travis, TX": Decimal("1.15"), "Collin, TX": Decimal("1.10"),
    "Denton, TX": Decimal("1.08"), "Fort Bend, TX": Decimal("1.12"),
    "Williamson, TX": Decimal("1.08"),
    # Florida
    "Miami-Dade, FL": Decimal("1.35"), "Broward, FL": Decimal("1.30"),
    "Palm Beach, FL": Decimal("1.28"), "Hillsborough, FL": Decimal("1.20"),
    "Orange, FL": Decimal("1.18"), "Duval, FL": Decimal("1.15"),
    "Pinellas, FL": Decimal("1.18"), "Lee, FL": Decimal("1.22"),
    # New York
    "New York, NY": Decimal("1.35"), "Kings, NY": Decimal("1.30"),
    "Queens, NY": Decimal("1.28"), "Bronx, NY": Decimal("1.25"),
    "Nassau, NY": Decimal("1.22"), "Suffolk, NY": Decimal("1.20"),
    "Westchester, NY": Decimal("1.25"),
    # Illinois
    "Cook, IL": Decimal("1.25"), "DuPage, IL": Decimal("1.15"),
    "Lake, IL": Decimal("1.12"), "Will, IL": Decimal("1.10"),
    "Kane, IL": Decimal("1.08"),
    # Pennsylvania
    "Philadelphia, PA": Decimal("1.20"), "Allegheny, PA": Decimal("1.12"),
    "Montgomery, PA": Decimal("1.15"), "Bucks, PA": Decimal("1.12"),
    "Delaware, PA": Decimal("1.10"),
    # Arizona
    "Maricopa, AZ": Decimal("1.15"), "Pima, AZ": Decimal("1.10"),
    # Massachusetts
    "Suffolk, MA": Decimal("1.30"), "Middlesex, MA": Decimal("1.22"),
    "Essex, MA": Decimal("1.18"), "Norfolk, MA": Decimal("1.20"),
    "Worcester, MA": Decimal("1.10"),
    # Washington
    "King, WA": Decimal("1.25"), "Pierce, WA": Decimal("1.15"),
    "Snohomish, WA": Decimal("1.18"), "Clark, WA": Decimal("1.10"),
    # Georgia
    "Fulton, GA": Decimal("1.20"), "DeKalb, GA": Decimal("1.18"),
    "Cobb, GA": Decimal("1.15"), "Gwinnett, GA": Decimal("1.12"),
    # North Carolina
    "Mecklenburg, NC": Decimal("1.15"), "Wake, NC": Decimal("1.12"),
    "Guilford, NC": Decimal("1.08"),
    # Michigan
    "Wayne, MI": Decimal("1.15"), "Oakland, MI": Decimal("1.12"),
    "Macomb, MI": Decimal("1.10"),
    # Ohio
    "Cuyahoga, OH": Decimal("1.12"), "Franklin, OH": Decimal("1.10"),
    "Hamilton, OH": Decimal("1.08"),
    # Colorado
    "Denver, CO": Decimal("1.18"), "Jefferson, CO": Decimal("1.15"),
    "Arapahoe, CO": Decimal("1.12"), "Adams, CO": Decimal("1.10"),
    "Boulder, CO": Decimal("1.20"),
    # Oregon
    "Multnomah, OR": Decimal("1.15"), "Washington, OR": Decimal("1.12"),
    "Clackamas, OR": Decimal("1.10"),
    # Nevada
    "Clark, NV": Decimal("1.15"), "Washoe, NV": Decimal("1.12"),
})

_RURAL_PATTERNS = (
    re.compile(r"\bRural\b", re.IGNORECASE),
    re.compile(r"\bFarm", re.IGNORECASE),
    re.compile(r"\bAgricultural\b", re.IGNORECASE),
)


def state_rate_per_thousand(state: str) -> Decimal:
    return STATE_RATES_PER_THOUSAND.get(state.upper(), NATIONAL_AVERAGE_PER_THOUSAND)


def county_adjustment(county: str, state: str) -> Decimal:
    """Multiplier for a county relative to its state average (1.0 if unlisted)."""
    return COUNTY_ADJUSTMENTS.get(f"{county}, {state.upper()}", Decimal("1.0"))


def is_rural_county(county: str, state: str) -> bool:
    """Name-pattern heuristic for rural counties. Advisory only."""
    if f"{county}, {state.upper()}" in COUNTY_ADJUSTMENTS:
        return False
    return any(p.search(county) for p in _RURAL_PATTERNS)


def county_adjustment_description(adjustment: Decimal) -> str:
    if adjustment >= Decimal("1.3"):
        return "Major metropolitan area with significantly higher rates"
    if adjustment >= Decimal("1.2"):
        return "Large metropolitan area with higher rates"
    if adjustment >= Decimal("1.1"):
        return "Metropolitan area with moderately higher rates"
    if adjustment > Decimal("1.0"):
        return "Suburban area with slightly higher rates"
    if adjustment == Decimal("1.0"):
        return "Average rates for the state"
    if adjustment >= Decimal("0.9"):
        return "Rural area with lower rates"
    return "Very rural area with significantly lower rates"
