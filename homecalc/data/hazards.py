"""Static peril tables by state and county.

Simplified from FEMA wind and flood maps, USGS seismic hazard maps and the
USFS wildfire risk data. County keys use the "County, ST" form.
"""

from types import MappingProxyType

COASTAL_STATES: frozenset[str] = frozenset({
    "ME", "NH", "MA", "RI", "CT", "NY", "NJ", "DE", "MD", "VA",
    "NC", "SC", "GA", "FL", "AL", "MS", "LA", "TX", "CA", "OR",
    "WA", "AK", "HI",
})

# Per-peril state tiers; absence means "low"
WILDFIRE_STATES = MappingProxyType({
    "high": frozenset({"CA", "OR", "WA", "NV", "ID", "MT", "WY", "CO", "UT", "AZ", "NM"}),
    "medium": frozenset({"TX", "OK", "KS", "NE", "SD", "ND"}),
})

SEVERE_WEATHER_STATES = MappingProxyType({
    "high": frozenset({"OK", "KS", "TX", "NE", "SD", "IA", "MO", "AR", "LA", "MS", "AL"}),
    "medium": frozenset({"IL", "IN", "OH", "KY", "TN", "GA", "FL", "SC", "NC"}),
})

EARTHQUAKE_STATES = MappingProxyType({
    "high": frozenset({"CA", "AK", "WA", "OR", "NV", "UT"}),
    "medium": frozenset({"ID", "MT", "WY", "MO", "AR", "TN", "KY", "IL", "SC"}),
})

HIGH_RISK_COUNTIES = MappingProxyType({
    "hurricane": frozenset({
        "Miami-Dade, FL", "Broward, FL", "Palm Beach, FL", "Monroe, FL",
        "Harris, TX", "Galveston, TX", "Jefferson, TX", "Brazoria, TX",
        "Orleans, LA", "Jefferson, LA", "St. Bernard, LA", "Plaquemines, LA",
        "Mobile, AL", "Baldwin, AL", "Jackson, MS", "Harrison, MS",
    }),
    "wildfire": frozenset({
        "Los Angeles, CA", "San Diego, CA", "Riverside, CA", "San Bernardino, CA",
        "Ventura, CA", "Orange, CA", "Santa Barbara, CA", "Kern, CA",
        "Boulder, CO", "El Paso, CO", "Jefferson, CO", "Douglas, CO",
        "Deschutes, OR", "Jackson, OR", "Josephine, OR", "Klamath, OR",
    }),
    "tornado": frozenset({
        "Oklahoma, OK", "Cleveland, OK", "Canadian, OK", "Moore, OK",
        "Sedgwick, KS", "Johnson, KS", "Butler, KS", "Harvey, KS",
        "Dallas, TX", "Tarrant, TX", "Denton, TX", "Collin, TX",
        "Madison, AL", "Jefferson, AL", "Tuscaloosa, AL", "Shelby, AL",
    }),
    "earthquake": frozenset({
        "Los Angeles, CA", "San Francisco, CA", "Alameda, CA", "Santa Clara, CA",
        "King, WA", "Pierce, WA", "Snohomish, WA", "Clark, WA",
        "Salt Lake, UT", "Utah, UT", "Davis, UT", "Weber, UT",
        "Anchorage, AK", "Fairbanks North Star, AK", "Matanuska-Susitna, AK",
    }),
    "flood": frozenset({
        "Harris, TX", "Orleans, LA", "Miami-Dade, FL", "Kings, NY",
        "Galveston, TX", "Jefferson, LA", "Virginia Beach, VA", "Norfolk, VA",
        "Charleston, SC", "Horry, SC", "New Hanover, NC", "Dare, NC",
    }),
})


def state_tier(tiers: MappingProxyType, state: str) -> str:
    """Return "high", "medium" or "low" for a state in a per-peril tier table."""
    state_upper = state.upper()
    if state_upper in tiers["high"]:
        return "high"
    if state_upper in tiers["medium"]:
        return "medium"
    return "low"


def county_in(peril: str, county_full_name: str) -> bool:
    return county_full_name in HIGH_RISK_COUNTIES[peril]
