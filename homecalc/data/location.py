"""Free-text location parsing and ZIP enrichment."""

import logging
import re

from homecalc.data.geocode import ZipCodeClient
from homecalc.errors import ExternalUnavailable, NotFound
from homecalc.models.location import ParsedLocation

logger = logging.getLogger(__name__)

STATE_NAMES = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas", "CA": "California",
    "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware", "DC": "District of Columbia",
    "FL": "Florida", "GA": "Georgia", "HI": "Hawaii", "ID": "Idaho", "IL": "Illinois",
    "IN": "Indiana", "IA": "Iowa", "KS": "Kansas", "KY": "Kentucky", "LA": "Louisiana",
    "ME": "Maine", "MD": "Maryland", "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota",
    "MS": "Mississippi", "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada",
    "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York",
    "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma", "OR": "Oregon",
    "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina", "SD": "South Dakota",
    "TN": "Tennessee", "TX": "Texas", "UT": "Utah", "VT": "Vermont", "VA": "Virginia",
    "WA": "Washington", "WV": "West Virginia", "WI": "Wisconsin", "WY": "Wyoming",
}
_ABBREVIATIONS = {name.lower(): abbr for abbr, name in STATE_NAMES.items()}

ZIP_RE = re.compile(r"\b(\d{5}(?:-\d{4})?)\b")
# Longest names first so "West Virginia" wins over "Virginia"
_STATE_NAME_RE = re.compile(
    r"\b(" + "|".join(sorted((re.escape(n) for n in STATE_NAMES.values()), key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)
# Abbreviations are matched in upper case only; "in", "or" and "me" are words
_STATE_ABBR_RE = re.compile(r"\b(" + "|".join(STATE_NAMES) + r")\b")


def state_abbreviation(text: str) -> str | None:
    """Two-letter code for a state name or code, or None."""
    normalized = text.strip()
    if normalized.upper() in STATE_NAMES:
        return normalized.upper()
    return _ABBREVIATIONS.get(normalized.lower())


def parse_location(text: str) -> ParsedLocation:
    """Split "City, ST 12345" style input into its parts.

    The city is whatever remains after the ZIP and state are removed.
    """
    zip_match = ZIP_RE.search(text)
    zip_code = zip_match.group(1) if zip_match else None

    state = None
    remainder = ZIP_RE.sub("", text)
    name_matches = list(_STATE_NAME_RE.finditer(remainder))
    if name_matches:
        match = name_matches[-1]
        state = state_abbreviation(match.group(1))
    else:
        abbr_matches = list(_STATE_ABBR_RE.finditer(remainder))
        match = abbr_matches[-1] if abbr_matches else None
        if match:
            state = match.group(1)
    if match:
        remainder = remainder[:match.start()] + remainder[match.end():]

    city = re.sub(r"[,\s]+", " ", remainder).strip() or None
    return ParsedLocation(state=state, city=city, zip_code=zip_code)


async def resolve_location(text: str, zip_client: ZipCodeClient | None = None) -> ParsedLocation:
    """Parse text and, when it carries a ZIP, fill county (and missing parts) from the ZIP lookup.

    A failed lookup leaves the parsed result as is.
    """
    parsed = parse_location(text)
    if not parsed.zip_code:
        return parsed

    client = zip_client or ZipCodeClient()
    try:
        found = await client.lookup(parsed.zip_code[:5])
    except (NotFound, ExternalUnavailable) as e:
        logger.warning("ZIP enrichment failed for %s: %s", parsed.zip_code, e)
        return parsed

    return ParsedLocation(
        state=parsed.state or found.state,
        city=parsed.city or found.city,
        zip_code=parsed.zip_code[:5],
        county=found.county,
    )
