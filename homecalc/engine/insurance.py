"""Location-based homeowners insurance model.

Peril layers: flood, coastal exposure, wildfire, severe weather, earthquake.
Each applicable layer is a multiplier on the state base rate, and the
multipliers compound without a cap. County adjustments scale the state rate
for metro areas.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from homecalc.data.hazards import COASTAL_STATES, EARTHQUAKE_STATES, SEVERE_WEATHER_STATES, WILDFIRE_STATES, county_in, state_tier
from homecalc.data.insurance_rates import NATIONAL_AVERAGE_PER_THOUSAND, county_adjustment, state_rate_per_thousand
from homecalc.models.insurance import CountyData, InsuranceEstimate, InsuranceFactors, RiskFactors, RiskLevel

logger = logging.getLogger(__name__)

FLOOD_MULTIPLIER = Decimal("1.3")
COASTAL_MULTIPLIER = Decimal("1.2")

WILDFIRE_MULTIPLIERS: dict[RiskLevel, Decimal] = {
    RiskLevel.HIGH: Decimal("1.25"), RiskLevel.MEDIUM: Decimal("1.10"),
}
SEVERE_WEATHER_MULTIPLIERS: dict[RiskLevel, Decimal] = {
    RiskLevel.HIGH: Decimal("1.15"), RiskLevel.MEDIUM: Decimal("1.08"),
}
EARTHQUAKE_MULTIPLIERS: dict[RiskLevel, Decimal] = {
    RiskLevel.HIGH: Decimal("1.20"), RiskLevel.MEDIUM: Decimal("1.10"),
}


def _upgrade(current: RiskLevel, county_is_high: bool) -> RiskLevel:
    return RiskLevel.HIGH if county_is_high else current


def assess_risk(zip_code: str | None, county: CountyData | None, state: str | None) -> RiskFactors:
    """Derive peril levels from state tiers, then upgrade from county lists.

    County membership can raise a peril to high but never lowers it.
    """
    if not state:
        return RiskFactors()

    state = state.upper()
    flood_zone = False
    wildfire = RiskLevel(state_tier(WILDFIRE_STATES, state))
    severe_weather = RiskLevel(state_tier(SEVERE_WEATHER_STATES, state))
    earthquake = RiskLevel(state_tier(EARTHQUAKE_STATES, state))

    if county is not None:
        name = county.full_name
        flood_zone = county_in("flood", name) or county_in("hurricane", name)
        wildfire = _upgrade(wildfire, county_in("wildfire", name))
        severe_weather = _upgrade(
            severe_weather, county_in("tornado", name) or county_in("hurricane", name)
        )
        earthquake = _upgrade(earthquake, county_in("earthquake", name))

    return RiskFactors(
        flood_zone=flood_zone,
        coastal_county=state in COASTAL_STATES,
        wildfire_risk=wildfire,
        severe_weather_risk=severe_weather,
        earthquake_risk=earthquake,
    )


def risk_multiplier(factors: RiskFactors) -> Decimal:
    multiplier = Decimal("1.0")
    if factors.flood_zone:
        multiplier *= FLOOD_MULTIPLIER
    if factors.coastal_county:
        multiplier *= COASTAL_MULTIPLIER
    multiplier *= WILDFIRE_MULTIPLIERS.get(factors.wildfire_risk, Decimal("1.0"))
    multiplier *= SEVERE_WEATHER_MULTIPLIERS.get(factors.severe_weather_risk, Decimal("1.0"))
    multiplier *= EARTHQUAKE_MULTIPLIERS.get(factors.earthquake_risk, Decimal("1.0"))
    return multiplier


def format_risk_assessment(factors: RiskFactors) -> list[str]:
    """Human-readable labels for the elevated perils."""
    labels = []
    if factors.flood_zone:
        labels.append("Flood zone - higher risk")
    if factors.coastal_county:
        labels.append("Coastal location - hurricane risk")

    described = (
        (factors.wildfire_risk, "High wildfire risk area", "Moderate wildfire risk"),
        (factors.severe_weather_risk, "High severe weather risk (tornadoes/hail)", "Moderate severe weather risk"),
        (factors.earthquake_risk, "High earthquake risk", "Moderate earthquake risk"),
    )
    for level, high_label, medium_label in described:
        if level is RiskLevel.HIGH:
            labels.append(high_label)
        elif level is RiskLevel.MEDIUM:
            labels.append(medium_label)
    return labels


def _confidence(has_county: bool, has_zip: bool) -> str:
    if has_county and has_zip:
        return "high"
    if has_county or has_zip:
        return "medium"
    return "low"


def estimate_homeowners_insurance(
    home_value: Decimal,
    state: str | None,
    county: CountyData | None = None,
    zip_code: str | None = None,
) -> InsuranceEstimate:
    """Annual premium = (value / 1000) x state rate x county adjustment x risk multiplier."""
    if not state:
        premium = home_value / 1000 * NATIONAL_AVERAGE_PER_THOUSAND
        logger.info("No state for insurance estimate, using national average")
        return InsuranceEstimate(
            estimated_annual=premium.quantize(Decimal("1"), ROUND_HALF_UP),
            estimated_monthly=(premium / 12).quantize(Decimal("1"), ROUND_HALF_UP),
            confidence="low",
            source="National average (location not determined)",
            factors=InsuranceFactors(
                base_rate=NATIONAL_AVERAGE_PER_THOUSAND,
                county_adjustment=Decimal("1.0"),
                risk_multiplier=Decimal("1.0"),
            ),
        )

    state = state.upper()
    base_rate = state_rate_per_thousand(state)
    adjustment = county_adjustment(county.county, county.state) if county else Decimal("1.0")
    risks = assess_risk(zip_code, county, state)
    multiplier = risk_multiplier(risks)

    premium = home_value / 1000 * base_rate * adjustment * multiplier
    logger.debug(
        "Insurance %s: base %s x county %s x risk %s", state, base_rate, adjustment, multiplier
    )

    return InsuranceEstimate(
        estimated_annual=premium.quantize(Decimal("1"), ROUND_HALF_UP),
        estimated_monthly=(premium / 12).quantize(Decimal("1"), ROUND_HALF_UP),
        confidence=_confidence(county is not None, bool(zip_code)),
        source=f"County-level data for {county.full_name}" if county else f"State average for {state}",
        factors=InsuranceFactors(
            base_rate=base_rate,
            county_adjustment=adjustment,
            risk_multiplier=multiplier,
        ),
        county=county,
        risk_assessment=risks,
        risk_labels=format_risk_assessment(risks),
    )
