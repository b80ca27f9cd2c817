"""Homeowners insurance route."""

from decimal import Decimal

from fastapi import APIRouter, Query

from homecalc.api.schemas import InsuranceResponse, RiskFactorsResponse
from homecalc.data.insurance_rates import county_adjustment_description, is_rural_county
from homecalc.data.location import state_abbreviation
from homecalc.engine.insurance import estimate_homeowners_insurance
from homecalc.errors import InvalidInput
from homecalc.models.insurance import CountyData

router = APIRouter(prefix="/api", tags=["insurance"])


@router.get("/insurance", response_model=InsuranceResponse)
async def insurance(
    home_value: Decimal = Query(..., gt=0),
    state: str | None = None,
    county: str | None = None,
    zip_code: str | None = Query(None, pattern=r"^\d{5}$"),
):
    """Annual premium estimate from state rates, county adjustment and peril risk."""
    state_code = None
    if state:
        state_code = state_abbreviation(state)
        if state_code is None:
            raise InvalidInput(f"Unknown state: {state}")

    county_data = CountyData(county=county, state=state_code) if county and state_code else None
    est = estimate_homeowners_insurance(home_value, state_code, county_data, zip_code)

    risks = None
    if est.risk_assessment is not None:
        r = est.risk_assessment
        risks = RiskFactorsResponse(
            flood_zone=r.flood_zone,
            coastal_county=r.coastal_county,
            wildfire_risk=r.wildfire_risk.value,
            severe_weather_risk=r.severe_weather_risk.value,
            earthquake_risk=r.earthquake_risk.value,
        )

    return InsuranceResponse(
        estimated_annual=est.estimated_annual,
        estimated_monthly=est.estimated_monthly,
        confidence=est.confidence,
        source=est.source,
        base_rate=est.factors.base_rate,
        county_adjustment=est.factors.county_adjustment,
        county_description=county_adjustment_description(est.factors.county_adjustment),
        likely_rural=county_data is not None and is_rural_county(county_data.county, county_data.state),
        risk_multiplier=est.factors.risk_multiplier,
        risk_assessment=risks,
        risk_labels=est.risk_labels,
    )
