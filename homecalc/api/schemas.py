"""Pydantic request/response models for the API."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from homecalc.models.property_tax import LocationQuery


class CamelModel(BaseModel):
    """Accepts and emits camelCase field names; snake_case is accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Property tax ──────────────────────────────────────────────


class PropertyTaxRequest(CamelModel):
    state: str = Field(..., pattern=r"^[A-Z]{2}$", description="Two-letter state code")
    zip_code: str | None = Field(None, pattern=r"^\d{5}$")
    city: str | None = Field(None, min_length=1, max_length=100)
    county: str | None = Field(None, min_length=1, max_length=100)
    is_primary_residence: bool = True
    is_over_65: bool | None = None
    is_veteran: bool | None = None
    is_disabled: bool | None = None
    home_value: float | None = Field(None, ge=1000, le=50_000_000)

    def to_query(self) -> LocationQuery:
        return LocationQuery(**self.model_dump())


class ExemptionResponse(CamelModel):
    description: str
    amount: float | None = None
    discount: float | None = None


class ExemptionsResponse(CamelModel):
    homestead: ExemptionResponse | None = None
    senior: ExemptionResponse | None = None
    veteran: ExemptionResponse | None = None
    disability: ExemptionResponse | None = None


class TaxDetailsResponse(CamelModel):
    assessed_value: float
    exemption_total: float
    taxable_value: float
    jurisdiction: str


class PropertyTaxResponse(CamelModel):
    headline_rate: float
    applicable_rate: float
    exemptions: ExemptionsResponse
    estimated_annual_tax: float
    details: TaxDetailsResponse
    confidence: float
    sources: list[str]


class TaxRecommendationResponse(CamelModel):
    estimated_annual_tax: float
    monthly_tax: float
    effective_rate: float
    confidence: str
    source: str


# ── Loan / MIP ────────────────────────────────────────────────


class MIPRequest(BaseModel):
    loan_amount: Decimal
    home_price: Decimal
    term_years: int = Field(30, ge=1, le=40)


class MIPResponse(BaseModel):
    loan_to_value: Decimal
    upfront: Decimal
    annual_rate_pct: Decimal
    monthly_premium: Decimal
    warnings: list[str]


class AffordabilityRequest(BaseModel):
    annual_income: Decimal = Field(..., gt=0)
    monthly_debts: Decimal = Field(Decimal("0"), ge=0)
    fico: int = Field(..., ge=300, le=850)
    down_payment_pct: Decimal = Field(Decimal("3.5"), ge=0, lt=100)
    compensating_factor_increase: Decimal = Field(Decimal("0"), ge=0, description="DTI increase as a fraction")
    interest_rate: Decimal | None = Field(None, gt=0, lt=1, description="Annual rate as a fraction")
    monthly_property_tax: Decimal | None = Field(None, ge=0)
    monthly_insurance: Decimal | None = Field(None, ge=0)


class PITIResponse(BaseModel):
    principal_and_interest: Decimal
    property_tax: Decimal
    insurance: Decimal
    mip: Decimal
    total: Decimal


class AffordabilityResponse(BaseModel):
    max_loan_amount: Decimal
    max_home_price: Decimal
    down_payment: Decimal
    payment: PITIResponse | None
    max_dti: Decimal
    debt_to_income_ratio: Decimal
    loan_to_value_ratio: Decimal
    upfront_mip: Decimal
    meets_minimum_requirements: bool
    warnings: list[str]


# ── Insurance ─────────────────────────────────────────────────


class RiskFactorsResponse(BaseModel):
    flood_zone: bool
    coastal_county: bool
    wildfire_risk: str
    severe_weather_risk: str
    earthquake_risk: str


class InsuranceResponse(BaseModel):
    estimated_annual: Decimal
    estimated_monthly: Decimal
    confidence: str
    source: str
    base_rate: Decimal
    county_adjustment: Decimal
    county_description: str
    likely_rural: bool = False  # advisory, not applied to the premium
    risk_multiplier: Decimal
    risk_assessment: RiskFactorsResponse | None = None
    risk_labels: list[str]


# ── Scenarios ─────────────────────────────────────────────────


class ScenarioCreate(BaseModel):
    name: str | None = Field(None, max_length=200)
    notes: str | None = None
    inputs: dict
    compensating_factors: dict | None = None
    results: dict | None = None


class ScenarioUpdate(BaseModel):
    name: str | None = Field(None, max_length=200)
    notes: str | None = None
    inputs: dict | None = None
    compensating_factors: dict | None = None
    results: dict | None = None


class ScenarioResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None
    notes: str | None
    inputs: dict
    compensating_factors: dict | None
    results: dict | None
    created_at: datetime
    updated_at: datetime
