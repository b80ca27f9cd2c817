"""Pydantic models for property tax lookups and the tax cache."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

FALLBACK_SOURCE = "Fallback calculation"


class LocationQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: str  # 2-letter code
    zip_code: str | None = None
    city: str | None = None
    county: str | None = None
    is_primary_residence: bool = True
    is_over_65: bool | None = None
    is_veteran: bool | None = None
    is_disabled: bool | None = None
    home_value: float | None = None

    @property
    def has_special_exemptions(self) -> bool:
        return bool(self.is_over_65 or self.is_veteran or self.is_disabled)

    @property
    def jurisdiction(self) -> str:
        if self.county:
            return f"{self.county}, {self.state}"
        if self.city:
            return f"{self.city}, {self.state}"
        return self.state


class Exemption(BaseModel):
    description: str
    amount: float | None = None  # dollars off assessed value
    discount: float | None = None  # percent off taxable value


class TaxExemptions(BaseModel):
    homestead: Exemption | None = None
    senior: Exemption | None = None
    veteran: Exemption | None = None
    disability: Exemption | None = None


class TaxDetails(BaseModel):
    assessed_value: float
    exemption_total: float
    taxable_value: float
    jurisdiction: str


class PropertyTaxResult(BaseModel):
    headline_rate: float  # decimal fraction, e.g. 0.018
    applicable_rate: float  # decimal fraction after exemptions
    exemptions: TaxExemptions
    estimated_annual_tax: float
    details: TaxDetails
    confidence: float  # 0.0–1.0
    sources: list[str]

    @property
    def is_fallback(self) -> bool:
        return FALLBACK_SOURCE in self.sources


class PropertyTaxRecord(PropertyTaxResult):
    """A cached PropertyTaxResult with the query denormalized for inspection."""

    cache_key: str
    state: str
    zip_code: str | None = None
    city: str | None = None
    county: str | None = None
    is_primary_residence: bool = True
    is_over_65: bool | None = None
    is_veteran: bool | None = None
    is_disabled: bool | None = None
    home_value: float | None = None
    last_updated: datetime
    expires_at: datetime

    def to_result(self) -> PropertyTaxResult:
        return PropertyTaxResult(
            headline_rate=self.headline_rate,
            applicable_rate=self.applicable_rate,
            exemptions=self.exemptions,
            estimated_annual_tax=self.estimated_annual_tax,
            details=self.details,
            confidence=self.confidence,
            sources=self.sources,
        )


class TaxCacheStats(BaseModel):
    total: int
    active: int
    expired: int
    by_state: dict[str, int]


class TaxRecommendation(BaseModel):
    """Annual tax to plan around, chosen from the AI estimate and the state formula."""

    estimated_annual_tax: float
    monthly_tax: float
    effective_rate: float  # percent
    confidence: str  # "low" | "medium" | "high"
    source: str
