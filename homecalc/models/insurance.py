from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class RiskLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class CountyData:
    county: str
    state: str
    fips: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.county}, {self.state}"


@dataclass(frozen=True)
class RiskFactors:
    flood_zone: bool = False
    coastal_county: bool = False
    wildfire_risk: RiskLevel = RiskLevel.LOW
    severe_weather_risk: RiskLevel = RiskLevel.LOW
    earthquake_risk: RiskLevel = RiskLevel.LOW


@dataclass(frozen=True)
class InsuranceFactors:
    base_rate: Decimal  # dollars per $1,000 of coverage
    county_adjustment: Decimal
    risk_multiplier: Decimal


@dataclass(frozen=True)
class InsuranceEstimate:
    estimated_annual: Decimal
    estimated_monthly: Decimal
    confidence: str  # "low" | "medium" | "high"
    source: str
    factors: InsuranceFactors
    county: CountyData | None = None
    risk_assessment: RiskFactors | None = None
    risk_labels: list[str] = field(default_factory=list)
