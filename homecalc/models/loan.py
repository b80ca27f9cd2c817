from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class MIPResult:
    loan_to_value: Decimal  # percent, e.g. 95.24
    upfront: Decimal
    annual_rate_pct: Decimal  # e.g. 0.55 for 0.55%
    monthly_premium: Decimal
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PITIBreakdown:
    principal_and_interest: Decimal
    property_tax: Decimal
    insurance: Decimal
    mip: Decimal
    total: Decimal


@dataclass(frozen=True)
class AffordabilityResult:
    max_loan_amount: Decimal
    max_home_price: Decimal
    down_payment: Decimal
    payment: PITIBreakdown | None
    debt_to_income_ratio: Decimal  # percent
    loan_to_value_ratio: Decimal  # percent
    upfront_mip: Decimal
    meets_minimum_requirements: bool
    warnings: list[str] = field(default_factory=list)
