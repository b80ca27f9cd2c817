"""FHA borrowing power and monthly payment.

Combines the amortization math, the MIP table and income/DTI limits into a
maximum loan, maximum home price and PITI breakdown.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from homecalc.engine.debt import monthly_payment, present_value
from homecalc.engine.mip import LOAN_AMOUNT_THRESHOLD, calculate_mip
from homecalc.models.loan import AffordabilityResult, PITIBreakdown

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
WHOLE_DOLLARS = Decimal("1")

DEFAULT_INTEREST_RATE = Decimal("0.07")
LOAN_TERM_YEARS = 30

BASE_DTI = Decimal("0.43")
MAX_DTI_WITH_FACTORS = Decimal("0.5699")
MIN_FICO_LOW_DOWN = 580
MIN_FICO = 500
MIN_DOWN_PAYMENT_PCT = Decimal("3.5")
MIN_DOWN_PAYMENT_PCT_LOW_FICO = Decimal("10")

# Estimates used when the caller has no tax or insurance figure
DEFAULT_TAX_RATE = Decimal("0.012")
DEFAULT_INSURANCE_RATE = Decimal("0.003")

# Approximate monthly MIP folded into the rate when sizing a loan
ESTIMATED_MIP_BASE = Decimal("0.0050")
ESTIMATED_MIP_HIGH = Decimal("0.0070")


def calculate_piti(
    loan_amount: Decimal,
    home_price: Decimal,
    annual_rate: Decimal = DEFAULT_INTEREST_RATE,
    monthly_property_tax: Decimal | None = None,
    monthly_insurance: Decimal | None = None,
    term_years: int = LOAN_TERM_YEARS,
) -> PITIBreakdown:
    """Principal, interest, taxes, insurance and MIP for one month.

    Missing tax or insurance figures default to 1.2% and 0.3% of the home
    price per year.
    """
    pi = monthly_payment(loan_amount, annual_rate, term_years)
    mip = calculate_mip(loan_amount, home_price, term_years).monthly_premium
    tax = home_price * DEFAULT_TAX_RATE / 12 if monthly_property_tax is None else monthly_property_tax
    insurance = home_price * DEFAULT_INSURANCE_RATE / 12 if monthly_insurance is None else monthly_insurance
    total = pi + tax + insurance + mip

    return PITIBreakdown(
        principal_and_interest=pi.quantize(WHOLE_DOLLARS, ROUND_HALF_UP),
        property_tax=tax.quantize(WHOLE_DOLLARS, ROUND_HALF_UP),
        insurance=insurance.quantize(WHOLE_DOLLARS, ROUND_HALF_UP),
        mip=mip,
        total=total.quantize(WHOLE_DOLLARS, ROUND_HALF_UP),
    )


def max_loan_amount(
    annual_income: Decimal,
    dti_ratio: Decimal,
    monthly_debts: Decimal,
    annual_rate: Decimal = DEFAULT_INTEREST_RATE,
    term_years: int = LOAN_TERM_YEARS,
) -> Decimal:
    """Largest loan whose payment plus monthly MIP fits under the DTI limit.

    MIP is approximated by adding the common annual rate (0.50%, or 0.70%
    above the loan-amount threshold) to the interest rate.
    """
    max_housing_payment = annual_income / 12 * dti_ratio - monthly_debts
    if max_housing_payment <= 0:
        return Decimal("0")

    monthly_rate = annual_rate / 12
    periods = term_years * 12
    base_amount = present_value(max_housing_payment, monthly_rate, periods)

    estimated_mip = ESTIMATED_MIP_BASE if base_amount <= LOAN_AMOUNT_THRESHOLD else ESTIMATED_MIP_HIGH
    adjusted = present_value(max_housing_payment, monthly_rate + estimated_mip / 12, periods)
    return max(Decimal("0"), adjusted).quantize(TWO_PLACES, ROUND_HALF_UP)


def calculate_max_dti(base_dti: Decimal, compensating_factor_increase: Decimal) -> Decimal:
    """DTI limit raised by compensating factors, capped at 56.99%."""
    return min(base_dti + compensating_factor_increase, MAX_DTI_WITH_FACTORS).quantize(
        Decimal("0.0001"), ROUND_HALF_UP
    )


def debt_to_income(monthly_debts: Decimal, annual_income: Decimal) -> Decimal:
    """Back-end DTI as a percent."""
    if annual_income <= 0:
        return Decimal("0")
    return (monthly_debts / (annual_income / 12) * 100).quantize(TWO_PLACES, ROUND_HALF_UP)


def fha_eligibility(fico: int, down_payment_pct: Decimal) -> tuple[bool, list[str]]:
    warnings = []
    if fico < MIN_FICO:
        return False, [f"Minimum FICO score of {MIN_FICO} required for FHA loans"]
    if fico < MIN_FICO_LOW_DOWN:
        if down_payment_pct < MIN_DOWN_PAYMENT_PCT_LOW_FICO:
            warnings.append(
                f"FICO score {fico} requires minimum {MIN_DOWN_PAYMENT_PCT_LOW_FICO}% down payment"
            )
    elif down_payment_pct < MIN_DOWN_PAYMENT_PCT:
        warnings.append(f"Minimum down payment of {MIN_DOWN_PAYMENT_PCT}% required")
    return True, warnings


def _unqualified(warnings: list[str], dti: Decimal = Decimal("0")) -> AffordabilityResult:
    zero = Decimal("0")
    return AffordabilityResult(
        max_loan_amount=zero,
        max_home_price=zero,
        down_payment=zero,
        payment=None,
        debt_to_income_ratio=dti,
        loan_to_value_ratio=zero,
        upfront_mip=zero,
        meets_minimum_requirements=False,
        warnings=warnings,
    )


def calculate_affordability(
    annual_income: Decimal,
    monthly_debts: Decimal,
    fico: int,
    down_payment_pct: Decimal = MIN_DOWN_PAYMENT_PCT,
    max_dti: Decimal = BASE_DTI,
    annual_rate: Decimal = DEFAULT_INTEREST_RATE,
    monthly_property_tax: Decimal | None = None,
    monthly_insurance: Decimal | None = None,
) -> AffordabilityResult:
    """Maximum FHA loan and home price for a borrower.

    Args:
        annual_income: Gross annual income
        monthly_debts: Recurring monthly debt payments, excluding housing
        fico: Credit score
        down_payment_pct: Requested down payment percent; raised to the FHA
            minimum for the credit score
        max_dti: DTI limit as a fraction (0.43 base, up to 0.5699)
        annual_rate: Interest rate as a fraction
    """
    warnings = []
    min_down = MIN_DOWN_PAYMENT_PCT if fico >= MIN_FICO_LOW_DOWN else MIN_DOWN_PAYMENT_PCT_LOW_FICO
    if down_payment_pct < min_down:
        warnings.append(f"Down payment increased to FHA minimum of {min_down}% based on credit score")
        down_payment_pct = min_down

    eligible, eligibility_warnings = fha_eligibility(fico, down_payment_pct)
    warnings.extend(eligibility_warnings)
    if not eligible:
        return _unqualified(warnings)

    loan = max_loan_amount(annual_income, max_dti, monthly_debts, annual_rate)
    if loan <= 0:
        warnings.append("Current income and debts do not qualify for any loan amount")
        return _unqualified(warnings, debt_to_income(monthly_debts, annual_income))

    home_price = loan / (1 - down_payment_pct / 100)
    down_payment = home_price * down_payment_pct / 100
    payment = calculate_piti(loan, home_price, annual_rate, monthly_property_tax, monthly_insurance)
    mip = calculate_mip(loan, home_price)
    warnings.extend(mip.warnings)

    # DTI reported is the limit the loan was sized against
    used_dti = (max_dti * 100).quantize(TWO_PLACES, ROUND_HALF_UP)
    logger.debug("Affordability: loan %s, price %s at DTI %s%%", loan, home_price, used_dti)

    return AffordabilityResult(
        max_loan_amount=loan.quantize(WHOLE_DOLLARS, ROUND_HALF_UP),
        max_home_price=home_price.quantize(WHOLE_DOLLARS, ROUND_HALF_UP),
        down_payment=down_payment.quantize(WHOLE_DOLLARS, ROUND_HALF_UP),
        payment=payment,
        debt_to_income_ratio=used_dti,
        loan_to_value_ratio=mip.loan_to_value,
        upfront_mip=mip.upfront,
        meets_minimum_requirements=used_dti <= MAX_DTI_WITH_FACTORS * 100,
        warnings=warnings,
    )
