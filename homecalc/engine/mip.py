"""FHA mortgage insurance premium (MIP) rate table.

Rates follow HUD Mortgagee Letter 2023-05: a flat 1.75% upfront premium and an
annual premium chosen by term, loan amount tier and LTV.
"""

from decimal import Decimal, ROUND_HALF_UP

from homecalc.errors import InvalidInput
from homecalc.models.loan import MIPResult

TWO_PLACES = Decimal("0.01")

LOAN_AMOUNT_THRESHOLD = Decimal("726200")
UPFRONT_RATE = Decimal("0.0175")
FHA_MAX_LOAN_HIGH_COST = Decimal("1149825")
MAX_TYPICAL_LTV_PCT = Decimal("96.5")

# (max LTV percent inclusive, annual rate); the last row has no ceiling
SHORT_TERM_BASE = ((Decimal("90"), Decimal("0.0015")), (None, Decimal("0.0040")))
SHORT_TERM_HIGH = (
    (Decimal("78"), Decimal("0.0015")),
    (Decimal("90"), Decimal("0.0040")),
    (None, Decimal("0.0065")),
)
LONG_TERM_BASE = ((Decimal("95"), Decimal("0.0050")), (None, Decimal("0.0055")))
LONG_TERM_HIGH = ((Decimal("95"), Decimal("0.0070")), (None, Decimal("0.0075")))


def _validate(loan_amount: Decimal, home_price: Decimal) -> None:
    if loan_amount < 0:
        raise InvalidInput("Loan amount cannot be negative")
    if home_price <= 0:
        raise InvalidInput("Home price must be greater than zero")
    if loan_amount >= home_price:
        raise InvalidInput("Loan amount cannot equal or exceed home price")


def loan_to_value_pct(loan_amount: Decimal, home_price: Decimal) -> Decimal:
    return loan_amount / home_price * 100


def annual_mip_rate(loan_amount: Decimal, ltv_pct: Decimal, term_years: int) -> Decimal:
    """Annual MIP rate as a decimal fraction (0.0055 = 0.55%).

    A loan of exactly $726,200 is in the base tier.
    """
    high_amount = loan_amount > LOAN_AMOUNT_THRESHOLD
    if term_years <= 15:
        table = SHORT_TERM_HIGH if high_amount else SHORT_TERM_BASE
    else:
        table = LONG_TERM_HIGH if high_amount else LONG_TERM_BASE

    for ceiling, rate in table:
        if ceiling is None or ltv_pct <= ceiling:
            return rate
    raise AssertionError("MIP table has no open-ended tier")


def mip_warnings(loan_amount: Decimal, home_price: Decimal, term_years: int) -> list[str]:
    """Advisory warnings for inputs that are valid but atypical for FHA."""
    warnings = []
    if home_price > 0 and loan_to_value_pct(loan_amount, home_price) > MAX_TYPICAL_LTV_PCT:
        warnings.append("LTV exceeds typical FHA maximum of 96.5%")
    if term_years < 8 or term_years > 30:
        warnings.append("Unusual loan term - verify MIP rates apply")
    if loan_amount > FHA_MAX_LOAN_HIGH_COST:
        warnings.append("Loan amount may exceed FHA limits in your area")
    return warnings


def calculate_mip(loan_amount: Decimal, home_price: Decimal, term_years: int = 30) -> MIPResult:
    """Resolve the MIP tier and compute upfront and monthly premiums.

    Raises:
        InvalidInput: negative loan, non-positive price, or LTV >= 100%.
    """
    _validate(loan_amount, home_price)

    ltv_pct = loan_to_value_pct(loan_amount, home_price)
    rate = annual_mip_rate(loan_amount, ltv_pct, term_years)

    return MIPResult(
        loan_to_value=ltv_pct.quantize(TWO_PLACES, ROUND_HALF_UP),
        upfront=(loan_amount * UPFRONT_RATE).quantize(TWO_PLACES, ROUND_HALF_UP),
        annual_rate_pct=rate * 100,
        monthly_premium=(loan_amount * rate / 12).quantize(TWO_PLACES, ROUND_HALF_UP),
        warnings=mip_warnings(loan_amount, home_price, term_years),
    )
