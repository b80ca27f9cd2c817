"""Loan payment math.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")


def monthly_payment(principal: Decimal, annual_rate: Decimal, term_years: int) -> Decimal:
    """Calculate fixed monthly mortgage payment."""
    if principal <= 0:
        return Decimal("0")
    if annual_rate <= 0:
        return (principal / (term_years * 12)).quantize(TWO_PLACES, ROUND_HALF_UP)

    r = annual_rate / 12
    n = term_years * 12
    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + r) ** n
    payment = principal * (r * factor) / (factor - 1)
    return payment.quantize(TWO_PLACES, ROUND_HALF_UP)


def present_value(payment: Decimal, monthly_rate: Decimal, periods: int) -> Decimal:
    """Principal supported by a fixed payment: P = M * [(1+r)^n - 1] / [r(1+r)^n]."""
    if payment <= 0:
        return Decimal("0")
    if monthly_rate <= 0:
        return payment * periods
    factor = (1 + monthly_rate) ** periods
    return payment * (factor - 1) / (monthly_rate * factor)
