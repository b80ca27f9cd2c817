"""Borrowing power route."""

from fastapi import APIRouter

from homecalc.api.schemas import AffordabilityRequest, AffordabilityResponse, PITIResponse
from homecalc.engine.affordability import BASE_DTI, DEFAULT_INTEREST_RATE, calculate_affordability, calculate_max_dti

router = APIRouter(prefix="/api", tags=["loan"])


@router.post("/affordability", response_model=AffordabilityResponse)
async def affordability(req: AffordabilityRequest):
    """Maximum FHA loan, home price and monthly payment for a borrower."""
    max_dti = calculate_max_dti(BASE_DTI, req.compensating_factor_increase)
    result = calculate_affordability(
        annual_income=req.annual_income,
        monthly_debts=req.monthly_debts,
        fico=req.fico,
        down_payment_pct=req.down_payment_pct,
        max_dti=max_dti,
        annual_rate=req.interest_rate or DEFAULT_INTEREST_RATE,
        monthly_property_tax=req.monthly_property_tax,
        monthly_insurance=req.monthly_insurance,
    )

    payment = None
    if result.payment is not None:
        payment = PITIResponse(
            principal_and_interest=result.payment.principal_and_interest,
            property_tax=result.payment.property_tax,
            insurance=result.payment.insurance,
            mip=result.payment.mip,
            total=result.payment.total,
        )

    return AffordabilityResponse(
        max_loan_amount=result.max_loan_amount,
        max_home_price=result.max_home_price,
        down_payment=result.down_payment,
        payment=payment,
        max_dti=max_dti,
        debt_to_income_ratio=result.debt_to_income_ratio,
        loan_to_value_ratio=result.loan_to_value_ratio,
        upfront_mip=result.upfront_mip,
        meets_minimum_requirements=result.meets_minimum_requirements,
        warnings=result.warnings,
    )
