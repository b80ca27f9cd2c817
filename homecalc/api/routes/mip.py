"""Mortgage insurance route."""

from fastapi import APIRouter

from homecalc.api.schemas import MIPRequest, MIPResponse
from homecalc.engine.mip import calculate_mip

router = APIRouter(prefix="/api", tags=["loan"])


@router.post("/mip", response_model=MIPResponse)
async def mip(req: MIPRequest):
    result = calculate_mip(req.loan_amount, req.home_price, req.term_years)
    return MIPResponse(
        loan_to_value=result.loan_to_value,
        upfront=result.upfront,
        annual_rate_pct=result.annual_rate_pct,
        monthly_premium=result.monthly_premium,
        warnings=result.warnings,
    )
