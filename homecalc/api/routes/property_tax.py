"""Property tax routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from homecalc.api.deps import get_tax_resolver
from homecalc.api.schemas import PropertyTaxRequest, PropertyTaxResponse, TaxRecommendationResponse
from homecalc.data.tax_resolver import PropertyTaxResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["property-tax"])


@router.post("/property-tax", response_model=PropertyTaxResponse)
async def property_tax(
    req: PropertyTaxRequest,
    resolver: PropertyTaxResolver = Depends(get_tax_resolver),
):
    """Rates, exemptions and annual tax for a location, served from cache when fresh."""
    try:
        result = await resolver.resolve(req.to_query())
    except Exception:
        logger.exception("Property tax lookup failed for %s", req.state)
        raise HTTPException(status_code=500, detail="Failed to calculate property tax")
    return result.model_dump()


@router.post("/property-tax/recommendation", response_model=TaxRecommendationResponse)
async def property_tax_recommendation(
    req: PropertyTaxRequest,
    resolver: PropertyTaxResolver = Depends(get_tax_resolver),
):
    """Annual and monthly tax to plan around, blending the AI estimate with the state formula."""
    try:
        recommendation = await resolver.recommend(req.to_query())
    except Exception:
        logger.exception("Property tax recommendation failed for %s", req.state)
        raise HTTPException(status_code=500, detail="Failed to calculate property tax")
    return recommendation.model_dump()
