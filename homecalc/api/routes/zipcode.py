"""ZIP code lookup route."""

from fastapi import APIRouter, Depends, Query

from homecalc.api.deps import get_zip_client
from homecalc.data.geocode import ZipCodeClient
from homecalc.models.location import ZipLocation

router = APIRouter(prefix="/api", tags=["location"])


@router.get("/zipcode", response_model=ZipLocation)
async def zipcode(
    zip_code: str | None = Query(None, alias="zip"),
    client: ZipCodeClient = Depends(get_zip_client),
):
    """City, state and county for a ZIP.

    Errors map to 400 (bad ZIP), 404 (unknown), 504 (timeout) or 500.
    """
    return await client.lookup(zip_code)
