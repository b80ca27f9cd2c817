"""FastAPI dependency injection."""

from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from homecalc.config import settings
from homecalc.data.geocode import ZipCodeClient
from homecalc.data.scenario_store import ScenarioStore
from homecalc.data.tax_cache import PropertyTaxCache
from homecalc.data.tax_resolver import PropertyTaxResolver

engine = create_async_engine(settings.database_url, echo=settings.debug)
async_session = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncSession:
    async with async_session() as session:
        yield session


@lru_cache
def get_tax_cache() -> PropertyTaxCache:
    return PropertyTaxCache(settings.tax_cache_db_path, settings.tax_cache_max_entries)


def get_tax_resolver(cache: PropertyTaxCache = Depends(get_tax_cache)) -> PropertyTaxResolver:
    return PropertyTaxResolver(cache=cache)


def get_zip_client() -> ZipCodeClient:
    return ZipCodeClient()


def get_user_id(x_user_id: str | None = Header(None)) -> str:
    """Identity established upstream by the auth provider."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_user_id


def get_scenario_store(db: AsyncSession = Depends(get_db)) -> ScenarioStore:
    return ScenarioStore(db)
