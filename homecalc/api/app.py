"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from homecalc.api.deps import get_tax_cache
from homecalc.api.routes import affordability, insurance, mip, property_tax, scenarios, zipcode
from homecalc.config import settings
from homecalc.data.sweeper import run_sweeper
from homecalc.errors import ExternalUnavailable, InvalidInput, LookupTimeout, NotFound

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    sweeper = None
    if settings.cache_sweep_interval_hours > 0:
        sweeper = asyncio.get_running_loop().create_task(
            run_sweeper(get_tax_cache(), settings.cache_sweep_interval_hours)
        )
    yield
    if sweeper is not None:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass


app = FastAPI(
    title="HomeCalc",
    description="Mortgage affordability, property tax and insurance estimates",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(property_tax.router)
app.include_router(zipcode.router)
app.include_router(insurance.router)
app.include_router(mip.router)
app.include_router(affordability.router)
app.include_router(scenarios.router)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid input data", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(InvalidInput)
async def invalid_input(request: Request, exc: InvalidInput):
    return _error(400, str(exc))


@app.exception_handler(NotFound)
async def not_found(request: Request, exc: NotFound):
    return _error(404, str(exc))


@app.exception_handler(LookupTimeout)
async def lookup_timeout(request: Request, exc: LookupTimeout):
    logger.warning("External lookup timed out on %s", request.url.path)
    return _error(504, str(exc))


@app.exception_handler(ExternalUnavailable)
async def external_unavailable(request: Request, exc: ExternalUnavailable):
    logger.error("External service failed on %s: %s", request.url.path, exc)
    return _error(500, "Internal server error")


@app.get("/health")
async def health():
    return {"status": "ok"}


def serve() -> None:
    """Run the API with uvicorn on the configured host and port."""
    logger.info("Starting HomeCalc API on %s:%s", settings.api_host, settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    serve()
