"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from sa_tax.api.routes import router
from sa_tax.calculators.errors import InvalidInputError, TaxCalculationError
from sa_tax.calculators.tax_data import TAX_YEARS

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: configure logging and report loaded tax years."""
    logging.basicConfig(level=settings.log_level)
    logger.info("Starting up with tax years: %s", ", ".join(sorted(TAX_YEARS)))

    yield

    logger.info("Shutting down...")


async def tax_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn calculator errors into JSON error responses.

    Bad input is a 400 naming the field; table integrity faults are a 500.
    """
    if isinstance(exc, InvalidInputError):
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse({"error": str(exc), "field": exc.field}, status_code=400)

    # Table integrity faults: the request was fine, the data is not
    logger.error("Tax table error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": str(exc), "field": None}, status_code=500)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="SA Tax Calculator", lifespan=lifespan)
    app.add_exception_handler(TaxCalculationError, tax_error_handler)
    app.include_router(router)
    return app
