"""
Dashboard - API.

============================================================
RESPONSIBILITY
============================================================
HTTP JSON interface to the service.

- App factory; the service container is injected, never global
- Every InsightsError becomes {"error": <type>, "message": <text>}
  with a status code chosen by error type
- Lifespan connects the database on startup and, when the app
  built its own container, closes everything on shutdown

============================================================
ERROR MAPPING
============================================================
ValidationError                       400
NotAuthenticatedError                 401
RecordNotFoundError, ProviderDataError 404
DuplicateRecordError                  409
ProviderRateLimitError                429
TransportError, ParseError            502
DispatchTimeoutError                  504
anything else                         500

============================================================
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import AppConfig
from core.constants import SYSTEM_NAME, SYSTEM_VERSION
from core.container import ServiceContainer, build_container
from core.exceptions import InsightsError, NotAuthenticatedError, ValidationError
from dashboard.routers import health, stocks, watchlist
from data_sources.exceptions import (
    DispatchTimeoutError,
    ParseError,
    ProviderDataError,
    ProviderRateLimitError,
    TransportError,
)
from storage.repositories.exceptions import DuplicateRecordError, RecordNotFoundError

logger = logging.getLogger(__name__)


# Checked in order; first isinstance match wins
ERROR_STATUS_CODES: List[Tuple[Type[InsightsError], int]] = [
    (ValidationError, 400),
    (NotAuthenticatedError, 401),
    (RecordNotFoundError, 404),
    (ProviderDataError, 404),
    (DuplicateRecordError, 409),
    (ProviderRateLimitError, 429),
    (DispatchTimeoutError, 504),
    (TransportError, 502),
    (ParseError, 502),
]


def status_for(error: InsightsError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


async def insights_error_handler(request: Request, exc: InsightsError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {status_code}: {exc.to_log_format()}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": exc.message},
    )


def create_app(
    container: Optional[ServiceContainer] = None,
    close_container: Optional[bool] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Pre-built services. When omitted, one is built from the
            environment at startup.
        close_container: Close the container at shutdown. Defaults to True
            only when the app built the container itself.
    """
    owns_container = container is None if close_container is None else close_container

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        services = app.state.container
        if services is None:
            services = build_container(AppConfig.from_env())
            app.state.container = services
        await services.startup()
        logger.info(f"{SYSTEM_NAME} API ready")
        try:
            yield
        finally:
            if owns_container:
                await services.aclose()

    app = FastAPI(
        title="Stock Insights API",
        description="Watchlist and computed insights over rate-limited market data",
        version=SYSTEM_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InsightsError, insights_error_handler)

    app.include_router(health.router)
    app.include_router(stocks.router)
    app.include_router(watchlist.router)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "service": SYSTEM_NAME,
            "version": SYSTEM_VERSION,
            "docs": "/docs",
        }

    return app
