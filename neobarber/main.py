"""FastAPI application entry point.

Run locally with ``uvicorn neobarber.main:app --reload``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from neobarber.api.v1.router import api_router
from neobarber.core.config import settings
from neobarber.core.logging import setup_logging
from neobarber.db.init_db import init_db
from neobarber.db.session import engine
from neobarber.services.store import StorageUnavailableError

SERVICE_NAME = "NeoBarber Appointments API"
VERSION = "0.1.0"

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(f"{SERVICE_NAME} {VERSION} starting (env={settings.env})")

    if settings.init_db_on_startup:
        await init_db()

    yield

    await engine.dispose()
    logger.info(f"{SERVICE_NAME} stopped")


docs_enabled = settings.is_dev

app = FastAPI(
    title=SERVICE_NAME,
    description="Service appointment booking with conflict-safe admission",
    version=VERSION,
    docs_url="/docs" if docs_enabled else None,
    redoc_url="/redoc" if docs_enabled else None,
    openapi_url="/openapi.json" if docs_enabled else None,
    lifespan=lifespan,
)
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(
    request: Request, exc: StorageUnavailableError
) -> JSONResponse:
    """Storage outages are 503 so clients can tell them from rejections."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage unavailable"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    detail = "Internal server error" if settings.is_prod else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": detail},
    )


@app.get("/", include_in_schema=False)
async def root() -> dict:
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "docs": "/docs" if docs_enabled else None,
    }
