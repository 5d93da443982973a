"""Liveness and readiness probes."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text

from neobarber.api.deps import DbSession
from neobarber.services.store import UNAVAILABLE_ERRORS

router = APIRouter()
logger = logging.getLogger(__name__)


class ProbeStatus(BaseModel):
    status: str


@router.get("", response_model=ProbeStatus, summary="Liveness probe")
async def health_check() -> ProbeStatus:
    """The process is up; says nothing about the database."""
    return ProbeStatus(status="ok")


@router.get(
    "/ready",
    response_model=ProbeStatus,
    summary="Readiness probe",
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ProbeStatus}},
)
async def readiness_check(session: DbSession) -> ProbeStatus | JSONResponse:
    """Ready once the database answers a trivial query.

    Admission depends entirely on database constraints, so the service
    must not take traffic while the database is unreachable.
    """
    try:
        await session.execute(text("SELECT 1"))
    except UNAVAILABLE_ERRORS as exc:
        logger.warning(f"Readiness check failed: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable"},
        )
    return ProbeStatus(status="ok")
