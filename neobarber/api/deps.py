"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from neobarber.db.session import get_db
from neobarber.services.admission import AppointmentAdmission

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_admission(session: DbSession) -> AppointmentAdmission:
    """Build the admission engine bound to the request's session."""
    return AppointmentAdmission(session)


Admission = Annotated[AppointmentAdmission, Depends(get_admission)]
