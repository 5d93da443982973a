"""Appointment API endpoints.

Thin HTTP layer over the admission engine: it maps outcomes to status
codes and never inspects rejection messages.
"""

from fastapi import APIRouter, HTTPException, status

from neobarber.api.deps import Admission
from neobarber.schemas.appointment import (
    AppointmentCreate,
    AppointmentDeleted,
    AppointmentRead,
    AppointmentUpdate,
    RejectionDetail,
)
from neobarber.services.admission import NotFound, Rejected, RejectionKind

router = APIRouter()

NOT_FOUND_DETAIL = "Appointment not found"


def _rejected(outcome: Rejected) -> HTTPException:
    code = (
        status.HTTP_409_CONFLICT
        if outcome.reason.kind == RejectionKind.SLOT_CONFLICT
        else status.HTTP_400_BAD_REQUEST
    )
    return HTTPException(
        status_code=code,
        detail=RejectionDetail.from_rejection(outcome.reason).model_dump(),
    )


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=NOT_FOUND_DETAIL,
    )


@router.post(
    "",
    response_model=AppointmentRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_appointment(
    request: AppointmentCreate,
    admission: Admission,
) -> AppointmentRead:
    """Book an appointment."""
    outcome = await admission.create(request.model_dump())

    if isinstance(outcome, Rejected):
        raise _rejected(outcome)

    return AppointmentRead.model_validate(outcome.appointment)


@router.get(
    "",
    response_model=list[AppointmentRead],
)
async def list_appointments(admission: Admission) -> list[AppointmentRead]:
    """List all appointments ordered by date and time."""
    appointments = await admission.list_appointments()
    return [AppointmentRead.model_validate(a) for a in appointments]


@router.get(
    "/{identifier}",
    response_model=AppointmentRead,
)
async def get_appointment(identifier: str, admission: Admission) -> AppointmentRead:
    """Get an appointment by sequence id or native id."""
    result = await admission.get(identifier)

    if isinstance(result, NotFound):
        raise _not_found()

    return AppointmentRead.model_validate(result)


@router.put(
    "/{identifier}",
    response_model=AppointmentRead,
)
async def update_appointment(
    identifier: str,
    request: AppointmentUpdate,
    admission: Admission,
) -> AppointmentRead:
    """Partially update an appointment, including its status."""
    outcome = await admission.update(identifier, request.model_dump(exclude_unset=True))

    if isinstance(outcome, NotFound):
        raise _not_found()
    if isinstance(outcome, Rejected):
        raise _rejected(outcome)

    return AppointmentRead.model_validate(outcome.appointment)


@router.delete(
    "/{identifier}",
    response_model=AppointmentDeleted,
)
async def delete_appointment(identifier: str, admission: Admission) -> AppointmentDeleted:
    """Delete an appointment."""
    result = await admission.delete(identifier)

    if isinstance(result, NotFound):
        raise _not_found()

    return AppointmentDeleted(
        message="Appointment deleted",
        deleted=AppointmentRead.model_validate(result),
    )
