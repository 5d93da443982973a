"""Pydantic schemas for request/response validation."""

from neobarber.schemas.appointment import (
    AppointmentCreate,
    AppointmentDeleted,
    AppointmentRead,
    AppointmentUpdate,
    RejectionDetail,
)

__all__ = [
    "AppointmentCreate",
    "AppointmentUpdate",
    "AppointmentRead",
    "AppointmentDeleted",
    "RejectionDetail",
]
