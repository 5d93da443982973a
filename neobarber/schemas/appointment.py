"""Pydantic schemas for appointment operations.

Request fields are deliberately loose (optional strings): emptiness,
slot and business-hours checks belong to the admission engine so that every
rejection comes back with a structured reason.
"""

import datetime as dt

from pydantic import BaseModel, Field, field_serializer

from neobarber.models.appointment import AppointmentStatus
from neobarber.services.admission import Rejection


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment."""

    client_name: str | None = None
    provider_name: str | None = None
    service: str | None = None
    date: str | None = Field(None, description="YYYY-MM-DD")
    time: str | None = Field(None, description="HH:MM, on a 30-minute boundary")


class AppointmentUpdate(BaseModel):
    """Schema for a partial appointment update.

    Only fields present in the request body are applied.
    """

    client_name: str | None = None
    provider_name: str | None = None
    service: str | None = None
    date: str | None = Field(None, description="YYYY-MM-DD")
    time: str | None = Field(None, description="HH:MM, on a 30-minute boundary")
    status: str | None = Field(None, description="ACTIVE or CANCELLED")


class AppointmentRead(BaseModel):
    """Schema for reading an appointment."""

    id: str
    appointment_id: int
    client_name: str
    provider_name: str
    service: str
    date: dt.date
    time: dt.time
    status: AppointmentStatus
    created_at: dt.datetime
    updated_at: dt.datetime | None

    model_config = {"from_attributes": True}

    @field_serializer("time")
    def serialize_time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")


class AppointmentDeleted(BaseModel):
    """Response for an administrative delete."""

    message: str
    deleted: AppointmentRead


class RejectionDetail(BaseModel):
    """Structured reason returned with 400/409 responses."""

    kind: str
    message: str
    dimension: str | None = None

    @classmethod
    def from_rejection(cls, rejection: Rejection) -> "RejectionDetail":
        return cls(
            kind=rejection.kind.value,
            message=rejection.message,
            dimension=rejection.dimension.value if rejection.dimension else None,
        )
