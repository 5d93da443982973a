"""Database models for NeoBarber."""

from neobarber.models.appointment import (
    CLIENT_SLOT_CONSTRAINT,
    PROVIDER_SLOT_CONSTRAINT,
    Appointment,
    AppointmentStatus,
)
from neobarber.models.counter import SequenceCounter

__all__ = [
    # Appointments
    "Appointment",
    "AppointmentStatus",
    "CLIENT_SLOT_CONSTRAINT",
    "PROVIDER_SLOT_CONSTRAINT",
    # Sequence identifiers
    "SequenceCounter",
]
