"""Appointment model.

An appointment books one slot (date, time) for a client with a provider.
Double-booking is prevented by two unique constraints enforced by the
database, not by application-level checks.
"""

import datetime as dt
from enum import Enum

from sqlalchemy import Date, Integer, String, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from neobarber.db.base import Base, NativeIdMixin, TimestampMixin

CLIENT_SLOT_CONSTRAINT = "uq_appointments_client_slot"
PROVIDER_SLOT_CONSTRAINT = "uq_appointments_provider_slot"


class AppointmentStatus(str, Enum):
    """Status of an appointment."""

    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"


class Appointment(NativeIdMixin, TimestampMixin, Base):
    """Scheduled appointment between a client and a provider.

    ``id`` is the native record identifier (UUID); ``appointment_id`` is the
    sequence identifier issued once at creation and never changed.
    """

    __tablename__ = "appointments"
    # No status filter: a CANCELLED appointment still holds its slot
    __table_args__ = (
        UniqueConstraint("client_name", "date", "time", name=CLIENT_SLOT_CONSTRAINT),
        UniqueConstraint("provider_name", "date", "time", name=PROVIDER_SLOT_CONSTRAINT),
    )

    appointment_id: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
        index=True,
    )
    client_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    provider_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    service: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )
    time: Mapped[dt.time] = mapped_column(
        Time,
        nullable=False,
    )
    status: Mapped[AppointmentStatus] = mapped_column(
        String(20),
        default=AppointmentStatus.ACTIVE,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Appointment #{self.appointment_id} {self.date} {self.time}>"
