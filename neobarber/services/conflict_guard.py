"""Slot conflict detection.

The guard never checks whether a slot is free before writing: a
read-then-write check would let two concurrent requests both see the slot
as free. Instead it writes and lets the database's unique constraints
decide, then maps the duplicate-key signal to a typed ``SlotConflict``.

When a write collides on both constraints at once, the database reports
only one of them, and which one depends on the backend. The client
dimension takes priority: after a provider violation the guard reads
whether the client also holds the slot, purely to classify the failure.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from neobarber.models.appointment import (
    CLIENT_SLOT_CONSTRAINT,
    PROVIDER_SLOT_CONSTRAINT,
    Appointment,
)
from neobarber.services.store import AppointmentStore, DuplicateKeyError

logger = logging.getLogger(__name__)


class ConflictDimension(str, Enum):
    """Which party is already booked in the slot."""

    CLIENT = "client"
    PROVIDER = "provider"


_DIMENSION_BY_CONSTRAINT = {
    CLIENT_SLOT_CONSTRAINT: ConflictDimension.CLIENT,
    PROVIDER_SLOT_CONSTRAINT: ConflictDimension.PROVIDER,
}


@dataclass(frozen=True)
class SlotConflict:
    """Write rejected because the client or provider already holds the slot."""

    dimension: ConflictDimension


@dataclass(frozen=True)
class _ClientSlot:
    """Client half of the slot a write asks for, captured before the write."""

    client_name: str
    date: dt.date
    time: dt.time
    record_id: str | None = None


class ConflictGuard:
    """Wraps appointment writes and classifies uniqueness violations."""

    def __init__(self, store: AppointmentStore):
        self.store = store

    async def insert(self, appointment: Appointment) -> Appointment | SlotConflict:
        """Insert an appointment, or report which slot constraint rejected it."""
        slot = _ClientSlot(appointment.client_name, appointment.date, appointment.time)
        try:
            return await self.store.insert(appointment)
        except DuplicateKeyError as exc:
            return await self._classify(exc, slot)

    async def update_fields(
        self,
        appointment: Appointment,
        fields: dict[str, Any],
    ) -> Appointment | SlotConflict:
        """Update an appointment, or report which slot constraint rejected it."""
        # A failed commit expires the instance, so read the target slot first
        slot = _ClientSlot(
            fields.get("client_name", appointment.client_name),
            fields.get("date", appointment.date),
            fields.get("time", appointment.time),
            record_id=appointment.id,
        )
        try:
            return await self.store.update_fields(appointment, fields)
        except DuplicateKeyError as exc:
            return await self._classify(exc, slot)

    async def _classify(self, exc: DuplicateKeyError, slot: _ClientSlot) -> SlotConflict:
        dimension = _DIMENSION_BY_CONSTRAINT.get(exc.constraint)
        if dimension is None:
            # Not a slot constraint (e.g. a reused sequence id)
            raise exc

        if dimension is ConflictDimension.PROVIDER:
            holder = await self.store.find_client_booking(
                slot.client_name,
                slot.date,
                slot.time,
                exclude_id=slot.record_id,
            )
            if holder is not None:
                dimension = ConflictDimension.CLIENT

        logger.info(f"Slot conflict on {dimension.value} ({exc.constraint})")
        return SlotConflict(dimension=dimension)
