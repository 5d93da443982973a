"""Appointment persistence.

Minimal read/write/upsert contract used by the admission engine. All
atomicity comes from the database itself: the counter is bumped with a
single upsert statement and double-booking is stopped by unique
constraints. Driver errors are translated into the two storage exceptions
below so that callers never depend on a particular database backend.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, time
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from neobarber.models.appointment import (
    CLIENT_SLOT_CONSTRAINT,
    PROVIDER_SLOT_CONSTRAINT,
    Appointment,
)
from neobarber.models.counter import SequenceCounter

logger = logging.getLogger(__name__)

APPOINTMENT_ID_CONSTRAINT = "ix_appointments_appointment_id"

# Errors meaning the database could not be reached or did not answer in time
UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, OSError)

# Text fragments identifying each unique constraint across backends.
# PostgreSQL reports the constraint name, SQLite the column list.
_CONSTRAINT_MARKERS = (
    (PROVIDER_SLOT_CONSTRAINT, (PROVIDER_SLOT_CONSTRAINT, "appointments.provider_name")),
    (CLIENT_SLOT_CONSTRAINT, (CLIENT_SLOT_CONSTRAINT, "appointments.client_name")),
    (APPOINTMENT_ID_CONSTRAINT, ("appointment_id",)),
)


class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class DuplicateKeyError(StorageError):
    """Raised when a write violates a unique constraint."""

    def __init__(self, constraint: str, detail: str = "") -> None:
        self.constraint = constraint
        self.detail = detail
        super().__init__(f"Duplicate key on {constraint}")


class StorageUnavailableError(StorageError):
    """Raised when the database cannot complete an operation."""

    pass


def _is_unique_violation(exc: IntegrityError) -> bool:
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate == "23505":
        return True
    text = str(exc.orig).lower()
    return "unique constraint" in text or "duplicate key" in text


def violated_constraint(exc: IntegrityError) -> str | None:
    """Name the unique constraint behind an IntegrityError, if any."""
    if not _is_unique_violation(exc):
        return None

    cause = getattr(exc.orig, "__cause__", None)
    constraint_name = getattr(cause, "constraint_name", None)
    text = f"{constraint_name or ''} {exc.orig}"

    for constraint, markers in _CONSTRAINT_MARKERS:
        if any(marker in text for marker in markers):
            return constraint
    return None


class AppointmentStore:
    """Database access for appointments and sequence counters."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncIterator[None]:
        """Roll back and translate driver errors raised inside the block."""
        try:
            yield
        except IntegrityError as exc:
            await self._rollback()
            constraint = violated_constraint(exc)
            if constraint is None:
                raise
            raise DuplicateKeyError(constraint, str(exc.orig)) from exc
        except UNAVAILABLE_ERRORS as exc:
            await self._rollback()
            logger.error(f"Storage unavailable during {operation}: {exc}")
            raise StorageUnavailableError(f"Storage unavailable during {operation}") from exc

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as exc:
            logger.warning(f"Rollback failed: {exc}")

    async def atomic_increment(self, counter_name: str) -> int:
        """Increment a named counter and return its new value.

        A missing counter is created as if it held 0. The increment is one
        ``INSERT ... ON CONFLICT DO UPDATE ... RETURNING`` statement and is
        committed immediately, so a returned value is never issued twice.
        """
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            insert = pg_insert
        elif dialect == "sqlite":
            insert = sqlite_insert
        else:
            raise NotImplementedError(f"Atomic increment not supported on {dialect}")

        stmt = (
            insert(SequenceCounter)
            .values(name=counter_name, value=1)
            .on_conflict_do_update(
                index_elements=[SequenceCounter.name],
                set_={"value": SequenceCounter.value + 1},
            )
            .returning(SequenceCounter.value)
        )

        async with self._translate_errors("atomic_increment"):
            result = await self.session.execute(stmt)
            value = result.scalar_one()
            await self.session.commit()

        return value

    async def insert(self, appointment: Appointment) -> Appointment:
        """Insert a new appointment.

        Raises:
            DuplicateKeyError: If a unique constraint rejects the row
            StorageUnavailableError: If the database cannot be reached
        """
        async with self._translate_errors("insert"):
            self.session.add(appointment)
            await self.session.commit()
            await self.session.refresh(appointment)

        return appointment

    async def update_fields(
        self,
        appointment: Appointment,
        fields: dict[str, Any],
    ) -> Appointment:
        """Apply a set of field changes to an existing appointment.

        Raises:
            DuplicateKeyError: If the new values collide with another row
            StorageUnavailableError: If the database cannot be reached
        """
        async with self._translate_errors("update_fields"):
            for name, value in fields.items():
                setattr(appointment, name, value)
            await self.session.commit()
            await self.session.refresh(appointment)

        return appointment

    async def find_by_id(self, numeric_id: int) -> Appointment | None:
        """Get appointment by sequence identifier."""
        async with self._translate_errors("find_by_id"):
            result = await self.session.execute(
                select(Appointment).where(Appointment.appointment_id == numeric_id)
            )
            return result.scalar_one_or_none()

    async def find_by_native_id(self, native_id: str) -> Appointment | None:
        """Get appointment by native record identifier (UUID)."""
        try:
            # Canonical form: braces, case and missing hyphens all name the same id
            canonical = str(UUID(native_id))
        except ValueError:
            # Not a well-formed native id, so no record can match
            return None

        async with self._translate_errors("find_by_native_id"):
            return await self.session.get(Appointment, canonical)

    async def find_client_booking(
        self,
        client_name: str,
        slot_date: date,
        slot_time: time,
        exclude_id: str | None = None,
    ) -> Appointment | None:
        """Get the appointment holding a client's slot, other than ``exclude_id``.

        Only used to classify a write the database has already rejected.
        """
        stmt = select(Appointment).where(
            Appointment.client_name == client_name,
            Appointment.date == slot_date,
            Appointment.time == slot_time,
        )
        if exclude_id is not None:
            stmt = stmt.where(Appointment.id != exclude_id)

        async with self._translate_errors("find_client_booking"):
            result = await self.session.execute(stmt.limit(1))
            return result.scalar_one_or_none()

    async def find_all(self) -> Sequence[Appointment]:
        """List every appointment ordered by date, then time."""
        async with self._translate_errors("find_all"):
            result = await self.session.execute(
                select(Appointment).order_by(
                    Appointment.date,
                    Appointment.time,
                    Appointment.appointment_id,
                )
            )
            return result.scalars().all()

    async def delete(self, appointment: Appointment) -> Appointment:
        """Physically remove an appointment."""
        async with self._translate_errors("delete"):
            await self.session.delete(appointment)
            await self.session.commit()

        return appointment
