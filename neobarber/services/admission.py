"""Appointment admission.

Decides whether a create or update request becomes a stored appointment:

    create: validate -> allocate id -> persist -> Admitted | Rejected
    update: validate supplied fields -> resolve record -> revalidate slot
            (if date/time supplied) -> persist -> Admitted | Rejected | NotFound

Validation short-circuits in a fixed order (missing fields, past, slot
granularity, business hours) and reports only the first failure. Slot
conflicts are reported only after the database rejects the write.
Outcomes are returned as values; only StorageUnavailableError is raised.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from neobarber.booking.time_rules import (
    BusinessCalendar,
    business_hours_message,
    get_business_calendar,
    is_past,
    is_valid_slot,
    is_within_business_hours,
)
from neobarber.core.logging import admission_logger
from neobarber.models.appointment import Appointment, AppointmentStatus
from neobarber.services.conflict_guard import ConflictDimension, ConflictGuard, SlotConflict
from neobarber.services.sequence import SequenceAllocator
from neobarber.services.store import AppointmentStore
from neobarber.utils.time import local_now, parse_date, parse_time

TEXT_FIELDS = ("client_name", "provider_name", "service")
SLOT_FIELDS = ("date", "time")
REQUIRED_FIELDS = TEXT_FIELDS + SLOT_FIELDS

STATUS_VALUES = frozenset(status.value for status in AppointmentStatus)

# Sequence ids are plain ASCII integers
_NUMERIC_ID = re.compile(r"-?[0-9]+")


class RejectionKind(str, Enum):
    """Why an admission request was refused."""

    FIELD_MISSING = "field_missing"
    INVALID_STATUS = "invalid_status"
    PAST_DATETIME = "past_datetime"
    INVALID_SLOT = "invalid_slot"
    OUTSIDE_HOURS = "outside_hours"
    SLOT_CONFLICT = "slot_conflict"


VALIDATION_KINDS = frozenset(
    {
        RejectionKind.FIELD_MISSING,
        RejectionKind.INVALID_STATUS,
        RejectionKind.PAST_DATETIME,
        RejectionKind.INVALID_SLOT,
        RejectionKind.OUTSIDE_HOURS,
    }
)


@dataclass(frozen=True)
class Rejection:
    """Structured rejection reason.

    Attributes:
        kind: Rejection category
        message: Human-readable explanation
        dimension: For slot conflicts, whether the client or provider is taken
    """

    kind: RejectionKind
    message: str
    dimension: ConflictDimension | None = None

    @property
    def is_validation(self) -> bool:
        return self.kind in VALIDATION_KINDS


@dataclass(frozen=True)
class NumericId:
    """Sequence identifier (``appointment_id``)."""

    value: int


@dataclass(frozen=True)
class NativeId:
    """Store-native record identifier (UUID string)."""

    value: str


AppointmentIdentifier = NumericId | NativeId


@dataclass(frozen=True)
class Admitted:
    appointment: Appointment


@dataclass(frozen=True)
class Rejected:
    reason: Rejection


@dataclass(frozen=True)
class NotFound:
    identifier: AppointmentIdentifier


AdmissionOutcome = Admitted | Rejected | NotFound


def parse_identifier(raw: str | int | AppointmentIdentifier) -> AppointmentIdentifier:
    """Resolve a raw identifier into a numeric or native id.

    A plain ASCII integer (optional leading minus) is a sequence id; anything else is
    treated as a native record id.

    Examples:
        >>> parse_identifier("12")
        NumericId(value=12)
        >>> parse_identifier("5f1c0d9e-0f3b-4c1e-9a43-5b8e2f7c9d10")
        NativeId(value='5f1c0d9e-0f3b-4c1e-9a43-5b8e2f7c9d10')
    """
    if isinstance(raw, (NumericId, NativeId)):
        return raw
    if isinstance(raw, int):
        return NumericId(raw)

    text = str(raw).strip()
    if _NUMERIC_ID.fullmatch(text):
        return NumericId(int(text))
    return NativeId(text)


def _clean(name: str, value: Any) -> Any:
    """Trim a field value; empty or missing values become None."""
    if value is None:
        return None
    if name in SLOT_FIELDS and isinstance(value, (date, time)):
        return value
    return str(value).strip() or None


class AppointmentAdmission:
    """Admits appointment creates and updates for one request.

    Holds no state between calls besides its collaborators; every decision
    re-reads the database.
    """

    def __init__(
        self,
        session: AsyncSession,
        calendar: BusinessCalendar | None = None,
        clock: Callable[[], datetime] = local_now,
    ):
        self.store = AppointmentStore(session)
        self.allocator = SequenceAllocator(self.store)
        self.guard = ConflictGuard(self.store)
        self.calendar = calendar or get_business_calendar()
        self.clock = clock

    async def create(self, fields: Mapping[str, Any]) -> Admitted | Rejected:
        """Create a new appointment.

        Rules:
        - No empty fields
        - No past date/time
        - Starts only on slot boundaries
        - Inside business hours (closed day, last start before closing)
        - Database unique constraints stop double booking
        """
        cleaned = {name: _clean(name, fields.get(name)) for name in REQUIRED_FIELDS}

        missing = [name for name in REQUIRED_FIELDS if cleaned[name] is None]
        if missing:
            return self._reject(
                "create",
                Rejection(
                    RejectionKind.FIELD_MISSING,
                    f"All fields are required and cannot be empty: {', '.join(missing)}",
                ),
            )

        rejection = self._check_slot(
            cleaned["date"],
            cleaned["time"],
            past_message="Appointments in the past are not allowed",
        )
        if rejection:
            return self._reject("create", rejection)

        appointment_id = await self.allocator.next_id()

        appointment = Appointment(
            appointment_id=appointment_id,
            client_name=cleaned["client_name"],
            provider_name=cleaned["provider_name"],
            service=cleaned["service"],
            date=parse_date(cleaned["date"]),
            time=parse_time(cleaned["time"]),
            status=AppointmentStatus.ACTIVE,
        )

        result = await self.guard.insert(appointment)
        if isinstance(result, SlotConflict):
            return self._reject(
                "create",
                self._conflict_rejection(result),
                appointment_id=appointment_id,
            )

        admission_logger.log(
            action="create",
            outcome="admitted",
            appointment_id=result.appointment_id,
        )
        return Admitted(result)

    async def update(
        self,
        identifier: str | int | AppointmentIdentifier,
        fields: Mapping[str, Any],
    ) -> AdmissionOutcome:
        """Partially update an appointment.

        Only supplied fields are validated and written. When date or time is
        supplied, the merged slot is validated like a new booking. The
        sequence id never changes.
        """
        changes: dict[str, Any] = {}

        for name in REQUIRED_FIELDS:
            if name not in fields:
                continue
            value = _clean(name, fields[name])
            if value is None:
                return self._reject(
                    "update",
                    Rejection(
                        RejectionKind.FIELD_MISSING,
                        f"Invalid data or empty fields: {name}",
                    ),
                )
            changes[name] = value

        if "status" in fields:
            status = fields["status"]
            if not isinstance(status, str) or status not in STATUS_VALUES:
                return self._reject(
                    "update",
                    Rejection(
                        RejectionKind.INVALID_STATUS,
                        f"Invalid status {status!r}. Allowed: {', '.join(sorted(STATUS_VALUES))}",
                    ),
                )
            changes["status"] = AppointmentStatus(status)

        identifier = parse_identifier(identifier)
        current = await self._resolve(identifier)
        if current is None:
            return NotFound(identifier)
        # Rolled-back instances expire, so keep the id for logging
        appointment_id = current.appointment_id

        if "date" in changes or "time" in changes:
            final_date = changes.get("date", current.date)
            final_time = changes.get("time", current.time)

            rejection = self._check_slot(
                final_date,
                final_time,
                past_message="Cannot move an appointment to a past date/time",
            )
            if rejection:
                return self._reject(
                    "update", rejection, appointment_id=appointment_id
                )

            if "date" in changes:
                changes["date"] = parse_date(final_date)
            if "time" in changes:
                changes["time"] = parse_time(final_time)

        result = await self.guard.update_fields(current, changes)
        if isinstance(result, SlotConflict):
            return self._reject(
                "update",
                self._conflict_rejection(result),
                appointment_id=appointment_id,
            )

        admission_logger.log(
            action="update",
            outcome="admitted",
            appointment_id=result.appointment_id,
            metadata={"fields": sorted(changes)},
        )
        return Admitted(result)

    async def get(self, identifier: str | int | AppointmentIdentifier) -> Appointment | NotFound:
        """Get an appointment by sequence id or native id."""
        identifier = parse_identifier(identifier)
        appointment = await self._resolve(identifier)
        if appointment is None:
            return NotFound(identifier)
        return appointment

    async def list_appointments(self) -> Sequence[Appointment]:
        """List all appointments ordered by date and time."""
        return await self.store.find_all()

    async def delete(self, identifier: str | int | AppointmentIdentifier) -> Appointment | NotFound:
        """Remove an appointment (administrative, bypasses admission rules)."""
        identifier = parse_identifier(identifier)
        appointment = await self._resolve(identifier)
        if appointment is None:
            return NotFound(identifier)

        deleted = await self.store.delete(appointment)
        admission_logger.log(
            action="delete",
            outcome="deleted",
            appointment_id=deleted.appointment_id,
        )
        return deleted

    async def _resolve(self, identifier: AppointmentIdentifier) -> Appointment | None:
        if isinstance(identifier, NumericId):
            return await self.store.find_by_id(identifier.value)
        return await self.store.find_by_native_id(identifier.value)

    def _check_slot(
        self,
        date_value: str | date,
        time_value: str | time,
        past_message: str,
    ) -> Rejection | None:
        """Run the temporal rules in order and return the first failure."""
        if is_past(date_value, time_value, now=self.clock()):
            return Rejection(RejectionKind.PAST_DATETIME, past_message)

        if not is_valid_slot(time_value, self.calendar):
            return Rejection(
                RejectionKind.INVALID_SLOT,
                f"Invalid time: appointments start only every "
                f"{self.calendar.slot_minutes} minutes",
            )

        if not is_within_business_hours(date_value, time_value, self.calendar):
            return Rejection(
                RejectionKind.OUTSIDE_HOURS,
                f"Outside business hours. {business_hours_message(date_value, self.calendar)}",
            )

        return None

    @staticmethod
    def _conflict_rejection(conflict: SlotConflict) -> Rejection:
        return Rejection(
            RejectionKind.SLOT_CONFLICT,
            f"An appointment already exists for this {conflict.dimension.value} "
            "at that date and time",
            dimension=conflict.dimension,
        )

    @staticmethod
    def _reject(
        action: str,
        rejection: Rejection,
        appointment_id: int | None = None,
    ) -> Rejected:
        admission_logger.log(
            action=action,
            outcome=f"rejected:{rejection.kind.value}",
            appointment_id=appointment_id,
        )
        return Rejected(rejection)
