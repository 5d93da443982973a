"""Temporal booking rules.

Decides whether a requested (date, time) slot is legal against the business
calendar. Every function here is pure: no I/O, no hidden state, and the
only clock input is the explicit ``now`` passed to ``is_past``.

Policy (defaults, configurable through settings):
- Monday to Saturday open 09:00 - 20:00
- Sunday closed
- Appointments last one slot (30 minutes), so the last start is 19:30
- Starts only on 30-minute boundaries
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time

from neobarber.core.config import settings
from neobarber.utils.time import (
    format_time,
    local_now,
    parse_date,
    parse_local_datetime,
    parse_time,
    time_to_minutes,
)

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


@dataclass(frozen=True)
class BusinessCalendar:
    """Opening hours and slot granularity of the business.

    Attributes:
        open_time: First bookable start time
        close_time: Closing time; an appointment must end at or before it
        slot_minutes: Slot granularity and appointment duration
        closed_weekdays: Python weekday numbers (Monday=0) with no service
    """

    open_time: time = time(9, 0)
    close_time: time = time(20, 0)
    slot_minutes: int = 30
    closed_weekdays: frozenset[int] = field(default_factory=lambda: frozenset({6}))

    @property
    def open_minutes(self) -> int:
        return self.open_time.hour * 60 + self.open_time.minute

    @property
    def close_minutes(self) -> int:
        return self.close_time.hour * 60 + self.close_time.minute

    @property
    def last_start(self) -> time:
        """Latest start time that still ends by closing."""
        minutes = self.close_minutes - self.slot_minutes
        return time(minutes // 60, minutes % 60)

    @classmethod
    def from_settings(cls) -> "BusinessCalendar":
        """Build the calendar from application settings."""
        open_time = parse_time(settings.business_open_time)
        close_time = parse_time(settings.business_close_time)
        if open_time is None or close_time is None:
            raise ValueError(
                "Invalid business hours configuration: "
                f"{settings.business_open_time!r} - {settings.business_close_time!r}"
            )
        return cls(
            open_time=open_time,
            close_time=close_time,
            slot_minutes=settings.slot_minutes,
            closed_weekdays=frozenset(settings.closed_weekdays),
        )


_default_calendar: BusinessCalendar | None = None


def get_business_calendar() -> BusinessCalendar:
    """Get the calendar configured for this process."""
    global _default_calendar
    if _default_calendar is None:
        _default_calendar = BusinessCalendar.from_settings()
    return _default_calendar


def is_past(
    date_value: str | date,
    time_value: str | time,
    now: datetime | None = None,
) -> bool:
    """Check whether a slot is not strictly in the future.

    Unparseable input counts as past so that bad data is rejected.

    Args:
        date_value: ``YYYY-MM-DD`` date
        time_value: ``HH:MM`` time
        now: Reference instant (defaults to the local wall clock)

    Returns:
        True if the slot must be rejected as past

    Examples:
        >>> is_past("2020-01-01", "10:00")
        True
        >>> is_past("not-a-date", "10:00")
        True
    """
    instant = parse_local_datetime(date_value, time_value)
    if instant is None:
        return True
    if now is None:
        now = local_now()
    return instant <= now


def is_valid_slot(time_value: str | time, calendar: BusinessCalendar | None = None) -> bool:
    """Check that a time falls on a slot boundary.

    Examples:
        >>> is_valid_slot("09:30")
        True
        >>> is_valid_slot("19:45")
        False
    """
    calendar = calendar or get_business_calendar()
    minutes = time_to_minutes(time_value)
    if minutes is None:
        return False
    return minutes % calendar.slot_minutes == 0


def is_within_business_hours(
    date_value: str | date,
    time_value: str | time,
    calendar: BusinessCalendar | None = None,
) -> bool:
    """Check that a slot starts after opening and ends by closing on an open day.

    Args:
        date_value: ``YYYY-MM-DD`` date
        time_value: ``HH:MM`` start time
        calendar: Business calendar (defaults to the configured one)

    Returns:
        True if the whole appointment fits inside business hours
    """
    calendar = calendar or get_business_calendar()
    instant = parse_local_datetime(date_value, time_value)
    if instant is None:
        return False

    if instant.weekday() in calendar.closed_weekdays:
        return False

    start_minutes = instant.hour * 60 + instant.minute
    if start_minutes < calendar.open_minutes:
        return False

    end_minutes = start_minutes + calendar.slot_minutes
    return end_minutes <= calendar.close_minutes


def business_hours_message(
    date_value: str | date,
    calendar: BusinessCalendar | None = None,
) -> str:
    """Explain the hours policy for a date, for use in rejection messages."""
    calendar = calendar or get_business_calendar()
    parsed = parse_date(date_value)
    if parsed is None:
        return "Invalid date."

    if parsed.weekday() in calendar.closed_weekdays:
        return f"Closed on {WEEKDAY_NAMES[parsed.weekday()]}s."

    open_days = [i for i in range(7) if i not in calendar.closed_weekdays]
    if not open_days:
        return "Closed every day."
    if open_days == list(range(open_days[0], open_days[-1] + 1)):
        days = f"{WEEKDAY_NAMES[open_days[0]][:3]}-{WEEKDAY_NAMES[open_days[-1]][:3]}"
    else:
        days = ", ".join(WEEKDAY_NAMES[i][:3] for i in open_days)

    return (
        f"Hours {days}: {format_time(calendar.open_time)} to "
        f"{format_time(calendar.close_time)}. "
        f"Last appointment: {format_time(calendar.last_start)}. "
        f"Appointments every {calendar.slot_minutes} min."
    )
