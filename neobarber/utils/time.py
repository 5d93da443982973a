"""Date and time parsing utilities.

Appointments live on a single local business calendar: dates are
``YYYY-MM-DD`` and times ``HH:MM``, combined into naive local timestamps
without any time-zone conversion.
"""

from datetime import date, datetime, time

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def local_now() -> datetime:
    """Get the current naive local datetime.

    Returns:
        Current wall-clock datetime without tzinfo
    """
    return datetime.now()


def parse_date(value: str | date) -> date | None:
    """Parse a ``YYYY-MM-DD`` date.

    Args:
        value: Date string or date object

    Returns:
        Parsed date, or None if the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def parse_time(value: str | time) -> time | None:
    """Parse an ``HH:MM`` time of day.

    Args:
        value: Time string or time object

    Returns:
        Parsed time, or None if the value cannot be parsed
    """
    if isinstance(value, time):
        return value
    try:
        return datetime.strptime(str(value).strip(), TIME_FORMAT).time()
    except ValueError:
        return None


def parse_local_datetime(date_value: str | date, time_value: str | time) -> datetime | None:
    """Combine a date and a time into a naive local timestamp.

    Returns None if either part fails to parse.
    """
    parsed_date = parse_date(date_value)
    parsed_time = parse_time(time_value)
    if parsed_date is None or parsed_time is None:
        return None
    return datetime.combine(parsed_date, parsed_time)


def time_to_minutes(value: str | time) -> int | None:
    """Convert a time of day to minutes since midnight."""
    parsed = parse_time(value)
    if parsed is None:
        return None
    return parsed.hour * 60 + parsed.minute


def format_time(value: time) -> str:
    """Format a time of day as ``HH:MM``."""
    return value.strftime(TIME_FORMAT)
