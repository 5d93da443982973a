"""Utility functions."""

from neobarber.utils.time import (
    format_time,
    local_now,
    parse_date,
    parse_local_datetime,
    parse_time,
    time_to_minutes,
)

__all__ = [
    "local_now",
    "parse_date",
    "parse_time",
    "parse_local_datetime",
    "time_to_minutes",
    "format_time",
]
