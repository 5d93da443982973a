"""Booking module for temporal validation of appointment slots."""

from neobarber.booking.time_rules import (
    BusinessCalendar,
    business_hours_message,
    get_business_calendar,
    is_past,
    is_valid_slot,
    is_within_business_hours,
)

__all__ = [
    "BusinessCalendar",
    "get_business_calendar",
    "is_past",
    "is_valid_slot",
    "is_within_business_hours",
    "business_hours_message",
]
