"""Shared utilities for TimeJournal."""

from .time_utils import (
    add_minutes_to_time,
    calculate_duration,
    format_duration,
    format_duration_long,
    format_hour,
    format_time_display,
    is_valid_time,
    minutes_to_time,
    subtract_minutes_from_time,
    time_to_minutes,
)

__all__ = [
    "add_minutes_to_time",
    "calculate_duration",
    "format_duration",
    "format_duration_long",
    "format_hour",
    "format_time_display",
    "is_valid_time",
    "minutes_to_time",
    "subtract_minutes_from_time",
    "time_to_minutes",
]
