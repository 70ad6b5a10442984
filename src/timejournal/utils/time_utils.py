"""Clock arithmetic helpers for HH:MM wall-clock strings.

All helpers work on a single 24-hour day; results wrap around midnight and no
date rollover is tracked.
"""

import re
from datetime import datetime
from typing import Optional

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def is_valid_time(value: Optional[str]) -> bool:
    """Return True for strings like ``09:30`` within 00:00-24:00."""
    if not value:
        return False
    match = _TIME_RE.match(value.strip())
    if not match:
        return False
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours == 24:
        return minutes == 0
    return 0 <= hours <= 23 and 0 <= minutes <= 59


def time_to_minutes(time: str) -> int:
    """Convert a time string (HH:MM) to total minutes from midnight.

    Raises:
        ValueError: If the string is not a valid HH:MM time
    """
    if not is_valid_time(time):
        raise ValueError(f"Invalid time: {time!r}")
    hours, minutes = time.strip().split(':')
    return int(hours) * 60 + int(minutes)


def format_time(hours: int, minutes: int = 0) -> str:
    return f"{hours:02d}:{minutes:02d}"


def minutes_to_time(minutes: int) -> str:
    """Convert total minutes to a time string, wrapping at midnight."""
    minutes = int(minutes) % MINUTES_PER_DAY
    return format_time(minutes // 60, minutes % 60)


def add_minutes_to_time(time: str, minutes: int) -> str:
    """Add minutes to a time string, e.g. ``("14:30", 45) -> "15:15"``."""
    return minutes_to_time(time_to_minutes(time) + minutes)


def subtract_minutes_from_time(time: str, minutes: int) -> str:
    """Subtract minutes from a time string, wrapping before midnight."""
    return minutes_to_time(time_to_minutes(time) - minutes)


def calculate_duration(start: Optional[str], end: Optional[str]) -> int:
    """Calculate duration between two time strings in minutes.

    An end at or before the start is read as crossing midnight
    (``23:00`` to ``01:00`` is 120 minutes). Missing bounds give 0.
    """
    if not start or not end:
        return 0
    start_minutes = time_to_minutes(start)
    end_minutes = time_to_minutes(end)
    if end_minutes <= start_minutes:
        end_minutes += MINUTES_PER_DAY
    return end_minutes - start_minutes


def format_duration(minutes: int) -> str:
    """Format a duration compactly: ``90 -> "1h 30m"``, ``45 -> "45m"``."""
    if minutes <= 0:
        return "0m"
    if minutes < 60:
        return f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"


def format_duration_long(minutes: int) -> str:
    """Format a duration with full words: ``90 -> "1 hour 30 minutes"``."""
    if minutes <= 0:
        return "0 minutes"
    if minutes < 60:
        return f"{minutes} minute{'' if minutes == 1 else 's'}"
    hours, mins = divmod(minutes, 60)
    hour_str = f"{hours} hour{'' if hours == 1 else 's'}"
    if mins == 0:
        return hour_str
    return f"{hour_str} {mins} minute{'' if mins == 1 else 's'}"


def format_time_display(time: Optional[str]) -> str:
    """Format time for display in 12-hour format: ``"14:30" -> "2:30 PM"``."""
    if not time:
        return ""
    total = time_to_minutes(time) % MINUTES_PER_DAY
    hours, minutes = divmod(total, 60)
    period = "PM" if hours >= 12 else "AM"
    return f"{hours % 12 or 12}:{minutes:02d} {period}"


def format_hour(hour: int) -> str:
    """Format an hour label for the timeline axis: ``13 -> "1pm"``."""
    hour = hour % 24
    if hour == 0:
        return "12am"
    if hour == 12:
        return "12pm"
    if hour < 12:
        return f"{hour}am"
    return f"{hour - 12}pm"


def is_time_in_range(time: str, range_start: str, range_end: str) -> bool:
    """Check if a time is within a range (inclusive), handling midnight wrap."""
    t = time_to_minutes(time)
    start = time_to_minutes(range_start)
    end = time_to_minutes(range_end)

    if end < start:
        return t >= start or t <= end
    return start <= t <= end


def round_to_nearest_15(moment: Optional[datetime] = None) -> str:
    """Round a datetime to the nearest quarter hour as HH:MM."""
    moment = moment or datetime.now()
    total = moment.hour * 60 + int(round(moment.minute / 15.0)) * 15
    return minutes_to_time(total)


def current_time(moment: Optional[datetime] = None) -> str:
    """Get the current (or given) wall-clock time as HH:MM."""
    moment = moment or datetime.now()
    return format_time(moment.hour, moment.minute)


def time_of_day_label(time: Optional[str]) -> str:
    """Describe a time loosely, e.g. ``"15:00" -> "afternoon"``."""
    if not time:
        return "sometime today"
    hour = time_to_minutes(time) // 60
    if hour < 6:
        return "early morning"
    if hour < 9:
        return "morning"
    if hour < 12:
        return "late morning"
    if hour < 14:
        return "around midday"
    if hour < 17:
        return "afternoon"
    if hour < 20:
        return "evening"
    return "night"
