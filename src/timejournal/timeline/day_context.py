"""Relation of a viewed day to the local calendar date."""

from datetime import date, datetime
from typing import Optional, Tuple, Union

from dateutil import parser as date_parser


def to_date(value: Union[str, date, datetime]) -> date:
    """Coerce an ISO date string, date or datetime into a date.

    Raises:
        ValueError: If a string cannot be parsed as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value).strip()).date()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Invalid date: {value!r}") from exc


def day_flags(day: Union[str, date, datetime],
              today: Optional[Union[str, date, datetime]] = None) -> Tuple[bool, bool]:
    """Return ``(is_today, is_future_day)`` for a viewed day.

    Args:
        day: The day being viewed
        today: Reference date, defaults to the local date
    """
    viewed = to_date(day)
    reference = to_date(today) if today is not None else date.today()
    return viewed == reference, viewed > reference
