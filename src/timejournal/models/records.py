"""Stored entries and imported calendar events.

Both types are read-only inputs owned by external collaborators: the
persistence layer supplies ``LoggedEntry`` rows and the calendar import
supplies ``ImportedEvent`` records already normalized to local HH:MM.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..core.error_handler import RecordError
from ..core.logging_manager import LoggingManager
from ..utils.time_utils import is_valid_time

logger = LoggingManager.get_logger(__name__)


class EntryStatus(Enum):
    """Lifecycle status of a logged entry."""
    PENDING = "pending"
    CONFIRMED = "confirmed"


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_time(record: Dict[str, Any], key: str, record_id: str) -> Optional[str]:
    value = _optional_str(record.get(key))
    if value is not None and not is_valid_time(value):
        # Treated as missing; the record is placed as untimed
        logger.debug(f"Record {record_id}: ignoring malformed {key} {value!r}")
        return None
    return value


@dataclass(frozen=True)
class LoggedEntry:
    """One user-confirmed (or pending) activity for a day."""
    id: str
    date: str
    activity: str
    duration_minutes: int
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    category: Optional[str] = None
    status: EntryStatus = EntryStatus.CONFIRMED

    @property
    def is_timed(self) -> bool:
        """Both bounds are present and well formed."""
        return is_valid_time(self.start_time) and is_valid_time(self.end_time)

    @property
    def is_confirmed(self) -> bool:
        return self.status == EntryStatus.CONFIRMED

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'LoggedEntry':
        """Build an entry from a storage row.

        Args:
            record: Mapping with ``id``, ``date``, ``activity``, ``duration_minutes``
                and optional ``start_time``, ``end_time``, ``category``, ``status``

        Returns:
            The converted entry

        Raises:
            RecordError: If required fields are missing or the duration or status
                is malformed. Malformed times are dropped instead.
        """
        record_id = _optional_str(record.get("id")) or "<unknown>"
        missing = [key for key in ("id", "date", "activity") if not _optional_str(record.get(key))]
        if record.get("duration_minutes") in (None, ""):
            missing.append("duration_minutes")
        if missing:
            raise RecordError(f"Record {record_id}: missing required fields {missing}", record_id=record_id)

        try:
            duration = int(record["duration_minutes"])
        except (TypeError, ValueError) as exc:
            raise RecordError(f"Record {record_id}: invalid duration_minutes", record_id=record_id) from exc
        if duration < 0:
            raise RecordError(f"Record {record_id}: negative duration_minutes", record_id=record_id)

        status_raw = _optional_str(record.get("status")) or EntryStatus.CONFIRMED.value
        try:
            status = EntryStatus(status_raw.lower())
        except ValueError as exc:
            raise RecordError(f"Record {record_id}: invalid status '{status_raw}'", record_id=record_id) from exc

        return cls(
            id=record_id,
            date=str(record["date"]).strip(),
            activity=str(record["activity"]).strip(),
            duration_minutes=duration,
            start_time=_optional_time(record, "start_time", record_id),
            end_time=_optional_time(record, "end_time", record_id),
            category=_optional_str(record.get("category")),
            status=status,
        )


@dataclass(frozen=True)
class ImportedEvent:
    """A calendar event not yet confirmed as a logged activity."""
    id: str
    title: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    is_all_day: bool = False
    date: Optional[str] = None

    @property
    def is_timed(self) -> bool:
        return (not self.is_all_day
                and is_valid_time(self.start_time)
                and is_valid_time(self.end_time))

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'ImportedEvent':
        """Build an event from a calendar import record.

        Accepts both ``start_time``/``end_time``/``is_all_day`` and the
        camel-cased ``startTime``/``endTime``/``isAllDay`` keys.
        """
        record_id = _optional_str(record.get("id"))
        if not record_id:
            raise RecordError("Calendar event without id")

        normalized = {
            "start_time": record.get("start_time", record.get("startTime")),
            "end_time": record.get("end_time", record.get("endTime")),
        }
        is_all_day = bool(record.get("is_all_day", record.get("isAllDay", False)))

        return cls(
            id=record_id,
            title=_optional_str(record.get("title")) or "",
            start_time=_optional_time(normalized, "start_time", record_id),
            end_time=_optional_time(normalized, "end_time", record_id),
            is_all_day=is_all_day,
            date=_optional_str(record.get("date")),
        )
