"""Renderable timeline values produced by the placement engine."""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Tuple

from ..models.records import ImportedEvent, LoggedEntry
from ..utils.time_utils import minutes_to_time


@dataclass(frozen=True)
class PlacedEntry:
    """A logged entry with its display position.

    ``placed_start``/``placed_end`` equal the entry's own times for timed
    entries. Untimed entries get a synthesized position and
    ``is_estimated=True``; the entry itself is never modified.
    """
    entry: LoggedEntry
    placed_start: str
    placed_end: str
    is_estimated: bool

    @property
    def id(self) -> str:
        return self.entry.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.entry.id,
            "activity": self.entry.activity,
            "category": self.entry.category,
            "status": self.entry.status.value,
            "startTime": self.entry.start_time,
            "endTime": self.entry.end_time,
            "placedStartTime": self.placed_start,
            "placedEndTime": self.placed_end,
            "isEstimated": self.is_estimated,
        }


@dataclass(frozen=True)
class TimeGap:
    """A contiguous stretch of the day with no confirmed activity."""
    start_minutes: int
    end_minutes: int

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def start_time(self) -> str:
        return minutes_to_time(self.start_minutes)

    @property
    def end_time(self) -> str:
        return minutes_to_time(self.end_minutes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startMinutes": self.start_minutes,
            "endMinutes": self.end_minutes,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationMinutes": self.duration_minutes,
        }


@dataclass(frozen=True)
class TimelineLayout:
    """Everything the rendering layer needs to paint one day."""
    placed_entries: Tuple[PlacedEntry, ...] = ()
    hidden_event_ids: FrozenSet[str] = frozenset()
    visible_events: Tuple[ImportedEvent, ...] = ()
    overlapping_entry_ids: FrozenSet[str] = frozenset()
    overlapping_event_ids: FrozenSet[str] = frozenset()
    gaps: Tuple[TimeGap, ...] = ()
    start_hour: int = 0
    end_hour: int = 24
    total_minutes: int = 0
    hours: List[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.placed_entries and not self.visible_events

    def to_dict(self) -> Dict[str, Any]:
        return {
            "placedEntries": [placed.to_dict() for placed in self.placed_entries],
            "hiddenEventIds": sorted(self.hidden_event_ids),
            "visibleEventIds": [event.id for event in self.visible_events],
            "overlappingEntryIds": sorted(self.overlapping_entry_ids),
            "overlappingEventIds": sorted(self.overlapping_event_ids),
            "gaps": [gap.to_dict() for gap in self.gaps],
            "startHour": self.start_hour,
            "endHour": self.end_hour,
            "totalMinutes": self.total_minutes,
            "isEmpty": self.is_empty,
        }
