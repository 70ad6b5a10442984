"""Timeline Placement Engine

Lays out one day of logged entries next to imported calendar events:

1. Entries with both times keep their own position.
2. Entries with only a duration are packed greedily into free intervals
   between timed entries, in the order the caller supplied them. Entries that
   fit nowhere are stacked just before the earliest timed entry.
3. Imported events already covered by a confirmed entry are hidden; the rest
   are checked for any intersection with confirmed entries.
4. Unlogged stretches of at least 30 minutes are reported as gaps.

Placement is a display-only projection; stored entry times are never changed.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from ..core.logging_manager import LoggingManager
from ..models.records import ImportedEvent, LoggedEntry
from ..utils.time_utils import current_time, is_valid_time, minutes_to_time, time_to_minutes
from .day_context import day_flags
from .gap_finder import (
    GAP_SCAN_FLOOR_HOUR,
    MIN_GAP_MINUTES,
    Interval,
    find_free_intervals,
    find_unlogged_gaps,
)
from .layout import PlacedEntry, TimelineLayout
from .reconciliation import COVERAGE_THRESHOLD, find_hidden_event_ids, find_overlapping_ids


@dataclass(frozen=True)
class PlacementOptions:
    """Window and day flags for one placement run."""
    visible_start_hour: int = 0
    visible_end_hour: int = 24
    is_today: bool = False
    is_future_day: bool = False
    now: Optional[str] = None
    dismissed_event_ids: FrozenSet[str] = frozenset()
    show_dismissed: bool = False
    min_gap_minutes: int = MIN_GAP_MINUTES
    gap_scan_floor_hour: int = GAP_SCAN_FLOOR_HOUR
    coverage_threshold: float = COVERAGE_THRESHOLD

    def __post_init__(self):
        if not 0 <= self.visible_start_hour < self.visible_end_hour <= 24:
            raise ValueError(
                f"Invalid visible window {self.visible_start_hour}-{self.visible_end_hour}"
            )
        if self.now is not None and not is_valid_time(self.now):
            raise ValueError(f"Invalid current time: {self.now!r}")
        if self.min_gap_minutes < MIN_GAP_MINUTES:
            raise ValueError(f"min_gap_minutes must be at least {MIN_GAP_MINUTES}")
        object.__setattr__(self, "dismissed_event_ids", frozenset(self.dismissed_event_ids))

    @classmethod
    def from_config(cls, timeline_config, **overrides) -> 'PlacementOptions':
        """Build options from the ``timeline`` configuration section."""
        values = dict(
            visible_start_hour=timeline_config.visible_start_hour,
            visible_end_hour=timeline_config.visible_end_hour,
            min_gap_minutes=timeline_config.min_gap_minutes,
            gap_scan_floor_hour=timeline_config.gap_scan_floor_hour,
            coverage_threshold=timeline_config.coverage_threshold,
        )
        values.update(overrides)
        return cls(**values)

    @classmethod
    def for_day(cls, day: Union[str, date], today: Optional[Union[str, date]] = None,
                **overrides) -> 'PlacementOptions':
        """Build options with ``is_today``/``is_future_day`` derived from a date."""
        is_today, is_future_day = day_flags(day, today)
        return cls(is_today=is_today, is_future_day=is_future_day, **overrides)

    @property
    def start_minutes(self) -> int:
        return self.visible_start_hour * 60

    @property
    def end_minutes(self) -> int:
        return self.visible_end_hour * 60

    def now_minutes(self) -> Optional[int]:
        """Current time in minutes when viewing today, None otherwise."""
        if not self.is_today:
            return None
        return time_to_minutes(self.now or current_time())


@dataclass(frozen=True)
class FillCursor:
    """Position of the greedy packer: current free interval and fill offset."""
    gap_index: int = 0
    offset: int = 0


def partition_entries(entries: Iterable[LoggedEntry]) -> Tuple[List[LoggedEntry], List[LoggedEntry]]:
    """Split entries into timed (both times present) and untimed ones."""
    timed: List[LoggedEntry] = []
    untimed: List[LoggedEntry] = []
    for entry in entries:
        (timed if entry.is_timed else untimed).append(entry)
    return timed, untimed


def fit_into_gaps(gaps: Sequence[Interval], cursor: FillCursor,
                  duration: int) -> Tuple[Optional[int], FillCursor]:
    """Find the first free interval with room for ``duration`` minutes.

    Intervals before ``cursor.gap_index`` are never revisited. On success the
    offset advances by the duration and the index stays on the same interval
    so the next entry tries it first.

    Returns:
        ``(start_minutes or None, next cursor)``
    """
    while cursor.gap_index < len(gaps):
        gap_start, gap_end = gaps[cursor.gap_index]
        available = gap_end - gap_start - cursor.offset
        if available >= duration:
            return gap_start + cursor.offset, replace(cursor, offset=cursor.offset + duration)
        cursor = FillCursor(gap_index=cursor.gap_index + 1, offset=0)
    return None, cursor


def place_untimed_entries(timed_entries: Sequence[LoggedEntry],
                          untimed_entries: Sequence[LoggedEntry],
                          start_hour: int = 0, end_hour: int = 24) -> List[PlacedEntry]:
    """Place timed entries as-is and synthesize positions for untimed ones.

    Args:
        timed_entries: Entries with both times
        untimed_entries: Entries with only a duration, in caller order
        start_hour: Visible window start
        end_hour: Visible window end

    Returns:
        Timed placements followed by estimated placements
    """
    placed = [
        PlacedEntry(entry=entry, placed_start=entry.start_time, placed_end=entry.end_time, is_estimated=False)
        for entry in timed_entries
    ]
    if not untimed_entries:
        return placed

    window_start = start_hour * 60
    gaps = find_free_intervals(timed_entries, window_start, end_hour * 60)

    timed_starts = [time_to_minutes(entry.start_time) for entry in timed_entries if entry.is_timed]
    first_timed_start = min(timed_starts) if timed_starts else window_start + 60

    cursor = FillCursor()
    for entry in untimed_entries:
        duration = max(0, entry.duration_minutes)
        placed_start, cursor = fit_into_gaps(gaps, cursor, duration)

        if placed_start is None:
            # Stack against earlier estimates already sitting before the first timed entry
            used_minutes = sum(
                p.entry.duration_minutes for p in placed
                if p.is_estimated and time_to_minutes(p.placed_start) < first_timed_start
            )
            placed_start = max(window_start, first_timed_start - used_minutes - duration)

        placed.append(PlacedEntry(
            entry=entry,
            placed_start=minutes_to_time(placed_start),
            placed_end=minutes_to_time(placed_start + duration),
            is_estimated=True,
        ))

    return placed


class PlacementEngine:
    """Computes the renderable layout of one day."""

    def __init__(self):
        self.logger = LoggingManager.get_logger(__name__)

    def place(self, day_entries: Sequence[LoggedEntry],
              imported_events: Sequence[ImportedEvent] = (),
              options: Optional[PlacementOptions] = None) -> TimelineLayout:
        """Lay out a day's entries and imported events.

        Args:
            day_entries: Entries of the day, timed or untimed
            imported_events: Calendar events for the same day
            options: Window and day flags (defaults to a full past day)

        Returns:
            Timeline layout
        """
        options = options or PlacementOptions()
        day_entries = list(day_entries)
        imported_events = list(imported_events)

        timed, untimed = partition_entries(day_entries)
        placed = place_untimed_entries(timed, untimed, options.visible_start_hour, options.visible_end_hour)

        dismissed = options.dismissed_event_ids if not options.show_dismissed else frozenset()
        candidates = [event for event in imported_events if event.id not in dismissed]
        hidden = find_hidden_event_ids(candidates, day_entries, options.coverage_threshold)
        visible = tuple(event for event in candidates if event.id not in hidden)
        overlapping_entry_ids, overlapping_event_ids = find_overlapping_ids(visible, day_entries)

        gaps = find_unlogged_gaps(
            day_entries,
            is_today=options.is_today,
            is_future_day=options.is_future_day,
            now_minutes=options.now_minutes(),
            min_gap_minutes=options.min_gap_minutes,
            floor_hour=options.gap_scan_floor_hour,
        )

        self.logger.debug(
            f"Placed {len(timed)} timed and {len(untimed)} untimed entries; "
            f"{len(hidden)} events hidden, {len(visible)} visible, {len(gaps)} gaps"
        )

        return TimelineLayout(
            placed_entries=tuple(placed),
            hidden_event_ids=hidden,
            visible_events=visible,
            overlapping_entry_ids=overlapping_entry_ids,
            overlapping_event_ids=overlapping_event_ids,
            gaps=tuple(gaps),
            start_hour=options.visible_start_hour,
            end_hour=options.visible_end_hour,
            total_minutes=sum(entry.duration_minutes for entry in day_entries),
            hours=list(range(options.visible_start_hour, options.visible_end_hour + 1)),
        )


def place(day_entries: Sequence[LoggedEntry],
          imported_events: Sequence[ImportedEvent] = (),
          options: Optional[PlacementOptions] = None) -> TimelineLayout:
    """Lay out a day with a fresh engine."""
    return PlacementEngine().place(day_entries, imported_events, options)
