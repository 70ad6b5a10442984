"""Free-interval and unlogged-gap discovery.

Two related but separate computations live here:

* ``find_free_intervals`` finds room between timed entries inside the visible
  window. The placement engine packs untimed entries into these intervals.
* ``find_unlogged_gaps`` reports stretches of the day nobody accounted for.
  It only looks at confirmed entries with both times, merges overlapping
  intervals and suppresses anything shorter than the minimum gap length.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.logging_manager import LoggingManager
from ..models.records import LoggedEntry
from ..utils.time_utils import time_to_minutes
from .layout import TimeGap

logger = LoggingManager.get_logger(__name__)

MIN_GAP_MINUTES = 30
GAP_SCAN_FLOOR_HOUR = 7

Interval = Tuple[int, int]


def entry_interval(entry: LoggedEntry) -> Interval:
    """Start and end of a timed entry in minutes from midnight."""
    return time_to_minutes(entry.start_time), time_to_minutes(entry.end_time)


def find_free_intervals(timed_entries: Iterable[LoggedEntry],
                        start_minutes: int, end_minutes: int) -> List[Interval]:
    """Find free intervals between timed entries within a window.

    Args:
        timed_entries: Entries with both start and end times
        start_minutes: Window start in minutes from midnight
        end_minutes: Window end in minutes from midnight

    Returns:
        Chronological ``(start, end)`` intervals not covered by any entry
    """
    intervals = sorted(
        (entry_interval(entry) for entry in timed_entries if entry.is_timed),
        key=lambda interval: interval[0],
    )

    free: List[Interval] = []
    cursor = start_minutes

    for entry_start, entry_end in intervals:
        if cursor >= end_minutes:
            break
        free_end = min(entry_start, end_minutes)
        if free_end > cursor:
            free.append((cursor, free_end))
        cursor = max(cursor, entry_end)

    if cursor < end_minutes:
        free.append((cursor, end_minutes))

    return free


def merge_intervals(intervals: Sequence[Interval]) -> List[Interval]:
    """Merge overlapping or adjacent intervals.

    Args:
        intervals: Intervals sorted by start

    Returns:
        Minimal list of occupied intervals
    """
    merged: List[List[int]] = []
    for start, end in intervals:
        if merged and start <= merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])
    return [(start, end) for start, end in merged]


def find_unlogged_gaps(entries: Iterable[LoggedEntry],
                       is_today: bool = False,
                       is_future_day: bool = False,
                       now_minutes: Optional[int] = None,
                       min_gap_minutes: int = MIN_GAP_MINUTES,
                       floor_hour: int = GAP_SCAN_FLOOR_HOUR) -> List[TimeGap]:
    """Find stretches of the day with no confirmed activity.

    The scan runs from ``min(first start, floor_hour)`` to the end of the last
    entry, extended to ``now_minutes`` when the day is today.

    Args:
        entries: All entries of the day; only confirmed timed ones count
        is_today: Whether the day being viewed is today
        is_future_day: Future days never report gaps
        now_minutes: Current wall-clock time in minutes, used when is_today
        min_gap_minutes: Shorter gaps are not reported; at least MIN_GAP_MINUTES
        floor_hour: Earliest hour the scan starts at when entries begin later

    Returns:
        Chronological list of gaps
    """
    if min_gap_minutes < MIN_GAP_MINUTES:
        raise ValueError(f"min_gap_minutes must be at least {MIN_GAP_MINUTES}")
    if is_future_day:
        return []

    confirmed = sorted(
        (entry_interval(entry) for entry in entries if entry.is_confirmed and entry.is_timed),
        key=lambda interval: interval[0],
    )
    if not confirmed:
        return []

    occupied = merge_intervals(confirmed)
    first_start = occupied[0][0]
    last_end = occupied[-1][1]
    range_start = min(first_start, floor_hour * 60)
    effective_end = max(last_end, first_start)
    if is_today and now_minutes is not None:
        effective_end = max(effective_end, now_minutes)

    gaps: List[TimeGap] = []
    cursor = range_start

    for start, end in occupied:
        if start > cursor and start - cursor >= min_gap_minutes:
            gaps.append(TimeGap(start_minutes=cursor, end_minutes=start))
        cursor = max(cursor, end)

    if effective_end > cursor and effective_end - cursor >= min_gap_minutes:
        gaps.append(TimeGap(start_minutes=cursor, end_minutes=effective_end))

    logger.debug(f"Found {len(gaps)} unlogged gaps across {len(confirmed)} confirmed entries")
    return gaps
