"""Calendar event reconciliation against logged entries.

An imported event is hidden once a confirmed entry covers at least half of the
event's own duration. Independently, visible events and confirmed entries that
intersect at all are flagged so the renderer can draw them side by side.
"""

from typing import FrozenSet, Iterable, List, Sequence, Tuple

from ..models.records import ImportedEvent, LoggedEntry
from ..utils.time_utils import time_to_minutes

COVERAGE_THRESHOLD = 0.5


def _event_interval(event: ImportedEvent) -> Tuple[int, int]:
    return time_to_minutes(event.start_time), time_to_minutes(event.end_time)


def _confirmed_intervals(entries: Iterable[LoggedEntry]) -> List[Tuple[LoggedEntry, int, int]]:
    return [
        (entry, time_to_minutes(entry.start_time), time_to_minutes(entry.end_time))
        for entry in entries
        if entry.is_confirmed and entry.is_timed
    ]


def is_event_covered(event: ImportedEvent, entries: Iterable[LoggedEntry],
                     threshold: float = COVERAGE_THRESHOLD) -> bool:
    """Check whether a confirmed entry already accounts for an event.

    All-day, partially timed and zero-length events are never covered.
    """
    if not event.is_timed:
        return False

    event_start, event_end = _event_interval(event)
    event_duration = event_end - event_start
    if event_duration <= 0:
        return False

    for _, entry_start, entry_end in _confirmed_intervals(entries):
        overlap = max(0, min(event_end, entry_end) - max(event_start, entry_start))
        if overlap >= event_duration * threshold:
            return True
    return False


def find_hidden_event_ids(events: Iterable[ImportedEvent], entries: Sequence[LoggedEntry],
                          threshold: float = COVERAGE_THRESHOLD) -> FrozenSet[str]:
    """Ids of events that duplicate an already-logged entry."""
    return frozenset(event.id for event in events if is_event_covered(event, entries, threshold))


def find_overlapping_ids(visible_events: Iterable[ImportedEvent],
                         entries: Iterable[LoggedEntry]) -> Tuple[FrozenSet[str], FrozenSet[str]]:
    """Tag confirmed entries and visible events that intersect each other.

    Args:
        visible_events: Events left after suppression
        entries: All entries of the day; only confirmed timed ones count

    Returns:
        ``(overlapping_entry_ids, overlapping_event_ids)``
    """
    confirmed = _confirmed_intervals(entries)
    entry_ids = set()
    event_ids = set()

    for event in visible_events:
        if not event.is_timed:
            continue
        event_start, event_end = _event_interval(event)

        for entry, entry_start, entry_end in confirmed:
            if event_start < entry_end and event_end > entry_start:
                event_ids.add(event.id)
                entry_ids.add(entry.id)

    return frozenset(entry_ids), frozenset(event_ids)
