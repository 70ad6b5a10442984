"""Timeline placement, gap discovery and calendar reconciliation."""

from .day_context import day_flags
from .gap_finder import find_free_intervals, find_unlogged_gaps, merge_intervals
from .layout import PlacedEntry, TimeGap, TimelineLayout
from .placement_engine import (
    FillCursor,
    PlacementEngine,
    PlacementOptions,
    fit_into_gaps,
    partition_entries,
    place,
    place_untimed_entries,
)
from .reconciliation import find_hidden_event_ids, find_overlapping_ids, is_event_covered

__all__ = [
    "FillCursor",
    "PlacedEntry",
    "PlacementEngine",
    "PlacementOptions",
    "TimeGap",
    "TimelineLayout",
    "day_flags",
    "find_free_intervals",
    "find_hidden_event_ids",
    "find_overlapping_ids",
    "find_unlogged_gaps",
    "fit_into_gaps",
    "is_event_covered",
    "merge_intervals",
    "partition_entries",
    "place",
    "place_untimed_entries",
]
