"""TimeJournal - Activity Time Extraction and Timeline Placement

Reads free-text activity descriptions for time information and lays out a
day's logged entries and imported calendar events on a 24-hour timeline.
"""

__version__ = "0.1.0"
__author__ = "TimeJournal Team"
__description__ = "Activity time extraction and timeline placement"

from .processors.core.temporal_extractor import ParseOutcome, TemporalExtractor, TimeExpression, parse
from .timeline.placement_engine import PlacementEngine, PlacementOptions, TimelineLayout, place

__all__ = [
    "ParseOutcome",
    "PlacementEngine",
    "PlacementOptions",
    "TemporalExtractor",
    "TimeExpression",
    "TimelineLayout",
    "parse",
    "place",
]
