"""Text Processing Module

Processors that turn free-text activity descriptions into structured time
information.
"""

from .core.temporal_extractor import ParseOutcome, TemporalExtractor, TimeExpression

__all__ = [
    "ParseOutcome",
    "TemporalExtractor",
    "TimeExpression"
]
