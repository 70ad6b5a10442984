"""Core text processors."""

from .activity_durations import infer_default_duration
from .temporal_extractor import (
    ExpressionKind,
    ParseOutcome,
    PatternRule,
    TemporalExtractor,
    TextSegment,
    TimeExpression,
    detect_expressions,
    has_time_expression,
    highlight_segments,
    parse,
    remove_spans,
)

__all__ = [
    "ExpressionKind",
    "ParseOutcome",
    "PatternRule",
    "TemporalExtractor",
    "TextSegment",
    "TimeExpression",
    "detect_expressions",
    "has_time_expression",
    "highlight_segments",
    "infer_default_duration",
    "parse",
    "remove_spans",
]
