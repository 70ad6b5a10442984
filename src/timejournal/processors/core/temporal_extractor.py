"""Temporal Extractor for Activity Descriptions

Finds time-related phrases in free-text activity descriptions ("coded for 2
hours", "standup at 9am", "lunch") and resolves them into a best-guess start
and end time for the described activity.

Rules are evaluated in a fixed priority order, most specific first. A match is
accepted only when its span does not intersect a span accepted earlier, so the
returned expressions never overlap.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ...core.logging_manager import LoggingManager
from ...utils.time_utils import (
    add_minutes_to_time,
    format_time,
    is_valid_time,
    subtract_minutes_from_time,
)
from .activity_durations import infer_default_duration


class ExpressionKind(Enum):
    """Kinds of recognized time expressions."""
    DURATION = "duration"             # Length of the activity (2 hours)
    ABSOLUTE_TIME = "absoluteTime"    # Start or end clock time (at 3pm, until 5)
    RANGE = "range"                   # Both ends (3 to 5, lunch)


@dataclass(frozen=True)
class TimeExpression:
    """One matched span in the source text."""
    span: Tuple[int, int]
    kind: ExpressionKind
    matched_text: str
    rule: str
    resolved_start: Optional[str] = None
    resolved_end: Optional[str] = None
    resolved_duration_minutes: Optional[int] = None

    @property
    def start(self) -> int:
        return self.span[0]

    @property
    def end(self) -> int:
        return self.span[1]

    def overlaps(self, start: int, end: int) -> bool:
        return start < self.span[1] and end > self.span[0]


@dataclass(frozen=True)
class ParseOutcome:
    """Result of parsing one activity description."""
    cleaned_text: str
    expressions: Tuple[TimeExpression, ...] = ()
    resolved_start: Optional[str] = None
    resolved_end: Optional[str] = None
    total_duration_minutes: int = 0
    inferred_duration_minutes: Optional[int] = None

    @property
    def has_expression(self) -> bool:
        return len(self.expressions) > 0

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation for JSON output."""
        return {
            "cleanedText": self.cleaned_text,
            "expressions": [
                {
                    "span": list(expr.span),
                    "kind": expr.kind.value,
                    "text": expr.matched_text,
                    "rule": expr.rule,
                    "resolvedStart": expr.resolved_start,
                    "resolvedEnd": expr.resolved_end,
                    "resolvedDurationMinutes": expr.resolved_duration_minutes,
                }
                for expr in self.expressions
            ],
            "resolvedStart": self.resolved_start,
            "resolvedEnd": self.resolved_end,
            "totalDurationMinutes": self.total_duration_minutes,
            "inferredDurationMinutes": self.inferred_duration_minutes,
            "hasExpression": self.has_expression,
        }


@dataclass(frozen=True)
class TextSegment:
    """A run of the original text, highlighted when it belongs to an expression."""
    text: str
    is_highlighted: bool
    expression: Optional[TimeExpression] = None


# A resolver turns a regex match into the resolved fields of an expression
# (start, end, duration) or None when the match does not describe a time.
Resolution = Dict[str, Any]
Resolver = Callable[[re.Match], Optional[Resolution]]


@dataclass(frozen=True)
class PatternRule:
    """One entry of the priority-ordered rule catalogue."""
    name: str
    pattern: re.Pattern
    kind: ExpressionKind
    resolver: Resolver


# Shared fragments
_HOUR_UNITS = r"(?:hrs|hr|hours|hour|h)"
_MINUTE_UNITS = r"(?:minutes|minute|mins|min|m)"
_CLOCK = r"\d{1,2}(?:[:.]?\d{2})?\s*(?:am|pm)?"
_SHORT_ACTIVITIES = r"(?:call|meeting|chat|sync|standup|break|check|review)"

_MERIDIEM_RE = re.compile(r"^(\d{1,2})\s*(am|pm)$", re.IGNORECASE)
_COLON_RE = re.compile(r"^(\d{1,2})[:.](\d{2})\s*(am|pm)?$", re.IGNORECASE)
_COMPACT_RE = re.compile(r"^(\d{1,2})(\d{2})\s*(am|pm)$", re.IGNORECASE)
_BARE_RE = re.compile(r"^(\d{1,2})$")
_HAS_MERIDIEM_RE = re.compile(r"am|pm", re.IGNORECASE)


def _to_24_hour(hour: int, is_pm: bool) -> int:
    if is_pm and hour != 12:
        return hour + 12
    if not is_pm and hour == 12:
        return 0
    return hour


def _unit_to_minutes(value: float, unit: str) -> int:
    if unit.lower().startswith('h'):
        return int(round(value * 60))
    return int(round(value))


class TemporalExtractor:
    """Priority-ordered time expression extractor for activity text."""

    def __init__(self, pm_hours: Optional[Iterable[int]] = None,
                 default_duration_minutes: int = 60):
        """Initialize the extractor and compile the rule catalogue.

        Args:
            pm_hours: Bare hours read as afternoon/evening (defaults to 1-7)
            default_duration_minutes: Fallback duration when no activity keyword matches
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.pm_hours = frozenset(pm_hours if pm_hours is not None else range(1, 8))
        self.default_duration_minutes = default_duration_minutes
        self.rules: Tuple[PatternRule, ...] = tuple(self._build_rules())

    @classmethod
    def from_config(cls, parser_config) -> 'TemporalExtractor':
        """Create an extractor from the ``parser`` configuration section."""
        return cls(
            pm_hours=parser_config.pm_hours,
            default_duration_minutes=parser_config.default_duration_minutes,
        )

    def _build_rules(self) -> List[PatternRule]:
        """Build the rule catalogue, most semantically specific first.

        Returns:
            Ordered list of pattern rules
        """
        def rule(name: str, pattern: str, kind: ExpressionKind, resolver: Resolver) -> PatternRule:
            return PatternRule(name, re.compile(pattern, re.IGNORECASE), kind, resolver)

        def fixed(**resolution) -> Resolver:
            return lambda match: dict(resolution)

        return [
            # Relative expressions
            rule("last_hour", r"\b(?:last|past)\s+hour\b",
                 ExpressionKind.DURATION, fixed(duration=60)),
            rule("last_n_hours", rf"\b(?:last|past)\s+(\d+(?:\.\d+)?)\s*{_HOUR_UNITS}\b",
                 ExpressionKind.DURATION, lambda m: {"duration": _unit_to_minutes(float(m.group(1)), "h")}),
            rule("last_n_minutes", rf"\b(?:last|past)\s+(\d+)\s*{_MINUTE_UNITS}\b",
                 ExpressionKind.DURATION, lambda m: {"duration": int(m.group(1))}),

            # Time of day keywords
            rule("noon", r"\b(?:at\s+)?(?:noon|midday)\b",
                 ExpressionKind.ABSOLUTE_TIME, fixed(start="12:00")),
            rule("midnight", r"\b(?:at\s+)?midnight\b",
                 ExpressionKind.ABSOLUTE_TIME, fixed(start="00:00")),
            rule("morning", r"\b(?:this\s+)?morning\b",
                 ExpressionKind.ABSOLUTE_TIME, self._resolve_morning),
            rule("afternoon", r"\b(?:this\s+)?afternoon\b",
                 ExpressionKind.ABSOLUTE_TIME, fixed(start="14:00")),
            rule("evening", r"\b(?:this\s+)?evening\b",
                 ExpressionKind.ABSOLUTE_TIME, fixed(start="18:00")),

            # "at 3" with the meridiem inferred
            rule("at_bare_hour", r"\bat\s+(\d{1,2})\b(?!\s*(?:am|pm|:|\.|\d))",
                 ExpressionKind.ABSOLUTE_TIME, self._resolve_at_bare_hour),

            # Meals
            rule("lunch", r"\blunch\b",
                 ExpressionKind.RANGE, fixed(start="12:00", end="13:00")),
            rule("breakfast", r"\bbreakfast\b",
                 ExpressionKind.RANGE, fixed(start="07:00", end="08:00")),
            rule("dinner", r"\bdinner\b",
                 ExpressionKind.RANGE, fixed(start="18:00", end="19:00")),

            # Duration modifiers
            rule("quick_activity", rf"\bquick\s+{_SHORT_ACTIVITIES}\b",
                 ExpressionKind.DURATION, fixed(duration=15)),
            rule("brief_activity", rf"\bbrief\s+{_SHORT_ACTIVITIES}\b",
                 ExpressionKind.DURATION, fixed(duration=15)),

            # Explicit ranges: "from 3 to 5", "9am-10:30am"
            rule("explicit_range", rf"(?:\bfrom\s+)?({_CLOCK})\s*(?:to|-|–|until|till)\s*({_CLOCK})",
                 ExpressionKind.RANGE, self._resolve_range),

            # Durations
            rule("for_duration", rf"\bfor\s+(\d+(?:\.\d+)?)\s*({_HOUR_UNITS}|{_MINUTE_UNITS})\b",
                 ExpressionKind.DURATION, self._resolve_amount),
            rule("and_a_half_hours", rf"\b(\d+)\s*and\s+a\s+half\s*{_HOUR_UNITS}\b",
                 ExpressionKind.DURATION, lambda m: {"duration": int(m.group(1)) * 60 + 30}),
            rule("half_hour", r"\bhalf\s*(?:an?\s*)?hour\b",
                 ExpressionKind.DURATION, fixed(duration=30)),
            rule("quarter_hour", r"\bquarter\s*(?:of\s*)?(?:an?\s*)?hour\b",
                 ExpressionKind.DURATION, fixed(duration=15)),
            rule("approximate_duration",
                 rf"(?:\b(?:about|around|approximately|approx\.?)|~)\s*(\d+(?:\.\d+)?)\s*({_HOUR_UNITS}|{_MINUTE_UNITS})\b",
                 ExpressionKind.DURATION, self._resolve_amount),
            rule("plain_hours", rf"\b(\d+(?:\.\d+)?)\s*({_HOUR_UNITS})\b",
                 ExpressionKind.DURATION, self._resolve_amount),
            rule("plain_minutes", rf"\b(\d+)\s*({_MINUTE_UNITS})\b",
                 ExpressionKind.DURATION, self._resolve_amount),

            # Single bounds
            rule("until_time", rf"\b(?:until|till)\s+({_CLOCK})\b",
                 ExpressionKind.ABSOLUTE_TIME, lambda m: self._resolve_bound(m, "end")),
            rule("since_time", rf"\b(?:since|from|starting(?:\s*at)?)\s+({_CLOCK})\b",
                 ExpressionKind.ABSOLUTE_TIME, lambda m: self._resolve_bound(m, "start")),

            # Generic clock times
            rule("meridiem_time", r"(?:\bat\s+)?\b(\d{1,2})[:.]?(\d{2})?\s*(am|pm)\b",
                 ExpressionKind.ABSOLUTE_TIME, self._resolve_meridiem_time),
            rule("clock_time", r"(?:\bat\s+)?\b([01]?\d|2[0-3]):([0-5]\d)\b",
                 ExpressionKind.ABSOLUTE_TIME,
                 lambda m: {"start": format_time(int(m.group(1)), int(m.group(2)))}),
        ]

    def infer_hour(self, hour: int) -> Optional[int]:
        """Infer a 24-hour value for a bare hour without am/pm.

        1-7 read as PM by default, 8-11 as AM, 12 as noon. Anything outside
        1-12 is not treated as a clock hour.
        """
        if hour < 1 or hour > 12:
            return None
        if hour == 12:
            return 12
        if hour in self.pm_hours:
            return hour + 12
        return hour

    def parse_clock(self, text: str, infer_meridiem: bool = False) -> Optional[Tuple[int, int]]:
        """Parse ``2pm``, ``2:30 pm``, ``14:30`` (and bare ``3`` when inferring).

        Returns:
            ``(hours, minutes)`` in 24-hour form, or None when not a valid time
        """
        text = text.strip()

        match = _MERIDIEM_RE.match(text)
        if match:
            hour = int(match.group(1))
            if not 1 <= hour <= 12:
                return None
            return _to_24_hour(hour, match.group(2).lower() == "pm"), 0

        match = _COLON_RE.match(text) or _COMPACT_RE.match(text)
        if match:
            hour, minutes = int(match.group(1)), int(match.group(2))
            if minutes > 59:
                return None
            if match.group(3):
                if not 1 <= hour <= 12:
                    return None
                hour = _to_24_hour(hour, match.group(3).lower() == "pm")
            elif hour > 23:
                return None
            return hour, minutes

        if infer_meridiem:
            match = _BARE_RE.match(text)
            if match:
                hour = self.infer_hour(int(match.group(1)))
                if hour is not None:
                    return hour, 0

        return None

    def _resolve_morning(self, match: re.Match) -> Optional[Resolution]:
        # "good morning" is a greeting, not a time
        if match.string[:match.start()].lower().endswith("good "):
            return None
        return {"start": "09:00"}

    def _resolve_at_bare_hour(self, match: re.Match) -> Optional[Resolution]:
        hour = self.infer_hour(int(match.group(1)))
        if hour is None:
            return None
        return {"start": format_time(hour, 0)}

    def _resolve_range(self, match: re.Match) -> Optional[Resolution]:
        first, second = match.group(1).strip(), match.group(2).strip()
        infer = not (_HAS_MERIDIEM_RE.search(first) or _HAS_MERIDIEM_RE.search(second))

        start = self.parse_clock(first, infer_meridiem=infer)
        end = self.parse_clock(second, infer_meridiem=infer)
        if start is None or end is None:
            return None
        return {"start": format_time(*start), "end": format_time(*end)}

    def _resolve_amount(self, match: re.Match) -> Optional[Resolution]:
        return {"duration": _unit_to_minutes(float(match.group(1)), match.group(2))}

    def _resolve_bound(self, match: re.Match, which: str) -> Optional[Resolution]:
        parsed = self.parse_clock(match.group(1))
        if parsed is None:
            return None
        return {which: format_time(*parsed)}

    def _resolve_meridiem_time(self, match: re.Match) -> Optional[Resolution]:
        hour = int(match.group(1))
        minutes = int(match.group(2)) if match.group(2) else 0
        if not 1 <= hour <= 12 or minutes > 59:
            return None
        return {"start": format_time(_to_24_hour(hour, match.group(3).lower() == "pm"), minutes)}

    def detect_expressions(self, text: str) -> List[TimeExpression]:
        """Find all disjoint time expressions in text.

        Args:
            text: Free-text activity description

        Returns:
            Expressions ordered by position in the text
        """
        if not text:
            return []

        accepted: List[TimeExpression] = []

        for rule in self.rules:
            for match in rule.pattern.finditer(text):
                start, end = match.span()
                # Optional meridiem groups can swallow trailing whitespace
                while end > start and text[end - 1].isspace():
                    end -= 1
                if start == end:
                    continue
                if any(expr.overlaps(start, end) for expr in accepted):
                    continue

                resolution = rule.resolver(match)
                if resolution is None:
                    continue

                expression = TimeExpression(
                    span=(start, end),
                    kind=rule.kind,
                    matched_text=text[start:end],
                    rule=rule.name,
                    resolved_start=resolution.get("start"),
                    resolved_end=resolution.get("end"),
                    resolved_duration_minutes=resolution.get("duration"),
                )
                accepted.append(expression)
                self.logger.debug(f"Rule {rule.name} matched {expression.matched_text!r} at {start}-{end}")

        accepted.sort(key=lambda expr: expr.span[0])
        return accepted

    def has_time_expression(self, text: str) -> bool:
        """Check whether text contains any recognizable time expression."""
        if not text or len(text.strip()) < 2:
            return False
        return len(self.detect_expressions(text)) > 0

    def parse(self, text: str, current_time: Optional[str] = None) -> ParseOutcome:
        """Extract time expressions and resolve them into a start and end time.

        Args:
            text: Free-text activity description
            current_time: Reference HH:MM used when only a duration is given;
                the activity is assumed to have just ended

        Returns:
            Parse outcome with cleaned text and resolved times
        """
        text = text or ""
        expressions = self.detect_expressions(text)

        if not expressions:
            return ParseOutcome(cleaned_text=text)

        cleaned_text = remove_spans(text, expressions)

        if current_time is not None and not is_valid_time(current_time):
            self.logger.debug(f"Ignoring malformed reference time {current_time!r}")
            current_time = None

        start: Optional[str] = None
        end: Optional[str] = None
        total_duration = 0

        for expression in expressions:
            if expression.kind is ExpressionKind.RANGE:
                start = expression.resolved_start or start
                end = expression.resolved_end or end
            elif expression.kind is ExpressionKind.ABSOLUTE_TIME:
                if expression.resolved_start:
                    start = expression.resolved_start
                if expression.resolved_end:
                    end = expression.resolved_end
            else:
                total_duration += expression.resolved_duration_minutes or 0

        if total_duration > 0 and not start and not end and current_time:
            end = current_time
            start = subtract_minutes_from_time(current_time, total_duration)
        elif total_duration > 0 and start and not end:
            end = add_minutes_to_time(start, total_duration)
        elif total_duration > 0 and not start and end:
            start = subtract_minutes_from_time(end, total_duration)

        inferred_duration = None
        if start and not end and total_duration == 0:
            inferred_duration = infer_default_duration(cleaned_text, self.default_duration_minutes)
            end = add_minutes_to_time(start, inferred_duration)

        self.logger.debug(
            f"Parsed {len(expressions)} expressions: start={start}, end={end}, "
            f"duration={total_duration}"
        )

        return ParseOutcome(
            cleaned_text=cleaned_text,
            expressions=tuple(expressions),
            resolved_start=start,
            resolved_end=end,
            total_duration_minutes=total_duration,
            inferred_duration_minutes=inferred_duration,
        )


def remove_spans(text: str, expressions: Iterable[TimeExpression]) -> str:
    """Remove every expression span from text and collapse whitespace.

    Spans are cut from the highest offset downward so earlier offsets stay
    valid while the string shrinks.
    """
    cleaned = text
    for expression in sorted(expressions, key=lambda expr: expr.span[0], reverse=True):
        start, end = expression.span
        cleaned = cleaned[:start] + cleaned[end:]
    return re.sub(r"\s+", " ", cleaned).strip()


def highlight_segments(text: str, expressions: Iterable[TimeExpression]) -> List[TextSegment]:
    """Split text into plain and highlighted runs for display.

    Concatenating the segment texts reproduces the original text.
    """
    ordered = sorted(expressions, key=lambda expr: expr.span[0])
    if not ordered:
        return [TextSegment(text=text, is_highlighted=False)]

    segments: List[TextSegment] = []
    last_end = 0

    for expression in ordered:
        start, end = expression.span
        if start > last_end:
            segments.append(TextSegment(text=text[last_end:start], is_highlighted=False))
        segments.append(TextSegment(text=text[start:end], is_highlighted=True, expression=expression))
        last_end = end

    if last_end < len(text):
        segments.append(TextSegment(text=text[last_end:], is_highlighted=False))

    return segments


_default_extractor: Optional[TemporalExtractor] = None


def get_extractor() -> TemporalExtractor:
    """Shared extractor with the default inference policy."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = TemporalExtractor()
    return _default_extractor


def detect_expressions(text: str) -> List[TimeExpression]:
    return get_extractor().detect_expressions(text)


def parse(text: str, current_time: Optional[str] = None) -> ParseOutcome:
    return get_extractor().parse(text, current_time)


def has_time_expression(text: str) -> bool:
    return get_extractor().has_time_expression(text)
