"""Default activity durations inferred from activity keywords.

Used when a description names a start time but neither an end time nor a
duration. Buckets are checked in order and the first match wins.
"""

import re
from typing import List, Tuple

DURATION_BUCKETS: List[Tuple[int, re.Pattern]] = [
    # Standups, check-ins, quick ceremonies
    (15, re.compile(
        r"\b(standup|stand-up|daily|huddle|check-in|checkin|scrum|debrief|recap|catchup|catch-up)\b")),
    # Calls, syncs, reviews
    (30, re.compile(
        r"\b(call|chat|sync|1:1|one-on-one|coffee|break|phone|video|demo|walkthrough|review|feedback"
        r"|pairing|pair\s*programming)\b")),
    # Interviews, planning, brainstorms
    (45, re.compile(
        r"\b(interview|screening|planning|sprint|grooming|refinement|brainstorm|brainstorming"
        r"|retro|retrospective)\b")),
    # Classes, lectures, training
    (90, re.compile(r"\b(lecture|class|seminar|training|course|lesson|tutorial)\b")),
    # Deep work and creative sessions
    (120, re.compile(
        r"\b(workshop|deep\s*work|focus\s*time|focus\s*session|coding|programming|development|study"
        r"|studying|learning|writing|drafting|research|analysis|design|prototyping|exam|test|assessment"
        r"|project|building|creating)\b")),
    # Offsites and marathons
    (180, re.compile(r"\b(offsite|bootcamp|hackathon|marathon)\b")),
]


def infer_default_duration(text: str, fallback: int = 60) -> int:
    """Infer a duration in minutes from activity keywords in text.

    Args:
        text: Activity description with time expressions already removed
        fallback: Duration used when no keyword matches

    Returns:
        Duration in minutes
    """
    lowered = (text or "").lower()
    for minutes, pattern in DURATION_BUCKETS:
        if pattern.search(lowered):
            return minutes
    return fallback
