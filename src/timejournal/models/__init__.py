"""Input record types consumed by the timeline engine."""

from .records import EntryStatus, ImportedEvent, LoggedEntry

__all__ = ["EntryStatus", "ImportedEvent", "LoggedEntry"]
