"""Core modules for TimeJournal.

This package contains configuration, logging and error handling shared by
the extractor, the timeline engine and the command line.
"""

from .config_manager import AppConfig, ConfigManager, LoggingConfig, ParserConfig, TimelineConfig
from .error_handler import (
    TimeJournalError,
    ConfigurationError,
    RecordError,
    ErrorHandler,
    ErrorSeverity
)
from .logging_manager import LoggingManager

__all__ = [
    "AppConfig",
    "ConfigManager",
    "LoggingConfig",
    "ParserConfig",
    "TimelineConfig",
    "TimeJournalError",
    "ConfigurationError",
    "RecordError",
    "ErrorHandler",
    "ErrorSeverity",
    "LoggingManager"
]
