"""Error Handling for TimeJournal

Exception hierarchy and centralized error logging for the journaling core.
"""

import logging
import traceback
from enum import Enum
from typing import Callable, Dict, Optional, Type


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TimeJournalError(Exception):
    """Base exception class for TimeJournal."""

    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        self.message = message
        self.severity = severity
        super().__init__(self.message)


class ConfigurationError(TimeJournalError):
    """Error raised when configuration is invalid."""
    pass


class RecordError(TimeJournalError):
    """Error raised when a stored or imported record cannot be converted."""

    def __init__(self, message: str, record_id: Optional[str] = None,
                 severity: ErrorSeverity = ErrorSeverity.LOW):
        self.record_id = record_id
        super().__init__(message, severity)


class ErrorHandler:
    """Error handler shared by the command line and embedding applications."""

    def __init__(self):
        """Initialize error handler."""
        self.logger = logging.getLogger(__name__)
        self.error_callbacks: Dict[Type[Exception], Callable] = {}

    def register_error_callback(self, exception_type: Type[Exception],
                                callback: Callable[[Exception], None]):
        """Register a callback for specific exception types.

        Args:
            exception_type: The exception type to handle
            callback: Function to call when this exception occurs
        """
        self.error_callbacks[exception_type] = callback

    def handle_error(self, error: Exception, context: Optional[str] = None) -> bool:
        """Handle an error with severity-appropriate logging.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            True if error was handled successfully, False otherwise
        """
        try:
            severity = self._get_error_severity(error)
            error_message = self._format_error_message(error, context)

            self._log_error(error_message, severity)

            for error_type, callback in self.error_callbacks.items():
                if isinstance(error, error_type):
                    callback(error)
                    break

            return True

        except Exception as handler_error:
            self.logger.critical(f"Error handler failed: {handler_error}")
            return False

    def handle_critical_error(self, error: Exception, context: Optional[str] = None):
        """Log a critical error together with its traceback.

        Args:
            error: The critical exception
            context: Additional context about the error
        """
        error_message = f"Critical error occurred: {error}"
        if context:
            error_message = f"{context}: {error_message}"

        details = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        self.logger.critical(f"{error_message}\n{details}")

    def _get_error_severity(self, error: Exception) -> ErrorSeverity:
        """Determine error severity based on exception type."""
        if isinstance(error, TimeJournalError):
            return error.severity

        severity_map = {
            FileNotFoundError: ErrorSeverity.MEDIUM,
            PermissionError: ErrorSeverity.HIGH,
            ValueError: ErrorSeverity.MEDIUM,
            MemoryError: ErrorSeverity.CRITICAL,
            KeyboardInterrupt: ErrorSeverity.LOW,
        }

        return severity_map.get(type(error), ErrorSeverity.MEDIUM)

    def _format_error_message(self, error: Exception, context: Optional[str] = None) -> str:
        message = str(error)
        if context:
            message = f"{context}: {message}"
        return message

    def _log_error(self, message: str, severity: ErrorSeverity):
        """Log error with appropriate level.

        Args:
            message: Formatted error message
            severity: Error severity
        """
        log_methods = {
            ErrorSeverity.LOW: self.logger.info,
            ErrorSeverity.MEDIUM: self.logger.warning,
            ErrorSeverity.HIGH: self.logger.error,
            ErrorSeverity.CRITICAL: self.logger.critical,
        }

        log_methods[severity](message)
