"""Centralized Logging Management for TimeJournal

Handles log configuration, formatting, and output management.
"""

import logging
import logging.handlers
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .config_manager import LoggingConfig


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Format log record with colors for console output."""
        log_message = super().format(record)
        return f"{self.COLORS.get(record.levelname, '')}{log_message}{self.COLORS['RESET']}"


def parse_file_size(size: str) -> int:
    """Convert a size string such as ``10MB`` into bytes."""
    match = re.match(r'^(\d+)([KMG])B$', size.strip().upper())
    if not match:
        raise ValueError(f"Invalid file size: {size}")
    amount, unit = match.groups()
    return int(amount) * {'K': 1024, 'M': 1024 ** 2, 'G': 1024 ** 3}[unit]


class LoggingManager:
    """Centralized logging configuration and management.

    Loggers are available as soon as the manager exists; handlers are only
    installed when ``setup`` is called, so library use stays silent until an
    application configures output.
    """

    _instance: Optional['LoggingManager'] = None
    _initialized: bool = False

    def __new__(cls) -> 'LoggingManager':
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize logging manager (only once)."""
        if self._initialized:
            return

        self.log_dir: Optional[Path] = None
        self.loggers: Dict[str, logging.Logger] = {}
        self._handlers: list = []
        self._initialized = True

    def setup(self, config: 'LoggingConfig'):
        """Configure the package logger with console and file handlers.

        Args:
            config: Logging section of the application configuration
        """
        package_logger = logging.getLogger("timejournal")
        package_logger.setLevel(logging.DEBUG)

        # Replacing handlers from a previous setup call
        for handler in self._handlers:
            package_logger.removeHandler(handler)
            handler.close()
        self._handlers = []

        level = getattr(logging, config.level.upper())

        if config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)
            console_handler.setFormatter(ColoredFormatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                datefmt='%H:%M:%S'
            ))
            self._add_handler(package_logger, console_handler)

        if config.log_to_file:
            self.log_dir = Path(config.log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)

            file_formatter = logging.Formatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

            log_file = self.log_dir / f"timejournal_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=parse_file_size(config.max_file_size),
                backupCount=config.backup_count
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(file_formatter)
            self._add_handler(package_logger, file_handler)

            # Error file handler for errors only
            error_file = self.log_dir / f"timejournal_errors_{datetime.now().strftime('%Y%m%d')}.log"
            error_handler = logging.handlers.RotatingFileHandler(
                error_file,
                maxBytes=parse_file_size(config.max_file_size),
                backupCount=config.backup_count
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(file_formatter)
            self._add_handler(package_logger, error_handler)

    def _add_handler(self, logger: logging.Logger, handler: logging.Handler):
        logger.addHandler(handler)
        self._handlers.append(handler)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get or create a logger with the specified name.

        Args:
            name: Logger name (typically __name__ of the module)

        Returns:
            Logger instance
        """
        manager = cls()
        if name not in manager.loggers:
            manager.loggers[name] = logging.getLogger(name)
        return manager.loggers[name]

    def set_log_level(self, level: str):
        """Set the logging level for the console handler.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f'Invalid log level: {level}')

        for handler in self._handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(numeric_level)
                break
