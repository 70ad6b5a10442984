"""Configuration Management for TimeJournal

Handles loading, validation, and management of application configurations.
Supports hierarchical configuration files with environment variable overrides.
"""

import os
import re
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .error_handler import ConfigurationError


class ParserConfig(BaseModel):
    """Configuration for the temporal expression extractor."""
    pm_hours: List[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5, 6, 7])
    default_duration_minutes: int = Field(default=60, ge=1, le=24 * 60)

    @field_validator('pm_hours')
    @classmethod
    def validate_pm_hours(cls, v):
        """Only 1-11 can be shifted to the afternoon; 12 is always noon."""
        if any(hour < 1 or hour > 11 for hour in v):
            raise ValueError("pm_hours must contain values between 1 and 11")
        return sorted(set(v))


class TimelineConfig(BaseModel):
    """Configuration for timeline placement and gap reporting."""
    visible_start_hour: int = Field(default=0, ge=0, le=23)
    visible_end_hour: int = Field(default=24, ge=1, le=24)
    min_gap_minutes: int = Field(default=30, ge=30)
    gap_scan_floor_hour: int = Field(default=7, ge=0, le=23)
    coverage_threshold: float = Field(default=0.5, gt=0.0, le=1.0)

    @model_validator(mode='after')
    def validate_window(self):
        """Validate the visible window is non-empty"""
        if self.visible_end_hour <= self.visible_start_hour:
            raise ValueError("visible_end_hour must be greater than visible_start_hour")
        return self


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_dir: str = Field(default="logs")
    max_file_size: str = Field(default="10MB")
    backup_count: int = Field(default=5, ge=1, le=20)
    log_to_console: bool = Field(default=True)
    log_to_file: bool = Field(default=False)

    @field_validator('max_file_size')
    @classmethod
    def validate_file_size(cls, v):
        """Validate file size format"""
        if not re.match(r'^\d+[KMG]B$', v.upper()):
            raise ValueError("File size must be in format: 10KB, 10MB, or 1GB")
        return v


class AppConfig(BaseModel):
    """Main application configuration."""
    model_config = ConfigDict(validate_assignment=True)

    app_name: str = Field(default="TimeJournal")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development", pattern="^(development|testing|production)$")
    debug_mode: bool = Field(default=False)

    parser: ParserConfig = Field(default_factory=ParserConfig)
    timeline: TimelineConfig = Field(default_factory=TimelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages application configuration loading and validation."""

    ENV_PREFIX = "TIMEJOURNAL_"

    def __init__(self, config_path: Optional[Path] = None, environment: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to the configuration directory
            environment: Environment name (development, testing, production)
        """
        self.config_base_path = Path(config_path) if config_path else self._get_default_config_path()
        self.environment = environment or os.getenv('TIMEJOURNAL_ENV', 'development')
        self._config: Optional[AppConfig] = None
        self._lock = threading.RLock()
        self.logger = logging.getLogger(__name__)

        self.config_files = self._get_config_files()

    def _get_default_config_path(self) -> Path:
        """Get the default configuration directory."""
        config_locations = [
            Path("config"),
            Path.home() / ".timejournal",
        ]

        for location in config_locations:
            if location.exists() and location.is_dir():
                return location

        return Path("config")

    def _get_config_files(self) -> Dict[str, Path]:
        """Get configuration file paths for hierarchical loading."""
        base_dir = self.config_base_path

        return {
            'default': base_dir / 'default_config.yaml',
            'environment': base_dir / f'{self.environment}_config.yaml',
            'user': base_dir / 'user_config.yaml',
        }

    @property
    def config(self) -> AppConfig:
        """Current configuration, loading it on first access."""
        return self.load_config()

    def load_config(self) -> AppConfig:
        """Load and validate configuration with hierarchical overrides.

        Returns:
            Validated application configuration

        Raises:
            ConfigurationError: If a file cannot be parsed or validation fails
        """
        with self._lock:
            if self._config:
                return self._config

            config_data: Dict[str, Any] = {}

            for config_type, config_file in self.config_files.items():
                if config_file.exists():
                    self.logger.info(f"Loading {config_type} config from {config_file}")
                    self._deep_merge(config_data, self._load_yaml_file(config_file))

            env_overrides = self._get_env_overrides()
            if env_overrides:
                self.logger.info(f"Applying environment overrides: {list(env_overrides.keys())}")
                self._deep_merge(config_data, env_overrides)

            try:
                self._config = AppConfig(**config_data)
            except ValidationError as e:
                self.logger.error(f"Configuration validation failed: {e}")
                raise ConfigurationError(f"Invalid configuration: {e}") from e

            return self._config

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file.

        Returns:
            Configuration dictionary
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"Failed to parse YAML file {file_path}: {e}")
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {file_path} must contain a mapping")
        return data

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Get configuration overrides from environment variables.

        Environment variables follow pattern: TIMEJOURNAL_<SECTION>__<KEY>
        Example: TIMEJOURNAL_TIMELINE__VISIBLE_START_HOUR -> timeline.visible_start_hour
        """
        overrides: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == 'TIMEJOURNAL_ENV':
                continue

            config_path = key[len(self.ENV_PREFIX):].lower().split('__')

            current = overrides
            for part in config_path[:-1]:
                current = current.setdefault(part, {})

            current[config_path[-1]] = self._convert_env_value(value)

        return overrides

    def _convert_env_value(self, value: str) -> Union[str, int, float, bool, List[str]]:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        # Comma-separated lists
        if ',' in value:
            return [v.strip() for v in value.split(',')]

        return value

    def _deep_merge(self, base_dict: Dict[str, Any], update_dict: Dict[str, Any]):
        """Recursively merge nested dictionaries."""
        for key, value in update_dict.items():
            if isinstance(value, dict) and key in base_dict and isinstance(base_dict[key], dict):
                self._deep_merge(base_dict[key], value)
            else:
                base_dict[key] = value
