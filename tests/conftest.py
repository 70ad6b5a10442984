"""
Pytest configuration and shared fixtures for TimeJournal testing.

Provides configuration directories, sample day data and ready-made
extractor and placement engine instances.
"""

import tempfile
from pathlib import Path
from typing import List
from unittest.mock import patch

import pytest
import yaml

from tests.fixtures.sample_data import (
    SAMPLE_ENTRY_RECORDS,
    SAMPLE_EVENT_RECORDS,
)
from timejournal.models.records import ImportedEvent, LoggedEntry


# Configuration Fixtures
@pytest.fixture
def temp_config_dir():
    """Temporary directory for test configuration files"""
    with tempfile.TemporaryDirectory() as temp_dir:
        config_dir = Path(temp_dir) / "config"
        config_dir.mkdir()

        default_config = {
            "app_name": "TimeJournal-Test",
            "version": "0.1.0-test",
            "environment": "testing",
            "debug_mode": True,
            "parser": {
                "pm_hours": [1, 2, 3, 4, 5, 6],
                "default_duration_minutes": 45,
            },
            "timeline": {
                "visible_start_hour": 6,
                "visible_end_hour": 22,
                "min_gap_minutes": 30,
            },
            "logging": {
                "level": "DEBUG",
                "log_to_console": False,
                "log_to_file": False,
            },
        }

        with open(config_dir / "default_config.yaml", "w") as f:
            yaml.dump(default_config, f)

        yield config_dir


@pytest.fixture
def mock_config_manager(temp_config_dir):
    """Configuration manager reading from the temporary config directory"""
    from timejournal.core.config_manager import ConfigManager

    with patch.object(ConfigManager, '_get_default_config_path') as mock_path:
        mock_path.return_value = temp_config_dir
        config_manager = ConfigManager(environment="testing")
        config_manager.load_config()
        yield config_manager


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host TIMEJOURNAL_* variables out of configuration tests"""
    import os

    for key in list(os.environ):
        if key.startswith("TIMEJOURNAL_"):
            monkeypatch.delenv(key, raising=False)


# Domain Fixtures
@pytest.fixture
def sample_entries() -> List[LoggedEntry]:
    """One day of logged entries"""
    return [LoggedEntry.from_record(record) for record in SAMPLE_ENTRY_RECORDS]


@pytest.fixture
def sample_events() -> List[ImportedEvent]:
    """Calendar events for the same day"""
    return [ImportedEvent.from_record(record) for record in SAMPLE_EVENT_RECORDS]


@pytest.fixture
def extractor():
    """Extractor with the default inference policy"""
    from timejournal.processors.core.temporal_extractor import TemporalExtractor
    return TemporalExtractor()


@pytest.fixture
def placement_engine():
    from timejournal.timeline.placement_engine import PlacementEngine
    return PlacementEngine()
