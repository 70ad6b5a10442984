"""
Unit tests for the ConfigManager component.

Tests hierarchical YAML loading, environment overrides and section
validation.
"""

import pytest
import yaml

from timejournal.core.config_manager import AppConfig, ConfigManager, ParserConfig, TimelineConfig
from timejournal.core.error_handler import ConfigurationError


class TestConfigManager:
    """Test suite for configuration loading"""

    @pytest.mark.unit
    def test_loads_default_file(self, mock_config_manager):
        config = mock_config_manager.config

        assert config.app_name == "TimeJournal-Test"
        assert config.environment == "testing"
        assert config.parser.pm_hours == [1, 2, 3, 4, 5, 6]
        assert config.parser.default_duration_minutes == 45
        assert config.timeline.visible_start_hour == 6
        assert config.timeline.visible_end_hour == 22
        # Untouched values keep their defaults
        assert config.timeline.gap_scan_floor_hour == 7
        assert config.logging.log_to_console is False

    @pytest.mark.unit
    def test_defaults_without_files(self, tmp_path):
        config = ConfigManager(config_path=tmp_path).load_config()

        assert config == AppConfig()
        assert config.parser.pm_hours == [1, 2, 3, 4, 5, 6, 7]
        assert config.timeline.min_gap_minutes == 30

    @pytest.mark.unit
    def test_environment_and_user_files_override(self, temp_config_dir):
        with open(temp_config_dir / "testing_config.yaml", "w") as f:
            yaml.dump({"timeline": {"min_gap_minutes": 60}}, f)
        with open(temp_config_dir / "user_config.yaml", "w") as f:
            yaml.dump({"timeline": {"min_gap_minutes": 45}, "debug_mode": False}, f)

        config = ConfigManager(config_path=temp_config_dir, environment="testing").load_config()

        assert config.timeline.min_gap_minutes == 45
        assert config.timeline.visible_start_hour == 6
        assert config.debug_mode is False

    @pytest.mark.unit
    def test_environment_variable_overrides(self, temp_config_dir, monkeypatch):
        monkeypatch.setenv("TIMEJOURNAL_TIMELINE__VISIBLE_START_HOUR", "8")
        monkeypatch.setenv("TIMEJOURNAL_PARSER__PM_HOURS", "1,2,3")
        monkeypatch.setenv("TIMEJOURNAL_DEBUG_MODE", "false")

        config = ConfigManager(config_path=temp_config_dir, environment="testing").load_config()

        assert config.timeline.visible_start_hour == 8
        assert config.parser.pm_hours == [1, 2, 3]
        assert config.debug_mode is False

    @pytest.mark.unit
    def test_env_selector_is_not_an_override(self, temp_config_dir, monkeypatch):
        monkeypatch.setenv("TIMEJOURNAL_ENV", "testing")

        manager = ConfigManager(config_path=temp_config_dir)

        assert manager.environment == "testing"
        assert "env" not in manager._get_env_overrides()

    @pytest.mark.unit
    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("False", False),
        ("42", 42),
        ("0.75", 0.75),
        ("a, b", ["a", "b"]),
        ("INFO", "INFO"),
    ])
    def test_convert_env_value(self, tmp_path, raw, expected):
        assert ConfigManager(config_path=tmp_path)._convert_env_value(raw) == expected

    @pytest.mark.unit
    def test_invalid_yaml_raises(self, tmp_path):
        (tmp_path / "default_config.yaml").write_text("timeline: [unclosed")

        with pytest.raises(ConfigurationError):
            ConfigManager(config_path=tmp_path).load_config()

    @pytest.mark.unit
    def test_non_mapping_file_raises(self, tmp_path):
        (tmp_path / "default_config.yaml").write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError):
            ConfigManager(config_path=tmp_path).load_config()

    @pytest.mark.unit
    def test_invalid_values_raise(self, tmp_path):
        (tmp_path / "default_config.yaml").write_text(
            yaml.dump({"timeline": {"visible_start_hour": 20, "visible_end_hour": 8}})
        )

        with pytest.raises(ConfigurationError):
            ConfigManager(config_path=tmp_path).load_config()

    @pytest.mark.unit
    def test_config_is_cached(self, mock_config_manager):
        assert mock_config_manager.load_config() is mock_config_manager.load_config()


class TestConfigModels:
    """Test suite for section validators"""

    @pytest.mark.unit
    def test_pm_hours_sorted_and_deduplicated(self):
        assert ParserConfig(pm_hours=[5, 1, 5, 3]).pm_hours == [1, 3, 5]

    @pytest.mark.unit
    @pytest.mark.parametrize("hours", [[0], [12], [1, 13]])
    def test_pm_hours_out_of_range(self, hours):
        with pytest.raises(ValueError):
            ParserConfig(pm_hours=hours)

    @pytest.mark.unit
    def test_timeline_window_must_be_non_empty(self):
        with pytest.raises(ValueError):
            TimelineConfig(visible_start_hour=10, visible_end_hour=10)

    @pytest.mark.unit
    def test_invalid_environment(self):
        with pytest.raises(ValueError):
            AppConfig(environment="staging")

    @pytest.mark.unit
    def test_min_gap_cannot_drop_below_thirty_minutes(self):
        assert TimelineConfig(min_gap_minutes=30).min_gap_minutes == 30
        with pytest.raises(ValueError):
            TimelineConfig(min_gap_minutes=20)
