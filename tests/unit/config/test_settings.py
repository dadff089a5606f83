"""
Tests for settings configuration.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from channelsieve import __version__
from channelsieve.config.settings import Settings


def test_settings_defaults():
    """Test default settings values."""
    settings = Settings(_env_file=None)

    assert settings.app_name == "channelsieve"
    assert settings.app_version == __version__
    assert settings.fetch_concurrency == 1
    assert settings.fetch_max_retries == 6
    assert settings.videos_limit == 30
    assert settings.rules_file is None
    assert settings.host_rules["www.youtube.com"]["min_interval_ms"] == 4500


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch):
    """Test CHANNELSIEVE_ prefixed environment variables."""
    monkeypatch.setenv("CHANNELSIEVE_FETCH_MAX_RETRIES", "2")
    monkeypatch.setenv("CHANNELSIEVE_SKIP_VIDEOS", "true")
    monkeypatch.setenv("CHANNELSIEVE_RULES_FILE", "rules/strict.yaml")
    monkeypatch.setenv("CHANNELSIEVE_HOST_RULES", '{"WWW.YouTube.com": {"min_interval_ms": 9000}}')

    settings = Settings(_env_file=None)

    assert settings.fetch_max_retries == 2
    assert settings.skip_videos is True
    assert settings.rules_file == Path("rules/strict.yaml")
    assert settings.host_rules == {"www.youtube.com": {"min_interval_ms": 9000}}


def test_log_level_is_uppercased():
    """Test log level normalization."""
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


def test_invalid_log_level():
    """Test invalid log level validation."""
    with pytest.raises(ValidationError, match="Invalid log level"):
        Settings(_env_file=None, log_level="CHATTY")


@pytest.mark.parametrize(
    "overrides",
    [
        {"tab_switch_pause_min_ms": 6000, "tab_switch_pause_max_ms": 5000},
        {"channel_pause_min_ms": 13000},
    ],
)
def test_pause_range_validation(overrides):
    """Test min <= max for pause ranges."""
    with pytest.raises(ValidationError, match="must be <="):
        Settings(_env_file=None, **overrides)


def test_fetch_concurrency_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, fetch_concurrency=0)


def test_create_directories(mock_settings: Settings):
    """Test output directory creation."""
    assert not mock_settings.output_dir.exists()

    mock_settings.create_directories()

    assert mock_settings.output_dir.is_dir()
