"""Unit tests for environment-driven Settings."""

from pathlib import Path

import pytest

from scriptgen.config import Settings
from scriptgen.errors import ConfigurationError


def test_defaults_without_environment():
    settings = Settings.from_env()
    assert settings.library_dir == Path("./library")
    assert settings.log_dir is None
    assert settings.query_delay == 0.5
    assert not settings.has_synthesis_provider
    assert not settings.has_search_provider


def test_values_are_read_from_environment(monkeypatch):
    monkeypatch.setenv("SERPER_API_KEY", " serper ")
    monkeypatch.setenv("SCRIPT_LOG_DIR", "logs")
    monkeypatch.setenv("SEARCH_QUERY_DELAY", "0")

    settings = Settings.from_env()

    assert settings.serper_api_key == "serper"
    assert settings.log_dir == Path("logs")
    assert settings.query_delay == 0.0
    assert settings.environment_status()["SERPER_API_KEY"] is True


@pytest.mark.parametrize("value", ["soon", "-1"])
def test_bad_query_delay_is_a_configuration_error(monkeypatch, value):
    monkeypatch.setenv("SEARCH_QUERY_DELAY", value)
    with pytest.raises(ConfigurationError, match="SEARCH_QUERY_DELAY"):
        Settings.from_env()
