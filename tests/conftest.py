"""Pytest fixtures shared across the suite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from scriptgen.research_service import ResearchAggregator
from scriptgen.script_library import ScriptLibrary

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def library(tmp_path, fixed_clock):
    return ScriptLibrary(tmp_path / "library", clock=fixed_clock)


@pytest.fixture
def offline_research():
    """Aggregator with no configured provider, so it falls back to mock results."""
    return ResearchAggregator((), query_delay=0)


@pytest.fixture(autouse=True)
def _clear_provider_env(monkeypatch):
    for name in (
        "ANTHROPIC_API_KEY",
        "OPENAI_API_KEY",
        "SCRIPT_MODEL",
        "SERPER_API_KEY",
        "GOOGLE_SEARCH_API_KEY",
        "GOOGLE_SEARCH_ENGINE_ID",
        "TAVILY_API_KEY",
        "SCRIPT_LIBRARY_DIR",
        "SCRIPT_LOG_DIR",
        "SEARCH_QUERY_DELAY",
    ):
        monkeypatch.delenv(name, raising=False)
