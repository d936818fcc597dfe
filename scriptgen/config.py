"""
Runtime settings for the script generator.

Values are read from environment variables.  Entry points call
`load_dotenv()` first so a local `.env` file is honoured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .errors import ConfigurationError

DEFAULT_LIBRARY_DIR = "./library"
DEFAULT_QUERY_DELAY = 0.5


def _optional(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def _parse_delay(value: Optional[str]) -> float:
    if value is None:
        return DEFAULT_QUERY_DELAY
    try:
        delay = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"SEARCH_QUERY_DELAY must be a number of seconds, got {value!r}.") from exc
    if delay < 0:
        raise ConfigurationError(f"SEARCH_QUERY_DELAY must not be negative, got {value!r}.")
    return delay


@dataclass(frozen=True, slots=True)
class Settings:
    """Credentials and paths consumed by `ScriptOrchestrator.from_settings`."""

    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    script_model: Optional[str] = None
    serper_api_key: Optional[str] = None
    google_search_api_key: Optional[str] = None
    google_search_engine_id: Optional[str] = None
    tavily_api_key: Optional[str] = None
    library_dir: Path = Path(DEFAULT_LIBRARY_DIR)
    log_dir: Optional[Path] = None
    query_delay: float = DEFAULT_QUERY_DELAY

    @classmethod
    def from_env(cls) -> "Settings":
        log_dir = _optional("SCRIPT_LOG_DIR")
        delay = _optional("SEARCH_QUERY_DELAY")
        return cls(
            anthropic_api_key=_optional("ANTHROPIC_API_KEY"),
            openai_api_key=_optional("OPENAI_API_KEY"),
            openai_base_url=os.getenv("OPENAI_API_BASE_URL", "https://api.openai.com/v1"),
            script_model=_optional("SCRIPT_MODEL"),
            serper_api_key=_optional("SERPER_API_KEY"),
            google_search_api_key=_optional("GOOGLE_SEARCH_API_KEY"),
            google_search_engine_id=_optional("GOOGLE_SEARCH_ENGINE_ID"),
            tavily_api_key=_optional("TAVILY_API_KEY"),
            library_dir=Path(_optional("SCRIPT_LIBRARY_DIR") or DEFAULT_LIBRARY_DIR),
            log_dir=Path(log_dir) if log_dir else None,
            query_delay=_parse_delay(delay),
        )

    @property
    def has_synthesis_provider(self) -> bool:
        return bool(self.anthropic_api_key or self.openai_api_key)

    @property
    def has_search_provider(self) -> bool:
        return bool(
            self.serper_api_key
            or (self.google_search_api_key and self.google_search_engine_id)
            or self.tavily_api_key
        )

    def environment_status(self) -> Dict[str, bool]:
        """Return which credential variables are set, keyed by variable name."""

        return {
            "ANTHROPIC_API_KEY": bool(self.anthropic_api_key),
            "OPENAI_API_KEY": bool(self.openai_api_key),
            "SERPER_API_KEY": bool(self.serper_api_key),
            "GOOGLE_SEARCH_API_KEY": bool(self.google_search_api_key),
            "GOOGLE_SEARCH_ENGINE_ID": bool(self.google_search_engine_id),
            "TAVILY_API_KEY": bool(self.tavily_api_key),
        }
