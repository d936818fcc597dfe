"""Exception hierarchy shared by the script generation pipeline."""

from __future__ import annotations

from typing import Optional


class ScriptGenError(RuntimeError):
    """Base class for every error raised by the pipeline."""


class ConfigurationError(ScriptGenError, EnvironmentError):
    """Raised when a required provider credential is missing at construction time."""


class ProviderError(ScriptGenError):
    """Raised when a search or synthesis provider call fails."""

    def __init__(self, message: str, *, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider = provider


class PersistenceError(ScriptGenError):
    """Raised when an artifact cannot be read, written, or deleted."""
