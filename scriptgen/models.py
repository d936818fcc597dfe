"""
Data models passed between the pipeline stages.

Internal records are slotted dataclasses.  The request and result surfaces
exchanged with callers are pydantic models so that the CLI and the UI get
validation and camelCase serialisation for free.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A single hit returned by a search provider."""

    title: str
    link: str
    snippet: str


@dataclass(slots=True)
class ResearchDigest:
    """Search results for one topic plus the compiled text fed to the prompt."""

    results: List[SearchResult]
    compiled_text: str
    queries: List[str] = field(default_factory=list)

    @property
    def source_count(self) -> int:
        return len(self.results)


@dataclass(frozen=True, slots=True)
class TokenUsage:
    input_tokens: int
    output_tokens: int


@dataclass(frozen=True, slots=True)
class SynthesisResponse:
    """Raw completion text returned by the synthesis provider."""

    content: str
    usage: Optional[TokenUsage] = None
    model: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Verdict:
    """Outcome of validating one candidate script."""

    valid: bool
    word_count: int
    feedback: str


@dataclass(frozen=True, slots=True)
class GenerationAttempt:
    attempt_index: int
    content: str
    verdict: Verdict


@dataclass(frozen=True, slots=True)
class ScriptRecord:
    """Metadata describing one persisted script artifact."""

    filename: str
    file_path: Path
    title: str
    generated_at: datetime
    word_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "filePath": str(self.file_path),
            "title": self.title,
            "generatedAt": self.generated_at.isoformat(),
            "wordCount": self.word_count,
        }


class GenerationRequest(BaseModel):
    """Parameters of a single generation run."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
    )

    title: str = Field(min_length=1)
    enable_research: bool = True
    target_word_count: int = Field(1250, gt=0)
    max_retries: int = Field(2, ge=1)
    output_dir: Optional[Path] = None


class GenerationResult(BaseModel):
    """Result surface returned to the CLI and the UI."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    success: bool
    content: Optional[str] = None
    word_count: Optional[int] = None
    file_path: Optional[str] = None
    warning: Optional[str] = None
    error: Optional[str] = None
    research_source_count: Optional[int] = None
    attempts: int = 0
    degraded: bool = False

    def to_payload(self) -> Dict[str, Any]:
        """Serialise with camelCase keys, omitting fields that were never set."""

        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
