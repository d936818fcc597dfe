"""
ScriptOrchestrator: title in, persisted narrated script out.

The run moves through research (optional), synthesis and validation, retrying
synthesis until a draft passes or the attempt budget is spent.  The last draft
is always saved so the caller gets something to inspect, and when no draft was
produced at all the most recent library entry is offered instead.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .config import Settings
from .content_synthesizer import ContentSynthesizer
from .errors import PersistenceError, ProviderError
from .models import GenerationAttempt, GenerationRequest, GenerationResult, ResearchDigest
from .prompts import NO_RESEARCH_PLACEHOLDER, format_script_prompt
from .research_service import ResearchAggregator
from .run_log import RunLog
from .script_library import ScriptLibrary
from .search_providers import default_search_providers
from .validator import ScriptValidator

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    INIT = "init"
    RESEARCHING = "researching"
    SYNTHESIZING = "synthesizing"
    VALIDATING = "validating"
    RETRYING = "retrying"
    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"
    RECOVERED = "recovered"
    ERROR = "error"


class ScriptOrchestrator:
    """Runs the research → synthesize → validate → persist pipeline for one title at a time."""

    def __init__(
        self,
        *,
        research: ResearchAggregator,
        synthesizer: ContentSynthesizer,
        library: ScriptLibrary,
        validator: Optional[ScriptValidator] = None,
        prompt_builder: Callable[..., str] = format_script_prompt,
        log_dir: Optional[Path] = None,
    ) -> None:
        self._research = research
        self._synthesizer = synthesizer
        self._library = library
        self._validator = validator or ScriptValidator()
        self._prompt_builder = prompt_builder
        self._log_dir = log_dir

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScriptOrchestrator":
        """Wire the default collaborators from environment settings."""

        research = ResearchAggregator(
            default_search_providers(
                serper_api_key=settings.serper_api_key,
                google_api_key=settings.google_search_api_key,
                google_engine_id=settings.google_search_engine_id,
                tavily_api_key=settings.tavily_api_key,
            ),
            query_delay=settings.query_delay,
        )
        return cls(
            research=research,
            synthesizer=ContentSynthesizer.from_settings(settings),
            library=ScriptLibrary(settings.library_dir),
            log_dir=settings.log_dir,
        )

    @property
    def library(self) -> ScriptLibrary:
        return self._library

    def generate(self, request: GenerationRequest) -> GenerationResult:
        library = self._library.for_directory(request.output_dir)
        run_log = RunLog(self._log_dir, title=request.title)
        logger.info("Starting script generation for: \"%s\"", request.title)
        self._transition(run_log, PipelineState.INIT, request=request.model_dump(mode="json"))

        digest: Optional[ResearchDigest] = None
        if request.enable_research:
            self._transition(run_log, PipelineState.RESEARCHING)
            digest = self._research.research(request.title)
            run_log.record("research", {"queries": digest.queries, "source_count": digest.source_count})
        else:
            logger.info("Skipping research phase.")

        research_text = digest.compiled_text if digest else NO_RESEARCH_PLACEHOLDER
        prompt = self._prompt_builder(title=request.title, research=research_text)
        source_count = digest.source_count if digest else None

        last_attempt: Optional[GenerationAttempt] = None
        last_error: Optional[ProviderError] = None
        attempts = 0

        while attempts < request.max_retries:
            attempts += 1
            self._transition(run_log, PipelineState.SYNTHESIZING, attempt=attempts, max_attempts=request.max_retries)
            try:
                response = self._synthesizer.generate_script(prompt)
            except ProviderError as exc:
                last_error = exc
                logger.warning("Generation attempt %d/%d failed: %s", attempts, request.max_retries, exc)
                run_log.record("provider_error", {"attempt": attempts, "error": str(exc)})
                if attempts < request.max_retries:
                    self._transition(run_log, PipelineState.RETRYING)
                continue
            last_error = None

            self._transition(run_log, PipelineState.VALIDATING, attempt=attempts)
            verdict = self._validator.validate(response.content, request.target_word_count)
            last_attempt = GenerationAttempt(attempt_index=attempts, content=response.content, verdict=verdict)
            run_log.record(
                "verdict",
                {
                    "attempt": attempts,
                    "verdict": asdict(verdict),
                    "usage": asdict(response.usage) if response.usage else None,
                },
            )

            if verdict.valid:
                logger.info("%s", verdict.feedback)
                file_path = self._save(run_log, library, request.title, response.content)
                self._transition(run_log, PipelineState.ACCEPTED, file_path=str(file_path))
                return self._finish(
                    run_log,
                    GenerationResult(
                        success=True,
                        content=response.content,
                        word_count=verdict.word_count,
                        file_path=str(file_path),
                        research_source_count=source_count,
                        attempts=attempts,
                    ),
                )

            logger.info("Validation failed: %s", verdict.feedback)
            if attempts < request.max_retries:
                self._transition(run_log, PipelineState.RETRYING)

        if last_attempt is not None:
            warning = last_attempt.verdict.feedback
            if last_error is not None:
                warning = f"{warning} Final attempt failed: {last_error}"
            file_path = self._save(run_log, library, request.title, last_attempt.content)
            logger.warning("Script saved despite validation issues: %s", file_path)
            self._transition(run_log, PipelineState.EXHAUSTED, file_path=str(file_path))
            return self._finish(
                run_log,
                GenerationResult(
                    success=False,
                    content=last_attempt.content,
                    word_count=last_attempt.verdict.word_count,
                    file_path=str(file_path),
                    warning=warning,
                    research_source_count=source_count,
                    attempts=attempts,
                ),
            )

        error_message = str(last_error) if last_error else "Max retries exceeded"
        logger.error("Script generation failed: %s", error_message)
        return self._recover(run_log, library, request, error_message, attempts)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _recover(
        self,
        run_log: RunLog,
        library: ScriptLibrary,
        request: GenerationRequest,
        error_message: str,
        attempts: int,
    ) -> GenerationResult:
        fallback = library.most_recent(request.title)
        if fallback is None:
            self._transition(run_log, PipelineState.ERROR, error=error_message)
            return self._finish(
                run_log,
                GenerationResult(success=False, error=error_message, attempts=attempts),
                error=error_message,
            )

        record, body = fallback
        logger.warning("Returning previously saved script %s after failure.", record.filename)
        self._transition(run_log, PipelineState.RECOVERED, file_path=str(record.file_path))
        return self._finish(
            run_log,
            GenerationResult(
                success=False,
                content=body,
                word_count=record.word_count,
                file_path=str(record.file_path),
                warning=(
                    f"Generation failed ({error_message}); showing the most recent saved script "
                    f"'{record.title}' instead."
                ),
                attempts=attempts,
                degraded=True,
            ),
            error=error_message,
        )

    @staticmethod
    def _save(run_log: RunLog, library: ScriptLibrary, title: str, content: str) -> Path:
        try:
            return library.save(title, content)
        except PersistenceError as exc:
            logger.error("Failed to save script for \"%s\": %s", title, exc)
            run_log.finalize(error=str(exc))
            raise

    @staticmethod
    def _transition(run_log: RunLog, state: PipelineState, **context: object) -> None:
        logger.debug("Pipeline state -> %s %s", state.value, context or "")
        run_log.record(f"state:{state.value}", dict(context))

    @staticmethod
    def _finish(run_log: RunLog, result: GenerationResult, *, error: Optional[str] = None) -> GenerationResult:
        run_log.finalize(result=result.to_payload(), error=error)
        return result
