"""
ContentSynthesizer: single-shot text generation through an AutoGen model client.

Anthropic is used when `ANTHROPIC_API_KEY` is available, otherwise any
OpenAI-compatible endpoint configured through `OPENAI_API_KEY` and
`OPENAI_API_BASE_URL`.  Retrying is left to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Coroutine, Dict, List, Optional

from autogen_core.models import ChatCompletionClient, LLMMessage, ModelFamily, ModelInfo, SystemMessage, UserMessage
from autogen_ext.models.anthropic import AnthropicChatCompletionClient
from autogen_ext.models.openai import OpenAIChatCompletionClient

from .config import Settings
from .errors import ConfigurationError, ProviderError
from .models import SynthesisResponse, TokenUsage

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-3-haiku-20240307"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

# Dated Anthropic model ids start with their family name, e.g. claude-3-haiku-20240307.
_CLAUDE_FAMILIES = (
    ModelFamily.CLAUDE_3_7_SONNET,
    ModelFamily.CLAUDE_3_5_SONNET,
    ModelFamily.CLAUDE_3_5_HAIKU,
    ModelFamily.CLAUDE_3_OPUS,
    ModelFamily.CLAUDE_3_SONNET,
    ModelFamily.CLAUDE_3_HAIKU,
)


def anthropic_model_family(model_name: str) -> str:
    for family in _CLAUDE_FAMILIES:
        if model_name.startswith(family):
            return family
    return ModelFamily.UNKNOWN


class ContentSynthesizer:
    """Wraps one request/response call to a generative text provider."""

    def __init__(
        self,
        *,
        model_client: ChatCompletionClient,
        model_name: str,
        provider_name: str = "llm",
        default_max_tokens: int = 4000,
        default_temperature: float = 0.7,
    ) -> None:
        self._model_client = model_client
        self._model_name = model_name
        self._provider_name = provider_name
        self._default_max_tokens = default_max_tokens
        self._default_temperature = default_temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "ContentSynthesizer":
        """Build a synthesizer for whichever provider has credentials configured."""

        if settings.anthropic_api_key:
            model_name = settings.script_model or DEFAULT_ANTHROPIC_MODEL
            logger.info("Initializing Anthropic synthesizer with model '%s'", model_name)
            client = cls._build_anthropic_client(model_name=model_name, api_key=settings.anthropic_api_key)
            return cls(model_client=client, model_name=model_name, provider_name="anthropic")
        if settings.openai_api_key:
            model_name = settings.script_model or DEFAULT_OPENAI_MODEL
            logger.info("Initializing OpenAI synthesizer with model '%s'", model_name)
            client = cls._build_openai_client(
                model_name=model_name,
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
            )
            return cls(model_client=client, model_name=model_name, provider_name="openai")
        raise ConfigurationError("ANTHROPIC_API_KEY or OPENAI_API_KEY must be set to generate scripts.")

    @property
    def model_name(self) -> str:
        return self._model_name

    def synthesize(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        model: Optional[str] = None,
    ) -> SynthesisResponse:
        if not prompt or not prompt.strip():
            raise ValueError("Prompt must be a non-empty string.")

        messages: List[LLMMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(UserMessage(content=prompt, source="user"))

        create_args: Dict[str, Any] = {
            "max_tokens": max_tokens or self._default_max_tokens,
            "temperature": self._default_temperature if temperature is None else temperature,
        }
        if model and model != self._model_name:
            create_args["model"] = model

        logger.info("Generating content with %s (%s)...", self._provider_name, model or self._model_name)
        try:
            result = self._run_async(self._model_client.create(messages, extra_create_args=create_args))
        except Exception as exc:
            logger.error("%s request failed: %s", self._provider_name, exc)
            raise ProviderError(f"{self._provider_name} request failed: {exc}", provider=self._provider_name) from exc

        content = result.content
        if not isinstance(content, str) or not content.strip():
            raise ProviderError(
                f"{self._provider_name} returned no text content.",
                provider=self._provider_name,
            )

        usage = getattr(result, "usage", None)
        token_usage = None
        if usage is not None:
            token_usage = TokenUsage(
                input_tokens=int(getattr(usage, "prompt_tokens", 0) or 0),
                output_tokens=int(getattr(usage, "completion_tokens", 0) or 0),
            )
            logger.info(
                "Token usage: %d input / %d output",
                token_usage.input_tokens,
                token_usage.output_tokens,
            )
        return SynthesisResponse(content=content, usage=token_usage, model=model or self._model_name)

    def generate_research(self, prompt: str) -> SynthesisResponse:
        """Low-temperature call shape for factual research notes."""

        return self.synthesize(prompt, max_tokens=2000, temperature=0.3)

    def generate_script(self, prompt: str) -> SynthesisResponse:
        """Higher-temperature call shape for the narrated script."""

        return self.synthesize(prompt, max_tokens=4000, temperature=0.7)

    # ------------------------------------------------------------------
    # Client helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_openai_client(*, model_name: str, api_key: str, base_url: str) -> ChatCompletionClient:
        model_info: ModelInfo = {
            "vision": False,
            "function_calling": False,
            "json_output": False,
            "structured_output": False,
            "family": "openai",
        }
        return OpenAIChatCompletionClient(
            model=model_name,
            api_key=api_key,
            base_url=base_url,
            include_name_in_message=False,
            model_info=model_info,
        )

    @staticmethod
    def _build_anthropic_client(*, model_name: str, api_key: str) -> ChatCompletionClient:
        model_info: ModelInfo = {
            "vision": False,
            "function_calling": False,
            "json_output": False,
            "structured_output": False,
            "family": anthropic_model_family(model_name),
        }
        return AnthropicChatCompletionClient(
            model=model_name,
            api_key=api_key,
            model_info=model_info,
        )

    @staticmethod
    def _run_async(coro: Coroutine[Any, Any, Any]) -> Any:
        """Run `coro` to completion, on a worker thread when the caller already has a running loop."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(coro)
        with ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()
