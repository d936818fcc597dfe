"""Shared test doubles and builders."""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

from scriptgen.errors import ProviderError
from scriptgen.models import SearchResult, SynthesisResponse, TokenUsage
from scriptgen.search_providers import SearchProvider

INTRO_LINE = "Welcome back, today we explore the topic."
OUTRO_LINE = "Thanks for watching and subscribe."


def build_script(word_count: int, *, intro: bool = True, conclusion: bool = True) -> str:
    """Return a script with exactly `word_count` whitespace-delimited words."""

    head = [INTRO_LINE] if intro else []
    tail = [OUTRO_LINE] if conclusion else []
    used = sum(len(line.split()) for line in head + tail)
    filler = word_count - used
    if filler < 0:
        raise ValueError("word_count too small for the requested structure")
    words = ["narration"] * filler
    body = [" ".join(words[i : i + 20]) for i in range(0, len(words), 20)]
    return "\n".join(head + body + tail)


Reply = Union[str, Exception]


class FakeSynthesizer:
    """Stands in for ContentSynthesizer; replays canned replies in order."""

    def __init__(self, replies: Iterable[Reply]) -> None:
        self._replies: List[Reply] = list(replies)
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def generate_script(self, prompt: str) -> SynthesisResponse:
        self.prompts.append(prompt)
        index = min(len(self.prompts), len(self._replies)) - 1
        reply = self._replies[index]
        if isinstance(reply, Exception):
            raise reply
        return SynthesisResponse(content=reply, usage=TokenUsage(input_tokens=10, output_tokens=20), model="fake")


class StaticSearchProvider(SearchProvider):
    """Configured provider returning fixed results, optionally failing some queries."""

    name = "static"

    def __init__(self, results: List[SearchResult], *, fail_on: Optional[Iterable[int]] = None) -> None:
        self._results = results
        self._fail_on = set(fail_on or ())
        self.queries: List[str] = []

    def search(self, query: str, num_results: int = 10) -> List[SearchResult]:
        self.queries.append(query)
        if len(self.queries) in self._fail_on:
            raise ProviderError("rate limited", provider=self.name)
        return list(self._results[:num_results])


class UnconfiguredProvider(SearchProvider):
    name = "unconfigured"

    @property
    def is_configured(self) -> bool:
        return False

    def search(self, query: str, num_results: int = 10) -> List[SearchResult]:
        self._require_configured()
        return []
