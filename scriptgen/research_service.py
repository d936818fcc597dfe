"""ResearchAggregator: runs a few web searches and compiles them into a digest."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from .errors import ProviderError
from .models import ResearchDigest, SearchResult
from .search_providers import SearchProvider, resolve_search_provider

logger = logging.getLogger(__name__)

_ENUMERATION_WORDS = re.compile(r"every|all", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class DigestCategory:
    """A digest section and the snippet keywords that route results into it."""

    heading: str
    keywords: Tuple[str, ...] = ()

    def matches(self, snippet: str) -> bool:
        lowered = snippet.lower()
        return any(keyword in lowered for keyword in self.keywords)


DEFINITIONS = DigestCategory("Definitions and Explanations", ("definition", "what is", "means"))
EXAMPLES = DigestCategory("Examples and Case Studies", ("example", "case study", "instance"))
TECHNICAL = DigestCategory("Technical Details", ("how", "process", "mechanism"))
RECENT = DigestCategory("Recent Developments", ("recent", "latest", "new"))
KEY_INFORMATION = DigestCategory("Key Information")

# Order in which snippets are tested; the first match wins.
CLASSIFICATION_ORDER: Tuple[DigestCategory, ...] = (DEFINITIONS, EXAMPLES, TECHNICAL, RECENT)
# Order in which non-empty sections are rendered.
RENDER_ORDER: Tuple[DigestCategory, ...] = (KEY_INFORMATION, DEFINITIONS, EXAMPLES, TECHNICAL, RECENT)


def classify_snippet(
    snippet: str,
    categories: Sequence[DigestCategory] = CLASSIFICATION_ORDER,
    fallback: DigestCategory = KEY_INFORMATION,
) -> DigestCategory:
    for category in categories:
        if category.matches(snippet):
            return category
    return fallback


def build_search_queries(topic: str) -> List[str]:
    """Return the three queries used to research `topic`.

    The first two target an encyclopedic overview and concrete facts.  The
    third depends on whether the topic asks for an exhaustive enumeration
    ("every", "all"): such topics get a classification query, the rest a
    latest-developments query.
    """

    topic = topic.strip()
    queries = [
        f"{topic} site:wikipedia.org OR {topic} explained",
        f"{topic} examples facts site:britannica.com OR {topic} how it works",
    ]
    lowered = topic.lower()
    if "every" in lowered or "all" in lowered:
        clean_topic = re.sub(r"\s+", " ", _ENUMERATION_WORDS.sub("", topic)).strip()
        queries.append(f"types of {clean_topic} categories list site:edu OR {clean_topic} classification")
    else:
        queries.append(f"{topic} latest developments research site:edu OR {topic} modern applications")
    return queries


def compile_digest(
    results: Sequence[SearchResult],
    topic: str,
    *,
    classifier: Callable[[str], DigestCategory] = classify_snippet,
    render_order: Sequence[DigestCategory] = RENDER_ORDER,
) -> str:
    """Group results by category and render them as numbered research notes."""

    if not results:
        return (
            f"Research topic: {topic}\n\n"
            "No search results available. Please ensure a search API is properly configured."
        )

    sections: Dict[str, List[str]] = {category.heading: [] for category in render_order}
    for index, result in enumerate(results, start=1):
        category = classifier(result.snippet or "")
        sections.setdefault(category.heading, []).append(f"{index}. {result.title}: {result.snippet}")

    chunks = [f"Research topic: {topic}", f"Compiled from {len(results)} search results:"]
    for heading, entries in sections.items():
        if entries:
            chunks.append(f"## {heading}\n" + "\n\n".join(entries))
    return "\n\n".join(chunks) + "\n"


class ResearchAggregator:
    """Collects web research for a topic through the first configured provider."""

    def __init__(
        self,
        providers: Sequence[SearchProvider] = (),
        *,
        results_per_query: int = 10,
        query_delay: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._provider = resolve_search_provider(providers)
        self._results_per_query = max(1, results_per_query)
        self._query_delay = max(0.0, query_delay)
        self._sleep = sleep

    @property
    def provider(self) -> SearchProvider:
        return self._provider

    def research(self, topic: str) -> ResearchDigest:
        if not topic or not topic.strip():
            raise ValueError("Topic must be a non-empty string.")

        topic = topic.strip()
        logger.info("Researching: %s", topic)
        queries = build_search_queries(topic)
        collected: List[SearchResult] = []

        for index, query in enumerate(queries):
            if index and self._query_delay:
                self._sleep(self._query_delay)
            logger.info("Searching (%s): %s", self._provider.name, query)
            try:
                results = self._provider.search(query, self._results_per_query)
            except ProviderError as exc:
                logger.warning("Search failed for '%s': %s", query, exc)
                continue
            logger.info("Query returned %d results.", len(results))
            collected.extend(results)

        compiled = compile_digest(collected, topic)
        logger.info("Research completed: %d sources found.", len(collected))
        return ResearchDigest(results=collected, compiled_text=compiled, queries=queries)

