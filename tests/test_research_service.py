"""Unit tests for query planning, digest compilation and ResearchAggregator."""

import pytest

from scriptgen.models import SearchResult
from scriptgen.research_service import (
    DEFINITIONS,
    EXAMPLES,
    KEY_INFORMATION,
    RECENT,
    TECHNICAL,
    ResearchAggregator,
    build_search_queries,
    classify_snippet,
    compile_digest,
)
from scriptgen.search_providers import MockSearchProvider
from tests.fixtures import StaticSearchProvider, UnconfiguredProvider


# ============================================================================
# Query planning
# ============================================================================


def test_non_enumeration_topic_gets_latest_developments_query():
    queries = build_search_queries("Quantum Computing")
    assert len(queries) == 3
    assert queries[0] == "Quantum Computing site:wikipedia.org OR Quantum Computing explained"
    assert queries[1] == "Quantum Computing examples facts site:britannica.com OR Quantum Computing how it works"
    assert queries[2] == (
        "Quantum Computing latest developments research site:edu OR Quantum Computing modern applications"
    )


def test_enumeration_topic_gets_classification_query():
    queries = build_search_queries("Every Fighter Jet Generation")
    assert queries[2] == (
        "types of Fighter Jet Generation categories list site:edu OR Fighter Jet Generation classification"
    )


def test_enumeration_detection_is_substring_based():
    # "small" contains "all", so the enumeration branch is taken.
    queries = build_search_queries("Small Engines")
    assert queries[2].startswith("types of Sm Engines")


# ============================================================================
# Classification and digest rendering
# ============================================================================


@pytest.mark.parametrize(
    "snippet,expected",
    [
        ("The definition of a jet engine", DEFINITIONS),
        ("What is a turbofan and how it works", DEFINITIONS),
        ("A famous example is the F-86", EXAMPLES),
        ("The process of combustion", TECHNICAL),
        ("The latest research findings", RECENT),
        ("Built in 1947 by North American Aviation", KEY_INFORMATION),
        ("", KEY_INFORMATION),
    ],
)
def test_classify_snippet_uses_keyword_precedence(snippet, expected):
    assert classify_snippet(snippet) is expected


def test_compile_digest_groups_and_numbers_results():
    results = [
        SearchResult("Jet age", "https://a", "Built in 1947"),
        SearchResult("Turbojet", "https://b", "The definition of a turbojet"),
        SearchResult("Sabre", "https://c", "For example the F-86 Sabre"),
        SearchResult("F-35", "https://d", "The latest stealth fighter"),
    ]
    digest = compile_digest(results, "Fighter jets")

    assert digest.startswith("Research topic: Fighter jets\n\nCompiled from 4 search results:")
    assert "## Key Information\n1. Jet age: Built in 1947" in digest
    assert "## Definitions and Explanations\n2. Turbojet: The definition of a turbojet" in digest
    assert "## Examples and Case Studies\n3. Sabre: For example the F-86 Sabre" in digest
    assert "## Recent Developments\n4. F-35: The latest stealth fighter" in digest
    assert "## Technical Details" not in digest
    assert digest.index("## Key Information") < digest.index("## Definitions and Explanations")


def test_compile_digest_without_results_is_still_informative():
    digest = compile_digest([], "Fighter jets")
    assert "Research topic: Fighter jets" in digest
    assert "No search results available" in digest


# ============================================================================
# ResearchAggregator
# ============================================================================


def test_falls_back_to_mock_provider_when_nothing_is_configured():
    aggregator = ResearchAggregator((UnconfiguredProvider(),), query_delay=0)
    assert isinstance(aggregator.provider, MockSearchProvider)

    digest = aggregator.research("Every Fighter Jet Generation")

    assert digest.source_count == 3
    assert digest.compiled_text.strip()
    assert "Mock Result for:" in digest.compiled_text
    assert len(digest.queries) == 3


def test_first_configured_provider_wins():
    first = StaticSearchProvider([SearchResult("A", "https://a", "alpha")])
    second = StaticSearchProvider([SearchResult("B", "https://b", "beta")])
    aggregator = ResearchAggregator((UnconfiguredProvider(), first, second), query_delay=0)

    aggregator.research("Rockets")

    assert len(first.queries) == 3
    assert second.queries == []


def test_failed_query_is_skipped_not_retried():
    provider = StaticSearchProvider([SearchResult("A", "https://a", "alpha")], fail_on={2})
    aggregator = ResearchAggregator((provider,), query_delay=0)

    digest = aggregator.research("Rockets")

    assert len(provider.queries) == 3
    assert digest.source_count == 2


def test_every_query_failing_still_yields_a_digest():
    provider = StaticSearchProvider([], fail_on={1, 2, 3})
    digest = ResearchAggregator((provider,), query_delay=0).research("Rockets")
    assert digest.source_count == 0
    assert "No search results available" in digest.compiled_text


def test_queries_are_spaced_by_the_configured_delay():
    sleeps = []
    provider = StaticSearchProvider([SearchResult("A", "https://a", "alpha")])
    aggregator = ResearchAggregator((provider,), query_delay=0.5, sleep=sleeps.append)

    aggregator.research("Rockets")

    assert sleeps == [0.5, 0.5]


def test_results_per_query_is_forwarded():
    provider = StaticSearchProvider([SearchResult(str(i), "https://x", "s") for i in range(10)])
    digest = ResearchAggregator((provider,), results_per_query=2, query_delay=0).research("Rockets")
    assert digest.source_count == 6


def test_blank_topic_is_rejected():
    with pytest.raises(ValueError):
        ResearchAggregator((), query_delay=0).research("   ")
