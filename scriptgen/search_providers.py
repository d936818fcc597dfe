"""
Web search providers used by the research phase.

Every provider exposes the same `search(query, num_results)` call and
returns `SearchResult` objects.  Serper and Google Custom Search are called
over plain HTTP with `requests`; Tavily goes through its official client.
`MockSearchProvider` needs no credentials and returns deterministic data so
the pipeline keeps working offline.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import requests
from tavily import TavilyClient

from .errors import ProviderError
from .models import SearchResult

logger = logging.getLogger(__name__)

USER_AGENT = "ScriptGen/0.1"


class SearchProvider:
    """Base class for search back-ends."""

    name: str = "search"

    @property
    def is_configured(self) -> bool:
        return True

    def search(self, query: str, num_results: int = 10) -> List[SearchResult]:
        raise NotImplementedError

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise ProviderError(f"{self.name} credentials are not configured.", provider=self.name)


class _HTTPSearchProvider(SearchProvider):
    """Shared `requests` plumbing for JSON search APIs."""

    def __init__(self, *, session: Optional[requests.Session] = None, request_timeout: int = 30) -> None:
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})
        self._timeout = request_timeout

    def _request_json(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.exceptions.RequestException as exc:
            raise ProviderError(f"{self.name} request failed: {exc}", provider=self.name) from exc

        logger.debug("%s response status: %s", self.name, response.status_code)
        if response.status_code >= 400:
            logger.error("%s HTTP error %s: %s", self.name, response.status_code, response.text)
            raise ProviderError(
                f"{self.name} returned HTTP {response.status_code}.",
                provider=self.name,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(f"{self.name} returned a non-JSON body.", provider=self.name) from exc
        return data if isinstance(data, dict) else {}


class SerperSearchProvider(_HTTPSearchProvider):
    """Google results through the serper.dev API."""

    name = "serper"
    endpoint = "https://google.serper.dev/search"

    def __init__(self, api_key: Optional[str], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def search(self, query: str, num_results: int = 10) -> List[SearchResult]:
        self._require_configured()
        data = self._request_json(
            "POST",
            self.endpoint,
            json={"q": query, "num": num_results},
            headers={"X-API-KEY": self._api_key, "Content-Type": "application/json"},
        )
        return _to_results(data.get("organic"), link_keys=("link",), snippet_keys=("snippet",))


class GoogleSearchProvider(_HTTPSearchProvider):
    """Google Custom Search JSON API."""

    name = "google"
    endpoint = "https://www.googleapis.com/customsearch/v1"
    max_page_size = 10

    def __init__(self, api_key: Optional[str], engine_id: Optional[str], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._engine_id = engine_id

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._engine_id)

    def search(self, query: str, num_results: int = 10) -> List[SearchResult]:
        self._require_configured()
        data = self._request_json(
            "GET",
            self.endpoint,
            params={
                "key": self._api_key,
                "cx": self._engine_id,
                "q": query,
                "num": max(1, min(num_results, self.max_page_size)),
            },
        )
        return _to_results(data.get("items"), link_keys=("link",), snippet_keys=("snippet",))


class TavilySearchProvider(SearchProvider):
    """Tavily web search through the official Python client."""

    name = "tavily"

    def __init__(
        self,
        api_key: Optional[str],
        *,
        client: Optional[TavilyClient] = None,
        tavily_kwargs: Optional[dict] = None,
    ) -> None:
        self._client = client
        if self._client is None and api_key:
            self._client = TavilyClient(api_key=api_key)
        self._tavily_options = {"include_raw_content": False}
        if tavily_kwargs:
            self._tavily_options.update(tavily_kwargs)

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def search(self, query: str, num_results: int = 10) -> List[SearchResult]:
        self._require_configured()
        try:
            raw = self._client.search(query=query, max_results=num_results, **self._tavily_options)
        except Exception as exc:
            raise ProviderError(f"tavily search failed: {exc}", provider=self.name) from exc
        entries = raw.get("results") if isinstance(raw, dict) else raw
        return _to_results(entries, link_keys=("url", "link"), snippet_keys=("content", "snippet"))


class MockSearchProvider(SearchProvider):
    """Offline stand-in that returns one deterministic result per query."""

    name = "mock"

    def search(self, query: str, num_results: int = 10) -> List[SearchResult]:
        return [
            SearchResult(
                title=f"Mock Result for: {query}",
                link="https://example.com",
                snippet=(
                    f'This is a mock search result for "{query}". A configured search provider '
                    "would return real web results here."
                ),
            )
        ][:max(0, num_results)]


def resolve_search_provider(candidates: Iterable[SearchProvider]) -> SearchProvider:
    """Return the first configured provider, or the mock when none is configured."""

    for provider in candidates:
        if provider.is_configured:
            logger.info("Using '%s' search provider.", provider.name)
            return provider
    logger.warning("No search API configured; research will use mock results.")
    return MockSearchProvider()


def default_search_providers(
    *,
    serper_api_key: Optional[str] = None,
    google_api_key: Optional[str] = None,
    google_engine_id: Optional[str] = None,
    tavily_api_key: Optional[str] = None,
) -> Sequence[SearchProvider]:
    """Build the provider chain in precedence order: Serper, Google, Tavily."""

    return (
        SerperSearchProvider(serper_api_key),
        GoogleSearchProvider(google_api_key, google_engine_id),
        TavilySearchProvider(tavily_api_key),
    )


def _to_results(
    entries: Any,
    *,
    link_keys: Sequence[str],
    snippet_keys: Sequence[str],
) -> List[SearchResult]:
    if not isinstance(entries, list):
        return []
    results: List[SearchResult] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        title = str(entry.get("title") or "Result")
        link = next((str(entry[key]) for key in link_keys if entry.get(key)), "")
        snippet = next((str(entry[key]) for key in snippet_keys if entry.get(key)), "")
        results.append(SearchResult(title=title, link=link, snippet=snippet))
    return results
