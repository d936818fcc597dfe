"""Unit tests for the search provider implementations."""

from typing import Any, Dict, List, Optional

import pytest
import requests

from scriptgen.errors import ProviderError
from scriptgen.search_providers import (
    GoogleSearchProvider,
    MockSearchProvider,
    SerperSearchProvider,
    TavilySearchProvider,
    default_search_providers,
    resolve_search_provider,
)


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = str(payload)

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None) -> None:
        self.headers: Dict[str, str] = {}
        self.calls: List[Dict[str, Any]] = []
        self._response = response
        self._error = error

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if self._error:
            raise self._error
        return self._response


class FakeTavilyClient:
    def __init__(self, payload: Any = None, error: Optional[Exception] = None) -> None:
        self.payload = payload
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def search(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.payload


# ============================================================================
# Serper
# ============================================================================


def test_serper_posts_query_and_parses_organic_results():
    session = FakeSession(
        FakeResponse(
            {
                "organic": [
                    {"title": "F-86 Sabre", "link": "https://a", "snippet": "Korean War fighter"},
                    {"title": "MiG-15", "link": "https://b"},
                    "not-a-dict",
                ]
            }
        )
    )
    provider = SerperSearchProvider("key-123", session=session)

    results = provider.search("fighter jets", 5)

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://google.serper.dev/search"
    assert call["json"] == {"q": "fighter jets", "num": 5}
    assert call["headers"]["X-API-KEY"] == "key-123"
    assert [r.title for r in results] == ["F-86 Sabre", "MiG-15"]
    assert results[0].link == "https://a"
    assert results[1].snippet == ""


def test_serper_without_key_raises_provider_error():
    provider = SerperSearchProvider(None, session=FakeSession())
    assert not provider.is_configured
    with pytest.raises(ProviderError):
        provider.search("anything")


def test_http_error_status_becomes_provider_error():
    provider = SerperSearchProvider("key", session=FakeSession(FakeResponse({"message": "nope"}, status_code=429)))
    with pytest.raises(ProviderError, match="HTTP 429"):
        provider.search("anything")


def test_transport_error_becomes_provider_error():
    session = FakeSession(error=requests.exceptions.ConnectionError("offline"))
    provider = SerperSearchProvider("key", session=session)
    with pytest.raises(ProviderError) as excinfo:
        provider.search("anything")
    assert excinfo.value.provider == "serper"


def test_non_json_body_becomes_provider_error():
    provider = SerperSearchProvider("key", session=FakeSession(FakeResponse(ValueError("bad json"))))
    with pytest.raises(ProviderError):
        provider.search("anything")


# ============================================================================
# Google Custom Search
# ============================================================================


def test_google_sends_credentials_and_caps_page_size():
    session = FakeSession(FakeResponse({"items": [{"title": "Jet", "link": "https://j", "snippet": "s"}]}))
    provider = GoogleSearchProvider("gkey", "engine", session=session)

    results = provider.search("jets", 25)

    params = session.calls[0]["params"]
    assert session.calls[0]["method"] == "GET"
    assert params == {"key": "gkey", "cx": "engine", "q": "jets", "num": 10}
    assert results[0].title == "Jet"


def test_google_missing_items_yields_no_results():
    provider = GoogleSearchProvider("gkey", "engine", session=FakeSession(FakeResponse({})))
    assert provider.search("jets") == []


def test_google_requires_both_credentials():
    assert not GoogleSearchProvider("gkey", None, session=FakeSession()).is_configured
    assert not GoogleSearchProvider(None, "engine", session=FakeSession()).is_configured


# ============================================================================
# Tavily
# ============================================================================


def test_tavily_maps_url_and_content():
    client = FakeTavilyClient({"results": [{"title": "Jet", "url": "https://t", "content": "A jet"}]})
    provider = TavilySearchProvider(None, client=client)

    results = provider.search("jets", 4)

    assert client.calls[0]["query"] == "jets"
    assert client.calls[0]["max_results"] == 4
    assert results[0].link == "https://t"
    assert results[0].snippet == "A jet"


def test_tavily_client_errors_are_wrapped():
    provider = TavilySearchProvider(None, client=FakeTavilyClient(error=RuntimeError("quota")))
    with pytest.raises(ProviderError, match="quota"):
        provider.search("jets")


def test_tavily_without_key_is_unconfigured():
    assert not TavilySearchProvider(None).is_configured


# ============================================================================
# Mock and resolution
# ============================================================================


def test_mock_provider_is_deterministic():
    provider = MockSearchProvider()
    first = provider.search("jets")
    assert first == provider.search("jets")
    assert first[0].title == "Mock Result for: jets"


def test_resolution_prefers_serper_then_google():
    chain = default_search_providers(serper_api_key=None, google_api_key="g", google_engine_id="e")
    assert resolve_search_provider(chain).name == "google"

    chain = default_search_providers(serper_api_key="s", google_api_key="g", google_engine_id="e")
    assert resolve_search_provider(chain).name == "serper"


def test_resolution_falls_back_to_mock():
    assert isinstance(resolve_search_provider(default_search_providers()), MockSearchProvider)
