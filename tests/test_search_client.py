import asyncio

import httpx
import pytest

from nanosearch.config.schema import WebSearchConfig
from nanosearch.search.cancel import CancellationToken
from nanosearch.search.client import SearchClient
from nanosearch.search.errors import NavigationError
from nanosearch.search.models import LocalSearchResponse, SearchResultItem


class FakeController:
    def __init__(self, results=None, error: Exception | None = None, hang: bool = False):
        self.results = results or []
        self.error = error
        self.hang = hang
        self.calls: list[tuple] = []

    async def search(self, query, max_results, titles_only=False, cancel=None):
        self.calls.append((query, max_results, titles_only, cancel))
        if self.error:
            raise self.error
        if self.hang:
            from nanosearch.search.cancel import run_cancellable

            await run_cancellable(asyncio.Event().wait(), cancel)
        return LocalSearchResponse(results=list(self.results))


def _local_results() -> list[SearchResultItem]:
    return [
        SearchResultItem(
            title="Witsy",
            url="https://witsy.example/",
            content="<html><body><nav>menu</nav><main><p>Desktop AI assistant</p></main></body></html>",
        ),
        SearchResultItem(
            title="Docs",
            url="https://docs.example/",
            content="<html><body><p>Read the docs</p></body></html>",
        ),
    ]


@pytest.mark.asyncio
async def test_local_engine_converts_html_to_text() -> None:
    controller = FakeController(_local_results())
    client = SearchClient(WebSearchConfig(engine="local"), local=controller)

    response = await client.search("witsy", 3)

    assert response.error is None
    assert response.query == "witsy"
    assert [r.content for r in response.results] == ["Desktop AI assistant", "Read the docs"]
    assert controller.calls[0][:3] == ("witsy", 3, False)


@pytest.mark.asyncio
async def test_default_max_results_from_config() -> None:
    controller = FakeController()
    client = SearchClient(WebSearchConfig(max_results=7), local=controller)

    await client.search("witsy")
    await client.search("witsy", 999)

    assert [call[1] for call in controller.calls] == [7, 20]


@pytest.mark.asyncio
async def test_titles_only_strips_content() -> None:
    client = SearchClient(
        WebSearchConfig(titles_only=True),
        local=FakeController(_local_results()),
    )

    response = await client.search("witsy")

    assert all(r.content is None for r in response.results)
    assert response.to_dict()["results"][0] == {"title": "Witsy", "url": "https://witsy.example/"}


@pytest.mark.asyncio
async def test_content_is_truncated_to_content_length() -> None:
    client = SearchClient(
        WebSearchConfig(content_length=7),
        local=FakeController(_local_results()),
    )

    response = await client.search("witsy")

    assert [r.content for r in response.results] == ["Desktop", "Read th"]


@pytest.mark.asyncio
async def test_local_failure_is_reported_as_error() -> None:
    client = SearchClient(
        WebSearchConfig(),
        local=FakeController(error=NavigationError("failed to load results page")),
    )

    response = await client.search("witsy")

    assert response.to_dict() == {"error": "failed to load results page"}


@pytest.mark.asyncio
async def test_cancellation_is_reported_with_matchable_message() -> None:
    token = CancellationToken()
    client = SearchClient(WebSearchConfig(), local=FakeController(hang=True))
    asyncio.get_running_loop().call_later(0.01, token.signal)

    response = await client.search("witsy", cancel=token)

    assert response.error == "Operation cancelled"
    assert response.results is None


@pytest.mark.asyncio
async def test_invalid_engine() -> None:
    cfg = WebSearchConfig()
    cfg.engine = "altavista"  # type: ignore[assignment]

    response = await SearchClient(cfg).search("witsy")

    assert response.error == "Invalid engine"


@pytest.mark.asyncio
async def test_missing_api_key(monkeypatch) -> None:
    monkeypatch.delenv("EXA_API_KEY", raising=False)

    response = await SearchClient(WebSearchConfig(engine="exa")).search("witsy")

    assert "exa api key not configured" in response.error


def test_is_enabled(monkeypatch) -> None:
    monkeypatch.delenv("BRAVE_API_KEY", raising=False)

    assert SearchClient(WebSearchConfig(engine="local")).is_enabled() is True
    assert SearchClient(WebSearchConfig(engine="local", enabled=False)).is_enabled() is False
    assert SearchClient(WebSearchConfig(engine="brave")).is_enabled() is False

    monkeypatch.setenv("BRAVE_API_KEY", "from-env")
    assert SearchClient(WebSearchConfig(engine="brave")).is_enabled() is True


class FakeResponse:
    def __init__(self, payload: dict | None = None, text: str = "", error: Exception | None = None):
        self._payload = payload or {}
        self.text = text
        self._error = error

    def raise_for_status(self) -> None:
        if self._error:
            raise self._error

    def json(self) -> dict:
        return self._payload


@pytest.mark.asyncio
async def test_brave_results_are_enriched_with_page_text(monkeypatch) -> None:
    calls: dict = {"pages": []}

    class StubClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def get(self, url, params=None, headers=None, timeout=None):
            if params is not None:
                calls["params"] = params
                calls["headers"] = headers
                return FakeResponse(
                    {
                        "web": {
                            "results": [
                                {"title": "A", "url": "https://a.example/", "description": "short a"},
                                {"title": "B", "url": "https://b.example/", "description": "short b"},
                            ]
                        }
                    }
                )
            calls["pages"].append(url)
            if url == "https://b.example/":
                return FakeResponse(error=httpx.HTTPError("404"))
            return FakeResponse(text="<html><body><p>full page a</p></body></html>")

    monkeypatch.setattr("nanosearch.search.brave.httpx.AsyncClient", StubClient)

    cfg = WebSearchConfig(engine="brave")
    cfg.providers.brave.api_key = "brave-key"
    response = await SearchClient(cfg).search("python", 2)

    assert calls["params"] == {"q": "python", "count": 2}
    assert calls["headers"]["X-Subscription-Token"] == "brave-key"
    assert sorted(calls["pages"]) == ["https://a.example/", "https://b.example/"]
    assert [(r.title, r.content) for r in response.results] == [
        ("A", "full page a"),
        ("B", "short b"),
    ]


@pytest.mark.asyncio
async def test_remote_http_error_wrapped(monkeypatch) -> None:
    class StubClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def post(self, url, json=None, headers=None, timeout=None):
            return FakeResponse(error=httpx.HTTPError("boom"))

    monkeypatch.setattr("nanosearch.search.tavily.httpx.AsyncClient", StubClient)

    cfg = WebSearchConfig(engine="tavily")
    cfg.providers.tavily.api_key = "tavily-key"
    response = await SearchClient(cfg).search("fail", 1)

    assert response.error == "tavily search failed: boom"


@pytest.mark.asyncio
async def test_exa_returns_text_without_enrichment(monkeypatch) -> None:
    calls: dict = {}

    class StubClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def post(self, url, json=None, headers=None, timeout=None):
            calls["url"] = url
            calls["json"] = json
            calls["headers"] = headers
            return FakeResponse(
                {"results": [{"title": "Exa", "url": "https://exa.example/", "text": "full text"}]}
            )

        async def get(self, *args, **kwargs):
            raise AssertionError("exa results must not be re-fetched")

    monkeypatch.setattr("nanosearch.search.exa.httpx.AsyncClient", StubClient)

    cfg = WebSearchConfig(engine="exa")
    cfg.providers.exa.api_key = "exa-key"
    response = await SearchClient(cfg).search("agents", 1)

    assert calls["url"] == "https://api.exa.ai/search"
    assert calls["json"] == {"query": "agents", "numResults": 1, "contents": {"text": True}}
    assert calls["headers"]["x-api-key"] == "exa-key"
    assert [(r.title, r.content) for r in response.results] == [("Exa", "full text")]


@pytest.mark.asyncio
async def test_perplexity_request_shape(monkeypatch) -> None:
    calls: dict = {}

    class StubClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def post(self, url, json=None, headers=None, timeout=None):
            calls["url"] = url
            calls["json"] = json
            calls["headers"] = headers
            return FakeResponse({"results": []})

    monkeypatch.setattr("nanosearch.search.perplexity.httpx.AsyncClient", StubClient)

    cfg = WebSearchConfig(engine="perplexity")
    cfg.providers.perplexity.api_key = "pplx-key"
    cfg.providers.perplexity.base_url = "https://pplx.example/search"
    response = await SearchClient(cfg).search("news", 4)

    assert calls["url"] == "https://pplx.example/search"
    assert calls["json"] == {"query": "news", "max_results": 4}
    assert calls["headers"]["Authorization"] == "Bearer pplx-key"
    assert response.results == []


@pytest.mark.asyncio
async def test_malformed_result_url_keeps_snippet(monkeypatch) -> None:
    class StubClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def post(self, url, json=None, headers=None, timeout=None):
            return FakeResponse(
                {
                    "results": [
                        {"title": "Ok", "url": "https://ok.example/", "snippet": "ok snippet"},
                        {"title": "Bad", "url": "http://[::1", "snippet": "bad snippet"},
                    ]
                }
            )

        async def get(self, url):
            if url == "http://[::1":
                raise httpx.InvalidURL("Invalid port: ':1'")
            return FakeResponse(text="<html><body><p>ok page</p></body></html>")

    monkeypatch.setattr("nanosearch.search.perplexity.httpx.AsyncClient", StubClient)

    cfg = WebSearchConfig(engine="perplexity")
    cfg.providers.perplexity.api_key = "pplx-key"
    response = await SearchClient(cfg).search("news", 2)

    assert response.error is None
    assert [(r.title, r.content) for r in response.results] == [
        ("Ok", "ok page"),
        ("Bad", "bad snippet"),
    ]
