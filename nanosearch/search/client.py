"""Unified web search client: local browser search or remote APIs."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Literal

import httpx
from loguru import logger

from nanosearch.search.brave import search_brave
from nanosearch.search.cancel import CancellationToken, run_cancellable
from nanosearch.search.errors import SearchCancelledError, SearchError
from nanosearch.search.exa import search_exa
from nanosearch.search.html import html_to_text
from nanosearch.search.models import SearchResponse, SearchResultItem
from nanosearch.search.perplexity import search_perplexity
from nanosearch.search.tavily import search_tavily

if TYPE_CHECKING:
    from nanosearch.config.schema import SearchProviderConfig, WebSearchConfig
    from nanosearch.search.local.controller import LocalSearchController

RemoteEngine = Literal["brave", "tavily", "exa", "perplexity"]

MAX_RESULTS_LIMIT = 20
_FETCH_TIMEOUT_S = 15.0


class SearchClient:
    """Dispatch a query to the configured engine and post-process the results."""

    _ENV_KEYS: dict[RemoteEngine, str] = {
        "brave": "BRAVE_API_KEY",
        "tavily": "TAVILY_API_KEY",
        "exa": "EXA_API_KEY",
        "perplexity": "PERPLEXITY_API_KEY",
    }
    _DEFAULT_BASE_URLS: dict[RemoteEngine, str] = {
        "brave": "https://api.search.brave.com/res/v1/web/search",
        "tavily": "https://api.tavily.com/search",
        "exa": "https://api.exa.ai/search",
        "perplexity": "https://api.perplexity.ai/search",
    }
    _SEARCHERS: dict[RemoteEngine, Callable[..., Any]] = {
        "brave": search_brave,
        "tavily": search_tavily,
        "exa": search_exa,
        "perplexity": search_perplexity,
    }
    # Engines whose results carry little or no page content.
    _ENRICHED: frozenset[str] = frozenset({"brave", "tavily", "perplexity"})

    def __init__(
        self,
        config: WebSearchConfig | None = None,
        local: LocalSearchController | None = None,
    ):
        from nanosearch.config.schema import WebSearchConfig

        self.config = config or WebSearchConfig()
        self._local = local

    @property
    def local(self) -> LocalSearchController:
        if self._local is None:
            from nanosearch.search.local.controller import LocalSearchController

            self._local = LocalSearchController(self.config.local)
        return self._local

    def is_enabled(self) -> bool:
        if not self.config.enabled:
            return False
        engine = (self.config.engine or "").lower()
        if engine == "local":
            return True
        if engine not in self._SEARCHERS:
            return False
        return bool(self._api_key(engine).strip())

    async def search(
        self,
        query: str,
        max_results: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> SearchResponse:
        """Search and return a response; failures are reported in `error`."""
        count = min(max(max_results or self.config.max_results, 1), MAX_RESULTS_LIMIT)
        try:
            results = await self._search(query, count, cancel)
        except SearchCancelledError as e:
            logger.info("Search cancelled: {!r}", query)
            return SearchResponse(error=str(e))
        except Exception as e:
            logger.error("Search failed for {!r}: {}", query, e)
            return SearchResponse(error=str(e))

        for result in results:
            if self.config.titles_only:
                result.content = None
            else:
                result.content = self._truncate(result.content or "")

        return SearchResponse(query=query, results=results)

    async def _search(
        self,
        query: str,
        count: int,
        cancel: CancellationToken | None,
    ) -> list[SearchResultItem]:
        engine = (self.config.engine or "local").lower()

        if engine == "local":
            response = await self.local.search(query, count, self.config.titles_only, cancel)
            return [
                SearchResultItem(
                    title=item.title,
                    url=item.url,
                    content=html_to_text(item.content or ""),
                )
                for item in response.results
            ]

        if engine not in self._SEARCHERS:
            raise SearchError("Invalid engine")

        api_key = self._api_key(engine)
        if not api_key:
            raise SearchError(
                f"{engine} api key not configured "
                f"(set search.providers.{engine}.apiKey or {self._ENV_KEYS[engine]})"
            )

        provider_cfg = self._provider_config(engine)
        base_url = provider_cfg.base_url or self._DEFAULT_BASE_URLS[engine]
        searcher = self._SEARCHERS[engine]
        try:
            results = await run_cancellable(
                searcher(query=query, count=count, api_key=api_key, base_url=base_url),
                cancel,
            )
        except SearchCancelledError:
            raise
        except Exception as e:
            raise SearchError(f"{engine} search failed: {e}") from e

        if engine in self._ENRICHED and not self.config.titles_only:
            await run_cancellable(self._enrich(results), cancel)
        return results

    async def _enrich(self, results: list[SearchResultItem]) -> None:
        """Replace short snippets with the text of each result page."""
        async with httpx.AsyncClient(follow_redirects=True, timeout=_FETCH_TIMEOUT_S) as client:
            pages = await asyncio.gather(
                *(self._fetch_text(client, result.url) for result in results)
            )
        for result, text in zip(results, pages):
            if text:
                result.content = text

    async def _fetch_text(self, client: httpx.AsyncClient, url: str) -> str | None:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Could not fetch content for {}: {}", url, e)
            return None
        return html_to_text(response.text)

    def _truncate(self, content: str) -> str:
        if not self.config.content_length:
            return content
        return content[: self.config.content_length]

    def _api_key(self, engine: RemoteEngine) -> str:
        provider_cfg = self._provider_config(engine)
        return provider_cfg.api_key or os.environ.get(self._ENV_KEYS[engine], "")

    def _provider_config(self, engine: RemoteEngine) -> SearchProviderConfig:
        return getattr(self.config.providers, engine)
