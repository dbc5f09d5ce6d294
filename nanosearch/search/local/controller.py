"""Local web search driven through a hidden browser surface."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

from loguru import logger

from nanosearch.search.cancel import CancellationToken, raise_if_cancelled, run_cancellable
from nanosearch.search.errors import ExtractionError, NavigationError, SearchCancelledError
from nanosearch.search.local.engines import CONTENT_SCRIPT, TITLE_SCRIPT, get_engine
from nanosearch.search.local.safety import UrlPolicy
from nanosearch.search.local.surface import PlaywrightSurfaceProvider, Surface, SurfaceProvider
from nanosearch.search.models import (
    LocalSearchResponse,
    SearchCandidate,
    SearchResultItem,
    dedupe_candidates,
    parse_candidates,
)

if TYPE_CHECKING:
    from nanosearch.config.schema import LocalSearchConfig


class LocalSearchController:
    """
    Search a results page in a hidden browser, then scrape each hit.

    Every call gets its own surface from the provider and destroys it before
    returning, so concurrent searches never share browser state.
    """

    def __init__(
        self,
        config: LocalSearchConfig | None = None,
        provider: SurfaceProvider | None = None,
    ):
        from nanosearch.config.schema import LocalSearchConfig

        self.config = config or LocalSearchConfig()
        self.provider = provider or PlaywrightSurfaceProvider(self.config)
        self.engine = get_engine(self.config.engine)
        self.policy = UrlPolicy.from_config(self.config)

    async def search(
        self,
        query: str,
        max_results: int,
        titles_only: bool = False,
        cancel: CancellationToken | None = None,
    ) -> LocalSearchResponse:
        """
        Run a local search.

        Args:
            query: Search terms, must not be blank.
            max_results: Upper bound on returned results (>= 1).
            titles_only: Caller will drop content afterwards; pages are still scraped.
            cancel: Optional token; firing it aborts the search.

        Returns:
            Results in discovery order, `content` holding the raw body HTML.

        Raises:
            SearchCancelledError: The token fired before or during the search.
            NavigationError: The results page could not be loaded.
            ExtractionError: Results could not be read from the results page.
        """
        if not query or not query.strip():
            raise ValueError("query must not be empty")
        if max_results < 1:
            raise ValueError("max_results must be >= 1")

        raise_if_cancelled(cancel)

        logger.info(
            "Local search via {}: {!r} (max={}, titles_only={})",
            self.engine.name,
            query,
            max_results,
            titles_only,
        )
        try:
            surface = await self._acquire(cancel)
        except SearchCancelledError:
            logger.info("Local search cancelled while acquiring surface: {!r}", query)
            raise

        try:
            results = await run_cancellable(
                self._run(surface, query, max_results, cancel),
                cancel,
            )
        except SearchCancelledError:
            logger.info("Local search cancelled: {!r}", query)
            raise
        finally:
            await surface.destroy()

        logger.info("Local search done: {!r} -> {} results", query, len(results))
        return LocalSearchResponse(results=results)

    async def _acquire(self, cancel: CancellationToken | None) -> Surface:
        """Create a surface, destroying it if it arrives after cancellation."""
        creating = asyncio.ensure_future(self.provider.create())
        try:
            return await run_cancellable(asyncio.shield(creating), cancel)
        except BaseException:
            creating.cancel()
            surface = None
            with contextlib.suppress(asyncio.CancelledError, Exception):
                surface = await creating
            if surface is not None:
                await surface.destroy()
            raise

    async def _run(
        self,
        surface: Surface,
        query: str,
        max_results: int,
        cancel: CancellationToken | None,
    ) -> list[SearchResultItem]:
        harvested = await self._collect_candidates(surface, query, max_results)
        candidates = dedupe_candidates(harvested, max_results)
        logger.debug(
            "Harvested {} candidates, {} after dedupe", len(harvested), len(candidates)
        )

        results: list[SearchResultItem] = []
        for candidate in candidates:
            raise_if_cancelled(cancel)
            try:
                results.append(await self._scrape(surface, candidate))
            except Exception as e:
                logger.warning("Skipping search result {}: {}", candidate.url, e)
        raise_if_cancelled(cancel)
        return results

    async def _collect_candidates(
        self,
        surface: Surface,
        query: str,
        max_results: int,
    ) -> list[SearchCandidate]:
        url = self.engine.build_url(query)
        try:
            await surface.navigate(url)
            await surface.wait_ready()
        except Exception as e:
            raise NavigationError(f"failed to load results page {url}: {e}") from e

        limit = max(max_results, self.config.candidate_cap)
        try:
            raw = await surface.evaluate(self.engine.script(limit))
        except Exception as e:
            raise ExtractionError(f"failed to extract results: {e}") from e
        return parse_candidates(raw, limit=limit)

    async def _scrape(self, surface: Surface, candidate: SearchCandidate) -> SearchResultItem:
        blocked = self.policy.navigation_error(candidate.url)
        if blocked:
            raise NavigationError(blocked)

        try:
            await surface.navigate(candidate.url)
            await surface.wait_ready()
        except Exception as e:
            raise NavigationError(str(e)) from e

        title = await _evaluate_string(surface, TITLE_SCRIPT)
        content = await _evaluate_string(surface, CONTENT_SCRIPT)
        return SearchResultItem(title=title, url=candidate.url, content=content)


async def _evaluate_string(surface: Surface, script: str) -> str:
    try:
        value = await surface.evaluate(script)
    except Exception as e:
        raise ExtractionError(f"{script} failed: {e}") from e
    if not isinstance(value, str):
        raise ExtractionError(f"{script} returned {type(value).__name__}, expected a string")
    return value
