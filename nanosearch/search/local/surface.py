"""Hidden rendering surface built on Playwright."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Protocol

from loguru import logger

from nanosearch.search.local.installer import install_browser, is_missing_browser_error
from nanosearch.search.local.safety import UrlPolicy

if TYPE_CHECKING:
    from nanosearch.config.schema import LocalSearchConfig


class Surface(Protocol):
    """Off-screen page that can load a URL and evaluate scripts against it."""

    async def navigate(self, url: str) -> None: ...

    async def wait_ready(self) -> None: ...

    async def evaluate(self, script: str) -> Any: ...

    async def destroy(self) -> None: ...


class SurfaceProvider(Protocol):
    async def create(self) -> Surface: ...


def sanitize_user_agent(user_agent: str) -> str:
    """Strip headless and embedding markers so search engines serve real pages."""
    ua = user_agent.replace("HeadlessChrome/", "Chrome/")
    ua = re.sub(r"\s*\bElectron/\S+", "", ua)
    ua = re.sub(r"\s*\bHeadless\w*(/\S+)?", "", ua)
    return re.sub(r"\s+", " ", ua).strip()


class PlaywrightSurface:
    """One browser, one context, one page; owned by a single search call."""

    def __init__(self, playwright: Any, timeout_ms: int):
        self._playwright = playwright
        self._timeout_ms = timeout_ms
        self.browser: Any = None
        self.context: Any = None
        self.page: Any = None
        self._destroyed = False

    async def navigate(self, url: str) -> None:
        response = await self.page.goto(url, wait_until="commit", timeout=self._timeout_ms)
        if response is not None and response.status >= 400:
            raise RuntimeError(f"HTTP {response.status} for {url}")

    async def wait_ready(self) -> None:
        await self.page.wait_for_load_state("domcontentloaded", timeout=self._timeout_ms)

    async def evaluate(self, script: str) -> Any:
        return await self.page.evaluate(script)

    async def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        for label, closer in (
            ("context", self.context),
            ("browser", self.browser),
        ):
            if closer is None:
                continue
            try:
                await closer.close()
            except Exception as e:
                logger.warning("Failed to close search {}: {}", label, e)
        try:
            await self._playwright.stop()
        except Exception as e:
            logger.warning("Failed to stop playwright: {}", e)


class PlaywrightSurfaceProvider:
    """Creates a fresh headless browser surface per search."""

    def __init__(self, config: LocalSearchConfig | None = None):
        from nanosearch.config.schema import LocalSearchConfig

        self.config = config or LocalSearchConfig()
        self.policy = UrlPolicy.from_config(self.config)

    async def create(self) -> PlaywrightSurface:
        from playwright.async_api import async_playwright

        playwright = await async_playwright().start()
        surface = PlaywrightSurface(playwright, self.config.timeout_ms)
        try:
            surface.browser = await self._launch(playwright)
            user_agent = self.config.user_agent or await self._native_user_agent(surface.browser)
            surface.context = await surface.browser.new_context(
                accept_downloads=False,
                user_agent=user_agent,
            )
            await surface.context.route("**/*", self._apply_network_guard)
            surface.page = await surface.context.new_page()
        except BaseException:
            await surface.destroy()
            raise

        logger.debug(
            "Search surface ready ({}, headless={})",
            self.config.browser,
            self.config.headless,
        )
        return surface

    async def _launch(self, playwright: Any) -> Any:
        browser_type = getattr(playwright, self.config.browser)
        try:
            return await browser_type.launch(headless=self.config.headless)
        except Exception as first_error:
            if not self.config.auto_install_browsers or not is_missing_browser_error(first_error):
                raise

            installed = await install_browser(self.config.browser)
            if not installed.ok:
                raise RuntimeError(f"browser install failed: {installed.output}") from first_error
            return await browser_type.launch(headless=self.config.headless)

    async def _native_user_agent(self, browser: Any) -> str:
        scratch = await browser.new_context()
        try:
            page = await scratch.new_page()
            native = await page.evaluate("navigator.userAgent")
        finally:
            await scratch.close()
        return sanitize_user_agent(str(native))

    async def _apply_network_guard(self, route: Any, request: Any) -> None:
        reason = self.policy.request_block_reason(request.url)
        if reason:
            logger.debug("Blocked search request {}: {}", request.url, reason)
            await route.abort("blockedbyclient")
            return
        await route.continue_()
