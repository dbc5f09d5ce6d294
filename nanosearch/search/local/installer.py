"""On-demand install of the search browser via `playwright install`."""

from __future__ import annotations

import asyncio
import sys
from typing import NamedTuple

from loguru import logger

INSTALL_TIMEOUT_S = 10 * 60
_OUTPUT_TAIL_CHARS = 2000
_MISSING_BROWSER_MARKERS = (
    "executable doesn't exist",
    "please run the following command",
    "browser has not been found",
)

# One install at a time per process; concurrent searches wait for it.
_INSTALL_LOCK = asyncio.Lock()


class BrowserInstallResult(NamedTuple):
    ok: bool
    output: str


def is_missing_browser_error(exc: Exception) -> bool:
    """True when a launch failed because the browser binary is not installed."""
    text = str(exc).lower()
    return any(marker in text for marker in _MISSING_BROWSER_MARKERS)


def install_command(browser: str) -> list[str]:
    return [sys.executable, "-m", "playwright", "install", browser]


async def install_browser(
    browser: str,
    *,
    timeout_s: float = INSTALL_TIMEOUT_S,
) -> BrowserInstallResult:
    """
    Install `browser` for Playwright.

    The child process is killed and reaped when it outlives `timeout_s`.
    `output` holds the tail of the combined stdout/stderr.
    """
    if not browser:
        return BrowserInstallResult(False, "No browser target specified")

    async with _INSTALL_LOCK:
        logger.info("Installing Playwright browser: {}", browser)
        process = await asyncio.create_subprocess_exec(
            *install_command(browser),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        try:
            raw, _ = await asyncio.wait_for(process.communicate(), timeout=timeout_s)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.error("playwright install {} timed out after {}s", browser, timeout_s)
            return BrowserInstallResult(
                False, f"playwright install {browser} timed out after {timeout_s}s"
            )

    output = _tail((raw or b"").decode("utf-8", errors="replace").strip())
    if process.returncode == 0:
        logger.info("Installed Playwright browser: {}", browser)
        return BrowserInstallResult(True, output or f"Installed {browser}")

    logger.warning("playwright install {} exited with code {}", browser, process.returncode)
    return BrowserInstallResult(
        False,
        output or f"playwright install {browser} exited with code {process.returncode}",
    )


def _tail(text: str) -> str:
    if len(text) <= _OUTPUT_TAIL_CHARS:
        return text
    omitted = len(text) - _OUTPUT_TAIL_CHARS
    return f"... ({omitted} earlier chars omitted)\n" + text[-_OUTPUT_TAIL_CHARS:]
