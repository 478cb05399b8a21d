"""Shared Chromium process for manifest sniffing (opt-in).

Without a pool every sniff launches and closes its own Chromium. With a
pool, one Chromium process stays up and every sniff gets a fresh
``BrowserContext`` from it. Contexts never share cookies, cache or route
handlers, so concurrent sniffs stay isolated; the caller closes its
context when done.

Concurrent first calls are serialised by an asyncio lock: the first caller
launches Chromium, the others wait and reuse it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import structlog
from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright

from .constants import CHROMIUM_ARGS

log = structlog.get_logger(__name__)


class SharedBrowserPool:
    """Keeps one Chromium alive and hands out isolated contexts.

    Usage::

        pool = SharedBrowserPool(headless=True)
        context = await pool.new_context(viewport={"width": 1280, "height": 720})
        try:
            ...
        finally:
            await context.close()

        # At shutdown:
        await pool.cleanup()
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        launch_args: Sequence[str] = CHROMIUM_ARGS,
    ) -> None:
        self._headless = headless
        self._launch_args = list(launch_args)
        self._pw: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        """Whether the shared browser is currently connected."""
        return self._browser is not None and self._browser.is_connected()

    async def _ensure_browser(self) -> Browser:
        """Launch Chromium if needed; relaunch it after a crash."""
        if self._browser is not None and self._browser.is_connected():
            return self._browser

        async with self._lock:
            if self._browser is not None and self._browser.is_connected():
                return self._browser

            if self._pw is not None:
                try:
                    await self._pw.stop()
                except Exception:  # noqa: BLE001
                    log.debug("browser_pool_stale_pw_stop_error", exc_info=True)
                self._pw = None
                self._browser = None

            self._pw = await async_playwright().start()
            self._browser = await self._pw.chromium.launch(
                headless=self._headless,
                args=self._launch_args,
            )
            log.info("browser_pool_launched", headless=self._headless)
            return self._browser

    async def new_context(self, **options: Any) -> BrowserContext:
        """Create a fresh isolated context on the shared browser."""
        browser = await self._ensure_browser()
        return await browser.new_context(**options)

    async def cleanup(self) -> None:
        """Close the shared browser and Playwright instance (idempotent)."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception:  # noqa: BLE001
                log.warning("browser_pool_close_error", exc_info=True)
            self._browser = None
        if self._pw is not None:
            try:
                await self._pw.stop()
            except Exception:  # noqa: BLE001
                log.warning("browser_pool_pw_stop_error", exc_info=True)
            self._pw = None
        log.info("browser_pool_cleaned_up")
