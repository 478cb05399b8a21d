"""Manifest sniffer - watch an embed page's network traffic for an HLS URL.

One call to :meth:`PlaywrightManifestSniffer.sniff` owns one isolated
browser session:

1. open a fresh ``BrowserContext`` (own Chromium, or one from the pool)
2. route every request through a handler that records the first URL
   ending in ``.m3u8`` and aborts images, stylesheets and fonts
3. navigate to the embed page (``domcontentloaded``, 20s timeout);
   navigation errors are logged and swallowed
4. wait up to 4 × 1s for the manifest, returning the moment it shows up
5. close the session on every exit path

Worst case wall time is navigation timeout + detection window (~24s).
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

import structlog
from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    Route,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError

from manifestarr.domain.entities.manifest import MANIFEST_SUFFIX, is_manifest_url

from .browser_pool import SharedBrowserPool
from .constants import (
    BLOCKED_RESOURCE_TYPES,
    CHROMIUM_ARGS,
    DEFAULT_USER_AGENT,
    MAX_CONCURRENT_SESSIONS,
    NAVIGATION_TIMEOUT_MS,
    POLL_ATTEMPTS,
    POLL_INTERVAL_SECONDS,
    VIEWPORT,
)

log = structlog.get_logger(__name__)


class ManifestSignal:
    """One-shot handoff from the route handler to the waiting sniffer.

    The first matching URL completes the underlying future; later offers
    are ignored, so the detected URL is never overwritten or cleared.
    """

    def __init__(self, suffix: str = MANIFEST_SUFFIX) -> None:
        self._suffix = suffix
        self._future: asyncio.Future[str] = asyncio.get_running_loop().create_future()

    @property
    def url(self) -> str | None:
        return self._future.result() if self._future.done() else None

    def offer(self, url: str) -> bool:
        """Record *url* if it is a manifest and nothing was recorded yet."""
        if self._future.done() or not is_manifest_url(url, self._suffix):
            return False
        self._future.set_result(url)
        return True

    async def wait(self, timeout: float) -> str | None:
        """Wait up to *timeout* seconds for a manifest URL."""
        if self._future.done():
            return self._future.result()
        if timeout <= 0:
            return None
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout)
        except TimeoutError:
            return None


def make_route_handler(
    signal: ManifestSignal,
    blocked_resource_types: frozenset[str] = BLOCKED_RESOURCE_TYPES,
) -> Callable[[Route], Awaitable[None]]:
    """Build the ``page.route`` handler for one session.

    Detection runs before the block decision, so an aborted request can
    still be the detected manifest.
    """

    async def _handle(route: Route) -> None:
        request = route.request
        if signal.offer(request.url):
            log.info(
                "sniffer_manifest_detected",
                url=request.url,
                resource_type=request.resource_type,
            )
        try:
            if request.resource_type in blocked_resource_types:
                await route.abort()
            else:
                await route.continue_()
        except PlaywrightError:
            # Session already torn down while the request was in flight.
            log.debug("sniffer_route_after_close", url=request.url)

    return _handle


@dataclass
class SessionState:
    """Handles of one sniff session; only the owned parts get closed."""

    playwright: Playwright | None = None
    browser: Browser | None = None
    context: BrowserContext | None = None
    page: Page | None = None


class PlaywrightManifestSniffer:
    """Playwright implementation of ``ManifestSnifferPort``.

    Args:
        headless: Run Chromium headless.
        navigation_timeout_ms: ``page.goto`` timeout.
        poll_attempts: Number of detection polls after navigation.
        poll_interval_seconds: Spacing of the polls. The polls are served by
            one deadline wait of ``poll_attempts * poll_interval_seconds``
            that returns early on detection.
        blocked_resource_types: Resource types to abort.
        manifest_suffix: URL suffix that marks a manifest request.
        user_agent: User-Agent for the browser context.
        max_concurrent_sessions: Upper bound of simultaneously open sessions
            (0 = unbounded).
        browser_pool: Optional shared Chromium. When None every sniff
            launches and closes its own browser.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS,
        poll_attempts: int = POLL_ATTEMPTS,
        poll_interval_seconds: float = POLL_INTERVAL_SECONDS,
        blocked_resource_types: Iterable[str] = BLOCKED_RESOURCE_TYPES,
        manifest_suffix: str = MANIFEST_SUFFIX,
        user_agent: str = DEFAULT_USER_AGENT,
        max_concurrent_sessions: int = MAX_CONCURRENT_SESSIONS,
        browser_pool: SharedBrowserPool | None = None,
    ) -> None:
        self._headless = headless
        self._navigation_timeout_ms = navigation_timeout_ms
        self._poll_attempts = poll_attempts
        self._poll_interval = poll_interval_seconds
        self._blocked = frozenset(blocked_resource_types)
        self._suffix = manifest_suffix
        self._user_agent = user_agent
        self._pool = browser_pool
        self._semaphore = (
            asyncio.Semaphore(max_concurrent_sessions)
            if max_concurrent_sessions > 0
            else None
        )
        self._active_sessions = 0

    @property
    def detection_window_seconds(self) -> float:
        return max(0, self._poll_attempts) * self._poll_interval

    @property
    def active_sessions(self) -> int:
        return self._active_sessions

    # ------------------------------------------------------------------
    # Public API (ManifestSnifferPort)
    # ------------------------------------------------------------------

    async def sniff(self, embed_url: str) -> str | None:
        """Return the first manifest URL the embed page requests, or None."""
        if self._semaphore is None:
            return await self._sniff_once(embed_url)
        async with self._semaphore:
            return await self._sniff_once(embed_url)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def _sniff_once(self, embed_url: str) -> str | None:
        session = SessionState()
        signal = ManifestSignal(self._suffix)
        start = time.perf_counter()
        self._active_sessions += 1
        try:
            page = await self._open_page(session)
            await page.route("**/*", make_route_handler(signal, self._blocked))

            try:
                await page.goto(
                    embed_url,
                    wait_until="domcontentloaded",
                    timeout=self._navigation_timeout_ms,
                )
            except PlaywrightError as exc:
                log.warning(
                    "sniffer_navigation_failed",
                    url=embed_url,
                    error=str(exc),
                )

            manifest_url = await signal.wait(self.detection_window_seconds)
        finally:
            self._active_sessions -= 1
            await self._close_session(session)

        log.info(
            "sniffer_finished",
            url=embed_url,
            found=manifest_url is not None,
            duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
        )
        return manifest_url

    async def _open_page(self, session: SessionState) -> Page:
        """Open a fresh context + page; records every handle on *session*."""
        options = {"user_agent": self._user_agent, "viewport": dict(VIEWPORT)}
        if self._pool is not None:
            session.context = await self._pool.new_context(**options)
        else:
            session.playwright = await async_playwright().start()
            session.browser = await session.playwright.chromium.launch(
                headless=self._headless,
                args=list(CHROMIUM_ARGS),
            )
            session.context = await session.browser.new_context(**options)
        session.page = await session.context.new_page()
        return session.page

    async def _close_session(self, session: SessionState) -> None:
        """Release every handle the session owns; errors are only logged."""
        if session.context is not None:
            try:
                await session.context.close()
            except Exception:  # noqa: BLE001
                log.debug("sniffer_context_close_error", exc_info=True)
            session.context = None
            session.page = None
        if session.browser is not None:
            try:
                await session.browser.close()
            except Exception:  # noqa: BLE001
                log.debug("sniffer_browser_close_error", exc_info=True)
            session.browser = None
        if session.playwright is not None:
            try:
                await session.playwright.stop()
            except Exception:  # noqa: BLE001
                log.debug("sniffer_pw_stop_error", exc_info=True)
            session.playwright = None
