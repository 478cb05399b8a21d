"""Graceful shutdown: let in-flight resolutions finish before teardown.

A resolution may hold a Chromium session for up to ~24s. Shutting down
the browser pool or the event loop under it would orphan the session, so
the lifespan waits here first.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog

log = structlog.get_logger(__name__)


class GracefulShutdown:
    """Count in-flight requests and expose readiness.

    Usage::

        gs = GracefulShutdown()

        # In middleware:
        async with gs.track():
            response = await call_next(request)

        # In lifespan finally:
        await gs.drain(timeout=30.0)
    """

    def __init__(self) -> None:
        self._active = 0
        self._idle = asyncio.Event()
        self._idle.set()
        self._ready = False
        self._draining = False

    @property
    def active_requests(self) -> int:
        return self._active

    @property
    def is_draining(self) -> bool:
        return self._draining

    @property
    def is_ready(self) -> bool:
        """True after startup and until draining begins."""
        return self._ready and not self._draining

    def mark_ready(self) -> None:
        self._ready = True

    @asynccontextmanager
    async def track(self) -> AsyncIterator[None]:
        self._active += 1
        self._idle.clear()
        try:
            yield
        finally:
            self._active = max(0, self._active - 1)
            if self._active == 0:
                self._idle.set()

    async def drain(self, *, timeout: float = 30.0) -> bool:
        """Stop reporting ready and wait up to *timeout* for idle.

        Returns True when every tracked request finished in time.
        """
        self._draining = True
        if self._active == 0:
            return True
        log.info("graceful_shutdown_draining", active_requests=self._active)
        try:
            await asyncio.wait_for(self._idle.wait(), timeout=timeout)
        except TimeoutError:
            log.warning(
                "graceful_shutdown_timeout",
                remaining_requests=self._active,
                timeout=timeout,
            )
            return False
        log.info("graceful_shutdown_drained")
        return True
