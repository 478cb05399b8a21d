"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from manifestarr.application.use_cases.resolve_manifest import (
    ManifestResolutionUseCase,
)
from manifestarr.infrastructure.cache import MemoryCacheAdapter
from manifestarr.infrastructure.config.schema import AppConfig
from manifestarr.infrastructure.persistence.manifest_cache import (
    CacheManifestRepository,
)
from manifestarr.infrastructure.sniffer import (
    PlaywrightManifestSniffer,
    SharedBrowserPool,
)
from manifestarr.infrastructure.tmdb.client import HttpxTmdbClient
from manifestarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def _build_sniffer(
    config: AppConfig, pool: SharedBrowserPool | None
) -> PlaywrightManifestSniffer:
    return PlaywrightManifestSniffer(
        headless=config.playwright_headless,
        navigation_timeout_ms=config.playwright_navigation_timeout_ms,
        poll_attempts=config.playwright_poll_attempts,
        poll_interval_seconds=config.playwright_poll_interval_seconds,
        max_concurrent_sessions=config.playwright_max_concurrent_sessions,
        browser_pool=pool,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Cache (required by TMDB client and manifest repository)
        2. HTTP client (required by TMDB client)
        3. TMDB client
        4. Browser pool (optional) + sniffer
        5. Manifest repository
        6. Resolution use case
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Cache
    state.cache = MemoryCacheAdapter(ttl_seconds=config.cache_ttl_seconds)
    await state.cache.__aenter__()
    log.info("cache_initialized", backend="memory")

    # 2) HTTP client
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 3) TMDB client
    if not config.tmdb_api_key:
        log.warning(
            "tmdb_api_key_not_configured",
            hint="set MANIFESTARR_TMDB_API_KEY; every lookup will miss",
        )
    state.tmdb_client = HttpxTmdbClient(
        api_key=config.tmdb_api_key,
        http_client=state.http_client,
        cache=state.cache,
    )

    # 4) Sniffer (shared Chromium only when configured)
    state.browser_pool = (
        SharedBrowserPool(headless=config.playwright_headless)
        if config.playwright_shared_browser
        else None
    )
    sniffer = _build_sniffer(config, state.browser_pool)
    state.sniffer = sniffer
    log.info(
        "sniffer_initialized",
        shared_browser=state.browser_pool is not None,
        navigation_timeout_ms=config.playwright_navigation_timeout_ms,
        detection_window_seconds=sniffer.detection_window_seconds,
    )

    # 5) Manifest repository
    state.manifest_repo = CacheManifestRepository(
        cache=state.cache,
        ttl_seconds=config.cache_manifest_ttl_seconds,
    )

    # 6) Use case
    state.resolve_uc = ManifestResolutionUseCase(
        tmdb=state.tmdb_client,
        sniffer=state.sniffer,
        repository=state.manifest_repo,
        embed_base_url=config.embed.base_url,
        supported_languages=config.embed.supported_languages,
        default_language=config.embed.default_language,
    )

    state.graceful_shutdown.mark_ready()
    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.graceful_shutdown.drain(timeout=config.shutdown_drain_seconds)

        if state.browser_pool is not None:
            await state.browser_pool.cleanup()

        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
