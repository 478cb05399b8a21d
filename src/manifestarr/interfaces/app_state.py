"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from manifestarr.infrastructure.config import AppConfig
from manifestarr.infrastructure.graceful_shutdown import GracefulShutdown

if TYPE_CHECKING:
    from manifestarr.application.use_cases.resolve_manifest import (
        ManifestResolutionUseCase,
    )
    from manifestarr.domain.ports import (
        CachePort,
        ManifestRepository,
        ManifestSnifferPort,
        TmdbClientPort,
    )
    from manifestarr.infrastructure.sniffer.browser_pool import SharedBrowserPool


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient

    # Domain Ports
    tmdb_client: TmdbClientPort
    sniffer: ManifestSnifferPort
    manifest_repo: ManifestRepository

    # Shared Chromium (only when playwright.shared_browser is enabled)
    browser_pool: SharedBrowserPool | None

    # Application Services
    resolve_uc: ManifestResolutionUseCase

    # Graceful shutdown (request tracking + drain)
    graceful_shutdown: GracefulShutdown
