"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from manifestarr import __version__
from manifestarr.infrastructure.config import AppConfig
from manifestarr.infrastructure.graceful_shutdown import GracefulShutdown
from manifestarr.interfaces.app_state import AppState
from manifestarr.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app - configuration ONLY, NO resource initialization.

    Resources (HTTP client, cache, sniffer) are created in lifespan().
    """
    app = FastAPI(
        title="Manifestarr",
        description="Resolves HLS manifest URLs for TMDB movies and episodes",
        version=__version__,
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config
    app.state.graceful_shutdown = GracefulShutdown()

    from manifestarr.interfaces.api.streams.router import router as streams_router

    app.include_router(streams_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str | int]:
        """Liveness probe - returns 200 as long as the process is running."""
        sniffer = getattr(app.state, "sniffer", None)
        return {
            "status": "ok",
            "active_sessions": getattr(sniffer, "active_sessions", 0),
        }

    @app.get("/readyz")
    async def readyz() -> Response:
        """Readiness probe - 200 after startup complete, 503 otherwise."""
        gs: GracefulShutdown = app.state.graceful_shutdown
        if gs.is_ready:
            return JSONResponse({"status": "ready"}, status_code=200)
        return JSONResponse({"status": "not_ready"}, status_code=503)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        gs: GracefulShutdown = app.state.graceful_shutdown
        start = time.perf_counter()
        status_code = 500
        try:
            async with gs.track():
                response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
