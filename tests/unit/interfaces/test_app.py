"""Tests for the application factory (probes, middleware)."""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from manifestarr.infrastructure.config import AppConfig
from manifestarr.interfaces.app import create_app


class TestCreateApp:
    def test_routes_registered(self) -> None:
        app = create_app(AppConfig())
        paths = {route.path for route in app.routes}
        assert "/movie/{tmdb_id}" in paths
        assert "/series/{tmdb_id}/{season}/{episode}" in paths
        assert "/cache" in paths
        assert "/healthz" in paths
        assert "/readyz" in paths

    def test_healthz_without_lifespan(self) -> None:
        client = TestClient(create_app(AppConfig()))
        resp = client.get("/healthz")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "active_sessions": 0}

    def test_healthz_reports_active_sessions(self) -> None:
        app = create_app(AppConfig())
        sniffer = MagicMock()
        sniffer.active_sessions = 3
        app.state.sniffer = sniffer

        resp = TestClient(app).get("/healthz")

        assert resp.json()["active_sessions"] == 3

    def test_readyz_follows_graceful_shutdown(self) -> None:
        app = create_app(AppConfig())
        client = TestClient(app)

        assert client.get("/readyz").status_code == 503
        app.state.graceful_shutdown.mark_ready()
        assert client.get("/readyz").status_code == 200

    def test_middleware_releases_tracking(self) -> None:
        app = create_app(AppConfig())
        TestClient(app).get("/healthz")
        assert app.state.graceful_shutdown.active_requests == 0
