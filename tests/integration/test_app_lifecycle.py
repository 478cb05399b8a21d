"""Integration tests for the assembled application.

Runs the real lifespan (cache, httpx client, TMDB client, repository, use
case) through TestClient. TMDB is mocked via respx; the browser session is
replaced on the live sniffer instance so no Chromium is launched.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
import respx
from fastapi.testclient import TestClient

from manifestarr.infrastructure.config import AppConfig
from manifestarr.interfaces.app import create_app

pytestmark = pytest.mark.integration

_TMDB = "https://api.themoviedb.org/3"
_MANIFEST = "https://cdn.example/inception/master.m3u8"


def _config(**overrides) -> AppConfig:
    return AppConfig.model_validate({"tmdb_api_key": "test-key", **overrides})


class TestProbes:
    def test_not_ready_before_startup(self) -> None:
        client = TestClient(create_app(_config()))
        assert client.get("/readyz").status_code == 503

    def test_ready_and_healthy_after_startup(self) -> None:
        with TestClient(create_app(_config())) as client:
            ready = client.get("/readyz")
            health = client.get("/healthz")

        assert ready.status_code == 200
        assert ready.json() == {"status": "ready"}
        assert health.json() == {"status": "ok", "active_sessions": 0}

    def test_shutdown_drains_and_closes(self) -> None:
        app = create_app(_config())
        with TestClient(app):
            pass

        assert app.state.graceful_shutdown.is_draining is True
        assert app.state.http_client.is_closed is True
        assert app.state.browser_pool is None


class TestResolveThroughLifespan:
    def test_movie_lookup_sniff_and_cache(self, respx_mock: respx.MockRouter) -> None:
        tmdb_route = respx_mock.get(f"{_TMDB}/movie/27205/external_ids").respond(
            json={"id": 27205, "imdb_id": "tt1375666"}
        )
        app = create_app(_config())

        with TestClient(app) as client:
            sniff = AsyncMock(return_value=_MANIFEST)
            app.state.sniffer.sniff = sniff

            first = client.get("/movie/27205", params={"lang": "Hindi"})
            second = client.get("/movie/27205", params={"lang": "Hindi"})

        assert first.status_code == 200
        assert first.json()["imdbId"] == "tt1375666"
        assert first.json()["m3u8Url"] == _MANIFEST
        assert "cached" not in first.json()
        assert second.json()["cached"] is True
        sniff.assert_awaited_once_with(
            "https://embed.vidsrc.pk/movie/tt1375666?lang=Hindi"
        )
        assert tmdb_route.call_count == 1

    def test_series_lookup_miss(self, respx_mock: respx.MockRouter) -> None:
        respx_mock.get(f"{_TMDB}/tv/1399/external_ids").respond(status_code=404)
        app = create_app(_config())

        with TestClient(app) as client:
            sniff = AsyncMock(return_value=_MANIFEST)
            app.state.sniffer.sniff = sniff
            resp = client.get("/series/1399/1/1")

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "IMDb ID not found"}
        sniff.assert_not_awaited()

    def test_missing_api_key_is_lookup_miss(self) -> None:
        app = create_app(AppConfig())

        with TestClient(app) as client:
            resp = client.get("/movie/27205")

        assert resp.status_code == 404
        assert resp.json()["message"] == "IMDb ID not found"

    def test_configured_embed_base_url(self, respx_mock: respx.MockRouter) -> None:
        respx_mock.get(f"{_TMDB}/movie/27205/external_ids").respond(
            json={"imdb_id": "tt1375666"}
        )
        app = create_app(_config(embed={"base_url": "http://embed.local"}))

        with TestClient(app) as client:
            sniff = AsyncMock(return_value=None)
            app.state.sniffer.sniff = sniff
            resp = client.get("/movie/27205", params={"lang": "English"})

        assert resp.status_code == 404
        assert resp.json()["lang"] == "English"
        sniff.assert_awaited_once_with(
            "http://embed.local/movie/tt1375666?lang=English"
        )
