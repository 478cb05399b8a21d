"""Shared test fixtures for Manifestarr test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from manifestarr.domain.entities.manifest import ResolvedManifest
from manifestarr.infrastructure.cache.memory_adapter import MemoryCacheAdapter

# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def movie_manifest() -> ResolvedManifest:
    """Resolved manifest for Inception (TMDB 27205)."""
    return ResolvedManifest(
        asset_kind="movie",
        tmdb_id="27205",
        imdb_id="tt1375666",
        language="Hindi",
        manifest_url="https://cdn.example/x.m3u8",
    )


@pytest.fixture()
def episode_manifest() -> ResolvedManifest:
    """Resolved manifest for Game of Thrones S01E01 (TMDB 1399)."""
    return ResolvedManifest(
        asset_kind="series",
        tmdb_id="1399",
        imdb_id="tt0944947",
        language="English",
        manifest_url="https://cdn.example/got/s1e1/master.m3u8",
        season=1,
        episode=1,
    )


# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def memory_cache(clock: FakeClock) -> MemoryCacheAdapter:
    """Real in-memory cache driven by the fake clock."""
    return MemoryCacheAdapter(ttl_seconds=3600, clock=clock)


@pytest.fixture()
def mock_cache() -> AsyncMock:
    """Mock CachePort."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    cache.delete = AsyncMock(return_value=True)
    cache.exists = AsyncMock(return_value=False)
    cache.clear = AsyncMock()
    cache.aclose = AsyncMock()
    return cache


@pytest.fixture()
def mock_tmdb() -> AsyncMock:
    """Mock TmdbClientPort resolving every ID to Inception's IMDb ID."""
    tmdb = AsyncMock()
    tmdb.get_imdb_id = AsyncMock(return_value="tt1375666")
    return tmdb


@pytest.fixture()
def mock_sniffer() -> AsyncMock:
    """Mock ManifestSnifferPort that always finds the same manifest."""
    sniffer = AsyncMock()
    sniffer.sniff = AsyncMock(return_value="https://cdn.example/x.m3u8")
    return sniffer
