"""Tests for CacheManifestRepository."""

from __future__ import annotations

from unittest.mock import AsyncMock

from manifestarr.domain.entities.manifest import ResolvedManifest
from manifestarr.infrastructure.cache.memory_adapter import MemoryCacheAdapter
from manifestarr.infrastructure.persistence.manifest_cache import (
    CacheManifestRepository,
)


class TestSave:
    async def test_movie_key_and_ttl(
        self, mock_cache: AsyncMock, movie_manifest: ResolvedManifest
    ) -> None:
        repo = CacheManifestRepository(mock_cache, ttl_seconds=3600)
        await repo.save(movie_manifest)
        mock_cache.set.assert_awaited_once_with(
            "movie-tt1375666-Hindi", movie_manifest, ttl=3600
        )

    async def test_series_key(
        self, mock_cache: AsyncMock, episode_manifest: ResolvedManifest
    ) -> None:
        repo = CacheManifestRepository(mock_cache)
        await repo.save(episode_manifest)
        key = mock_cache.set.await_args.args[0]
        assert key == "series-tt0944947-s1e1-English"


class TestGet:
    async def test_roundtrip_through_memory_cache(
        self, memory_cache: MemoryCacheAdapter, movie_manifest: ResolvedManifest
    ) -> None:
        repo = CacheManifestRepository(memory_cache)
        await repo.save(movie_manifest)
        loaded = await repo.get("movie", "tt1375666", "Hindi")
        assert loaded is movie_manifest

    async def test_other_language_is_a_miss(
        self, memory_cache: MemoryCacheAdapter, movie_manifest: ResolvedManifest
    ) -> None:
        repo = CacheManifestRepository(memory_cache)
        await repo.save(movie_manifest)
        assert await repo.get("movie", "tt1375666", "English") is None

    async def test_other_episode_is_a_miss(
        self, memory_cache: MemoryCacheAdapter, episode_manifest: ResolvedManifest
    ) -> None:
        repo = CacheManifestRepository(memory_cache)
        await repo.save(episode_manifest)
        assert await repo.get("series", "tt0944947", "English", 1, 1) is not None
        assert await repo.get("series", "tt0944947", "English", 1, 2) is None

    async def test_expired_manifest_is_a_miss(
        self, memory_cache: MemoryCacheAdapter, clock, movie_manifest
    ) -> None:
        repo = CacheManifestRepository(memory_cache, ttl_seconds=3600)
        await repo.save(movie_manifest)
        clock.advance(3601)
        assert await repo.get("movie", "tt1375666", "Hindi") is None

    async def test_foreign_value_is_a_miss(self, mock_cache: AsyncMock) -> None:
        mock_cache.get = AsyncMock(return_value="tt1375666")
        repo = CacheManifestRepository(mock_cache)
        assert await repo.get("movie", "tt1375666", "Hindi") is None


class TestClear:
    async def test_clear_delegates(self, mock_cache: AsyncMock) -> None:
        repo = CacheManifestRepository(mock_cache)
        await repo.clear()
        mock_cache.clear.assert_awaited_once()
