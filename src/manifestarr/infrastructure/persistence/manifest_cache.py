"""Manifest repository backed by CachePort (in-memory)."""

from __future__ import annotations

import structlog

from manifestarr.domain.entities.manifest import (
    AssetKind,
    ResolvedManifest,
    manifest_cache_key,
)
from manifestarr.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)


class CacheManifestRepository:
    """Stores resolved manifests via CachePort.

    Values are stored as-is (no serialization): the in-memory cache holds
    the same frozen ``ResolvedManifest`` instance that was returned to the
    caller.
    """

    def __init__(self, cache: CachePort, ttl_seconds: int = 3600) -> None:
        self.cache = cache
        self.ttl = ttl_seconds

    async def save(self, manifest: ResolvedManifest) -> None:
        """Save manifest in cache with TTL."""
        key = manifest_cache_key(
            manifest.asset_kind,
            manifest.imdb_id,
            manifest.language,
            manifest.season,
            manifest.episode,
        )
        await self.cache.set(key, manifest, ttl=self.ttl)
        log.debug("manifest_saved", key=key, ttl=self.ttl)

    async def get(
        self,
        asset_kind: AssetKind,
        imdb_id: str,
        language: str,
        season: int | None = None,
        episode: int | None = None,
    ) -> ResolvedManifest | None:
        """Load manifest from cache. None on miss or foreign value."""
        key = manifest_cache_key(asset_kind, imdb_id, language, season, episode)
        value = await self.cache.get(key)
        if value is None:
            log.debug("manifest_not_cached", key=key)
            return None
        if not isinstance(value, ResolvedManifest):
            log.error(
                "manifest_cache_type_mismatch",
                key=key,
                value_type=type(value).__name__,
            )
            return None
        log.debug("manifest_loaded", key=key)
        return value

    async def clear(self) -> None:
        await self.cache.clear()
