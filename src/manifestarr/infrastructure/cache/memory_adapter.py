"""In-memory cache adapter - process-local dict with lazy TTL expiry."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import structlog

log = structlog.get_logger(__name__)


class MemoryCacheAdapter:
    """Async cache holding values by reference in a plain dict.

    - Each entry is an immutable ``(value, expires_at)`` tuple; ``set``
      replaces it in a single assignment, so readers see either the old or
      the new entry (last write wins).
    - Expired entries are evicted lazily by the read that finds them.
      There is no background sweep and no capacity bound.
    - State is lost when the process exits.

    Args:
        ttl_seconds: Default TTL for ``set()`` without explicit value.
        clock: Monotonic time source in seconds (injectable for tests).
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}
        self._open = False

        log.info("memory_cache_init", default_ttl=ttl_seconds)

    # --- Context Manager ---
    async def __aenter__(self) -> MemoryCacheAdapter:
        self._open = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._open:
            dropped = len(self._entries)
            self._entries.clear()
            self._open = False
            log.info("memory_cache_closed", dropped_entries=dropped)

    def __len__(self) -> int:
        return len(self._entries)

    def _live_entry(self, key: str) -> tuple[Any, float] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry[1]:
            del self._entries[key]
            log.debug("cache_expired", key=key)
            return None
        return entry

    # --- CachePort implementation ---
    async def get(self, key: str) -> Any | None:
        entry = self._live_entry(key)
        log.debug("cache_get", key=key, hit=entry is not None)
        return entry[0] if entry is not None else None

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        expire_after = ttl if ttl is not None else self.default_ttl
        self._entries[key] = (value, self._clock() + expire_after)
        log.debug("cache_set", key=key, ttl=expire_after)

    async def delete(self, key: str) -> bool:
        deleted = self._entries.pop(key, None) is not None
        log.debug("cache_delete", key=key, deleted=deleted)
        return deleted

    async def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        log.warning("cache_cleared", entries=count)
