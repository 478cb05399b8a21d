"""TMDB API client - async httpx implementation with caching."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from manifestarr.domain.entities.manifest import AssetKind
from manifestarr.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"

# Cache TTL (seconds); the TMDB -> IMDb mapping practically never changes
_TTL_EXTERNAL_IDS = 86_400  # 24 hours

_ENDPOINTS: dict[str, str] = {"movie": "movie", "series": "tv"}


class HttpxTmdbClient:
    """Async TMDB client using httpx + CachePort.

    Implements ``TmdbClientPort`` from domain.ports.tmdb.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        http_client: httpx.AsyncClient,
        cache: CachePort,
        base_url: str = _BASE_URL,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._cache = cache
        self._base_url = base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get(self, path: str) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(url, params={"api_key": self._api_key})
            if resp.status_code == 401:
                log.error("tmdb_api_key_invalid", status=401)
                return None
            if resp.status_code == 404:
                log.debug("tmdb_resource_not_found", path=path)
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError:
            log.warning("tmdb_http_error", path=path, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            return None
        except ValueError:
            log.warning("tmdb_invalid_json", path=path)
            return None

        if not isinstance(data, dict):
            log.warning("tmdb_unexpected_payload", path=path)
            return None
        return data

    # ------------------------------------------------------------------
    # Public API (TmdbClientPort)
    # ------------------------------------------------------------------

    async def get_imdb_id(self, tmdb_id: str, asset_kind: AssetKind) -> str | None:
        """Lookup the IMDb ID via ``/{movie|tv}/{id}/external_ids``.

        Args:
            tmdb_id: TMDB numeric ID (as received from the client).
            asset_kind: "movie" or "series" (maps to TMDB "tv").

        Returns:
            IMDb ID like ``tt1375666`` or None if unknown / lookup failed.
        """
        if not self._api_key:
            log.error("tmdb_api_key_missing", tmdb_id=tmdb_id)
            return None

        endpoint = _ENDPOINTS[asset_kind]
        cache_key = f"tmdb:external_ids:{endpoint}:{tmdb_id}"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        data = await self._get(f"/{endpoint}/{tmdb_id}/external_ids")
        if data is None:
            return None

        imdb_id = data.get("imdb_id") or None
        if imdb_id is None:
            log.info("tmdb_imdb_id_missing", tmdb_id=tmdb_id, endpoint=endpoint)
            return None

        await self._cache.set(cache_key, imdb_id, ttl=_TTL_EXTERNAL_IDS)
        return imdb_id
