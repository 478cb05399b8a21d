"""Manifest resolution use case.

TMDB ID -> IMDb ID -> cache probe -> embed page sniff -> cache write.

Per request::

    START -> CANONICAL_LOOKUP -> lookup_miss
                              -> CACHE_PROBE -> found (cached)
                                             -> SNIFF -> found | sniff_miss

No state is revisited and nothing is retried. Errors from the lookup and the
browser are already downgraded to ``None`` by the adapters; anything else
propagates to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from manifestarr.domain.entities.manifest import (
    DEFAULT_LANGUAGE,
    EMBED_BASE_URL,
    SUPPORTED_LANGUAGES,
    AssetKind,
    ResolutionResult,
    ResolvedManifest,
    movie_embed_url,
    normalize_language,
    series_embed_url,
)
from manifestarr.domain.ports.manifest_repository import ManifestRepository
from manifestarr.domain.ports.manifest_sniffer import ManifestSnifferPort
from manifestarr.domain.ports.tmdb import TmdbClientPort

log = structlog.get_logger(__name__)


class ManifestResolutionUseCase:
    """Resolves HLS manifests for movies and series episodes."""

    def __init__(
        self,
        *,
        tmdb: TmdbClientPort,
        sniffer: ManifestSnifferPort,
        repository: ManifestRepository,
        embed_base_url: str = EMBED_BASE_URL,
        supported_languages: Sequence[str] = SUPPORTED_LANGUAGES,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._tmdb = tmdb
        self._sniffer = sniffer
        self._repo = repository
        self._embed_base_url = embed_base_url.rstrip("/")
        self._supported = tuple(supported_languages)
        self._default_language = default_language

    def normalize_language(self, language: str | None) -> str:
        return normalize_language(
            language,
            supported=self._supported,
            default=self._default_language,
        )

    async def resolve_movie(
        self, tmdb_id: str, language: str | None = None
    ) -> ResolutionResult:
        """Resolve the manifest of a movie."""
        return await self._resolve("movie", tmdb_id, language)

    async def resolve_series(
        self,
        tmdb_id: str,
        season: int,
        episode: int,
        language: str | None = None,
    ) -> ResolutionResult:
        """Resolve the manifest of one series episode."""
        return await self._resolve(
            "series", tmdb_id, language, season=season, episode=episode
        )

    async def _resolve(
        self,
        asset_kind: AssetKind,
        tmdb_id: str,
        language: str | None,
        *,
        season: int | None = None,
        episode: int | None = None,
    ) -> ResolutionResult:
        lang = self.normalize_language(language)
        bound = log.bind(
            asset_kind=asset_kind,
            tmdb_id=tmdb_id,
            lang=lang,
            season=season,
            episode=episode,
        )

        imdb_id = await self._tmdb.get_imdb_id(tmdb_id, asset_kind)
        if not imdb_id:
            bound.info("resolve_lookup_miss")
            return ResolutionResult(status="lookup_miss", language=lang)

        cached = await self._repo.get(asset_kind, imdb_id, lang, season, episode)
        if cached is not None:
            bound.info("resolve_cache_hit", imdb_id=imdb_id)
            return ResolutionResult(
                status="found", language=lang, manifest=cached, cached=True
            )

        embed_url = self._embed_url(asset_kind, imdb_id, lang, season, episode)
        manifest_url = await self._sniffer.sniff(embed_url)
        if manifest_url is None:
            bound.info("resolve_sniff_miss", imdb_id=imdb_id, embed_url=embed_url)
            return ResolutionResult(status="sniff_miss", language=lang)

        manifest = ResolvedManifest(
            asset_kind=asset_kind,
            tmdb_id=tmdb_id,
            imdb_id=imdb_id,
            language=lang,
            manifest_url=manifest_url,
            season=season,
            episode=episode,
        )
        await self._repo.save(manifest)
        bound.info("resolve_found", imdb_id=imdb_id, manifest_url=manifest_url)
        return ResolutionResult(status="found", language=lang, manifest=manifest)

    def _embed_url(
        self,
        asset_kind: AssetKind,
        imdb_id: str,
        language: str,
        season: int | None,
        episode: int | None,
    ) -> str:
        if asset_kind == "series":
            if season is None or episode is None:
                raise ValueError("series resolution requires season and episode")
            return series_embed_url(
                imdb_id, season, episode, language, base_url=self._embed_base_url
            )
        return movie_embed_url(imdb_id, language, base_url=self._embed_base_url)

    async def clear_cache(self) -> None:
        """Flush every cached manifest."""
        await self._repo.clear()
        log.info("manifest_cache_flushed")
