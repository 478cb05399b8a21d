"""Domain entities for manifest resolution.

Pure value objects - no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

AssetKind = Literal["movie", "series"]

ResolutionStatus = Literal["found", "lookup_miss", "sniff_miss"]

SUPPORTED_LANGUAGES: tuple[str, ...] = ("Hindi", "English", "Bengali", "Tamil", "Telugu")
DEFAULT_LANGUAGE = "Hindi"

EMBED_BASE_URL = "https://embed.vidsrc.pk"
MANIFEST_SUFFIX = ".m3u8"


def normalize_language(
    language: str | None,
    *,
    supported: tuple[str, ...] = SUPPORTED_LANGUAGES,
    default: str = DEFAULT_LANGUAGE,
) -> str:
    """Return *language* if supported, otherwise the default (no error).

    Matching is exact (case-sensitive): ``"hindi"`` falls back like
    ``"Klingon"`` does.
    """
    if language is not None and language in supported:
        return language
    return default


def manifest_cache_key(
    asset_kind: AssetKind,
    imdb_id: str,
    language: str,
    season: int | None = None,
    episode: int | None = None,
) -> str:
    """Build the cache key for one resolved variant.

    Movies: ``movie-tt1375666-Hindi``
    Series: ``series-tt0944947-s1e1-Hindi``
    """
    if asset_kind == "series":
        return f"series-{imdb_id}-s{season}e{episode}-{language}"
    return f"movie-{imdb_id}-{language}"


def movie_embed_url(imdb_id: str, language: str, *, base_url: str = EMBED_BASE_URL) -> str:
    return f"{base_url}/movie/{imdb_id}?lang={language}"


def series_embed_url(
    imdb_id: str,
    season: int,
    episode: int,
    language: str,
    *,
    base_url: str = EMBED_BASE_URL,
) -> str:
    return f"{base_url}/tv/{imdb_id}/{season}-{episode}?lang={language}"


def is_manifest_url(url: str, suffix: str = MANIFEST_SUFFIX) -> bool:
    """Literal suffix match; query strings are not stripped."""
    return url.endswith(suffix)


@dataclass(frozen=True)
class ResolvedManifest:
    """A manifest URL discovered for one asset variant."""

    asset_kind: AssetKind
    tmdb_id: str
    imdb_id: str
    language: str
    manifest_url: str
    season: int | None = None
    episode: int | None = None


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of one resolution request.

    ``manifest`` is set only when ``status == "found"``; ``cached`` tells
    whether it came from the cache instead of a fresh browser session.
    """

    status: ResolutionStatus
    language: str
    manifest: ResolvedManifest | None = None
    cached: bool = False

    @property
    def found(self) -> bool:
        return self.status == "found" and self.manifest is not None
