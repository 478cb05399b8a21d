from .manifest import (
    DEFAULT_LANGUAGE,
    EMBED_BASE_URL,
    MANIFEST_SUFFIX,
    SUPPORTED_LANGUAGES,
    AssetKind,
    ResolutionResult,
    ResolutionStatus,
    ResolvedManifest,
    is_manifest_url,
    manifest_cache_key,
    movie_embed_url,
    normalize_language,
    series_embed_url,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "EMBED_BASE_URL",
    "MANIFEST_SUFFIX",
    "SUPPORTED_LANGUAGES",
    "AssetKind",
    "ResolutionResult",
    "ResolutionStatus",
    "ResolvedManifest",
    "is_manifest_url",
    "manifest_cache_key",
    "movie_embed_url",
    "normalize_language",
    "series_embed_url",
]
