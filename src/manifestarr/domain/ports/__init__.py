from .cache import CachePort
from .manifest_repository import ManifestRepository
from .manifest_sniffer import ManifestSnifferPort
from .tmdb import TmdbClientPort

__all__ = [
    "CachePort",
    "ManifestRepository",
    "ManifestSnifferPort",
    "TmdbClientPort",
]
