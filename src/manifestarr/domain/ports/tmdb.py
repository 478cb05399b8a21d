"""Port for TMDB catalog lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from manifestarr.domain.entities.manifest import AssetKind


@runtime_checkable
class TmdbClientPort(Protocol):
    """Async interface for translating TMDB IDs into IMDb IDs."""

    async def get_imdb_id(self, tmdb_id: str, asset_kind: AssetKind) -> str | None:
        """Return the IMDb ID for a TMDB movie/series ID.

        Returns None when the ID is unknown or the lookup failed.
        """
        ...
