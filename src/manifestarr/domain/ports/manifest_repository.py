"""Port for caching resolved manifests."""

from __future__ import annotations

from typing import Protocol

from manifestarr.domain.entities.manifest import AssetKind, ResolvedManifest


class ManifestRepository(Protocol):
    """Stores resolved manifests keyed by asset variant."""

    async def get(
        self,
        asset_kind: AssetKind,
        imdb_id: str,
        language: str,
        season: int | None = None,
        episode: int | None = None,
    ) -> ResolvedManifest | None: ...

    async def save(self, manifest: ResolvedManifest) -> None: ...

    async def clear(self) -> None: ...
