"""Port for discovering a manifest URL on an embed page."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ManifestSnifferPort(Protocol):
    """Observe network traffic of an embed page until a manifest appears."""

    async def sniff(self, embed_url: str) -> str | None:
        """Return the first manifest URL requested by the page, or None.

        Never raises for navigation problems; absence is the only failure
        signal.
        """
        ...
