"""Browser-based manifest discovery."""

from .browser_pool import SharedBrowserPool
from .playwright_sniffer import ManifestSignal, PlaywrightManifestSniffer

__all__ = ["ManifestSignal", "PlaywrightManifestSniffer", "SharedBrowserPool"]
