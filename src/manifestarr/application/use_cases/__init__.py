from .resolve_manifest import ManifestResolutionUseCase

__all__ = ["ManifestResolutionUseCase"]
