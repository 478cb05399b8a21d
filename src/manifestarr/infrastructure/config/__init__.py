from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EmbedConfig, EnvOverrides

__all__ = ["AppConfig", "EmbedConfig", "EnvOverrides", "load_config"]
