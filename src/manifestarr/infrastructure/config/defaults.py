"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "manifestarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": "Manifestarr/0.1.0",
    },
    "playwright": {
        "headless": True,
        "navigation_timeout_ms": 20_000,
        "poll_attempts": 4,
        "poll_interval_seconds": 1.0,
        "max_concurrent_sessions": 5,
        "shared_browser": False,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "ttl_seconds": 3600,
        "manifest_ttl_seconds": 3600,
    },
    "embed": {
        "base_url": "https://embed.vidsrc.pk",
        "default_language": "Hindi",
        "supported_languages": ["Hindi", "English", "Bengali", "Tamil", "Telugu"],
    },
    "shutdown_drain_seconds": 30.0,
}
