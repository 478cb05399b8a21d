"""Fixed browser policy for manifest sniffing."""

from __future__ import annotations

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

CHROMIUM_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-extensions",
    "--disable-gpu",
)

VIEWPORT = {"width": 1280, "height": 720}

# Requests of these Playwright resource types are aborted, never sent.
BLOCKED_RESOURCE_TYPES: frozenset[str] = frozenset({"image", "stylesheet", "font"})

NAVIGATION_TIMEOUT_MS = 20_000
POLL_ATTEMPTS = 4
POLL_INTERVAL_SECONDS = 1.0
MAX_CONCURRENT_SESSIONS = 5
