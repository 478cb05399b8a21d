"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _section(name: str, key: str, flat: str) -> AliasChoices:
    """Accept both the flat key and its ``section.key`` path."""
    return AliasChoices(flat, AliasPath(name, key))


class EmbedConfig(BaseModel):
    """Embed page addressing and language policy (YAML section: embed.*)."""

    base_url: str = Field(
        default="https://embed.vidsrc.pk",
        description="Embed service origin used by the URL templates.",
    )
    default_language: str = Field(
        default="Hindi",
        description="Language used when the request has none or an unsupported one.",
    )
    supported_languages: list[str] = Field(
        default=["Hindi", "English", "Bengali", "Tamil", "Telugu"],
        description="Languages passed through to the embed page unchanged.",
    )

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("embed.base_url must be an http(s) URL")
        return v.rstrip("/")

    @model_validator(mode="after")
    def _default_is_supported(self) -> "EmbedConfig":
        if self.default_language not in self.supported_languages:
            raise ValueError(
                "embed.default_language must be one of embed.supported_languages"
            )
        return self


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/playwright/logging/cache/embed).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="manifestarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client for TMDB (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=_section("http", "timeout_seconds", "http_timeout_seconds"),
        description="HTTP timeout in seconds for TMDB lookups.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=_section("http", "follow_redirects", "http_follow_redirects"),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="Manifestarr/0.1.0",
        validation_alias=_section("http", "user_agent", "http_user_agent"),
        description="User-Agent for outgoing TMDB requests.",
    )

    # Playwright / sniffer (YAML section: playwright.*)
    playwright_headless: bool = Field(
        default=True,
        validation_alias=_section("playwright", "headless", "playwright_headless"),
        description="Run Chromium headless.",
    )
    playwright_navigation_timeout_ms: int = Field(
        default=20_000,
        validation_alias=_section(
            "playwright", "navigation_timeout_ms", "playwright_navigation_timeout_ms"
        ),
        description="Timeout for loading the embed page (domcontentloaded).",
    )
    playwright_poll_attempts: int = Field(
        default=4,
        validation_alias=_section(
            "playwright", "poll_attempts", "playwright_poll_attempts"
        ),
        description="Detection polls after navigation.",
    )
    playwright_poll_interval_seconds: float = Field(
        default=1.0,
        validation_alias=_section(
            "playwright", "poll_interval_seconds", "playwright_poll_interval_seconds"
        ),
        description="Seconds between detection polls.",
    )
    playwright_max_concurrent_sessions: int = Field(
        default=5,
        validation_alias=_section(
            "playwright",
            "max_concurrent_sessions",
            "playwright_max_concurrent_sessions",
        ),
        description="Max simultaneously open browser sessions (0 = unbounded).",
    )
    playwright_shared_browser: bool = Field(
        default=False,
        validation_alias=_section(
            "playwright", "shared_browser", "playwright_shared_browser"
        ),
        description=(
            "Keep one Chromium process and give each sniff its own context "
            "instead of launching a browser per request."
        ),
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=_section("logging", "level", "log_level"),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=_section("logging", "format", "log_format"),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Cache (YAML section: cache.*)
    cache_ttl_seconds: int = Field(
        default=3600,
        validation_alias=_section("cache", "ttl_seconds", "cache_ttl_seconds"),
        description="Default TTL for cache entries (seconds).",
    )
    cache_manifest_ttl_seconds: int = Field(
        default=3600,
        validation_alias=_section(
            "cache", "manifest_ttl_seconds", "cache_manifest_ttl_seconds"
        ),
        description="TTL for resolved manifests (seconds).",
    )

    # TMDB API key (required for the IMDb lookup)
    tmdb_api_key: str | None = Field(
        default=None,
        description="TMDB v3 API key.",
    )

    embed: EmbedConfig = Field(default_factory=EmbedConfig)

    shutdown_drain_seconds: float = Field(
        default=30.0,
        description="Max seconds to wait for in-flight requests on shutdown.",
    )

    @field_validator("http_timeout_seconds", "playwright_poll_interval_seconds")
    @classmethod
    def _validate_positive_float(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("value must be > 0")
        return v

    @field_validator("playwright_navigation_timeout_ms")
    @classmethod
    def _validate_navigation_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("playwright_navigation_timeout_ms must be > 0")
        return v

    @field_validator(
        "playwright_poll_attempts",
        "playwright_max_concurrent_sessions",
        "cache_ttl_seconds",
        "cache_manifest_ttl_seconds",
    )
    @classmethod
    def _validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        The TMDB API key is masked.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "playwright": {
                "headless": self.playwright_headless,
                "navigation_timeout_ms": self.playwright_navigation_timeout_ms,
                "poll_attempts": self.playwright_poll_attempts,
                "poll_interval_seconds": self.playwright_poll_interval_seconds,
                "max_concurrent_sessions": self.playwright_max_concurrent_sessions,
                "shared_browser": self.playwright_shared_browser,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": {
                "ttl_seconds": self.cache_ttl_seconds,
                "manifest_ttl_seconds": self.cache_manifest_ttl_seconds,
            },
            "embed": self.embed.model_dump(),
            "tmdb_api_key": "***" if self.tmdb_api_key else None,
            "shutdown_drain_seconds": self.shutdown_drain_seconds,
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read MANIFESTARR_* variables, keeps
    only the values that were set, merges them over YAML/defaults, then
    validates AppConfig.

    Supported env var examples (flat, explicit):
    - MANIFESTARR_TMDB_API_KEY
    - MANIFESTARR_PLAYWRIGHT_HEADLESS
    - MANIFESTARR_PLAYWRIGHT_SHARED_BROWSER
    - MANIFESTARR_LOG_LEVEL
    - MANIFESTARR_EMBED_BASE_URL
    """

    model_config = SettingsConfigDict(
        env_prefix="MANIFESTARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    playwright_headless: Optional[bool] = None
    playwright_navigation_timeout_ms: Optional[int] = None
    playwright_poll_attempts: Optional[int] = None
    playwright_poll_interval_seconds: Optional[float] = None
    playwright_max_concurrent_sessions: Optional[int] = None
    playwright_shared_browser: Optional[bool] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_ttl_seconds: Optional[int] = None
    cache_manifest_ttl_seconds: Optional[int] = None

    embed_base_url: Optional[str] = None
    embed_default_language: Optional[str] = None

    tmdb_api_key: Optional[str] = None
    shutdown_drain_seconds: Optional[float] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
