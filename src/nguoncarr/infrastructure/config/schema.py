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
PreferredStreamType = Literal["m3u8", "embed"]


class CacheConfig(BaseModel):
    """Capacities and freshness windows of the two in-process caches."""

    http_capacity: int = Field(
        default=150,
        description="Max raw HTTP responses kept (keyed by request URL).",
    )
    http_ttl_seconds: float = Field(
        default=300.0,
        description="Freshness window for search/browse responses (seconds).",
    )
    detail_capacity: int = Field(
        default=400,
        description="Max normalized detail records kept (slug:/id: keys).",
    )
    detail_ttl_seconds: float = Field(
        default=3600.0,
        description="Freshness window for detail records and their raw JSON.",
    )

    @field_validator("http_capacity", "detail_capacity")
    @classmethod
    def _validate_capacity(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache capacity must be > 0")
        return v

    @field_validator("http_ttl_seconds", "detail_ttl_seconds")
    @classmethod
    def _validate_ttl(cls, v: float) -> float:
        if v < 0:
            raise ValueError("cache ttl must be >= 0")
        return v


class AppConfig(BaseModel):
    """Final plugin configuration, built once by ``load_config``.

    Each field accepts its flat name or its sectioned path, so the same
    model validates YAML blocks (``api.base_url``) and flat env/CLI keys
    (``api_base_url``).
    """

    # General
    app_name: str = Field(default="nguoncarr", description="Name used in log output.")
    environment: Environment = Field(
        default="dev",
        description="dev, test or prod; prod switches logs to JSON.",
    )

    # Upstream API (YAML section: api.*)
    api_base_url: str = Field(
        default="https://phim.nguonc.com",
        validation_alias=AliasChoices(
            "api_base_url",
            AliasPath("api", "base_url"),
        ),
        description="Base URL of the catalog API.",
    )
    api_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "api_timeout_seconds",
            AliasPath("api", "timeout_seconds"),
        ),
        description="Per-request timeout in seconds.",
    )
    api_user_agent: str = Field(
        default="nguoncarr/0.1.0",
        validation_alias=AliasChoices(
            "api_user_agent",
            AliasPath("api", "user_agent"),
        ),
        description="User-Agent header sent to the catalog API.",
    )

    # Plugin behavior (YAML section: plugin.*)
    preferred_stream_type: PreferredStreamType = Field(
        default="embed",
        validation_alias=AliasChoices(
            "preferred_stream_type",
            AliasPath("plugin", "preferred_stream_type"),
        ),
        description="Stream type picked first by play().",
    )
    debug_log: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "debug_log",
            AliasPath("plugin", "debug_log"),
        ),
        description="Emit diagnostic-only log events. Never changes behavior.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Root log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Cache (YAML section: cache.*)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    @field_validator("api_timeout_seconds")
    @classmethod
    def _validate_api_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("api_timeout_seconds must be > 0")
        return v

    @field_validator("api_base_url")
    @classmethod
    def _validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must be an http(s) URL")
        return v.rstrip("/")

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self


class EnvOverrides(BaseSettings):
    """``NGUONCARR_*`` variables, one per flat config key.

    Unset variables stay ``None`` and are left out of the env layer, e.g.
    ``NGUONCARR_PREFERRED_STREAM_TYPE=m3u8`` or
    ``NGUONCARR_CACHE_DETAIL_TTL_SECONDS=600``.
    """

    model_config = SettingsConfigDict(
        env_prefix="NGUONCARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    api_base_url: Optional[str] = None
    api_timeout_seconds: Optional[float] = None
    api_user_agent: Optional[str] = None

    preferred_stream_type: Optional[PreferredStreamType] = None
    debug_log: Optional[bool] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_http_capacity: Optional[int] = None
    cache_http_ttl_seconds: Optional[float] = None
    cache_detail_capacity: Optional[int] = None
    cache_detail_ttl_seconds: Optional[float] = None

    def to_update_dict(self) -> dict[str, Any]:
        """The env layer: only variables that are actually set."""
        return self.model_dump(exclude_none=True)
