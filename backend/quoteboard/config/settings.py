"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://www.alphavantage.co/query"
DEFAULT_SYMBOLS = ["AAPL", "MSFT", "GOOGL", "AMZN", "META"]


class AppSettings(BaseSettings):
    """Configuration options for the Quoteboard proxy service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="Quoteboard")

    alphavantage_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ALPHAVANTAGE_API_KEY", "ALPHA_VANTAGE_API_KEY"),
    )
    alphavantage_base_url: str = Field(
        default=DEFAULT_BASE_URL,
        validation_alias=AliasChoices("ALPHAVANTAGE_BASE_URL", "ALPHA_VANTAGE_BASE_URL"),
    )
    alphavantage_timeout_seconds: float = Field(default=15.0)
    alphavantage_requests_per_minute: int | None = Field(
        default=None,
        description="Optional outbound throttle; unset means no throttling.",
    )

    quote_cache_ttl_seconds: float = Field(default=5 * 60, gt=0)
    history_cache_ttl_seconds: float = Field(default=60 * 60, gt=0)
    search_cache_ttl_seconds: float = Field(default=24 * 60 * 60, gt=0)
    history_max_bars: int = Field(default=30, ge=1)

    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost",
            "http://127.0.0.1",
        ]
    )

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="quoteboard")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"alphavantage_api_key"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


class ClientSettings(BaseSettings):
    """Settings for the dashboard session that polls the proxy."""

    model_config = SettingsConfigDict(
        env_prefix="QUOTEBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    proxy_base_url: str = Field(default="http://127.0.0.1:8000")
    default_symbols: list[str] = Field(default_factory=lambda: list(DEFAULT_SYMBOLS))
    batch_size: int = Field(default=5, ge=1)
    cooldown_seconds: float = Field(default=60.0, ge=0)
    daily_call_budget: int = Field(default=25, ge=0)
    refresh_interval_seconds: float = Field(default=5 * 60, gt=0)
    search_debounce_seconds: float = Field(default=0.5, ge=0)
    search_min_length: int = Field(default=2, ge=1)
    request_timeout_seconds: float = Field(default=15.0, gt=0)


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


@lru_cache(maxsize=1)
def get_client_settings(**overrides: Any) -> ClientSettings:
    """Return cached dashboard settings with optional overrides."""

    if overrides:
        return ClientSettings(**overrides)
    return ClientSettings()


__all__ = [
    "AppSettings",
    "ClientSettings",
    "DEFAULT_BASE_URL",
    "DEFAULT_SYMBOLS",
    "get_client_settings",
    "get_settings",
]
