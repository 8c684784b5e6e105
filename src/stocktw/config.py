"""Application configuration helpers."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .data.seed import FUTURES_URL, INDEX_URL, VIX_URL


class AppSettings(BaseSettings):
    """Project-wide settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    request_timeout_ms: int = Field(
        default=8000, gt=0, alias="STOCKTW_REQUEST_TIMEOUT_MS")
    proxy_backoff_ms: int = Field(
        default=500, ge=0, alias="STOCKTW_PROXY_BACKOFF_MS")
    auto_refresh_seconds: float = Field(
        default=60.0, gt=0, alias="STOCKTW_AUTO_REFRESH_SECONDS")
    auto_refresh: bool = Field(default=True, alias="STOCKTW_AUTO_REFRESH")
    simulation_price_bound: float = Field(
        default=0.0015, ge=0, alias="STOCKTW_SIMULATION_PRICE_BOUND")
    simulation_vix_bound: float = Field(
        default=0.01, ge=0, alias="STOCKTW_SIMULATION_VIX_BOUND")
    status_clear_seconds: float = Field(
        default=3.0, ge=0, alias="STOCKTW_STATUS_CLEAR_SECONDS")
    index_url: str = Field(default=INDEX_URL, alias="STOCKTW_INDEX_URL")
    futures_url: str = Field(default=FUTURES_URL, alias="STOCKTW_FUTURES_URL")
    vix_url: str = Field(default=VIX_URL, alias="STOCKTW_VIX_URL")

    @property
    def request_timeout_seconds(self) -> float:
        return self.request_timeout_ms / 1000.0

    @property
    def proxy_backoff_seconds(self) -> float:
        return self.proxy_backoff_ms / 1000.0

    def symbol_urls(self) -> dict[str, str]:
        """Return the quote page for each tracked symbol, keyed by field name."""

        return {
            "index": self.index_url,
            "futures": self.futures_url,
            "vix": self.vix_url,
        }
