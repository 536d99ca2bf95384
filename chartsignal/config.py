"""Pydantic Settings configuration models.

3-tier config hierarchy (lowest to highest priority):
1. Pydantic defaults (in code below)
2. .env file (loaded by Pydantic Settings)
3. Environment variables (e.g., CHARTSIGNAL_SCREENER__MAX_TRADES=5)
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_INTERVALS = frozenset(
    {
        "1m", "3m", "5m", "15m", "30m",
        "1h", "2h", "4h", "6h", "8h", "12h",
        "1d", "3d", "1w", "1M",
    }
)  # fmt: skip
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
VALID_LOG_FORMATS = frozenset({"console", "json"})

_PAIR_PATTERN = re.compile(r"^[A-Z0-9]{2,20}$")


class IndicatorConfig(BaseModel):
    """Indicator lengths and multipliers used by the screener and CLI."""

    rsi_length: int = Field(default=14, ge=2, le=100)
    sma_length: int = Field(default=30, ge=2, le=200)
    supertrend_length: int = Field(default=10, ge=1, le=100)
    supertrend_mult: float = Field(default=3.0, gt=0.0, le=10.0)
    bands_length: int = Field(default=10, ge=2, le=200)
    bands_mult: float = Field(default=2.0, gt=0.0, le=10.0)


class ScreenerConfig(BaseModel):
    """Ranking and selection parameters."""

    max_trades: int = Field(default=7, ge=1, le=50)
    max_workers: int = Field(default=4, ge=1, le=32)
    interval: str = "1d"
    chart_limit: int = Field(default=50, ge=2, le=1000)

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v: str) -> str:
        if v not in VALID_INTERVALS:
            raise ValueError(
                f"interval must be one of {sorted(VALID_INTERVALS)}, got {v}"
            )
        return v


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Env var examples:
        CHARTSIGNAL_LOG_LEVEL=DEBUG
        CHARTSIGNAL_INDICATORS__RSI_LENGTH=10
        CHARTSIGNAL_WATCHLIST='["BTCBUSD","ETHBUSD"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARTSIGNAL_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: str = "console"
    indicators: IndicatorConfig = IndicatorConfig()
    screener: ScreenerConfig = ScreenerConfig()
    watchlist: list[str] = Field(
        default=[
            "BTCBUSD", "ETHBUSD", "BNBBUSD", "ADABUSD",
            "DOTBUSD", "CAKEBUSD", "UNIBUSD", "LINKBUSD",
            "AXSBUSD", "SOLBUSD", "MATICBUSD", "AVAXBUSD",
            "LUNABUSD", "ATOMBUSD", "TRXBUSD", "ALGOBUSD",
        ],
    )  # fmt: skip

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {v}"
            )
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in VALID_LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {sorted(VALID_LOG_FORMATS)}, got {v}"
            )
        return v

    @field_validator("watchlist")
    @classmethod
    def validate_watchlist(cls, v: list[str]) -> list[str]:
        if len(v) == 0:
            raise ValueError("Watchlist must not be empty")
        for pair in v:
            if not _PAIR_PATTERN.match(pair):
                raise ValueError(f"Invalid pair: {pair}")
        return v

    @model_validator(mode="after")
    def validate_chart_limit(self) -> AppConfig:
        """Each chart must cover the RSI and SMA warm-up."""
        rsi_bars = 3 * self.indicators.rsi_length + 1
        needed = max(rsi_bars, self.indicators.sma_length)
        if self.screener.chart_limit < needed:
            raise ValueError(
                f"screener.chart_limit must be >= {needed} for "
                f"rsi_length={self.indicators.rsi_length} and "
                f"sma_length={self.indicators.sma_length}, "
                f"got {self.screener.chart_limit}"
            )
        return self
