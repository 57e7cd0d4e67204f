"""
Core Module - Configuration.

============================================================
RESPONSIBILITY
============================================================
Loads and validates process configuration.

Configuration can be loaded from:
- Default values
- Environment variables
- A .env file (python-dotenv)

Required values fail fast at startup with MissingConfigError.

============================================================
ENVIRONMENT VARIABLES
============================================================
ALPHA_VANTAGE_API_KEY        required
ALPHA_VANTAGE_BASE_URL       default https://www.alphavantage.co/query
ALPHA_VANTAGE_TIMEOUT        seconds, default 30
RATE_LIMIT_CALLS_PER_MINUTE  default 5 (=> 12s between calls)
DISPATCH_JOB_TIMEOUT         seconds, unset = no per-job timeout
CACHE_TTL_HOURS              default 24
DATABASE_URL                 default sqlite+aiosqlite:///./stock_insights.db
DATABASE_ECHO                default false
INSIGHTS_DEAD_ZONE_PCT       default 0.5
INSIGHTS_INCLUDE_OVERVIEW    default false
API_HOST / API_PORT          default 0.0.0.0 / 8000
LOG_LEVEL                    default INFO

============================================================
"""

import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional

from dotenv import load_dotenv

from .constants import (
    ALPHA_VANTAGE_BASE_URL,
    CACHE_TTL_HOURS,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    PROVIDER_CALLS_PER_MINUTE,
    SECONDS_PER_MINUTE,
)
from .exceptions import ConfigurationError, MissingConfigError


logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")


# =============================================================
# SECTION CONFIGS
# =============================================================


@dataclass
class ProviderConfig:
    """Alpha Vantage connection settings."""
    api_key: str
    base_url: str = ALPHA_VANTAGE_BASE_URL
    timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS


@dataclass
class DispatcherConfig:
    """
    Rate-limit settings for the request dispatcher.

    The minimum spacing between provider calls is derived from the
    calls-per-minute quota: 5 calls/minute => 12 seconds.
    """
    calls_per_minute: int = PROVIDER_CALLS_PER_MINUTE
    job_timeout_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if self.calls_per_minute < 1:
            raise ConfigurationError(
                "calls_per_minute must be >= 1",
                config_key="RATE_LIMIT_CALLS_PER_MINUTE",
                actual_value=self.calls_per_minute,
            )
        if self.job_timeout_seconds is not None and self.job_timeout_seconds <= 0:
            raise ConfigurationError(
                "job_timeout_seconds must be positive",
                config_key="DISPATCH_JOB_TIMEOUT",
                actual_value=self.job_timeout_seconds,
            )

    @property
    def min_interval_seconds(self) -> float:
        return SECONDS_PER_MINUTE / self.calls_per_minute


@dataclass
class CacheConfig:
    """Market data cache policy."""
    ttl_hours: float = CACHE_TTL_HOURS


@dataclass
class DatabaseConfig:
    """Database connection settings."""
    url: str = "sqlite+aiosqlite:///./stock_insights.db"
    echo: bool = False


@dataclass
class ApiConfig:
    """HTTP server settings."""
    host: str = "0.0.0.0"
    port: int = 8000


# =============================================================
# APPLICATION CONFIG
# =============================================================


@dataclass
class AppConfig:
    """Complete process configuration."""
    provider: ProviderConfig
    dispatcher: DispatcherConfig = field(default_factory=DispatcherConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    insight_dead_zone_pct: str = "0.5"
    include_overview: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "AppConfig":
        """
        Load configuration from environment variables.

        Args:
            dotenv: Read a .env file into the environment first

        Raises:
            MissingConfigError: If ALPHA_VANTAGE_API_KEY is not set
            ConfigurationError: If a value cannot be parsed
        """
        if dotenv:
            load_dotenv()

        api_key = os.getenv("ALPHA_VANTAGE_API_KEY", "")
        if not api_key.strip():
            raise MissingConfigError("ALPHA_VANTAGE_API_KEY")

        provider = ProviderConfig(api_key=api_key.strip())
        if os.getenv("ALPHA_VANTAGE_BASE_URL"):
            provider.base_url = os.getenv("ALPHA_VANTAGE_BASE_URL")
        if os.getenv("ALPHA_VANTAGE_TIMEOUT"):
            provider.timeout_seconds = _parse_float("ALPHA_VANTAGE_TIMEOUT")

        dispatcher = DispatcherConfig(
            calls_per_minute=_parse_int(
                "RATE_LIMIT_CALLS_PER_MINUTE", PROVIDER_CALLS_PER_MINUTE
            ),
            job_timeout_seconds=(
                _parse_float("DISPATCH_JOB_TIMEOUT")
                if os.getenv("DISPATCH_JOB_TIMEOUT")
                else None
            ),
        )

        config = cls(provider=provider, dispatcher=dispatcher)

        if os.getenv("CACHE_TTL_HOURS"):
            config.cache.ttl_hours = _parse_float("CACHE_TTL_HOURS")
        if os.getenv("DATABASE_URL"):
            config.database.url = os.getenv("DATABASE_URL")
        config.database.echo = _parse_bool("DATABASE_ECHO")
        if os.getenv("API_HOST"):
            config.api.host = os.getenv("API_HOST")
        if os.getenv("API_PORT"):
            config.api.port = _parse_int("API_PORT", config.api.port)
        if os.getenv("INSIGHTS_DEAD_ZONE_PCT"):
            config.insight_dead_zone_pct = _parse_decimal("INSIGHTS_DEAD_ZONE_PCT")
        config.include_overview = _parse_bool("INSIGHTS_INCLUDE_OVERVIEW")
        config.log_level = os.getenv("LOG_LEVEL", config.log_level).upper()

        logger.debug(
            f"Loaded config: interval={config.dispatcher.min_interval_seconds}s "
            f"ttl={config.cache.ttl_hours}h db={config.database.url.split('@')[-1]}"
        )
        return config


# =============================================================
# PARSING HELPERS
# =============================================================


def _parse_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{key} must be an integer", config_key=key, actual_value=raw, cause=e
        ) from e


def _parse_float(key: str) -> float:
    raw = os.getenv(key, "")
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{key} must be a number", config_key=key, actual_value=raw, cause=e
        ) from e


def _parse_decimal(key: str) -> str:
    raw = os.getenv(key, "").strip()
    try:
        value = Decimal(raw)
    except InvalidOperation as e:
        raise ConfigurationError(
            f"{key} must be a decimal number", config_key=key, actual_value=raw, cause=e
        ) from e
    if not value.is_finite() or value < 0:
        raise ConfigurationError(
            f"{key} must be a non-negative number", config_key=key, actual_value=raw
        )
    return raw


def _parse_bool(key: str) -> bool:
    return os.getenv(key, "false").strip().lower() in _TRUE_VALUES
