"""
Core Module Tests.

Symbol validation, configuration loading, event source and clock.
"""

from datetime import datetime, timezone

import pytest

from core.clock import MockClock, ensure_utc
from core.config import AppConfig, DispatcherConfig
from core.events import EventSource
from core.exceptions import ConfigurationError, MissingConfigError, ValidationError
from core.validation import is_valid_symbol, normalize_symbol


# ============================================================
# SYMBOL VALIDATION
# ============================================================

class TestSymbolValidation:

    @pytest.mark.parametrize("raw,expected", [
        ("AAPL", "AAPL"),
        ("aapl", "AAPL"),
        ("  msft ", "MSFT"),
        ("brk.a", "BRK.A"),
        ("7203.T", "7203.T"),
        ("ABCDEFGHIJ", "ABCDEFGHIJ"),
    ])
    def test_accepted(self, raw, expected):
        assert normalize_symbol(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "AAPL$", "BRK-B", "ABCDEFGHIJK", "AA PL", None, 42])
    def test_rejected(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            normalize_symbol(raw)

        assert exc_info.value.field_name == "symbol"

    def test_is_valid_symbol(self):
        assert is_valid_symbol("aapl") is True
        assert is_valid_symbol("BRK.A") is True
        assert is_valid_symbol(" AAPL ") is True
        assert is_valid_symbol("TOOLONGSYMB") is False
        assert is_valid_symbol(None) is False

    @pytest.mark.parametrize("raw", [" aapl", "MSFT\n", "\tBRK.A ", "", "   ", " AAPL$", None])
    def test_is_valid_symbol_agrees_with_normalize(self, raw):
        try:
            normalize_symbol(raw)
            accepted = True
        except ValidationError:
            accepted = False

        assert is_valid_symbol(raw) is accepted


# ============================================================
# CONFIGURATION
# ============================================================

class TestConfig:

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for key in (
            "ALPHA_VANTAGE_API_KEY", "ALPHA_VANTAGE_BASE_URL", "ALPHA_VANTAGE_TIMEOUT",
            "RATE_LIMIT_CALLS_PER_MINUTE", "DISPATCH_JOB_TIMEOUT", "CACHE_TTL_HOURS",
            "DATABASE_URL", "DATABASE_ECHO", "INSIGHTS_DEAD_ZONE_PCT",
            "INSIGHTS_INCLUDE_OVERVIEW", "API_HOST", "API_PORT", "LOG_LEVEL",
        ):
            monkeypatch.delenv(key, raising=False)

    def test_missing_api_key_fails_fast(self):
        with pytest.raises(MissingConfigError) as exc_info:
            AppConfig.from_env(dotenv=False)

        assert exc_info.value.config_key == "ALPHA_VANTAGE_API_KEY"

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", "demo")

        config = AppConfig.from_env(dotenv=False)

        assert config.provider.api_key == "demo"
        assert config.dispatcher.min_interval_seconds == 12.0
        assert config.dispatcher.job_timeout_seconds is None
        assert config.cache.ttl_hours == 24
        assert config.insight_dead_zone_pct == "0.5"
        assert config.include_overview is False
        assert config.log_level == "INFO"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", "demo")
        monkeypatch.setenv("RATE_LIMIT_CALLS_PER_MINUTE", "75")
        monkeypatch.setenv("DISPATCH_JOB_TIMEOUT", "20")
        monkeypatch.setenv("CACHE_TTL_HOURS", "6")
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/insights")
        monkeypatch.setenv("INSIGHTS_DEAD_ZONE_PCT", "1.0")
        monkeypatch.setenv("INSIGHTS_INCLUDE_OVERVIEW", "true")
        monkeypatch.setenv("API_PORT", "9000")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = AppConfig.from_env(dotenv=False)

        assert config.dispatcher.min_interval_seconds == pytest.approx(0.8)
        assert config.dispatcher.job_timeout_seconds == 20.0
        assert config.cache.ttl_hours == 6.0
        assert config.database.url.startswith("postgresql+asyncpg://")
        assert config.insight_dead_zone_pct == "1.0"
        assert config.include_overview is True
        assert config.api.port == 9000
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("key,value", [
        ("RATE_LIMIT_CALLS_PER_MINUTE", "five"),
        ("RATE_LIMIT_CALLS_PER_MINUTE", "0"),
        ("API_PORT", "http"),
        ("INSIGHTS_DEAD_ZONE_PCT", "wide"),
        ("INSIGHTS_DEAD_ZONE_PCT", "-1"),
        ("CACHE_TTL_HOURS", "a day"),
    ])
    def test_invalid_values(self, monkeypatch, key, value):
        monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", "demo")
        monkeypatch.setenv(key, value)

        with pytest.raises(ConfigurationError):
            AppConfig.from_env(dotenv=False)

    def test_dispatcher_interval_from_quota(self):
        assert DispatcherConfig(calls_per_minute=5).min_interval_seconds == 12.0
        assert DispatcherConfig(calls_per_minute=60).min_interval_seconds == 1.0


# ============================================================
# EVENT SOURCE
# ============================================================

class TestEventSource:

    def test_subscribe_and_dispose(self):
        events = EventSource("test")
        received = []

        dispose = events.subscribe(received.append)
        events.emit(1)
        dispose()
        dispose()
        events.emit(2)

        assert received == [1]
        assert events.listener_count == 0

    def test_failing_listener_does_not_block_others(self):
        events = EventSource("test")
        received = []

        def broken(_):
            raise RuntimeError("listener bug")

        events.subscribe(broken)
        events.subscribe(received.append)
        events.emit("hello")

        assert received == ["hello"]


# ============================================================
# CLOCK
# ============================================================

class TestMockClock:

    @pytest.mark.asyncio
    async def test_sleep_advances_virtual_time(self):
        clock = MockClock(datetime(2024, 1, 1, tzinfo=timezone.utc))
        before = clock.monotonic()

        await clock.sleep(12)

        assert clock.monotonic() - before == 12
        assert clock.sleeps == [12]

    def test_ensure_utc_on_naive(self):
        naive = datetime(2024, 1, 1, 9, 30)

        assert ensure_utc(naive).tzinfo == timezone.utc
        assert ensure_utc(naive).hour == 9
