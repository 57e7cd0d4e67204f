"""
Insights Service Tests.

Validate -> fetch -> compute, against the SQLite cache and the
in-process fake source.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from core.clock import ensure_utc
from core.exceptions import ValidationError
from data_ingestion.cache_store import DatabaseCacheStore
from data_ingestion.fetcher import CacheAsideFetcher
from data_sources.dispatcher import RateLimitedDispatcher
from data_sources.exceptions import ProviderDataError, ProviderRateLimitError
from data_sources.models import DataType
from insights.service import StockInsightsService
from insights.types import InsufficientDataError, TrendDirection
from storage.repositories.cache import StockDataCacheRepository


@pytest.fixture
def dispatcher(clock):
    return RateLimitedDispatcher(min_interval=12.0, clock=clock)


@pytest.fixture
def fetcher(database, clock, dispatcher, fake_source):
    return CacheAsideFetcher(DatabaseCacheStore(database, clock=clock), dispatcher, fake_source)


class TestGetInsights:

    @pytest.mark.asyncio
    async def test_report(self, fetcher, fake_source):
        fake_source.closes = [110] + [100] * 39
        service = StockInsightsService(fetcher)

        report = await service.get_insights("aapl")

        assert fake_source.daily_calls == ["AAPL"]
        assert report.from_cache is False
        assert report.last_refreshed == "2024-01-31"
        assert report.insights.symbol == "AAPL"
        assert report.insights.trend_7_day.direction == TrendDirection.UP
        assert report.insights.high_52_week == Decimal("111.00")
        assert report.insights.low_52_week == Decimal("99.50")
        assert report.insights.pe_ratio is None
        assert fake_source.overview_calls == []

    @pytest.mark.asyncio
    async def test_second_request_served_from_cache(self, fetcher, fake_source):
        service = StockInsightsService(fetcher)

        await service.get_insights("AAPL")
        report = await service.get_insights("AAPL")

        assert report.from_cache is True
        assert fake_source.daily_calls == ["AAPL"]

    @pytest.mark.asyncio
    async def test_report_writes_fresh_cache_row(self, fetcher, database, clock):
        report = await StockInsightsService(fetcher).get_insights("AAPL")

        async with database.session() as session:
            row = await StockDataCacheRepository(session).get_fresh(
                "AAPL", DataType.TIME_SERIES_DAILY.value, clock.now() - timedelta(hours=24)
            )

        assert row is not None
        assert ensure_utc(row.fetched_at) == clock.now()
        latest = report.insights.latest_date.isoformat()
        assert latest == "2024-01-31"
        assert row.data["Meta Data"]["3. Last Refreshed"] == latest
        assert max(row.data["Time Series (Daily)"]) == latest

    @pytest.mark.asyncio
    @pytest.mark.parametrize("symbol", ["", "AAPL$", "WAYTOOLONGSYMBOL"])
    async def test_invalid_symbol_rejected_before_queueing(self, fetcher, fake_source, dispatcher, symbol):
        service = StockInsightsService(fetcher)

        with pytest.raises(ValidationError):
            await service.get_insights(symbol)

        assert fake_source.daily_calls == []
        assert dispatcher.get_stats()["completed"] == 0

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self, fetcher, fake_source):
        fake_source.daily_error = ProviderRateLimitError(provider_note="5 calls per minute")

        with pytest.raises(ProviderRateLimitError):
            await StockInsightsService(fetcher).get_insights("AAPL")

    @pytest.mark.asyncio
    async def test_empty_series(self, fetcher, fake_source):
        fake_source.closes = []

        with pytest.raises(InsufficientDataError):
            await StockInsightsService(fetcher).get_insights("AAPL")


class TestOverview:

    @pytest.mark.asyncio
    async def test_pe_ratio_included(self, fetcher, fake_source):
        service = StockInsightsService(fetcher, include_overview=True)

        report = await service.get_insights("AAPL")

        assert report.insights.pe_ratio == Decimal("28.5")
        assert fake_source.overview_calls == ["AAPL"]

    @pytest.mark.asyncio
    async def test_overview_failure_only_drops_pe(self, fetcher, fake_source):
        fake_source.overview_error = ProviderDataError("No overview", symbol="AAPL")
        service = StockInsightsService(fetcher, include_overview=True)

        report = await service.get_insights("AAPL")

        assert report.insights.pe_ratio is None
        assert report.insights.latest_price == Decimal("101")


class TestReportDisplay:

    @pytest.mark.asyncio
    async def test_display_strings(self, fetcher, fake_source):
        fake_source.closes = [110] + [100] * 39

        report = await StockInsightsService(fetcher).get_insights("AAPL")
        display = report.display()

        assert display["latest_price"] == "$110.00"
        assert display["day_change"] == "$10.00"
        assert display["day_change_percentage"] == "+10.00%"
        assert display["trend_7_day"] == "+10.00%"
        assert display["volume"] == "1.00M"
        assert display["high_52_week"] == "$111.00"
        assert display["low_52_week"] == "$99.50"

    @pytest.mark.asyncio
    async def test_display_omits_range_for_short_series(self, fetcher, fake_source):
        fake_source.closes = [101, 100]

        report = await StockInsightsService(fetcher).get_insights("AAPL")

        assert "high_52_week" not in report.display()
        assert report.to_dict()["insights"]["high_52_week"] is None
