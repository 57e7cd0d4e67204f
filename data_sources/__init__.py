"""
Data Sources Package - Rate-limited stock market data layer.

Features:
- Provider adapter with distinguishable failure kinds
- Global FIFO dispatcher enforcing the provider's call spacing
- Strict normalization of daily time series (descending by date)

Quick Start:
    from core.clock import SystemClock
    from data_sources import (
        AlphaVantageSource,
        RateLimitedDispatcher,
        normalize_daily_payload,
    )

    async def main():
        dispatcher = RateLimitedDispatcher(min_interval=12.0, clock=SystemClock())
        async with AlphaVantageSource(api_key="...") as source:
            payload = await dispatcher.submit(
                lambda: source.fetch_daily_series("AAPL")
            )
            series = normalize_daily_payload(payload)
            print(series[0].date, series[0].close)

Adding New Providers:
    1. Create class extending BaseMarketDataSource
    2. Implement: fetch_daily_series(), fetch_overview(), parse_overview(),
       search_symbols(), validate_response()
    3. Pass it to the container; nothing downstream changes
"""

from data_sources.base import BaseMarketDataSource
from data_sources.dispatcher import QueuedJob, RateLimitedDispatcher
from data_sources.exceptions import (
    DataSourceError,
    DispatchTimeoutError,
    ParseError,
    ProviderDataError,
    ProviderRateLimitError,
    TransportError,
)
from data_sources.models import (
    CompanyOverview,
    DailyBar,
    DataType,
    FetchRequest,
    NormalizedSeries,
    SourceHealth,
    SourceStatus,
    StockDataResult,
    SymbolMatch,
)
from data_sources.normalizer import normalize_daily_payload, normalize_time_series
from data_sources.providers import AlphaVantageSource


__version__ = "1.0.0"

__all__ = [
    # Base
    "BaseMarketDataSource",

    # Dispatcher
    "RateLimitedDispatcher",
    "QueuedJob",

    # Models
    "DailyBar",
    "NormalizedSeries",
    "StockDataResult",
    "CompanyOverview",
    "SymbolMatch",
    "SourceHealth",
    "SourceStatus",
    "DataType",
    "FetchRequest",

    # Normalizer
    "normalize_time_series",
    "normalize_daily_payload",

    # Exceptions
    "DataSourceError",
    "TransportError",
    "ProviderRateLimitError",
    "ProviderDataError",
    "ParseError",
    "DispatchTimeoutError",

    # Providers
    "AlphaVantageSource",
]
