"""
Data Ingestion - Cache-Aside Fetcher.

============================================================
RESPONSIBILITY
============================================================
Answers "give me data_type X for symbol S" with the fewest
provider calls possible.

1. Fresh cache entry (within TTL)  -> return it, no provider call
2. Miss                            -> submit the provider call to the
                                      rate-limited dispatcher and wait
3. Provider success                -> write through to the cache
4. Provider failure                -> propagate unchanged

============================================================
DESIGN PRINCIPLES
============================================================
- The cache is an optimization, never a point of failure:
  read errors count as a miss, write errors are logged and dropped
- Every provider call, including search, goes through the one
  dispatcher so the global rate limit holds
- Payloads are cached raw, exactly as the provider returned them

============================================================
"""

import logging
from typing import Any, Optional

from data_ingestion.cache_store import CacheStore
from data_sources.base import BaseMarketDataSource
from data_sources.dispatcher import RateLimitedDispatcher
from data_sources.models import (
    CompanyOverview,
    DataType,
    StockDataResult,
    SymbolMatch,
)
from data_sources.normalizer import normalize_daily_payload
from storage.repositories.exceptions import RepositoryException


logger = logging.getLogger(__name__)

META_DATA_KEY = "Meta Data"
META_SYMBOL_KEY = "2. Symbol"
META_LAST_REFRESHED_KEY = "3. Last Refreshed"


class CacheAsideFetcher:
    """
    Cache-aside access to provider data.

    Usage:
        fetcher = CacheAsideFetcher(cache_store, dispatcher, source)
        result = await fetcher.get_daily_series("AAPL")
    """

    def __init__(
        self,
        cache_store: CacheStore,
        dispatcher: RateLimitedDispatcher,
        source: BaseMarketDataSource,
    ) -> None:
        self._cache = cache_store
        self._dispatcher = dispatcher
        self._source = source

        self._provider_calls: dict[DataType, str] = {
            DataType.TIME_SERIES_DAILY: "fetch_daily_series",
            DataType.OVERVIEW: "fetch_overview",
        }

    async def fetch(self, symbol: str, data_type: DataType) -> tuple[Any, bool]:
        """
        Get the raw payload for (symbol, data_type).

        Args:
            symbol: Already-validated upper-case ticker
            data_type: Which provider function to use

        Returns:
            (payload, from_cache)

        Raises:
            DataSourceError: Whatever the provider call raised
        """
        cached = await self._read_cache(symbol, data_type)
        if cached is not None:
            logger.info(f"Cache hit: {symbol}/{data_type.value}")
            return cached, True

        logger.info(f"Cache miss: {symbol}/{data_type.value}, queueing provider call")
        provider_call = getattr(self._source, self._provider_calls[data_type])
        payload = await self._dispatcher.submit(lambda: provider_call(symbol))

        await self._write_cache(symbol, data_type, payload)
        return payload, False

    async def get_daily_series(self, symbol: str) -> StockDataResult:
        """
        Daily series for a symbol, newest first.

        Raises:
            DataSourceError: Provider failure or unparseable payload
        """
        payload, from_cache = await self.fetch(symbol, DataType.TIME_SERIES_DAILY)
        series = normalize_daily_payload(payload)

        meta = payload.get(META_DATA_KEY) or {}
        last_refreshed = meta.get(META_LAST_REFRESHED_KEY)
        if not last_refreshed:
            last_refreshed = series[0].date.isoformat() if series else ""

        return StockDataResult(
            symbol=meta.get(META_SYMBOL_KEY) or symbol,
            last_refreshed=last_refreshed,
            daily_data=series,
            from_cache=from_cache,
        )

    async def get_overview(self, symbol: str) -> CompanyOverview:
        """Company fundamentals for a symbol."""
        payload, _ = await self.fetch(symbol, DataType.OVERVIEW)
        return self._source.parse_overview(symbol, payload)

    async def search_symbols(self, keywords: str) -> list[SymbolMatch]:
        """
        Symbol lookup; a blank query returns [] without any I/O.

        Searches share the dispatcher queue but are never cached.
        """
        if not keywords or not keywords.strip():
            return []
        query = keywords.strip()
        return await self._dispatcher.submit(lambda: self._source.search_symbols(query))

    # =========================================================
    # CACHE HELPERS
    # =========================================================

    async def _read_cache(self, symbol: str, data_type: DataType) -> Optional[Any]:
        try:
            return await self._cache.get(symbol, data_type)
        except RepositoryException as e:
            logger.warning(f"Cache read failed, treating as miss: {e.to_log_format()}")
            return None

    async def _write_cache(self, symbol: str, data_type: DataType, payload: Any) -> None:
        try:
            await self._cache.upsert(symbol, data_type, payload)
        except RepositoryException as e:
            logger.error(f"Cache write failed, continuing without cache: {e.to_log_format()}")
