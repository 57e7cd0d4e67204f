"""
Core Module - Service Container.

============================================================
RESPONSIBILITY
============================================================
Builds every long-lived component exactly once per process and
hands them out by reference. Nothing in the service reaches for a
module-level singleton; the API and CLI receive a container.

============================================================
WIRING
============================================================
    Database ──► DatabaseCacheStore ─┐
    AlphaVantageSource ──────────────┼─► CacheAsideFetcher ─► StockInsightsService
    RateLimitedDispatcher ───────────┘
    Database + AuthState ─► WatchlistService

The dispatcher is shared by every provider call, so the rate
limit is global to the process.

============================================================
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from core.clock import ClockProtocol, SystemClock
from core.config import AppConfig
from data_ingestion.cache_store import CacheStore, DatabaseCacheStore
from data_ingestion.fetcher import CacheAsideFetcher
from data_sources.base import BaseMarketDataSource
from data_sources.dispatcher import RateLimitedDispatcher
from data_sources.providers.alpha_vantage import AlphaVantageSource
from insights.config import InsightConfig
from insights.engine import InsightEngine
from insights.service import StockInsightsService
from storage.database import Database
from watchlist.auth import AuthState
from watchlist.service import WatchlistService


logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Process-wide component graph."""
    config: AppConfig
    clock: ClockProtocol
    database: Database
    source: BaseMarketDataSource
    dispatcher: RateLimitedDispatcher
    cache_store: CacheStore
    fetcher: CacheAsideFetcher
    engine: InsightEngine
    insights: StockInsightsService
    auth: AuthState
    watchlist: WatchlistService

    async def startup(self) -> None:
        """Connect the database and make sure the schema exists."""
        await self.database.connect()
        await self.database.create_all()
        logger.info("Service container started")

    async def aclose(self) -> None:
        """Stop the dispatcher, close the HTTP session, dispose the engine."""
        await self.dispatcher.aclose()
        await self.source.close()
        await self.database.disconnect()
        logger.info("Service container closed")


def build_container(
    config: AppConfig,
    clock: Optional[ClockProtocol] = None,
    source: Optional[BaseMarketDataSource] = None,
) -> ServiceContainer:
    """
    Wire the service graph from configuration.

    Args:
        config: Loaded AppConfig
        clock: Time source (defaults to SystemClock)
        source: Market data source override (defaults to Alpha Vantage)
    """
    clock = clock or SystemClock()
    database = Database(config.database)

    if source is None:
        source = AlphaVantageSource(
            api_key=config.provider.api_key,
            base_url=config.provider.base_url,
            timeout=config.provider.timeout_seconds,
        )

    dispatcher = RateLimitedDispatcher(
        min_interval=config.dispatcher.min_interval_seconds,
        clock=clock,
        job_timeout=config.dispatcher.job_timeout_seconds,
    )
    cache_store = DatabaseCacheStore(database, clock=clock, ttl_hours=config.cache.ttl_hours)
    fetcher = CacheAsideFetcher(cache_store, dispatcher, source)

    engine = InsightEngine(InsightConfig(dead_zone_pct=Decimal(config.insight_dead_zone_pct)))
    insights = StockInsightsService(
        fetcher,
        engine=engine,
        include_overview=config.include_overview,
    )

    auth = AuthState()
    watchlist = WatchlistService(database, auth, clock=clock)

    logger.info(
        f"Container built: source={source.name} "
        f"interval={dispatcher.min_interval}s ttl={config.cache.ttl_hours}h"
    )
    return ServiceContainer(
        config=config,
        clock=clock,
        database=database,
        source=source,
        dispatcher=dispatcher,
        cache_store=cache_store,
        fetcher=fetcher,
        engine=engine,
        insights=insights,
        auth=auth,
        watchlist=watchlist,
    )
