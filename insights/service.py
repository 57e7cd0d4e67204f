"""
Insights Service - End-to-end "insights for a symbol" use case.

Validates the symbol before anything is queued, pulls the daily
series (and optionally the company overview) through the
cache-aside fetcher, and hands the result to the engine.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.validation import normalize_symbol
from data_ingestion.fetcher import CacheAsideFetcher
from data_sources.exceptions import DataSourceError
from data_sources.models import CompanyOverview

from .engine import InsightEngine
from .formatting import format_currency, format_large_number, format_percentage
from .types import StockInsights


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsightsReport:
    """Insights plus provenance of the data they were computed from."""
    insights: StockInsights
    from_cache: bool
    last_refreshed: str

    def display(self) -> Dict[str, str]:
        """Human-readable strings for the headline numbers."""
        i = self.insights
        display = {
            "latest_price": format_currency(i.latest_price),
            "day_change": format_currency(i.day_change.absolute),
            "day_change_percentage": format_percentage(i.day_change.percentage),
            "trend_7_day": format_percentage(i.trend_7_day.percentage),
            "trend_30_day": format_percentage(i.trend_30_day.percentage),
            "volume": format_large_number(i.volume),
        }
        if i.high_52_week is not None and i.low_52_week is not None:
            display["high_52_week"] = format_currency(i.high_52_week)
            display["low_52_week"] = format_currency(i.low_52_week)
        return display

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insights": self.insights.to_dict(),
            "display": self.display(),
            "from_cache": self.from_cache,
            "last_refreshed": self.last_refreshed,
        }


class StockInsightsService:
    """
    Orchestrates fetch -> normalize -> compute for one symbol.

    Overview data is optional: when enabled, a failed overview fetch
    only drops the P/E ratio, it never fails the request.
    """

    def __init__(
        self,
        fetcher: CacheAsideFetcher,
        engine: Optional[InsightEngine] = None,
        include_overview: bool = False,
    ) -> None:
        self._fetcher = fetcher
        self._engine = engine or InsightEngine()
        self._include_overview = include_overview

    async def get_insights(self, symbol: str) -> InsightsReport:
        """
        Compute insights for a symbol.

        Raises:
            ValidationError: Malformed symbol (nothing is queued)
            DataSourceError: Provider or parse failure for the daily series
            InsufficientDataError: Provider returned an empty series
        """
        symbol = normalize_symbol(symbol)

        result = await self._fetcher.get_daily_series(symbol)
        overview = await self._get_overview(symbol) if self._include_overview else None

        insights = self._engine.calculate_insights(result.symbol, result.daily_data, overview)
        logger.info(
            f"Insights for {symbol}: close={insights.latest_price} "
            f"7d={insights.trend_7_day.direction.value} from_cache={result.from_cache}"
        )
        return InsightsReport(
            insights=insights,
            from_cache=result.from_cache,
            last_refreshed=result.last_refreshed,
        )

    async def _get_overview(self, symbol: str) -> Optional[CompanyOverview]:
        try:
            return await self._fetcher.get_overview(symbol)
        except DataSourceError as e:
            logger.warning(f"Overview unavailable for {symbol}, omitting P/E: {e}")
            return None
