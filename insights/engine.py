"""
Insight Engine - Calculations.

============================================================
PURPOSE
============================================================
Turns a NormalizedSeries (newest first) into StockInsights.

Every method is a pure function of its inputs and the config:
no I/O, no clock, no state between calls.

============================================================
RULES
============================================================
Day change:
    fewer than 2 points      -> 0 / 0
    otherwise                -> c0 - c1, (c0 - c1) / c1 * 100

Trend over N days:
    fewer than N + 1 points  -> FLAT, 0
    otherwise                -> compare c0 against c[N]
                                 pct >  dead zone -> UP
                                 pct < -dead zone -> DOWN
                                 else             -> FLAT

52-week range:
    first min(252, n) points; fewer than 30 -> no range
    otherwise max(high), min(low)

All reported values are rounded to 2 decimal places with halves
going toward +infinity (1.005 -> 1.01, -1.005 -> -1.00).

============================================================
USAGE
============================================================
    engine = InsightEngine()
    insights = engine.calculate_insights("AAPL", series, overview)
    print(insights.trend_7_day.direction)

============================================================
"""

from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from typing import Optional, Sequence, Tuple

from data_sources.models import CompanyOverview, DailyBar

from .config import InsightConfig
from .types import (
    FLAT_TREND,
    ZERO_CHANGE,
    DayChange,
    InsufficientDataError,
    StockInsights,
    Trend,
    TrendDirection,
)


_TWO_PLACES = Decimal("0.01")
_HUNDRED = Decimal("100")


def round_to_two(value: Decimal) -> Decimal:
    """Round to 2 decimal places, halves toward +infinity."""
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return value.quantize(_TWO_PLACES, rounding=rounding)


class InsightEngine:
    """
    Stateless insight calculator.

    Configuration (dead zone, trend windows, range window) comes from
    InsightConfig; defaults match the provider's free-tier use case.
    """

    def __init__(self, config: Optional[InsightConfig] = None):
        self.config = config or InsightConfig()

    def calculate_insights(
        self,
        symbol: str,
        series: Sequence[DailyBar],
        overview: Optional[CompanyOverview] = None,
    ) -> StockInsights:
        """
        Compute the full insights record.

        Args:
            symbol: Ticker the series belongs to
            series: Daily bars, newest first
            overview: Optional fundamentals (source of the P/E ratio)

        Raises:
            InsufficientDataError: If the series is empty
        """
        if not series:
            raise InsufficientDataError(symbol)

        latest = series[0]
        short_window, long_window = self.config.trend_windows
        high, low = self.range_52_week(series)

        return StockInsights(
            symbol=symbol,
            latest_price=latest.close,
            latest_date=latest.date,
            day_change=self.day_change(series),
            trend_7_day=self.trend(series, short_window),
            trend_30_day=self.trend(series, long_window),
            volume=latest.volume,
            high_52_week=high,
            low_52_week=low,
            pe_ratio=overview.pe_ratio if overview is not None else None,
        )

    def day_change(self, series: Sequence[DailyBar]) -> DayChange:
        """Change from the previous trading day's close."""
        if len(series) < 2:
            return ZERO_CHANGE

        current = series[0].close
        previous = series[1].close
        absolute = current - previous

        return DayChange(
            absolute=round_to_two(absolute),
            percentage=round_to_two(absolute / previous * _HUNDRED),
        )

    def trend(self, series: Sequence[DailyBar], window: int) -> Trend:
        """Direction and size of the move over `window` trading days."""
        if len(series) < window + 1:
            return FLAT_TREND

        current = series[0].close
        past = series[window].close
        percentage = (current - past) / past * _HUNDRED

        return Trend(
            direction=self.classify(percentage),
            percentage=round_to_two(percentage),
        )

    def classify(self, percentage: Decimal) -> TrendDirection:
        """Map an unrounded percentage onto a direction via the dead zone."""
        dead_zone = self.config.dead_zone_pct
        if percentage > dead_zone:
            return TrendDirection.UP
        if percentage < -dead_zone:
            return TrendDirection.DOWN
        return TrendDirection.FLAT

    def range_52_week(
        self, series: Sequence[DailyBar]
    ) -> Tuple[Optional[Decimal], Optional[Decimal]]:
        """(high, low) over the last trading year, or (None, None) if too short."""
        window = min(self.config.trading_days_per_year, len(series))
        if window < self.config.min_range_points:
            return None, None

        recent = series[:window]
        return (
            round_to_two(max(bar.high for bar in recent)),
            round_to_two(min(bar.low for bar in recent)),
        )

