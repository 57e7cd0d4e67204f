"""
Insight Engine - Type Definitions.

============================================================
PURPOSE
============================================================
Output contracts of the insight engine.

- All results are immutable
- Money and percentages are Decimal rounded to 2 places
- Optional fields are None when the series is too short

============================================================
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from core.exceptions import InsightsError


# ============================================================
# ENUMS
# ============================================================


class TrendDirection(str, Enum):
    """Direction of price movement over a trend window."""

    UP = "up"
    DOWN = "down"
    FLAT = "flat"


# ============================================================
# RESULTS
# ============================================================


@dataclass(frozen=True)
class DayChange:
    """Close-to-close change between the two most recent trading days."""

    absolute: Decimal
    percentage: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"absolute": str(self.absolute), "percentage": str(self.percentage)}


@dataclass(frozen=True)
class Trend:
    """Change between the latest close and the close `window` trading days back."""

    direction: TrendDirection
    percentage: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"direction": self.direction.value, "percentage": str(self.percentage)}


ZERO_CHANGE = DayChange(absolute=Decimal("0"), percentage=Decimal("0"))
FLAT_TREND = Trend(direction=TrendDirection.FLAT, percentage=Decimal("0"))


@dataclass(frozen=True)
class StockInsights:
    """
    Computed insights for one symbol.

    Recomputed on every request from the (possibly cached) series;
    never stored.
    """

    symbol: str
    latest_price: Decimal
    latest_date: date
    day_change: DayChange
    trend_7_day: Trend
    trend_30_day: Trend
    volume: int
    high_52_week: Optional[Decimal] = None
    low_52_week: Optional[Decimal] = None
    pe_ratio: Optional[Decimal] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "symbol": self.symbol,
            "latest_price": str(self.latest_price),
            "latest_date": self.latest_date.isoformat(),
            "day_change": self.day_change.to_dict(),
            "trend_7_day": self.trend_7_day.to_dict(),
            "trend_30_day": self.trend_30_day.to_dict(),
            "volume": self.volume,
            "high_52_week": str(self.high_52_week) if self.high_52_week is not None else None,
            "low_52_week": str(self.low_52_week) if self.low_52_week is not None else None,
            "pe_ratio": str(self.pe_ratio) if self.pe_ratio is not None else None,
        }


# ============================================================
# EXCEPTIONS
# ============================================================


class InsufficientDataError(InsightsError):
    """Raised when there is no data to compute insights from."""

    def __init__(self, symbol: str, message: str = "No data available to calculate insights"):
        super().__init__(message, context={"symbol": symbol})
        self.symbol = symbol
