"""
Insight Engine - Configuration.

============================================================
PURPOSE
============================================================
Tuning constants for insight computation, in one immutable place.

============================================================
THRESHOLDS
============================================================
Trend dead zone:
- A window whose change is strictly inside (-0.5%, +0.5%) is FLAT
- Exactly +0.50% or -0.50% is still FLAT (exclusive bounds)
- Compared on the unrounded percentage

52-week range:
- A year is 252 trading days; a shorter series uses what it has
- Fewer than 30 points gives no range at all

============================================================
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class InsightConfig:
    """Immutable configuration for InsightEngine."""

    # Trading-day lookbacks reported as trends
    trend_windows: Tuple[int, ...] = (7, 30)

    # Percentage magnitude that must be exceeded to call a trend up/down
    dead_zone_pct: Decimal = Decimal("0.5")

    # Points considered for the 52-week high/low
    trading_days_per_year: int = 252

    # Minimum points before a 52-week range is reported
    min_range_points: int = 30

    def __post_init__(self) -> None:
        if not isinstance(self.dead_zone_pct, Decimal):
            object.__setattr__(self, "dead_zone_pct", Decimal(str(self.dead_zone_pct)))
        if self.dead_zone_pct < 0:
            raise ValueError("dead_zone_pct must be >= 0")
        if len(self.trend_windows) != 2 or any(window < 1 for window in self.trend_windows):
            raise ValueError("trend_windows must be two windows, each >= 1")
        if self.min_range_points < 1 or self.trading_days_per_year < self.min_range_points:
            raise ValueError("need 1 <= min_range_points <= trading_days_per_year")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trend_windows": list(self.trend_windows),
            "dead_zone_pct": str(self.dead_zone_pct),
            "trading_days_per_year": self.trading_days_per_year,
            "min_range_points": self.min_range_points,
        }
