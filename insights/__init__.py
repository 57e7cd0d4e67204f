"""
Insights Module.

============================================================
RESPONSIBILITY
============================================================
Derives per-symbol insights from normalized daily data.

- engine: pure calculations (day change, trends, 52-week range)
- formatting: display strings for currency, percentages, volumes
- service: validate -> fetch -> compute use case

============================================================
"""

from .config import InsightConfig
from .engine import InsightEngine, round_to_two
from .formatting import format_currency, format_large_number, format_percentage
from .service import InsightsReport, StockInsightsService
from .types import (
    DayChange,
    InsufficientDataError,
    StockInsights,
    Trend,
    TrendDirection,
)

__all__ = [
    "InsightConfig",
    "InsightEngine",
    "round_to_two",
    "format_currency",
    "format_percentage",
    "format_large_number",
    "InsightsReport",
    "StockInsightsService",
    "DayChange",
    "Trend",
    "TrendDirection",
    "StockInsights",
    "InsufficientDataError",
]
