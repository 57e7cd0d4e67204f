"""
Data Source Models - Normalized market data structures.

Provides strict typing for provider data after normalization.
Prices are Decimal so insight arithmetic and rounding are exact.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class SourceStatus(Enum):
    """Health status of a data source."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class DataType(Enum):
    """Provider payload shapes; also the cache key's data_type tag."""
    TIME_SERIES_DAILY = "TIME_SERIES_DAILY"
    OVERVIEW = "OVERVIEW"


@dataclass(frozen=True)
class DailyBar:
    """
    One trading day of price/volume data.

    Immutable once parsed. Prices are positive, volume non-negative.
    """
    date: date
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "date": self.date.isoformat(),
            "open": str(self.open),
            "high": str(self.high),
            "low": str(self.low),
            "close": str(self.close),
            "volume": self.volume,
        }


# Strictly descending by date, no duplicates; element 0 is the latest day.
NormalizedSeries = list[DailyBar]


@dataclass(frozen=True)
class StockDataResult:
    """Daily series for one symbol plus where it came from."""
    symbol: str
    last_refreshed: str
    daily_data: NormalizedSeries
    from_cache: bool

    @property
    def latest(self) -> Optional[DailyBar]:
        return self.daily_data[0] if self.daily_data else None


@dataclass(frozen=True)
class CompanyOverview:
    """Fundamental metadata from the provider's OVERVIEW function."""
    symbol: str
    name: Optional[str] = None
    sector: Optional[str] = None
    pe_ratio: Optional[Decimal] = None
    market_capitalization: Optional[int] = None


@dataclass(frozen=True)
class SymbolMatch:
    """One result of a symbol search."""
    symbol: str
    name: str
    type: str
    region: str
    currency: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "type": self.type,
            "region": self.region,
            "currency": self.currency,
        }


@dataclass
class SourceHealth:
    """Health status of a data source."""
    status: SourceStatus
    last_check: datetime
    error_count: int = 0
    last_error: Optional[str] = None
    last_error_time: Optional[datetime] = None
    consecutive_failures: int = 0
    request_count: int = 0
    success_count: int = 0

    def is_healthy(self) -> bool:
        """Check if source is operational."""
        return self.status == SourceStatus.HEALTHY

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "last_check": self.last_check.isoformat(),
            "error_count": self.error_count,
            "last_error": self.last_error,
            "last_error_time": self.last_error_time.isoformat() if self.last_error_time else None,
            "consecutive_failures": self.consecutive_failures,
            "request_count": self.request_count,
            "success_count": self.success_count,
        }


@dataclass
class FetchRequest:
    """Parameters for a single provider call."""
    function: str
    params: dict[str, str] = field(default_factory=dict)
    symbol: Optional[str] = None
