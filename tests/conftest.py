"""
Shared fixtures.

- clock: MockClock pinned to 2024-02-01 12:00 UTC (sleep is virtual)
- make_payload / make_series: provider payload and DailyBar builders
- fake_source: in-process market data source with call counters
- database: file-backed SQLite database with the schema created
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import pytest
import pytest_asyncio

from core.clock import MockClock
from core.config import DatabaseConfig
from data_sources.base import BaseMarketDataSource
from data_sources.models import CompanyOverview, DailyBar, FetchRequest, SymbolMatch
from storage.database import Database


START_TIME = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)
LATEST_DAY = date(2024, 1, 31)


def build_daily_payload(
    closes: Sequence[Any],
    symbol: str = "AAPL",
    latest: date = LATEST_DAY,
    volume: int = 1_000_000,
) -> Dict[str, Any]:
    """Provider-shaped TIME_SERIES_DAILY payload, closes newest first."""
    series = {}
    for offset, close in enumerate(closes):
        price = Decimal(str(close))
        series[(latest - timedelta(days=offset)).isoformat()] = {
            "1. open": str(price),
            "2. high": str(price + 1),
            "3. low": str(price - Decimal("0.5")),
            "4. close": str(price),
            "5. volume": str(volume),
        }
    return {
        "Meta Data": {
            "1. Information": "Daily Prices (open, high, low, close) and Volumes",
            "2. Symbol": symbol,
            "3. Last Refreshed": latest.isoformat(),
            "4. Output Size": "Compact",
            "5. Time Zone": "US/Eastern",
        },
        "Time Series (Daily)": series,
    }


def build_series(
    closes: Sequence[Any],
    highs: Optional[Sequence[Any]] = None,
    lows: Optional[Sequence[Any]] = None,
    latest: date = LATEST_DAY,
) -> List[DailyBar]:
    """DailyBar list, newest first."""
    bars = []
    for offset, close in enumerate(closes):
        price = Decimal(str(close))
        bars.append(DailyBar(
            date=latest - timedelta(days=offset),
            open=price,
            high=Decimal(str(highs[offset])) if highs else price,
            low=Decimal(str(lows[offset])) if lows else price,
            close=price,
            volume=1000 + offset,
        ))
    return bars


class FakeMarketDataSource(BaseMarketDataSource):
    """
    Market data source that never touches the network.

    Set daily_error / overview_error / search_error to make the
    corresponding call fail.
    """

    def __init__(self, closes: Optional[Sequence[Any]] = None) -> None:
        super().__init__()
        self.closes = list(closes) if closes is not None else [101 + i % 3 for i in range(40)]
        self.daily_calls: List[str] = []
        self.overview_calls: List[str] = []
        self.search_calls: List[str] = []
        self.daily_error: Optional[Exception] = None
        self.overview_error: Optional[Exception] = None
        self.search_error: Optional[Exception] = None
        self.pe_ratio = "28.5"

    @property
    def name(self) -> str:
        return "fake"

    @property
    def base_url(self) -> str:
        return "http://fake.invalid/query"

    async def fetch_daily_series(self, symbol: str) -> Dict[str, Any]:
        self.daily_calls.append(symbol)
        if self.daily_error is not None:
            raise self.daily_error
        return build_daily_payload(self.closes, symbol=symbol)

    async def fetch_overview(self, symbol: str) -> Dict[str, Any]:
        self.overview_calls.append(symbol)
        if self.overview_error is not None:
            raise self.overview_error
        return {"Symbol": symbol, "Name": f"{symbol} Inc", "PERatio": self.pe_ratio}

    def parse_overview(self, symbol: str, payload: Dict[str, Any]) -> CompanyOverview:
        pe = payload.get("PERatio")
        return CompanyOverview(
            symbol=payload.get("Symbol", symbol),
            name=payload.get("Name"),
            pe_ratio=Decimal(pe) if pe not in (None, "None") else None,
        )

    async def search_symbols(self, keywords: str) -> List[SymbolMatch]:
        self.search_calls.append(keywords)
        if self.search_error is not None:
            raise self.search_error
        return [SymbolMatch(
            symbol="AAPL",
            name="Apple Inc",
            type="Equity",
            region="United States",
            currency="USD",
        )]

    def validate_response(self, payload: Any, request: FetchRequest) -> None:
        pass


@pytest.fixture
def clock():
    return MockClock(START_TIME)


@pytest.fixture
def make_payload():
    return build_daily_payload


@pytest.fixture
def make_series():
    return build_series


@pytest.fixture
def fake_source():
    return FakeMarketDataSource()


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'insights.db'}"


@pytest_asyncio.fixture
async def database(sqlite_url):
    db = Database(DatabaseConfig(url=sqlite_url))
    await db.connect()
    await db.create_all()
    yield db
    await db.disconnect()
