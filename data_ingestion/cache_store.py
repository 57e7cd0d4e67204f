"""
Data Ingestion - Cache Store.

============================================================
RESPONSIBILITY
============================================================
Port between the cache-aside fetcher and persistence.

- get(): the raw payload for (symbol, data_type) if it was
  fetched within the TTL, otherwise None
- upsert(): record a freshly fetched payload

DatabaseCacheStore is the SQL implementation; each call runs in
its own short session and commits immediately.

============================================================
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from core.clock import ClockProtocol, SystemClock
from core.constants import CACHE_TTL_HOURS
from data_sources.models import DataType
from storage.database import Database
from storage.repositories.cache import StockDataCacheRepository
from storage.repositories.exceptions import CacheReadError, CacheWriteError


logger = logging.getLogger(__name__)


class CacheStore(ABC):
    """Abstract cache of raw provider payloads."""

    @abstractmethod
    async def get(self, symbol: str, data_type: DataType) -> Optional[Any]:
        """
        Return the fresh payload or None.

        Raises:
            CacheReadError: If the backing store cannot be read
        """
        pass

    @abstractmethod
    async def upsert(
        self,
        symbol: str,
        data_type: DataType,
        payload: Any,
        fetched_at: Optional[datetime] = None,
    ) -> None:
        """
        Insert or overwrite the payload for (symbol, data_type).

        Raises:
            CacheWriteError: If the backing store cannot be written
        """
        pass


class DatabaseCacheStore(CacheStore):
    """Cache store backed by the stock_data_cache table."""

    def __init__(
        self,
        database: Database,
        clock: Optional[ClockProtocol] = None,
        ttl_hours: float = CACHE_TTL_HOURS,
    ) -> None:
        if ttl_hours <= 0:
            raise ValueError("ttl_hours must be positive")
        self._database = database
        self._clock = clock or SystemClock()
        self._ttl = timedelta(hours=ttl_hours)

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    async def get(self, symbol: str, data_type: DataType) -> Optional[Any]:
        since = self._clock.now() - self._ttl
        try:
            async with self._database.session() as session:
                row = await StockDataCacheRepository(session).get_fresh(
                    symbol, data_type.value, since
                )
        except (SQLAlchemyError, OSError) as e:
            raise CacheReadError(symbol, data_type.value, str(e), cause=e) from e

        if row is None:
            return None
        return row.data

    async def upsert(
        self,
        symbol: str,
        data_type: DataType,
        payload: Any,
        fetched_at: Optional[datetime] = None,
    ) -> None:
        fetched_at = fetched_at or self._clock.now()
        try:
            async with self._database.session() as session:
                await StockDataCacheRepository(session).upsert(
                    symbol, data_type.value, payload, fetched_at
                )
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise CacheWriteError(symbol, data_type.value, str(e), cause=e) from e
