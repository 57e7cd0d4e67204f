"""
Market Data Cache Repository.

============================================================
PURPOSE
============================================================
Read and upsert raw provider payloads in stock_data_cache.

- get_fresh(): newest row for (symbol, data_type) fetched at or
  after a cutoff; None when absent or stale
- upsert(): insert or overwrite the single row for the key

============================================================
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storage.models.market_cache import StockDataCache
from storage.repositories.base import BaseRepository
from storage.repositories.exceptions import CacheReadError, CacheWriteError


_UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class StockDataCacheRepository(BaseRepository[StockDataCache]):
    """Repository for cached provider payloads."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, StockDataCache, "StockDataCacheRepository")

    async def get_fresh(
        self,
        symbol: str,
        data_type: str,
        since: datetime,
    ) -> Optional[StockDataCache]:
        """
        Get the cached row if it was fetched at or after `since`.

        Raises:
            CacheReadError: If the query fails
        """
        stmt = (
            select(StockDataCache)
            .where(StockDataCache.symbol == symbol)
            .where(StockDataCache.data_type == data_type)
            .where(StockDataCache.fetched_at >= since)
            .order_by(StockDataCache.fetched_at.desc())
            .limit(1)
        )
        try:
            result = await self._session.execute(stmt)
            return result.scalars().first()
        except SQLAlchemyError as e:
            raise CacheReadError(symbol, data_type, str(e), cause=e) from e

    async def upsert(
        self,
        symbol: str,
        data_type: str,
        data: Any,
        fetched_at: datetime,
    ) -> None:
        """
        Insert or replace the row for (symbol, data_type).

        Raises:
            CacheWriteError: If the statement fails
        """
        try:
            dialect = self._session.get_bind().dialect.name
            insert_fn = _UPSERT_DIALECTS.get(dialect)
            if insert_fn is not None:
                stmt = insert_fn(StockDataCache).values(
                    symbol=symbol,
                    data_type=data_type,
                    data=data,
                    fetched_at=fetched_at,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["symbol", "data_type"],
                    set_={"data": stmt.excluded.data, "fetched_at": stmt.excluded.fetched_at},
                )
                await self._session.execute(stmt)
            else:
                await self._upsert_generic(symbol, data_type, data, fetched_at)
            self._logger.debug(f"Cached {symbol}/{data_type} at {fetched_at.isoformat()}")
        except SQLAlchemyError as e:
            raise CacheWriteError(symbol, data_type, str(e), cause=e) from e

    async def _upsert_generic(
        self,
        symbol: str,
        data_type: str,
        data: Any,
        fetched_at: datetime,
    ) -> None:
        # Dialects without ON CONFLICT support
        result = await self._session.execute(
            update(StockDataCache)
            .where(StockDataCache.symbol == symbol)
            .where(StockDataCache.data_type == data_type)
            .values(data=data, fetched_at=fetched_at)
        )
        if result.rowcount == 0:
            self._session.add(StockDataCache(
                symbol=symbol,
                data_type=data_type,
                data=data,
                fetched_at=fetched_at,
            ))
            await self._session.flush()
