"""
Watchlist Repository.

Per-user CRUD over user_stocks. Every query is scoped by user_id;
a user can never read or delete another user's rows.
"""

from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storage.models.watchlist import UserStock
from storage.repositories.base import BaseRepository
from storage.repositories.exceptions import RecordNotFoundError


class UserStockRepository(BaseRepository[UserStock]):
    """Repository for watchlist entries."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserStock, "UserStockRepository")

    async def list_for_user(self, user_id: UUID) -> List[UserStock]:
        """Entries for one user, most recently added first."""
        stmt = (
            select(UserStock)
            .where(UserStock.user_id == user_id)
            .order_by(UserStock.added_at.desc())
        )
        return await self._execute_query(stmt)

    async def add(self, user_id: UUID, symbol: str, added_at: datetime) -> UserStock:
        """
        Add a symbol to a user's watchlist.

        Raises:
            DuplicateRecordError: If the user already tracks the symbol
        """
        entry = UserStock(user_id=user_id, symbol=symbol, added_at=added_at)
        return await self._add(entry, context={"symbol": symbol})

    async def delete_for_user(self, user_id: UUID, stock_id: UUID) -> None:
        """
        Remove one entry owned by the user.

        Raises:
            RecordNotFoundError: If no such entry belongs to the user
        """
        stmt = (
            delete(UserStock)
            .where(UserStock.id == stock_id)
            .where(UserStock.user_id == user_id)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "delete", {"id": str(stock_id)})
            raise

        if result.rowcount == 0:
            raise RecordNotFoundError(
                repository_name=self._repository_name,
                record_id=stock_id,
            )
        self._logger.debug(f"Deleted watchlist entry {stock_id} for user {user_id}")
