"""
Watchlist - Service.

============================================================
RESPONSIBILITY
============================================================
Per-user list of tracked symbols.

- list_stocks(): newest first
- add_stock(): validates the symbol; a symbol already on the
  list raises DuplicateRecordError
- remove_stock(): only the owner's entry; anything else raises
  RecordNotFoundError

Every operation needs a user. It is taken from the explicit
user_id argument when given (HTTP requests), otherwise from
the signed-in AuthState user.

============================================================
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from core.clock import ClockProtocol, SystemClock, ensure_utc
from core.validation import normalize_symbol
from storage.database import Database
from storage.models.watchlist import UserStock
from storage.repositories.watchlist import UserStockRepository

from .auth import AuthState


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchlistEntry:
    """One symbol on a user's watchlist, detached from the ORM session."""
    id: UUID
    user_id: UUID
    symbol: str
    added_at: datetime

    @classmethod
    def from_row(cls, row: UserStock) -> "WatchlistEntry":
        return cls(
            id=row.id,
            user_id=row.user_id,
            symbol=row.symbol,
            added_at=ensure_utc(row.added_at),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "symbol": self.symbol,
            "added_at": self.added_at.isoformat(),
        }


class WatchlistService:
    """CRUD over the current user's watchlist."""

    def __init__(
        self,
        database: Database,
        auth: AuthState,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        self._database = database
        self._auth = auth
        self._clock = clock or SystemClock()

    def _resolve_user(self, user_id: Optional[UUID]) -> UUID:
        if user_id is not None:
            return user_id
        return self._auth.require_user().id

    async def list_stocks(self, user_id: Optional[UUID] = None) -> List[WatchlistEntry]:
        """
        Raises:
            NotAuthenticatedError: If no user is given or signed in
        """
        owner = self._resolve_user(user_id)
        async with self._database.session() as session:
            rows = await UserStockRepository(session).list_for_user(owner)
            return [WatchlistEntry.from_row(row) for row in rows]

    async def add_stock(self, symbol: str, user_id: Optional[UUID] = None) -> WatchlistEntry:
        """
        Raises:
            NotAuthenticatedError: If no user is given or signed in
            ValidationError: Malformed symbol
            DuplicateRecordError: Symbol already on the watchlist
        """
        owner = self._resolve_user(user_id)
        symbol = normalize_symbol(symbol)

        async with self._database.session() as session:
            row = await UserStockRepository(session).add(owner, symbol, self._clock.now())
            entry = WatchlistEntry.from_row(row)
            await session.commit()

        logger.info(f"Added {symbol} to watchlist of {owner}")
        return entry

    async def remove_stock(self, stock_id: UUID, user_id: Optional[UUID] = None) -> None:
        """
        Raises:
            NotAuthenticatedError: If no user is given or signed in
            RecordNotFoundError: No such entry for this user
        """
        owner = self._resolve_user(user_id)
        async with self._database.session() as session:
            await UserStockRepository(session).delete_for_user(owner, stock_id)
            await session.commit()

        logger.info(f"Removed watchlist entry {stock_id} of {owner}")
