"""
Watchlist Model.

Which symbols each user tracks. A user cannot add the same
symbol twice.
"""

import uuid
from datetime import datetime

from sqlalchemy import Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from storage.models.base import Base


class UserStock(Base):
    """One symbol on one user's watchlist."""

    __tablename__ = "user_stocks"
    __table_args__ = (
        UniqueConstraint("user_id", "symbol", name="uq_user_stocks_user_symbol"),
        Index("idx_user_stocks_user_id", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(nullable=False)
    symbol: Mapped[str] = mapped_column(String(10), nullable=False)
    added_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "symbol": self.symbol,
            "added_at": self.added_at.isoformat() if self.added_at else None,
        }

    def __repr__(self) -> str:
        return f"<UserStock(user_id={self.user_id}, symbol={self.symbol})>"
