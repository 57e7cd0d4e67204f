"""
Market Data Cache Model.

One row per (symbol, data_type) holding the provider's raw
response. Rows are upserted after each successful fetch and
never deleted; a row older than the TTL is read as a miss and
overwritten on the next fetch.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from storage.models.base import Base, JSONPayload


class StockDataCache(Base):
    """Cached raw provider payload."""

    __tablename__ = "stock_data_cache"
    __table_args__ = (
        UniqueConstraint("symbol", "data_type", name="uq_stock_data_cache_symbol_type"),
        Index("idx_stock_data_cache_symbol", "symbol"),
        Index("idx_stock_data_cache_fetched_at", "fetched_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    symbol: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="Upper-case ticker symbol",
    )
    data_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Payload shape, e.g. TIME_SERIES_DAILY",
    )
    data: Mapped[Any] = mapped_column(
        JSONPayload,
        nullable=False,
        comment="Raw provider response",
    )
    fetched_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        comment="When the payload was fetched from the provider (UTC)",
    )

    def __repr__(self) -> str:
        return (
            f"<StockDataCache(symbol={self.symbol}, data_type={self.data_type}, "
            f"fetched_at={self.fetched_at})>"
        )
