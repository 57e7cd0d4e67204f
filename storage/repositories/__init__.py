"""
Repository Layer.

Data access for the service database. Repositories take an
AsyncSession; callers own the transaction.
"""

from storage.repositories.base import BaseRepository
from storage.repositories.cache import StockDataCacheRepository
from storage.repositories.exceptions import (
    CacheReadError,
    CacheWriteError,
    DuplicateRecordError,
    QueryError,
    RecordNotFoundError,
    RepositoryException,
)
from storage.repositories.watchlist import UserStockRepository

__all__ = [
    "BaseRepository",
    "StockDataCacheRepository",
    "UserStockRepository",
    "RepositoryException",
    "RecordNotFoundError",
    "DuplicateRecordError",
    "QueryError",
    "CacheReadError",
    "CacheWriteError",
]
