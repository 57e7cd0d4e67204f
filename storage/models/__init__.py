"""
Storage Models Package.

ORM models for the service database.

- StockDataCache (market_cache.py): raw provider payloads keyed by
  (symbol, data_type)
- UserStock (watchlist.py): per-user watchlist entries
"""

from storage.models.base import Base, JSONPayload
from storage.models.market_cache import StockDataCache
from storage.models.watchlist import UserStock

__all__ = [
    "Base",
    "JSONPayload",
    "StockDataCache",
    "UserStock",
]
