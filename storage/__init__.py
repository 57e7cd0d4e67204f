"""
Storage Module.

============================================================
RESPONSIBILITY
============================================================
Persistence for the market data cache and user watchlists.

- database: async engine/session lifecycle
- models: ORM tables (stock_data_cache, user_stocks)
- repositories: data access with wrapped errors

============================================================
"""

from storage.database import Database

__all__ = ["Database"]
