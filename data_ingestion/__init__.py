"""
Data Ingestion Module.

============================================================
RESPONSIBILITY
============================================================
Gets provider data to callers through the cache.

- cache_store: port + SQL implementation of the payload cache
- fetcher: cache-aside reads routed through the rate-limited dispatcher
- search: debounced type-ahead symbol search

============================================================
"""

from data_ingestion.cache_store import CacheStore, DatabaseCacheStore
from data_ingestion.fetcher import CacheAsideFetcher
from data_ingestion.search import DebouncedSymbolSearch

__all__ = [
    "CacheStore",
    "DatabaseCacheStore",
    "CacheAsideFetcher",
    "DebouncedSymbolSearch",
]
