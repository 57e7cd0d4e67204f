"""
Watchlist Module.

- auth: current-user state with subscribe/dispose notifications
- service: per-user watchlist CRUD
"""

from .auth import AuthState, User
from .service import WatchlistEntry, WatchlistService

__all__ = [
    "AuthState",
    "User",
    "WatchlistEntry",
    "WatchlistService",
]
