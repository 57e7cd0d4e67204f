"""
Dashboard Package.

HTTP JSON interface to the watchlist and insights.

Modules:
- api: application factory and error mapping
- routers/: health, stocks (insights, search), watchlist
- schemas: pydantic response models
"""

from .api import create_app

__all__ = ["create_app"]
