"""
Base ORM Model and Mixins.

============================================================
PURPOSE
============================================================
Provides the declarative base and common mixins used by all
ORM models of the service.

============================================================
COMPONENTS
============================================================
- Base: SQLAlchemy declarative base for all models
- JSONPayload: JSON column type, JSONB on PostgreSQL

============================================================
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase


# Raw provider responses; JSONB on PostgreSQL, generic JSON elsewhere (SQLite in tests)
JSONPayload = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """
    Declarative base for all ORM models.

    All models inherit from this base. This provides a common
    foundation for table creation and relationship mapping.
    """

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }
