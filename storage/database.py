"""
Storage - Database.

============================================================
RESPONSIBILITY
============================================================
Manages database connections and sessions.

- Owns the async engine and session factory
- Hands out sessions through an async context manager
- Creates the schema on startup
- Reports connectivity for the health endpoint

============================================================
DESIGN PRINCIPLES
============================================================
- Async by default (asyncpg on PostgreSQL, aiosqlite locally/tests)
- One Database per process, created by the service container
- Sessions never outlive a single unit of work

============================================================
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from core.config import DatabaseConfig
from core.exceptions import ConfigurationError
from storage.models.base import Base


logger = logging.getLogger(__name__)


class Database:
    """
    Async database handle.

    Usage:
        db = Database(DatabaseConfig(url="sqlite+aiosqlite:///./local.db"))
        await db.connect()
        await db.create_all()
        async with db.session() as session:
            ...
        await db.disconnect()
    """

    def __init__(self, config: Optional[DatabaseConfig] = None) -> None:
        self._config = config or DatabaseConfig()
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def get_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise ConfigurationError(
                "Database is not connected; call connect() first",
                config_key="DATABASE_URL",
            )
        return self._engine

    async def connect(self) -> None:
        """Create the engine and session factory. Idempotent."""
        if self._engine is not None:
            return

        engine_kwargs = {"echo": self._config.echo, "future": True}
        if self._config.url.startswith("sqlite") and ":memory:" in self._config.url:
            # One shared connection so every session sees the same in-memory DB
            engine_kwargs.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })
        elif not self._config.url.startswith("sqlite"):
            engine_kwargs["pool_pre_ping"] = True

        self._engine = create_async_engine(self._config.url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self._engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )
        logger.info(f"Database engine created: {self._safe_url()}")

    async def create_all(self) -> None:
        """Create all tables known to the ORM metadata."""
        async with self.get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session; rolls back if the block raises.

        Callers commit explicitly.
        """
        if self._session_factory is None:
            await self.connect()
        async with self._session_factory() as session:
            try:
                yield session
            except BaseException:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """Return True if a trivial query succeeds."""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    async def disconnect(self) -> None:
        """Dispose of the engine and its pool."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None

    def _safe_url(self) -> str:
        # Hide credentials
        return self._config.url.split("@")[-1]

    def __repr__(self) -> str:
        return f"Database(url={self._safe_url()!r}, connected={self.is_connected})"
