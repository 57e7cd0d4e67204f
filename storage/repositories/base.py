"""
Base Repository Class.

============================================================
PURPOSE
============================================================
Provides common functionality for all repositories including:
- Async session handling
- Error handling wrappers
- Logging setup

============================================================
USAGE
============================================================
All domain repositories inherit from BaseRepository.
The AsyncSession is injected via the constructor; the caller
owns the transaction and decides when to commit.

============================================================
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storage.models.base import Base
from storage.repositories.exceptions import (
    DuplicateRecordError,
    QueryError,
    RecordNotFoundError,
)


# Type variable for ORM model
T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    ============================================================
    RESPONSIBILITIES
    ============================================================
    - Wraps database errors in repository exceptions
    - Manages logging for all operations

    ============================================================
    USAGE
    ============================================================
    class MyRepository(BaseRepository[MyModel]):
        def __init__(self, session: AsyncSession):
            super().__init__(session, MyModel, "MyRepository")

    ============================================================
    """

    def __init__(
        self,
        session: AsyncSession,
        model_class: Type[T],
        repository_name: str
    ) -> None:
        """
        Initialize the repository.

        Args:
            session: SQLAlchemy async session (injected)
            model_class: The ORM model class this repository manages
            repository_name: Name for logging and error messages
        """
        self._session = session
        self._model_class = model_class
        self._repository_name = repository_name
        self._logger = logging.getLogger(f"repository.{repository_name}")

    @property
    def session(self) -> AsyncSession:
        return self._session

    @property
    def repository_name(self) -> str:
        return self._repository_name

    # =========================================================
    # PROTECTED HELPER METHODS
    # =========================================================

    def _handle_db_error(
        self,
        error: Exception,
        operation: str,
        context: Optional[dict] = None
    ) -> None:
        """
        Handle database errors by wrapping in repository exceptions.

        Raises:
            RepositoryException: Always raises appropriate exception
        """
        context = context or {}
        self._logger.error(
            f"Database error in {operation}: {error}",
            extra={"context": context},
        )

        if isinstance(error, IntegrityError):
            error_str = str(error).lower()
            if "duplicate" in error_str or "unique" in error_str:
                field, value = next(iter(context.items()), ("unknown", "unknown"))
                raise DuplicateRecordError(
                    repository_name=self._repository_name,
                    constraint_field=field,
                    value=value
                ) from error

        raise QueryError(
            repository_name=self._repository_name,
            operation=operation,
            original_error=str(error),
            cause=error,
        ) from error

    async def _add(self, entity: T, context: Optional[dict] = None) -> T:
        """Add an entity and flush so constraint violations surface here."""
        try:
            self._session.add(entity)
            await self._session.flush()
            self._logger.debug(f"Added entity: {entity}")
            return entity
        except SQLAlchemyError as e:
            await self._session.rollback()
            self._handle_db_error(e, "add", context or {"entity": str(entity)})
            raise

    async def _get_by_id(self, record_id: UUID) -> Optional[T]:
        try:
            return await self._session.get(self._model_class, record_id)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "get_by_id", {"id": str(record_id)})
            raise

    async def _get_by_id_or_raise(self, record_id: UUID, id_field: str = "id") -> T:
        """
        Get an entity by its primary key, raising if not found.

        Raises:
            RecordNotFoundError: If entity does not exist
        """
        entity = await self._get_by_id(record_id)
        if entity is None:
            raise RecordNotFoundError(
                repository_name=self._repository_name,
                record_id=record_id,
                id_field=id_field
            )
        return entity

    async def _execute_query(self, stmt: Any) -> List[T]:
        """Execute a select statement and return results."""
        try:
            result = await self._session.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self._handle_db_error(e, "query")
            raise

    async def _execute_scalar(self, stmt: Any) -> Optional[T]:
        """Execute a select statement and return single result."""
        try:
            result = await self._session.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self._handle_db_error(e, "query_scalar")
            raise
