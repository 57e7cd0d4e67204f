"""
Repository Layer Exceptions.

============================================================
PURPOSE
============================================================
Defines repository-specific exceptions for proper error handling
and propagation. All database errors must be caught and wrapped
in these exceptions.

============================================================
USAGE
============================================================
Repositories catch SQLAlchemy/database exceptions and re-raise
as repository exceptions with context.

The cache-aside fetcher catches CacheReadError/CacheWriteError
and degrades (miss / skip write) instead of failing the read path.

============================================================
"""

from typing import Any, Optional

from core.exceptions import InsightsError


class RepositoryException(InsightsError):
    """
    Base exception for all repository operations.

    All repository-specific exceptions inherit from this class.
    Business layers can catch this for generic error handling.
    """

    def __init__(
        self,
        message: str,
        repository_name: str,
        operation: str,
        details: Optional[dict] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        self.repository_name = repository_name
        self.operation = operation
        self.details = details or {}
        super().__init__(
            message,
            context={"repository": repository_name, "operation": operation, **self.details},
            cause=cause,
        )

    def __str__(self) -> str:
        return f"[{self.repository_name}] {self.operation}: {self.message}"


class RecordNotFoundError(RepositoryException):
    """
    Raised when a requested record does not exist.

    Use for get/delete operations when the record is expected
    to exist but cannot be found.
    """

    def __init__(
        self,
        repository_name: str,
        record_id: Any,
        id_field: str = "id"
    ) -> None:
        super().__init__(
            message=f"Record with {id_field}={record_id} not found",
            repository_name=repository_name,
            operation="get",
            details={id_field: str(record_id)}
        )
        self.record_id = record_id
        self.id_field = id_field


class DuplicateRecordError(RepositoryException):
    """
    Raised when attempting to create a duplicate record.

    Use when unique constraint violations occur during insert.
    """

    def __init__(
        self,
        repository_name: str,
        constraint_field: str,
        value: Any
    ) -> None:
        super().__init__(
            message=f"Duplicate record: {constraint_field}={value} already exists",
            repository_name=repository_name,
            operation="create",
            details={"field": constraint_field, "value": str(value)}
        )
        self.constraint_field = constraint_field
        self.value = value


class QueryError(RepositoryException):
    """
    Raised when a query execution fails.

    Use for connection failures, syntax errors, invalid parameters, etc.
    """

    def __init__(
        self,
        repository_name: str,
        operation: str,
        original_error: str,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message=f"Query failed: {original_error}",
            repository_name=repository_name,
            operation=operation,
            details={"original_error": original_error},
            cause=cause,
        )


class CacheReadError(RepositoryException):
    """Reading the market data cache failed; callers treat it as a miss."""

    def __init__(
        self,
        symbol: str,
        data_type: str,
        original_error: str,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message=f"Failed to read cache for {symbol}/{data_type}: {original_error}",
            repository_name="StockDataCacheRepository",
            operation="get",
            details={"symbol": symbol, "data_type": data_type},
            cause=cause,
        )


class CacheWriteError(RepositoryException):
    """Writing the market data cache failed; logged, never surfaced to callers."""

    def __init__(
        self,
        symbol: str,
        data_type: str,
        original_error: str,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message=f"Failed to cache {symbol}/{data_type}: {original_error}",
            repository_name="StockDataCacheRepository",
            operation="upsert",
            details={"symbol": symbol, "data_type": data_type},
            cause=cause,
        )
