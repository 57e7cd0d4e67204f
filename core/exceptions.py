"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines the root of the exception hierarchy for the service.

- Every error raised by this codebase derives from InsightsError
- Errors carry context for logging and a readable message
  the API layer can hand straight to the user
- Package-specific errors live next to their package
  (data_sources.exceptions, storage.repositories.exceptions)

============================================================
EXCEPTION HIERARCHY
============================================================
InsightsError (base)
├── ValidationError              (core)
├── NotAuthenticatedError        (core)
├── ConfigurationError           (core)
│   └── MissingConfigError
├── DataSourceError              (data_sources.exceptions)
│   ├── TransportError
│   ├── ProviderRateLimitError
│   ├── ProviderDataError
│   ├── ParseError
│   └── DispatchTimeoutError
├── RepositoryException          (storage.repositories.exceptions)
│   ├── CacheReadError
│   ├── CacheWriteError
│   ├── DuplicateRecordError
│   ├── RecordNotFoundError
│   └── QueryError
└── InsufficientDataError        (insights.types)

============================================================
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


# ============================================================
# BASE EXCEPTION
# ============================================================

class InsightsError(Exception):
    """
    Base exception for all service errors.

    All exceptions carry:
    - message: user-readable description
    - context: key/value pairs for debugging
    - cause: the underlying exception, if any
    - timestamp: when the error occurred
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)

        self.message = message
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging/API responses."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def to_log_format(self) -> str:
        """Format exception for structured logging."""
        ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        base = f"{type(self).__name__}: {self.message}"
        return f"{base} | {ctx_str}" if ctx_str else base


# ============================================================
# INPUT ERRORS
# ============================================================

class ValidationError(InsightsError):
    """Input rejected before any I/O (e.g. malformed ticker symbol)."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if field_name:
            context["field"] = field_name
        if value is not None:
            context["value"] = str(value)[:100]

        super().__init__(message, context=context, **kwargs)
        self.field_name = field_name
        self.value = value


class NotAuthenticatedError(InsightsError):
    """No active user session for an operation that requires one."""

    def __init__(self, message: str = "User not authenticated", **kwargs):
        super().__init__(message, **kwargs)


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(InsightsError):
    """Error in configuration."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if config_key:
            context["config_key"] = config_key
        if actual_value is not None:
            context["actual_value"] = str(actual_value)[:100]

        super().__init__(message, context=context, **kwargs)
        self.config_key = config_key


class MissingConfigError(ConfigurationError):
    """Required configuration is missing."""

    def __init__(self, key: str, source: str = "environment"):
        super().__init__(
            message=(
                f"Missing required environment variable: {key}. "
                f"Please ensure {key} is set in your .env file."
            ),
            config_key=key,
            context={"source": source},
        )
