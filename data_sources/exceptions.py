"""
Data Source Exceptions - Exception hierarchy for the market data provider.

Each provider outcome maps to a distinguishable failure kind:
- TransportError: non-2xx HTTP status or network failure
- ProviderRateLimitError: provider's soft "Note" quota message
- ProviderDataError: structured error or missing time series (unknown symbol)
- ParseError: malformed numeric/date field in a payload
- DispatchTimeoutError: job exceeded the dispatcher's per-job timeout
"""

from typing import Any, Optional

from core.exceptions import InsightsError


class DataSourceError(InsightsError):
    """Base exception for all data source errors."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        symbol: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if source_name:
            context["source_name"] = source_name
        if symbol:
            context["symbol"] = symbol
        super().__init__(message, context=context, cause=original_error)
        self.source_name = source_name
        self.symbol = symbol
        self.original_error = original_error

    def __str__(self) -> str:
        parts = [self.message]
        if self.source_name:
            parts.append(f"[source={self.source_name}]")
        if self.original_error:
            parts.append(f"(caused by: {self.original_error})")
        return " ".join(parts)


class TransportError(DataSourceError):
    """Non-2xx HTTP status or network failure reaching the provider."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        symbol: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if status_code is not None:
            context["status_code"] = status_code
        super().__init__(message, source_name, symbol, original_error, context)
        self.status_code = status_code
        self.response_body = response_body


class ProviderRateLimitError(DataSourceError):
    """
    Provider signalled quota exhaustion in the response body.

    Distinct from TransportError so callers can present a specific
    wait-and-retry message.
    """

    def __init__(
        self,
        message: str = (
            "API rate limit exceeded. Please wait a moment and try again. "
            "Free tier: 5 calls/minute, 500 calls/day."
        ),
        source_name: Optional[str] = None,
        symbol: Optional[str] = None,
        provider_note: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, source_name, symbol, context=context)
        self.provider_note = provider_note


class ProviderDataError(DataSourceError):
    """Response lacks the expected data (commonly: unknown symbol)."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        symbol: Optional[str] = None,
        provider_message: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, source_name, symbol, context=context)
        self.provider_message = provider_message


class ParseError(DataSourceError):
    """Malformed field in a cached or freshly fetched payload."""

    def __init__(
        self,
        message: str,
        entry_date: Optional[str] = None,
        field_name: Optional[str] = None,
        raw_value: Optional[Any] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if entry_date is not None:
            context["entry_date"] = entry_date
        if field_name is not None:
            context["field_name"] = field_name
        if raw_value is not None:
            context["raw_value"] = str(raw_value)[:100]
        super().__init__(message, original_error=original_error, context=context)
        self.entry_date = entry_date
        self.field_name = field_name
        self.raw_value = raw_value


class DispatchTimeoutError(DataSourceError):
    """A queued job did not complete within the dispatcher's per-job timeout."""

    def __init__(self, timeout_seconds: float, context: Optional[dict[str, Any]] = None) -> None:
        context = context or {}
        context["timeout_seconds"] = timeout_seconds
        super().__init__(
            f"Provider request timed out after {timeout_seconds:g}s",
            context=context,
        )
        self.timeout_seconds = timeout_seconds
