"""
Base Market Data Source - Abstract interface for stock data providers.

All providers MUST implement this interface so the fetcher and the
insights pipeline never depend on a specific vendor.

Features:
- Shared aiohttp session management
- HTTP/network failures mapped to TransportError
- Provider-specific body checks via validate_response()
- Health tracking
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional

import aiohttp

from core.constants import DEFAULT_HTTP_TIMEOUT_SECONDS
from data_sources.exceptions import DataSourceError, TransportError
from data_sources.models import (
    CompanyOverview,
    FetchRequest,
    SourceHealth,
    SourceStatus,
    SymbolMatch,
)


logger = logging.getLogger(__name__)


class BaseMarketDataSource(ABC):
    """
    Abstract base class for all stock market data sources.

    Each data source implementation must:
    1. Implement fetch_daily_series() - raw daily time-series payload
    2. Implement fetch_overview() - company fundamentals
    3. Implement search_symbols() - keyword symbol lookup
    4. Implement validate_response() - map body-level errors

    Calls are NOT rate limited here; route them through
    RateLimitedDispatcher.
    """

    DEGRADED_THRESHOLD = 3  # consecutive failures before degraded
    UNAVAILABLE_THRESHOLD = 5  # consecutive failures before unavailable

    def __init__(
        self,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

        self._health = SourceHealth(
            status=SourceStatus.UNKNOWN,
            last_check=datetime.now(timezone.utc),
        )

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this data source."""
        pass

    @property
    @abstractmethod
    def base_url(self) -> str:
        pass

    @abstractmethod
    async def fetch_daily_series(self, symbol: str) -> dict[str, Any]:
        """
        Fetch the raw daily time-series payload for a symbol.

        Raises:
            TransportError, ProviderRateLimitError, ProviderDataError
        """
        pass

    @abstractmethod
    async def fetch_overview(self, symbol: str) -> dict[str, Any]:
        """Fetch the raw company overview payload for a symbol."""
        pass

    @abstractmethod
    def parse_overview(self, symbol: str, payload: dict[str, Any]) -> CompanyOverview:
        """Convert a raw overview payload into a CompanyOverview."""
        pass

    @abstractmethod
    async def search_symbols(self, keywords: str) -> list[SymbolMatch]:
        """Search for symbols matching keywords."""
        pass

    @abstractmethod
    def validate_response(self, payload: Any, request: FetchRequest) -> None:
        """
        Raise the appropriate DataSourceError if the body signals failure.

        Called only for 2xx responses.
        """
        pass

    # =========================================================
    # REQUEST EXECUTION
    # =========================================================

    async def _execute(self, request: FetchRequest) -> dict[str, Any]:
        """Run one request, validate the body, and track health."""
        try:
            payload = await self._make_request(request)
            self.validate_response(payload, request)
        except DataSourceError as e:
            self._on_error(e)
            raise
        self._on_success()
        return payload

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers=self._get_default_headers(),
            )
            self._owns_session = True
        return self._session

    def _get_default_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": "StockInsights/1.0",
        }

    def _build_params(self, request: FetchRequest) -> dict[str, str]:
        return {"function": request.function, **request.params}

    async def _make_request(self, request: FetchRequest) -> Any:
        """
        GET the base URL with the request's query parameters.

        Raises:
            TransportError: Non-2xx status, network failure, timeout,
                or a body that is not JSON
        """
        session = await self._get_session()
        params = self._build_params(request)

        start_time = time.monotonic()
        try:
            async with session.get(self.base_url, params=params) as response:
                latency_ms = (time.monotonic() - start_time) * 1000

                if response.status < 200 or response.status >= 300:
                    body = await response.text()
                    raise TransportError(
                        message=f"HTTP error! status: {response.status}",
                        source_name=self.name,
                        symbol=request.symbol,
                        status_code=response.status,
                        response_body=body[:1000],
                    )

                data = await response.json(content_type=None)
                logger.debug(
                    f"[{self.name}] {request.function} completed in {latency_ms:.1f}ms"
                )
                return data

        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise TransportError(
                message=f"Connection error: {str(e) or type(e).__name__}",
                source_name=self.name,
                symbol=request.symbol,
                original_error=e,
            ) from e

    # =========================================================
    # HEALTH TRACKING
    # =========================================================

    def _on_success(self) -> None:
        self._health.request_count += 1
        self._health.success_count += 1
        self._health.consecutive_failures = 0
        self._health.last_check = datetime.now(timezone.utc)

        if self._health.status != SourceStatus.HEALTHY:
            self._health.status = SourceStatus.HEALTHY
            logger.info(f"[{self.name}] Recovered to HEALTHY status")

    def _on_error(self, error: DataSourceError) -> None:
        now = datetime.now(timezone.utc)
        self._health.request_count += 1
        self._health.error_count += 1
        self._health.consecutive_failures += 1
        self._health.last_error = str(error)
        self._health.last_error_time = now
        self._health.last_check = now

        if self._health.consecutive_failures >= self.UNAVAILABLE_THRESHOLD:
            if self._health.status != SourceStatus.UNAVAILABLE:
                self._health.status = SourceStatus.UNAVAILABLE
                logger.error(
                    f"[{self.name}] Marked UNAVAILABLE after "
                    f"{self._health.consecutive_failures} failures"
                )
        elif self._health.consecutive_failures >= self.DEGRADED_THRESHOLD:
            if self._health.status != SourceStatus.DEGRADED:
                self._health.status = SourceStatus.DEGRADED
                logger.warning(
                    f"[{self.name}] Marked DEGRADED after "
                    f"{self._health.consecutive_failures} failures"
                )

        logger.warning(f"[{self.name}] Request failed: {error}")

    def get_health(self) -> SourceHealth:
        """Get current health status."""
        return self._health

    # =========================================================
    # LIFECYCLE
    # =========================================================

    async def close(self) -> None:
        """Close resources."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "BaseMarketDataSource":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name}, status={self._health.status.value})>"
