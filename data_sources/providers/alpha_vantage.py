"""
Alpha Vantage Market Data Source - Public REST API adapter.

Implements stock data fetching from https://www.alphavantage.co/query.
Requires an API key.

Functions used:
- TIME_SERIES_DAILY (outputsize=compact, last ~100 trading days)
- OVERVIEW (company fundamentals, P/E ratio)
- SYMBOL_SEARCH (keyword lookup)

Rate limits (free tier):
- 5 requests/minute, 500 requests/day
- Exhaustion is reported in a 200 response body ("Note"), not via 429
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import aiohttp

from core.constants import ALPHA_VANTAGE_BASE_URL, DEFAULT_HTTP_TIMEOUT_SECONDS
from data_sources.base import BaseMarketDataSource
from data_sources.exceptions import ProviderDataError, ProviderRateLimitError
from data_sources.models import (
    CompanyOverview,
    DataType,
    FetchRequest,
    SymbolMatch,
)
from data_sources.normalizer import DAILY_SERIES_KEY


logger = logging.getLogger(__name__)

SYMBOL_SEARCH = "SYMBOL_SEARCH"

ERROR_MESSAGE_KEY = "Error Message"
NOTE_KEY = "Note"
INFORMATION_KEY = "Information"


class AlphaVantageSource(BaseMarketDataSource):
    """
    Alpha Vantage stock data source.

    Response classification (2xx bodies), checked in this order:
    - "Error Message"            -> ProviderDataError
    - "Note"                     -> ProviderRateLimitError
    - "Information" about limits -> ProviderRateLimitError
    - "Information" otherwise    -> ProviderDataError (bad key, premium endpoint)
    - daily series block missing -> ProviderDataError (unknown symbol)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = ALPHA_VANTAGE_BASE_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        super().__init__(timeout, session)
        if not api_key:
            raise ValueError("api_key is required")
        self._api_key = api_key
        self._base_url = base_url

    @property
    def name(self) -> str:
        return "alpha_vantage"

    @property
    def base_url(self) -> str:
        return self._base_url

    def _build_params(self, request: FetchRequest) -> dict[str, str]:
        params = super()._build_params(request)
        params["apikey"] = self._api_key
        return params

    # =========================================================
    # FETCHES
    # =========================================================

    async def fetch_daily_series(self, symbol: str) -> dict[str, Any]:
        """Fetch the compact daily series (raw payload, cacheable as-is)."""
        request = FetchRequest(
            function=DataType.TIME_SERIES_DAILY.value,
            params={"symbol": symbol.upper(), "outputsize": "compact"},
            symbol=symbol.upper(),
        )
        return await self._execute(request)

    async def fetch_overview(self, symbol: str) -> dict[str, Any]:
        """Fetch company fundamentals (raw payload, cacheable as-is)."""
        request = FetchRequest(
            function=DataType.OVERVIEW.value,
            params={"symbol": symbol.upper()},
            symbol=symbol.upper(),
        )
        return await self._execute(request)

    async def search_symbols(self, keywords: str) -> list[SymbolMatch]:
        """Search for symbols; a blank query returns [] without a request."""
        if not keywords or not keywords.strip():
            return []

        request = FetchRequest(
            function=SYMBOL_SEARCH,
            params={"keywords": keywords.strip()},
        )
        payload = await self._execute(request)

        return [
            SymbolMatch(
                symbol=match.get("1. symbol", ""),
                name=match.get("2. name", ""),
                type=match.get("3. type", ""),
                region=match.get("4. region", ""),
                currency=match.get("8. currency", ""),
            )
            for match in payload.get("bestMatches") or []
        ]

    # =========================================================
    # RESPONSE HANDLING
    # =========================================================

    def validate_response(self, payload: Any, request: FetchRequest) -> None:
        symbol = request.symbol
        if not isinstance(payload, dict):
            raise ProviderDataError(
                f"Unexpected response type {type(payload).__name__}",
                source_name=self.name,
                symbol=symbol,
            )

        if ERROR_MESSAGE_KEY in payload:
            raise ProviderDataError(
                f"Alpha Vantage API error: {payload[ERROR_MESSAGE_KEY]}",
                source_name=self.name,
                symbol=symbol,
                provider_message=str(payload[ERROR_MESSAGE_KEY]),
            )

        if NOTE_KEY in payload:
            raise ProviderRateLimitError(
                source_name=self.name,
                symbol=symbol,
                provider_note=str(payload[NOTE_KEY]),
            )

        if INFORMATION_KEY in payload:
            info = str(payload[INFORMATION_KEY])
            if "rate limit" in info.lower():
                raise ProviderRateLimitError(
                    source_name=self.name,
                    symbol=symbol,
                    provider_note=info,
                )
            raise ProviderDataError(
                f"Alpha Vantage API error: {info}",
                source_name=self.name,
                symbol=symbol,
                provider_message=info,
            )

        if request.function == DataType.TIME_SERIES_DAILY.value:
            if not payload.get(DAILY_SERIES_KEY):
                raise ProviderDataError(
                    f"Invalid symbol or no data available for {symbol}",
                    source_name=self.name,
                    symbol=symbol,
                )
        elif request.function == DataType.OVERVIEW.value:
            if not payload.get("Symbol"):
                raise ProviderDataError(
                    f"No company overview available for {symbol}",
                    source_name=self.name,
                    symbol=symbol,
                )

    def parse_overview(self, symbol: str, payload: dict[str, Any]) -> CompanyOverview:
        return CompanyOverview(
            symbol=payload.get("Symbol") or symbol,
            name=payload.get("Name") or None,
            sector=payload.get("Sector") or None,
            pe_ratio=_optional_decimal(payload.get("PERatio")),
            market_capitalization=_optional_int(payload.get("MarketCapitalization")),
        )


def _optional_decimal(raw: Any) -> Optional[Decimal]:
    # The provider reports missing figures as the string "None" or "-"
    if raw is None or str(raw).strip() in ("", "None", "-"):
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        logger.debug(f"Ignoring non-numeric overview value {raw!r}")
        return None
    return value if value.is_finite() else None


def _optional_int(raw: Any) -> Optional[int]:
    value = _optional_decimal(raw)
    return int(value) if value is not None else None
