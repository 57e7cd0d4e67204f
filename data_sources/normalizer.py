"""
Data Sources - Time Series Normalizer.

============================================================
RESPONSIBILITY
============================================================
Converts a raw provider daily time-series payload into a
NormalizedSeries: DailyBar records, strictly descending by date.

Input shape (one entry per trading day):
    {
        "2024-01-05": {
            "1. open": "181.99",
            "2. high": "182.76",
            "3. low": "180.17",
            "4. close": "181.18",
            "5. volume": "62379661",
        },
        ...
    }

============================================================
PARSE FAILURE POLICY
============================================================
A single malformed entry fails the whole conversion with a
ParseError naming the date and field. Partial series are never
returned: a silently shortened series would shift every trend
window and 52-week range computed from it.

Rejected:
- unparseable date, or a date that appears twice
- missing field
- non-numeric, non-finite or non-positive price
- non-integral or negative volume

============================================================
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from data_sources.exceptions import ParseError
from data_sources.models import DailyBar, NormalizedSeries


DAILY_SERIES_KEY = "Time Series (Daily)"

PRICE_FIELDS = {
    "open": "1. open",
    "high": "2. high",
    "low": "3. low",
    "close": "4. close",
}
VOLUME_FIELD = "5. volume"


def normalize_time_series(time_series: Mapping[str, Mapping[str, Any]]) -> NormalizedSeries:
    """
    Normalize a date-keyed time series.

    Args:
        time_series: Mapping of ISO date string to the provider's
            price/volume record

    Returns:
        DailyBar list, most recent first

    Raises:
        ParseError: If any entry is malformed
    """
    if not isinstance(time_series, Mapping):
        raise ParseError(
            f"Time series must be a mapping, got {type(time_series).__name__}"
        )

    bars: dict[date, DailyBar] = {}
    for raw_date, values in time_series.items():
        bar = _parse_entry(raw_date, values)
        if bar.date in bars:
            raise ParseError(
                f"Duplicate trading day {bar.date.isoformat()} in time series",
                entry_date=str(raw_date),
            )
        bars[bar.date] = bar

    return sorted(bars.values(), key=lambda b: b.date, reverse=True)


def normalize_daily_payload(payload: Mapping[str, Any]) -> NormalizedSeries:
    """
    Extract and normalize the daily series from a full provider response.

    Raises:
        ParseError: If the payload has no daily series block
    """
    if not isinstance(payload, Mapping) or DAILY_SERIES_KEY not in payload:
        raise ParseError(f"Payload is missing '{DAILY_SERIES_KEY}'")
    return normalize_time_series(payload[DAILY_SERIES_KEY])


def _parse_entry(raw_date: Any, values: Any) -> DailyBar:
    try:
        day = date.fromisoformat(str(raw_date))
    except ValueError as e:
        raise ParseError(
            f"Invalid date {raw_date!r} in time series",
            entry_date=str(raw_date),
            raw_value=raw_date,
            original_error=e,
        ) from e

    if not isinstance(values, Mapping):
        raise ParseError(
            f"Entry for {raw_date} is not a record",
            entry_date=str(raw_date),
            raw_value=values,
        )

    prices = {
        name: _parse_price(raw_date, key, values)
        for name, key in PRICE_FIELDS.items()
    }
    volume = _parse_volume(raw_date, values)

    return DailyBar(date=day, volume=volume, **prices)


def _field(raw_date: Any, key: str, values: Mapping[str, Any]) -> Decimal:
    if key not in values:
        raise ParseError(
            f"Missing field '{key}' for {raw_date}",
            entry_date=str(raw_date),
            field_name=key,
        )
    raw = values[key]
    try:
        number = Decimal(str(raw).strip())
    except InvalidOperation as e:
        raise ParseError(
            f"Non-numeric value {raw!r} for '{key}' on {raw_date}",
            entry_date=str(raw_date),
            field_name=key,
            raw_value=raw,
            original_error=e,
        ) from e
    if not number.is_finite():
        raise ParseError(
            f"Non-finite value {raw!r} for '{key}' on {raw_date}",
            entry_date=str(raw_date),
            field_name=key,
            raw_value=raw,
        )
    return number


def _parse_price(raw_date: Any, key: str, values: Mapping[str, Any]) -> Decimal:
    price = _field(raw_date, key, values)
    if price <= 0:
        raise ParseError(
            f"Price must be positive for '{key}' on {raw_date}, got {price}",
            entry_date=str(raw_date),
            field_name=key,
            raw_value=values[key],
        )
    return price


def _parse_volume(raw_date: Any, values: Mapping[str, Any]) -> int:
    volume = _field(raw_date, VOLUME_FIELD, values)
    if volume < 0 or volume != volume.to_integral_value():
        raise ParseError(
            f"Volume must be a non-negative integer on {raw_date}, got {volume}",
            entry_date=str(raw_date),
            field_name=VOLUME_FIELD,
            raw_value=values[VOLUME_FIELD],
        )
    return int(volume)
