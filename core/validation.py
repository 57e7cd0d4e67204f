"""
Core Module - Symbol Validation.

Ticker symbols are accepted as 1-10 characters of upper-case letters,
digits and '.' (composite tickers such as BRK.A), after stripping
surrounding whitespace and upper-casing.
Validation runs at the boundary, before anything is queued.
"""

from typing import Any

from .constants import SYMBOL_PATTERN
from .exceptions import ValidationError


def is_valid_symbol(raw: Any) -> bool:
    """Same rule as normalize_symbol(), without raising."""
    try:
        normalize_symbol(raw)
    except ValidationError:
        return False
    return True


def normalize_symbol(raw: Any) -> str:
    """
    Upper-case and validate a ticker symbol.

    Args:
        raw: User-supplied symbol

    Returns:
        The canonical (stripped, upper-case) symbol

    Raises:
        ValidationError: If the symbol does not match ^[A-Z0-9.]{1,10}$
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError(
            "Symbol must be a non-empty string",
            field_name="symbol",
            value=raw,
        )

    symbol = raw.strip().upper()
    if SYMBOL_PATTERN.fullmatch(symbol) is None:
        raise ValidationError(
            f"Invalid symbol format: {raw!r}. "
            "Use 1-10 letters, digits or '.' (e.g. AAPL, BRK.A)",
            field_name="symbol",
            value=raw,
        )
    return symbol
