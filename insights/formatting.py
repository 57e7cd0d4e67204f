"""
Display formatting for insight values.

Presentation only; the engine never calls these.
"""

from decimal import Decimal
from typing import Union

from .engine import round_to_two

Number = Union[Decimal, int, float, str]

_ABBREVIATIONS = (
    (Decimal("1000000000"), "B"),
    (Decimal("1000000"), "M"),
    (Decimal("1000"), "K"),
)


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_currency(value: Number) -> str:
    """USD with grouping and 2 decimals: 1234.5 -> '$1,234.50', -3.2 -> '-$3.20'."""
    amount = round_to_two(_to_decimal(value))
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percentage(value: Number) -> str:
    """Signed percentage: 0 -> '+0.00%', -1.25 -> '-1.25%'."""
    pct = round_to_two(_to_decimal(value))
    if pct.is_zero():
        pct = abs(pct)
    sign = "+" if pct >= 0 else ""
    return f"{sign}{pct:.2f}%"


def format_large_number(value: Number) -> str:
    """Abbreviate volumes: 1.5e9 -> '1.50B', 2.5e6 -> '2.50M', 1234 -> '1.23K', 999 -> '999'."""
    number = _to_decimal(value)
    for threshold, suffix in _ABBREVIATIONS:
        if number >= threshold:
            return f"{round_to_two(number / threshold):.2f}{suffix}"
    if number == number.to_integral_value():
        return f"{int(number):,}"
    return f"{number:,}"
