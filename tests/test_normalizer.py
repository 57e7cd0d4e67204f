"""
Time Series Normalizer Tests.
"""

from datetime import date
from decimal import Decimal

import pytest

from data_sources.exceptions import ParseError
from data_sources.normalizer import normalize_daily_payload, normalize_time_series


def entry(close="100.00", volume="1000", **overrides):
    values = {
        "1. open": "99.50",
        "2. high": "101.25",
        "3. low": "98.75",
        "4. close": close,
        "5. volume": volume,
    }
    values.update(overrides)
    return values


class TestOrdering:

    def test_sorted_descending_regardless_of_input_order(self):
        series = normalize_time_series({
            "2024-01-03": entry("103"),
            "2024-01-05": entry("105"),
            "2024-01-04": entry("104"),
        })

        assert [bar.date for bar in series] == [
            date(2024, 1, 5),
            date(2024, 1, 4),
            date(2024, 1, 3),
        ]
        assert series[0].close == Decimal("105")

    def test_fields_parsed_exactly(self):
        (bar,) = normalize_time_series({"2024-01-05": entry("181.18", "62379661")})

        assert bar.open == Decimal("99.50")
        assert bar.high == Decimal("101.25")
        assert bar.low == Decimal("98.75")
        assert bar.close == Decimal("181.18")
        assert bar.volume == 62379661

    def test_empty_series(self):
        assert normalize_time_series({}) == []

    def test_full_payload(self, make_payload):
        series = normalize_daily_payload(make_payload([3, 2, 1]))

        assert [bar.close for bar in series] == [Decimal("3"), Decimal("2"), Decimal("1")]


class TestParseFailures:
    """A single bad entry fails the whole conversion."""

    def test_non_numeric_price(self):
        with pytest.raises(ParseError) as exc_info:
            normalize_time_series({
                "2024-01-05": entry(),
                "2024-01-04": entry(close="abc"),
            })

        assert exc_info.value.entry_date == "2024-01-04"
        assert exc_info.value.field_name == "4. close"

    @pytest.mark.parametrize("close", ["0", "-1.5", "NaN", "Infinity"])
    def test_non_positive_or_non_finite_price(self, close):
        with pytest.raises(ParseError):
            normalize_time_series({"2024-01-05": entry(close=close)})

    @pytest.mark.parametrize("volume", ["-1", "12.5", "lots"])
    def test_bad_volume(self, volume):
        with pytest.raises(ParseError) as exc_info:
            normalize_time_series({"2024-01-05": entry(volume=volume)})

        assert exc_info.value.field_name == "5. volume"

    def test_zero_volume_allowed(self):
        (bar,) = normalize_time_series({"2024-01-05": entry(volume="0")})

        assert bar.volume == 0

    def test_missing_field(self):
        values = entry()
        del values["2. high"]

        with pytest.raises(ParseError) as exc_info:
            normalize_time_series({"2024-01-05": values})

        assert exc_info.value.field_name == "2. high"

    def test_invalid_date(self):
        with pytest.raises(ParseError) as exc_info:
            normalize_time_series({"not-a-date": entry()})

        assert exc_info.value.entry_date == "not-a-date"

    def test_payload_without_series(self):
        with pytest.raises(ParseError):
            normalize_daily_payload({"Meta Data": {}})
