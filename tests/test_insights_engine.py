"""
Insight Engine Tests.

============================================================
PURPOSE
============================================================
Day change, trend classification around the dead zone, the
52-week range window and rounding with halves toward +infinity. Pure calculations,
no I/O.

============================================================
"""

from datetime import date
from decimal import Decimal

import pytest

from data_sources.models import CompanyOverview
from insights.config import InsightConfig
from insights.engine import InsightEngine, round_to_two
from insights.types import InsufficientDataError, TrendDirection


@pytest.fixture
def engine():
    return InsightEngine()


# ============================================================
# FULL CALCULATION
# ============================================================

class TestCalculateInsights:

    def test_ten_points(self, engine, make_series):
        closes = [110, 108, 107, 106, 105, 104, 103, 100, 99, 98]
        insights = engine.calculate_insights("AAPL", make_series(closes))

        assert insights.symbol == "AAPL"
        assert insights.latest_price == Decimal("110")
        assert insights.latest_date == date(2024, 1, 31)
        assert insights.volume == 1000
        assert insights.day_change.absolute == Decimal("2.00")
        assert insights.day_change.percentage == Decimal("1.85")
        assert insights.trend_7_day.direction == TrendDirection.UP
        assert insights.trend_7_day.percentage == Decimal("10.00")
        # Fewer than 31 points
        assert insights.trend_30_day.direction == TrendDirection.FLAT
        assert insights.trend_30_day.percentage == Decimal("0")
        # Fewer than 30 points
        assert insights.high_52_week is None
        assert insights.low_52_week is None
        assert insights.pe_ratio is None

    def test_single_point(self, engine, make_series):
        insights = engine.calculate_insights("AAPL", make_series([50]))

        assert insights.day_change.absolute == Decimal("0")
        assert insights.day_change.percentage == Decimal("0")
        assert insights.trend_7_day.direction == TrendDirection.FLAT

    def test_empty_series_raises(self, engine):
        with pytest.raises(InsufficientDataError) as exc_info:
            engine.calculate_insights("AAPL", [])

        assert exc_info.value.symbol == "AAPL"

    def test_pe_ratio_from_overview(self, engine, make_series):
        overview = CompanyOverview(symbol="AAPL", pe_ratio=Decimal("28.5"))

        insights = engine.calculate_insights("AAPL", make_series([101, 100]), overview)

        assert insights.pe_ratio == Decimal("28.5")

    def test_flat_series(self, engine, make_series):
        insights = engine.calculate_insights("KO", make_series([60] * 40))

        assert insights.day_change.absolute == Decimal("0")
        assert insights.trend_7_day.direction == TrendDirection.FLAT
        assert insights.trend_30_day.direction == TrendDirection.FLAT
        assert insights.trend_30_day.percentage == Decimal("0")
        assert insights.high_52_week == Decimal("60.00")
        assert insights.low_52_week == Decimal("60.00")

    def test_to_dict_uses_strings(self, engine, make_series):
        data = engine.calculate_insights("AAPL", make_series([110, 100])).to_dict()

        assert data["latest_price"] == "110"
        assert data["latest_date"] == "2024-01-31"
        assert data["day_change"] == {"absolute": "10.00", "percentage": "10.00"}
        assert data["trend_7_day"] == {"direction": "flat", "percentage": "0"}
        assert data["high_52_week"] is None


# ============================================================
# TRENDS
# ============================================================

class TestTrend:

    def test_needs_window_plus_one_points(self, engine, make_series):
        series = make_series([120, 100, 100, 100, 100])

        trend = engine.trend(series, 7)

        assert trend.direction == TrendDirection.FLAT
        assert trend.percentage == Decimal("0")

    def test_compares_against_close_window_days_back(self, engine, make_series):
        closes = [90] + [200] * 6 + [100]

        trend = engine.trend(make_series(closes), 7)

        assert trend.direction == TrendDirection.DOWN
        assert trend.percentage == Decimal("-10.00")

    @pytest.mark.parametrize("latest,direction", [
        ("100.50", TrendDirection.FLAT),
        ("100.51", TrendDirection.UP),
        ("99.50", TrendDirection.FLAT),
        ("99.49", TrendDirection.DOWN),
        ("100.00", TrendDirection.FLAT),
    ])
    def test_dead_zone_bounds_are_exclusive(self, engine, make_series, latest, direction):
        closes = [latest] + [100] * 7

        assert engine.trend(make_series(closes), 7).direction == direction

    def test_classified_before_rounding(self, engine):
        # 0.504 rounds to 0.50 for display but is outside the dead zone
        assert engine.classify(Decimal("0.504")) == TrendDirection.UP
        assert engine.classify(Decimal("-0.504")) == TrendDirection.DOWN

    def test_custom_dead_zone(self, make_series):
        engine = InsightEngine(InsightConfig(dead_zone_pct=Decimal("2")))
        closes = ["101.50"] + [100] * 7

        assert engine.trend(make_series(closes), 7).direction == TrendDirection.FLAT

    def test_thirty_day_window(self, engine, make_series):
        closes = [110] + [105] * 29 + [100]

        insights = engine.calculate_insights("AAPL", make_series(closes))

        assert insights.trend_30_day.direction == TrendDirection.UP
        assert insights.trend_30_day.percentage == Decimal("10.00")


# ============================================================
# 52-WEEK RANGE
# ============================================================

class TestRange52Week:

    def test_twenty_nine_points_has_no_range(self, engine, make_series):
        assert engine.range_52_week(make_series([100] * 29)) == (None, None)

    def test_thirty_points_has_range(self, engine, make_series):
        closes = [100] * 30
        highs = [101] * 30
        lows = [99] * 30
        highs[12] = "130.456"
        lows[29] = "80.005"

        high, low = engine.range_52_week(make_series(closes, highs, lows))

        assert high == Decimal("130.46")
        assert low == Decimal("80.01")

    def test_only_last_252_points_count(self, engine, make_series):
        closes = [100] * 300
        highs = [105] * 300
        lows = [95] * 300
        highs[260] = 500
        lows[251] = 90
        lows[252] = 1

        high, low = engine.range_52_week(make_series(closes, highs, lows))

        assert high == Decimal("105.00")
        assert low == Decimal("90.00")


# ============================================================
# ROUNDING
# ============================================================

class TestRounding:

    @pytest.mark.parametrize("raw,expected", [
        ("1.005", "1.01"),
        ("1.004", "1.00"),
        ("2.675", "2.68"),
        ("-1.005", "-1.00"),
        ("-1.006", "-1.01"),
        ("-0.125", "-0.12"),
        ("0.125", "0.13"),
    ])
    def test_halves_round_toward_positive_infinity(self, raw, expected):
        assert round_to_two(Decimal(raw)) == Decimal(expected)

    def test_day_change_rounds_half_up(self, engine, make_series):
        change = engine.day_change(make_series(["100.005", "100"]))

        assert change.absolute == Decimal("0.01")
        assert change.percentage == Decimal("0.01")

    def test_negative_day_change_rounds_half_toward_positive_infinity(self, engine, make_series):
        change = engine.day_change(make_series(["100", "100.125"]))

        assert change.absolute == Decimal("-0.12")
        assert change.percentage == Decimal("-0.12")


class TestConfig:

    @pytest.mark.parametrize("kwargs", [
        {"dead_zone_pct": Decimal("-0.1")},
        {"trend_windows": (7,)},
        {"trend_windows": (0, 30)},
        {"min_range_points": 0},
        {"min_range_points": 300},
    ])
    def test_invalid_config_rejected(self, kwargs):
        with pytest.raises(ValueError):
            InsightConfig(**kwargs)

    def test_dead_zone_coerced_to_decimal(self):
        assert InsightConfig(dead_zone_pct="0.75").dead_zone_pct == Decimal("0.75")
