"""
MetricMath Unit Tests
=====================
Tests for threshold, weight and percentage calculations.
"""

from decimal import Decimal

import pytest

from netstatus.config import StatusConfig
from netstatus.metrics import MetricMath, parse_count, percent_of, sum_parsed_counts

ONLINE = {"A": 1000, "B": 2000}


@pytest.fixture
def math(unit_config):
    return MetricMath(unit_config)


class TestParsing:
    """Block count parsing and summing."""

    def test_non_numeric_count_is_zero(self):
        """Scenario: send 10, receive 5, change 'x' totals 15."""
        counts = {"send": "10", "receive": "5", "change": "x"}
        assert sum_parsed_counts(counts) == 15

    def test_leading_digits_are_used(self):
        assert parse_count("12abc") == 12
        assert parse_count("  7") == 7
        assert parse_count("-3") == -3

    def test_other_types(self):
        assert parse_count(42) == 42
        assert parse_count(None) == 0
        assert parse_count(True) == 0
        assert parse_count("") == 0

    def test_empty_map(self):
        assert sum_parsed_counts({}) == 0

    def test_count_too_long_to_convert_is_zero(self):
        counts = {"send": "9" * 5000, "receive": "5"}
        assert sum_parsed_counts(counts) == 5


class TestPercentOf:
    """Percentages and the zero-denominator sentinel."""

    def test_whole_of_itself_is_hundred(self):
        for x in (1, 3000, Decimal("0.5"), Decimal("133248297.123")):
            assert percent_of(x, x) == 100

    def test_zero_over_zero_is_sentinel(self):
        assert percent_of(0, 0) is None
        assert percent_of(Decimal(5), Decimal(0)) is None

    def test_fraction(self):
        assert percent_of(1, 4) == Decimal(25)


class TestMetricMath:
    """Rebroadcast threshold, eligibility and weights."""

    def test_rebroadcast_scenario(self, math):
        """max 10000, genesis 1000 -> threshold 9; A and B both eligible."""
        threshold = math.rebroadcast_threshold(1000)

        assert threshold == Decimal(9)
        assert math.rebroadcast_eligible(ONLINE, threshold) == ONLINE
        assert math.rebroadcast_weight(ONLINE, threshold) == 3000
        assert math.total_weight(ONLINE) == 3000
        assert math.online_rebroadcast_percent(ONLINE, 1000) == 100

    def test_empty_online_set(self, math):
        """Empty online set has zero weight and an N/A rebroadcast share."""
        assert math.total_weight({}) == 0
        threshold = math.rebroadcast_threshold(1000)
        assert math.rebroadcast_weight({}, threshold) == 0
        assert math.online_rebroadcast_percent({}, 1000) is None
        assert math.official_online_percent({"A": 5}, {}) is None

    def test_eligible_is_exactly_weights_at_or_above_threshold(self, math):
        reps = {"low": 8, "edge": 9, "high": 10, "zero": 0}
        eligible = math.rebroadcast_eligible(reps, Decimal(9))

        assert eligible == {"edge": 9, "high": 10}
        assert len(eligible) <= len(reps)

    def test_rebroadcast_weight_never_exceeds_total(self, math):
        reps = {"a": 0, "b": 1, "c": 50, "d": "12345", "e": 9}
        for t in (Decimal(0), Decimal(1), Decimal(9), Decimal(10), Decimal(10**6)):
            assert math.rebroadcast_weight(reps, t) <= math.total_weight(reps)

    def test_malformed_weights_count_as_zero(self, math):
        reps = {"a": "100", "b": "garbage", "c": None, "d": "NaN"}
        assert math.total_weight(reps) == 100

    def test_out_of_range_exponents_count_as_zero(self):
        math = MetricMath(StatusConfig())
        reps = {"A": "1e999999999", "B": "1000", "C": "1e-999999999"}

        assert math.total_weight(reps) == math.weight("1000")
        assert math.online_supply_percent(reps) is not None

    def test_raw_conversion(self):
        math = MetricMath(StatusConfig(currency_precision=30))
        one_million = "1000000" + "0" * 30
        assert math.weight(one_million) == Decimal(1_000_000)
        assert math.total_weight({"a": one_million, "b": one_million}) == 2_000_000

    def test_supply_percentages(self, math):
        assert math.online_supply_percent(ONLINE) == Decimal(30)
        assert math.official_supply_percent({"A": 1000}) == Decimal(10)
        assert math.rebroadcast_supply_percent(ONLINE, 1000) == (
            Decimal(3000) / Decimal(9000) * 100
        )

    def test_official_online_percent(self, math):
        assert math.official_online_percent({"A": 1000}, ONLINE) == (
            Decimal(1000) / Decimal(3000) * 100
        )

    def test_functions_are_idempotent(self, math):
        threshold = math.rebroadcast_threshold("1000")
        assert math.rebroadcast_threshold("1000") == threshold
        assert math.rebroadcast_eligible(ONLINE, threshold) == (
            math.rebroadcast_eligible(ONLINE, threshold)
        )
        assert math.total_weight(ONLINE) == math.total_weight(ONLINE)
        assert math.online_rebroadcast_percent(ONLINE, 1000) == (
            math.online_rebroadcast_percent(ONLINE, 1000)
        )

    def test_threshold_uses_fixed_ratio(self, unit_config):
        assert unit_config.rebroadcast_ratio == Decimal("0.001")
