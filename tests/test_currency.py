"""
Currency Conversion Unit Tests
==============================
"""

from decimal import Decimal

import pytest

from netstatus.currency import from_raw, parse_raw
from netstatus.utils.logging import setup_logging, make_logger


class TestParseRaw:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1000", Decimal(1000)),
            (" 42 ", Decimal(42)),
            (7, Decimal(7)),
            (1.5, Decimal("1.5")),
            ("garbage", Decimal(0)),
            ("Infinity", Decimal(0)),
            ("1e999999999", Decimal(0)),
            ("1e101", Decimal(0)),
            ("1e100", Decimal("1e100")),
            (None, Decimal(0)),
            (True, Decimal(0)),
        ],
    )
    def test_parse(self, value, expected):
        assert parse_raw(value) == expected


class TestFromRaw:

    def test_keeps_full_precision(self):
        raw = "133248289218203497353846153999000000001"
        assert from_raw(raw, 30) == Decimal("133248289.218203497353846153999000000001")

    def test_precision_zero_is_identity(self):
        assert from_raw(1000, 0) == 1000


class TestLogging:

    def test_invalid_level_raises(self):
        with pytest.raises(ValueError):
            setup_logging("loud", make_logger("netstatus.test"))
