"""Tests for registration fees."""

import pytest

from property_cashflow.calculations.mortgage_fee import calculate_mortgage_fee, round_up_to
from property_cashflow.models.lookups import Jurisdiction


class TestRoundUp:

    @pytest.mark.parametrize("value, expected", [
        (0, 0.0),
        (1, 100.0),
        (496.2, 500.0),
        (600, 600.0),
        (600.01, 700.0),
    ])
    def test_round_up_to_hundred(self, value, expected):
        assert round_up_to(value) == expected


class TestMortgageFee:
    """Tests for calculate_mortgage_fee."""

    @pytest.mark.parametrize("code, expected", [
        ("NSW", 500.0),  # 2 x 165.40 + 165.40 = 496.20
        ("VIC", 3_100.0),  # 2 x 1,478 + 135.70 = 3,091.70
        ("QLD", 4_500.0),
        ("SA", 7_000.0),
        ("WA", 2_500.0),
        ("TAS", 700.0),
        ("ACT", 1_200.0),
        ("NT", 600.0),
    ])
    def test_jurisdiction_fees(self, code, expected):
        assert calculate_mortgage_fee(code) == expected

    @pytest.mark.parametrize("jurisdiction", list(Jurisdiction) + ["XYZ"])
    def test_always_multiple_of_hundred(self, jurisdiction):
        fee = calculate_mortgage_fee(jurisdiction)
        assert fee > 0
        assert fee % 100 == 0

    def test_unknown_uses_fallback_fees(self):
        """2 x 200 + 200, already a multiple of 100."""
        assert calculate_mortgage_fee("XYZ") == 600.0

    def test_price_does_not_change_fee(self):
        assert calculate_mortgage_fee("NSW", 300_000) == calculate_mortgage_fee("NSW", 3_000_000)
