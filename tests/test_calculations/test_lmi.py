"""Tests for lenders mortgage insurance."""

import pytest

from property_cashflow.calculations.lmi import calculate_lmi, lmi_premium_rate


class TestPremiumRate:
    """Tests for the deposit band lookup."""

    @pytest.mark.parametrize("deposit", [0.20, 0.25, 0.50, 1.0])
    def test_no_lmi_at_twenty_percent_or_more(self, deposit):
        assert lmi_premium_rate(deposit) == 0.0

    @pytest.mark.parametrize("deposit, rate", [
        (0.19, 0.010),
        (0.15, 0.010),
        (0.1499, 0.017),
        (0.12, 0.017),
        (0.11, 0.025),
        (0.10, 0.025),
        (0.05, 0.035),
        (0.0, 0.035),
    ])
    def test_bands(self, deposit, rate):
        """Band lower bounds are inclusive."""
        assert lmi_premium_rate(deposit) == rate

    def test_smaller_deposit_never_cheaper(self):
        deposits = [d / 1000 for d in range(0, 301)]
        rates = [lmi_premium_rate(d) for d in deposits]
        assert all(a >= b for a, b in zip(rates, rates[1:]))


class TestCalculateLmi:
    """Tests for the dollar premium."""

    def test_premium_on_loan_principal(self):
        """10% deposit on $600k: 2.5% of a $540k loan."""
        assert calculate_lmi(0.10, 540_000) == pytest.approx(13_500)

    def test_zero_with_twenty_percent_deposit(self):
        assert calculate_lmi(0.20, 480_000) == 0.0

    def test_never_negative(self):
        assert calculate_lmi(0.05, -1_000) == 0.0
