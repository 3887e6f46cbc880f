"""Tests for loan sizing and servicing costs."""

import pytest

from property_cashflow.calculations.debt import (
    calculate_annual_repayment,
    calculate_interest_only_cost,
    calculate_loan_balance,
    calculate_monthly_repayment,
    size_loan,
)


def _closed_form_monthly(principal, annual_rate, years):
    r = annual_rate / 12
    n = years * 12
    return principal * r / (1 - (1 + r) ** -n)


class TestRepayments:
    """Tests for P&I amortization."""

    def test_matches_closed_form(self):
        """6% over 30 years on $300k."""
        annual = calculate_annual_repayment(0.06, 30, 300_000)
        assert annual == pytest.approx(_closed_form_monthly(300_000, 0.06, 30) * 12, rel=1e-9)
        assert annual == pytest.approx(21_583.82, abs=0.05)

    def test_zero_rate_repays_in_equal_parts(self):
        assert calculate_annual_repayment(0.0, 30, 300_000) == pytest.approx(10_000)
        assert calculate_monthly_repayment(0.0, 30, 360_000) == pytest.approx(1_000)

    def test_non_positive_term_raises(self):
        with pytest.raises(ValueError):
            calculate_monthly_repayment(0.06, 0, 300_000)

    def test_zero_principal(self):
        assert calculate_monthly_repayment(0.06, 30, 0) == pytest.approx(0.0)

    def test_interest_only_cost(self):
        assert calculate_interest_only_cost(480_000, 0.0625) == pytest.approx(30_000)


class TestLoanBalance:
    """Tests for the remaining balance formula."""

    def test_balance_is_zero_at_maturity(self):
        payment = calculate_monthly_repayment(0.06, 30, 300_000)
        balance = calculate_loan_balance(300_000, 0.06 / 12, payment, 360)
        assert balance == pytest.approx(0.0, abs=0.01)

    def test_balance_declines(self):
        payment = calculate_monthly_repayment(0.06, 30, 300_000)
        after_one = calculate_loan_balance(300_000, 0.005, payment, 12)
        after_ten = calculate_loan_balance(300_000, 0.005, payment, 120)
        assert 300_000 > after_one > after_ten > 0

    def test_zero_rate_balance(self):
        assert calculate_loan_balance(12_000, 0.0, 100, 12) == pytest.approx(10_800)
        assert calculate_loan_balance(12_000, 0.0, 100, 500) == 0.0


class TestSizeLoan:
    """Tests for size_loan."""

    def test_principal_from_deposit(self):
        loan = size_loan(600_000, 0.20, 0.0625, 0.0615, 30)

        assert loan.principal == pytest.approx(480_000)
        assert loan.lvr == pytest.approx(0.80)
        assert loan.interest_only_annual == pytest.approx(30_000)

    def test_both_servicing_costs_computed(self):
        loan = size_loan(600_000, 0.20, 0.0625, 0.0615, 30)

        expected_monthly = _closed_form_monthly(480_000, 0.0615, 30)
        assert loan.principal_interest_monthly == pytest.approx(expected_monthly)
        assert loan.principal_interest_annual == pytest.approx(expected_monthly * 12)

    def test_first_year_principal_repaid(self):
        """Repayments minus the interest charged go to principal."""
        loan = size_loan(600_000, 0.20, 0.0625, 0.0615, 30)

        assert 0 < loan.first_year_principal_repaid < loan.principal_interest_annual
        # Interest alone would be roughly principal x rate
        assert loan.principal_interest_annual - loan.first_year_principal_repaid == pytest.approx(
            480_000 * 0.0615, rel=0.01
        )

    def test_full_deposit_means_no_loan(self):
        loan = size_loan(600_000, 1.0, 0.0625, 0.0615, 30)

        assert loan.principal == 0.0
        assert loan.interest_only_annual == 0.0
        assert loan.principal_interest_annual == pytest.approx(0.0)
