"""Loan sizing and servicing costs for interest-only and P&I loans."""

from dataclasses import dataclass

import numpy_financial as npf


@dataclass(frozen=True)
class LoanServicing:
    """Loan size and both servicing costs, computed side by side."""

    principal: float
    lvr: float  # Loan / price
    interest_only_rate: float
    principal_interest_rate: float
    term_years: int
    interest_only_annual: float
    principal_interest_monthly: float
    principal_interest_annual: float
    first_year_principal_repaid: float  # Under P&I servicing


def calculate_interest_only_cost(principal: float, annual_rate: float) -> float:
    """Annual interest on an interest-only loan."""
    return principal * annual_rate


def calculate_monthly_repayment(
    annual_rate: float,
    term_years: int,
    principal: float,
) -> float:
    """Calculate the fixed monthly payment on a P&I loan.

    PMT = P x r / (1 - (1 + r)^-n), with r = annual_rate / 12 and
    n = term_years x 12. A zero rate repays the principal in equal parts.

    Args:
        annual_rate: Annual interest rate (e.g., 0.06).
        term_years: Loan term in years.
        principal: Amount borrowed.

    Returns:
        Monthly payment.

    Raises:
        ValueError: If the term is not positive.
    """
    n_periods = term_years * 12
    if n_periods <= 0:
        raise ValueError("Loan term must be positive")
    if annual_rate == 0:
        return principal / n_periods

    # numpy_financial returns the payment as a negative cash flow
    return float(-npf.pmt(rate=annual_rate / 12, nper=n_periods, pv=principal, fv=0))


def calculate_annual_repayment(
    annual_rate: float,
    term_years: int,
    principal: float,
) -> float:
    """Calculate a year of P&I repayments (12 x the monthly payment).

    Example:
        >>> round(calculate_annual_repayment(0.06, 30, 300_000))
        21584
    """
    return calculate_monthly_repayment(annual_rate, term_years, principal) * 12


def calculate_loan_balance(
    original_principal: float,
    monthly_rate: float,
    monthly_payment: float,
    months_elapsed: int,
) -> float:
    """Calculate remaining loan balance after a number of payments.

    Uses the loan balance formula:
    Balance = P x (1 + r)^n - PMT x [((1 + r)^n - 1) / r]

    Args:
        original_principal: Original loan amount.
        monthly_rate: Monthly interest rate.
        monthly_payment: Monthly P&I payment.
        months_elapsed: Number of payments made.

    Returns:
        Remaining loan balance.
    """
    if monthly_rate == 0:
        return max(0.0, original_principal - (monthly_payment * months_elapsed))

    growth_factor = (1 + monthly_rate) ** months_elapsed
    balance = (
        original_principal * growth_factor
        - monthly_payment * ((growth_factor - 1) / monthly_rate)
    )

    return max(0.0, balance)


def size_loan(
    price: float,
    deposit_ratio: float,
    interest_only_rate: float,
    principal_interest_rate: float,
    term_years: int,
) -> LoanServicing:
    """Size the loan from the deposit and cost it under both servicing modes.

    Args:
        price: Purchase price.
        deposit_ratio: Deposit as a fraction of price (0-1).
        interest_only_rate: Annual rate if the loan is interest only.
        principal_interest_rate: Annual rate if the loan is P&I.
        term_years: P&I amortization term.

    Returns:
        LoanServicing with principal, LVR and both annual costs.
    """
    lvr = 1 - deposit_ratio
    principal = price * lvr

    monthly_payment = calculate_monthly_repayment(
        principal_interest_rate, term_years, principal
    )
    balance_after_year = calculate_loan_balance(
        principal, principal_interest_rate / 12, monthly_payment, 12
    )

    return LoanServicing(
        principal=principal,
        lvr=lvr,
        interest_only_rate=interest_only_rate,
        principal_interest_rate=principal_interest_rate,
        term_years=term_years,
        interest_only_annual=calculate_interest_only_cost(principal, interest_only_rate),
        principal_interest_monthly=monthly_payment,
        principal_interest_annual=monthly_payment * 12,
        first_year_principal_repaid=principal - balance_after_year,
    )
