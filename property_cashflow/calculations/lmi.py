"""Lenders mortgage insurance (LMI) estimate from the deposit ratio."""

from typing import Tuple

# No LMI once the deposit reaches this share of the price
LMI_FREE_DEPOSIT_RATIO = 0.20

# (minimum deposit ratio, premium rate on the loan), checked high to low
LMI_DEPOSIT_BANDS: Tuple[Tuple[float, float], ...] = (
    (0.15, 0.010),
    (0.12, 0.017),
    (0.10, 0.025),
)
LMI_MINIMUM_DEPOSIT_RATE = 0.035  # Deposit below 10%


def lmi_premium_rate(deposit_ratio: float) -> float:
    """Get the LMI premium rate for a deposit ratio.

    Band lower bounds are inclusive, so a deposit of exactly 15% gets the
    1.0% rate rather than 1.7%.

    Args:
        deposit_ratio: Deposit as a fraction of price (0-1).

    Returns:
        Premium as a fraction of the loan principal.
    """
    if deposit_ratio >= LMI_FREE_DEPOSIT_RATIO:
        return 0.0
    for minimum_deposit, rate in LMI_DEPOSIT_BANDS:
        if deposit_ratio >= minimum_deposit:
            return rate
    return LMI_MINIMUM_DEPOSIT_RATE


def calculate_lmi(deposit_ratio: float, loan_principal: float) -> float:
    """Calculate the one-off LMI premium.

    Args:
        deposit_ratio: Deposit as a fraction of price (0-1).
        loan_principal: Amount borrowed.

    Returns:
        Premium in dollars; 0 when the deposit is 20% or more.
    """
    return lmi_premium_rate(deposit_ratio) * max(loan_principal, 0.0)
