"""Mortgage registration and transfer fees lodged at settlement."""

import math
from typing import Optional

from ..models.lookups import get_jurisdiction_rates

FEE_ROUNDING = 100


def round_up_to(value: float, step: int = FEE_ROUNDING) -> float:
    """Round a value up to the next multiple of step."""
    return float(math.ceil(value / step) * step)


def calculate_mortgage_fee(jurisdiction, price: Optional[float] = None) -> float:
    """Calculate government registration fees for the purchase.

    fee = 2 x transfer_fee + mortgage_registration_fee, rounded up to the
    nearest $100. The price is accepted for callers that have it but is not
    used: fixed fees approximate the price-scaled transfer fees some
    states charge.

    Args:
        jurisdiction: Jurisdiction enum member or state code.
        price: Purchase price (unused).

    Returns:
        Fee in dollars, a multiple of 100.
    """
    fees = get_jurisdiction_rates(jurisdiction).registration_fees
    return round_up_to(2 * fees.transfer_fee + fees.mortgage_registration_fee)
