"""Stamp duty (transfer duty) by jurisdiction."""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ..models.lookups import (
    DutyBracket,
    DutyScheme,
    JurisdictionRates,
    NT_LINEAR_COEFFICIENT,
    NT_QUADRATIC_COEFFICIENT,
    NT_QUADRATIC_THRESHOLD,
    get_jurisdiction_rates,
)


@dataclass
class StampDutyResult:
    """Stamp duty with the bracket that produced it."""

    price: float
    jurisdiction: str
    scheme: DutyScheme
    stamp_duty: float
    bracket: Optional[DutyBracket]  # None when the NT quadratic applies
    effective_rate: float  # Duty / price


def _find_bracket(
    brackets: Tuple[DutyBracket, ...], price: float
) -> Tuple[DutyBracket, float]:
    """Locate the first bracket whose upper bound exceeds price.

    Returns:
        The bracket and the previous bracket's upper bound (0 for the first).
    """
    previous_bound = 0.0
    for bracket in brackets:
        if price < bracket.upper_bound:
            return bracket, previous_bound
        previous_bound = bracket.upper_bound
    # Last bracket is open-ended, so only reached for price == inf
    return brackets[-1], previous_bound


def _marginal_duty(brackets, price: float) -> Tuple[float, DutyBracket]:
    bracket, previous_bound = _find_bracket(brackets, price)
    duty = bracket.base_amount + (price - previous_bound) * bracket.marginal_rate
    return duty, bracket


def _per_hundred_duty(brackets, price: float) -> Tuple[float, DutyBracket]:
    # Each $100 or part thereof of the excess attracts the full per-$100 rate
    bracket, previous_bound = _find_bracket(brackets, price)
    hundreds = math.ceil((price - previous_bound) / 100)
    duty = bracket.base_amount + hundreds * bracket.marginal_rate
    return duty, bracket


def _nt_quadratic(price: float) -> float:
    value_thousands = price / 1000
    return (
        NT_QUADRATIC_COEFFICIENT * value_thousands ** 2
        + NT_LINEAR_COEFFICIENT * value_thousands
    )


def _total_rate_duty(brackets, price: float) -> Tuple[float, Optional[DutyBracket]]:
    if price <= NT_QUADRATIC_THRESHOLD:
        return _nt_quadratic(price), None
    bracket, _ = _find_bracket(brackets, price)
    # Duty never falls when crossing from the quadratic into the rate bands
    duty = max(price * bracket.marginal_rate, _nt_quadratic(NT_QUADRATIC_THRESHOLD))
    return duty, bracket


def _compute(rates: JurisdictionRates, price: float) -> Tuple[float, Optional[DutyBracket]]:
    brackets = rates.duty_brackets
    if rates.duty_scheme == DutyScheme.PER_HUNDRED:
        duty, bracket = _per_hundred_duty(brackets, price)
    elif rates.duty_scheme == DutyScheme.TOTAL_RATE:
        duty, bracket = _total_rate_duty(brackets, price)
    elif rates.duty_scheme == DutyScheme.FLAT:
        bracket = brackets[0]
        duty = price * bracket.marginal_rate
    else:
        duty, bracket = _marginal_duty(brackets, price)

    return max(duty, rates.minimum_duty, 0.0), bracket


def calculate_stamp_duty(price: float, jurisdiction) -> float:
    """Calculate transfer duty on a purchase.

    Most jurisdictions use a cumulative marginal schedule:
        duty = base_amount + (price - previous_bound) x marginal_rate
    ACT charges per $100 (or part) of the excess, NT applies a quadratic up
    to $525,000 and a single rate on the whole price above it, and an
    unknown jurisdiction is charged a flat 4% of price.

    Args:
        price: Purchase price. Negative prices are treated as 0.
        jurisdiction: Jurisdiction enum member or state code.

    Returns:
        Stamp duty in dollars, never negative.

    Example:
        >>> calculate_stamp_duty(600_000, "NSW")
        21530.0
    """
    rates = get_jurisdiction_rates(jurisdiction)
    duty, _ = _compute(rates, max(price, 0.0))
    return duty


def calculate_stamp_duty_detailed(price: float, jurisdiction) -> StampDutyResult:
    """Calculate stamp duty and report the bracket and effective rate."""
    rates = get_jurisdiction_rates(jurisdiction)
    price = max(price, 0.0)
    duty, bracket = _compute(rates, price)

    return StampDutyResult(
        price=price,
        jurisdiction=rates.code,
        scheme=rates.duty_scheme,
        stamp_duty=duty,
        bracket=bracket,
        effective_rate=duty / price if price > 0 else 0.0,
    )
