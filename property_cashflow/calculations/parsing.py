"""Normalization of loosely typed form values into numbers.

Values arrive either as numbers or as strings typed into a form, such as
"$600,000", "5.5%" or "". Nothing here raises: anything that cannot be read
as a number is treated as missing.
"""

import logging
import math
from typing import Optional

logger = logging.getLogger(__name__)

_STRIP_CHARS = str.maketrans("", "", ",$% \t\n")


def _to_float(value) -> Optional[float]:
    """Convert a raw value to a finite float, or None if it isn't one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).translate(_STRIP_CHARS)
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            logger.debug("Could not parse %r as a number", value)
            return None
    if not math.isfinite(number):
        return None
    return number


def parse_number(value) -> float:
    """Parse a numeric form value, returning 0 when absent or unreadable.

    Args:
        value: Number or string such as "$1,250.50".

    Returns:
        The parsed float.
    """
    number = _to_float(value)
    return 0.0 if number is None else number


def parse_override(value) -> Optional[float]:
    """Parse an optional override.

    Returns:
        The parsed float, or None when the field was left blank or holds
        something that isn't a number, meaning the default should be used.
    """
    return _to_float(value)


def normalize_percent(value: float) -> float:
    """Convert a percentage to a fraction.

    Values above 1 are whole percentages (20 -> 0.20); values of 1 or less
    are taken as fractions already. An input of exactly 1 therefore means
    100%, never 1%.
    """
    return value / 100 if value > 1 else value


def clamp_fraction(value: float) -> float:
    """Clamp a normalized percentage to [0, 1].

    Applied after normalize_percent to deposit, rate, management fee and
    tax overrides, so "-5" becomes 0% and "250" becomes 100%.
    """
    clamped = min(max(value, 0.0), 1.0)
    if clamped != value:
        logger.debug("Percentage %r outside 0-100%%, using %r", value, clamped)
    return clamped


def parse_percent(value) -> float:
    """Parse a percentage field into a fraction, 0 when absent."""
    return normalize_percent(parse_number(value))


def parse_percent_override(value) -> Optional[float]:
    """Parse an optional percentage override into a fraction."""
    number = parse_override(value)
    return None if number is None else normalize_percent(number)
