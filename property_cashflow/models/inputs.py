"""Caller-supplied inputs for a single cashflow calculation."""

import logging
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Union

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# Numbers may arrive raw from a form ("$600,000", "5.5%") and are
# normalized by the engine, not here.
NumberLike = Union[float, int, str, None]


@dataclass
class CashflowInput:
    """Sparse inputs for one property.

    Only purchase_price and one of the weekly rents are expected; every other
    field falls back to a jurisdiction or global default when left as None.
    Percentage fields accept whole percentages (20) or fractions (0.20).
    """

    purchase_price: NumberLike = None
    lower_rent_weekly: NumberLike = None
    higher_rent_weekly: NumberLike = None
    deposit_pct: NumberLike = None

    # === Acquisition cost overrides ===
    stamp_duty: NumberLike = None
    mortgage_fee: NumberLike = None
    lmi: NumberLike = None
    legal_fees: NumberLike = None
    pest_report: NumberLike = None
    strata_report: NumberLike = None
    buyers_agency_fee: NumberLike = None
    renovation: NumberLike = None

    # === Recurring annual expense overrides ===
    council_rates: NumberLike = None
    strata_fees: NumberLike = None
    building_insurance: NumberLike = None
    landlord_insurance: NumberLike = None
    miscellaneous: NumberLike = None
    management_fee_pct: NumberLike = None

    # === Loan and tax overrides ===
    interest_only_rate: NumberLike = None
    principal_interest_rate: NumberLike = None
    tax_bracket: NumberLike = None

    expense_label: Optional[str] = None
    as_of: Union[date, str, None] = None  # Strings are parsed day-first

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CashflowInput":
        """Build inputs from a form submission.

        Accepts snake_case field names, their camelCase forms, and the
        aliases in FIELD_ALIASES. Unrecognised keys are ignored.
        """
        values: Dict[str, Any] = {}
        for f in fields(cls):
            for key in _keys_for(f.name):
                if key in data:
                    values[f.name] = data[key]
                    break

        if "as_of" in values:
            values["as_of"] = parse_report_date(values["as_of"])
        if "expense_label" in values:
            values["expense_label"] = normalize_label(values["expense_label"])

        return cls(**values)


# A bare "deposit" key holds a dollar amount and is not mapped here
FIELD_ALIASES: Dict[str, tuple] = {
    "purchase_price": ("price",),
    "lower_rent_weekly": ("lowerRent", "weeklyRent", "rentWeekly"),
    "higher_rent_weekly": ("higherRent",),
    "deposit_pct": ("depositPercent",),
    "legal_fees": ("legals",),
    "pest_report": ("pestInspection",),
    "buyers_agency_fee": ("buyersAgentFee", "buyersAgency"),
    "renovation": ("renovationBudget",),
    "miscellaneous": ("misc",),
    "management_fee_pct": ("managementFeePercent", "managementFee"),
    "interest_only_rate": ("ioRate",),
    "principal_interest_rate": ("piRate",),
    "as_of": ("reportDate",),
}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _keys_for(field_name: str) -> tuple:
    return (field_name, _camel(field_name)) + FIELD_ALIASES.get(field_name, ())


def normalize_label(value) -> Optional[str]:
    """Strip a free-text label; blank or missing becomes None."""
    if value is None:
        return None
    return str(value).strip() or None


def parse_report_date(value) -> Optional[date]:
    """Parse a report date from a date, datetime or day-first string.

    Returns None when the value is blank or not a date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError):
        logger.debug("Could not parse report date %r", value)
        return None
