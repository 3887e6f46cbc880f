"""Data models for the property investment cashflow engine."""

from .lookups import (
    Jurisdiction,
    DutyScheme,
    DutyBracket,
    RegistrationFees,
    JurisdictionRates,
    JURISDICTION_RATES,
    UNKNOWN_REGION_RATES,
    FALLBACK_JURISDICTION,
    get_jurisdiction_rates,
)
from .assumptions import (
    LoanType,
    ServicingMode,
    LoanTypeDefaults,
    LOAN_TYPE_DEFAULTS,
    CashflowAssumptions,
    DEFAULT_ASSUMPTIONS,
)
from .inputs import CashflowInput, normalize_label, parse_report_date

__all__ = [
    "Jurisdiction",
    "DutyScheme",
    "DutyBracket",
    "RegistrationFees",
    "JurisdictionRates",
    "JURISDICTION_RATES",
    "UNKNOWN_REGION_RATES",
    "FALLBACK_JURISDICTION",
    "get_jurisdiction_rates",
    "LoanType",
    "ServicingMode",
    "LoanTypeDefaults",
    "LOAN_TYPE_DEFAULTS",
    "CashflowAssumptions",
    "DEFAULT_ASSUMPTIONS",
    "CashflowInput",
    "normalize_label",
    "parse_report_date",
]
