"""Default assumptions for the cashflow engine, per loan type."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class LoanType(str, Enum):
    """Ownership structure of the purchase."""

    STANDARD = "standard"  # Individual investor, interest-only servicing
    SMSF = "smsf"  # Self-managed super fund, principal & interest servicing

    @classmethod
    def parse(cls, value) -> "LoanType":
        """Resolve a loan type from a form value, defaulting to STANDARD."""
        if isinstance(value, LoanType):
            return value
        text = str(value or "").strip().lower().replace("-", " ").replace("_", " ")
        if text in ("smsf", "super", "superannuation", "self managed super fund"):
            return cls.SMSF
        return cls.STANDARD


class ServicingMode(str, Enum):
    """Which loan servicing cost drives total expenses."""

    INTEREST_ONLY = "Interest Only"
    PRINCIPAL_AND_INTEREST = "Principal & Interest"

    @property
    def expense_label(self) -> str:
        return f"Total Expenses ({self.value})"


@dataclass(frozen=True)
class LoanTypeDefaults:
    """Default loan terms for one loan type."""

    interest_only_rate: float
    principal_interest_rate: float
    term_years: int
    tax_bracket: float
    servicing: ServicingMode

    def __post_init__(self) -> None:
        if self.term_years <= 0:
            raise ValueError("Loan term must be positive")
        for name in ("interest_only_rate", "principal_interest_rate", "tax_bracket"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be a fraction between 0 and 1, got {value}")


LOAN_TYPE_DEFAULTS: Mapping[LoanType, LoanTypeDefaults] = MappingProxyType({
    LoanType.STANDARD: LoanTypeDefaults(
        interest_only_rate=0.0625,
        principal_interest_rate=0.0615,
        term_years=30,
        tax_bracket=0.37,
        servicing=ServicingMode.INTEREST_ONLY,
    ),
    LoanType.SMSF: LoanTypeDefaults(
        interest_only_rate=0.0725,
        principal_interest_rate=0.0699,
        term_years=30,
        tax_bracket=0.0,  # Fund pays no tax at this stage
        servicing=ServicingMode.PRINCIPAL_AND_INTEREST,
    ),
})


@dataclass(frozen=True)
class CashflowAssumptions:
    """Global defaults used when an input is left blank.

    Landlord insurance and management fee defaults are per jurisdiction
    and live in the lookup tables instead.
    """

    # === Deposit ===
    default_deposit_pct: float = 0.20

    # === One-off acquisition costs ===
    legal_fees: float = 1_500.0
    pest_report: float = 500.0
    strata_report: float = 0.0
    buyers_agency_fee: float = 15_000.0
    renovation: float = 0.0

    # === Recurring annual expenses ===
    council_rates: float = 2_000.0
    strata_fees: float = 0.0
    building_insurance: float = 1_200.0
    miscellaneous: float = 500.0

    # === Period conversion ===
    weeks_per_year: int = 52
    months_per_year: int = 12

    # === Loan terms by loan type ===
    loan_types: Mapping[LoanType, LoanTypeDefaults] = field(
        default_factory=lambda: LOAN_TYPE_DEFAULTS
    )

    def __post_init__(self) -> None:
        if not 0.0 <= self.default_deposit_pct <= 1.0:
            raise ValueError("Default deposit must be a fraction between 0 and 1")
        if self.weeks_per_year <= 0 or self.months_per_year <= 0:
            raise ValueError("Period conversion factors must be positive")
        missing = [lt.value for lt in LoanType if lt not in self.loan_types]
        if missing:
            raise ValueError(f"Missing loan type defaults for: {', '.join(missing)}")

    def for_loan_type(self, loan_type: LoanType) -> LoanTypeDefaults:
        """Get the loan term defaults for a loan type."""
        return self.loan_types[loan_type]


DEFAULT_ASSUMPTIONS = CashflowAssumptions()
