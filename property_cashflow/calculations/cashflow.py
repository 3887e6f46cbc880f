"""Investment cashflow engine.

Turns a sparse set of property inputs into a complete cashflow projection:
- Funds required (deposit, stamp duty, fees, LMI, one-off costs)
- Loan size and both servicing costs (interest only and P&I)
- Rent and gross yield for a lower and a higher rent estimate
- Recurring expenses, management fee and total expenses
- Pre- and post-tax cashflow

Every blank input falls back to a jurisdiction or global default; the engine
always returns a complete result, whatever it is given.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from ..models.assumptions import (
    CashflowAssumptions,
    DEFAULT_ASSUMPTIONS,
    LoanType,
    ServicingMode,
)
from ..models.inputs import CashflowInput, normalize_label, parse_report_date
from ..models.lookups import get_jurisdiction_rates
from .debt import LoanServicing, size_loan
from .lmi import calculate_lmi
from .mortgage_fee import calculate_mortgage_fee
from .parsing import clamp_fraction, parse_number, parse_override, parse_percent_override
from .stamp_duty import calculate_stamp_duty
from .trace import TraceContext, trace

logger = logging.getLogger(__name__)


def format_money(value: float) -> str:
    """Two decimals with thousands separators, e.g. 21,530.00."""
    return f"{value:,.2f}"


def format_percent(fraction: float) -> str:
    """Percentage label without trailing zeros, e.g. 0.055 -> 5.5%."""
    return f"{round(fraction * 100, 2):g}%"


def format_yield(fraction: float) -> str:
    """Yield with two decimals, e.g. 0.0433 -> 4.33%."""
    return f"{fraction * 100:.2f}%"


@dataclass(frozen=True)
class Amount:
    """An annual figure re-expressed per week and per month.

    weekly = annual / 52 and monthly = annual / 12 (simple division).
    """

    annual: float
    weekly: float
    monthly: float

    @classmethod
    def from_annual(
        cls,
        annual: float,
        weeks_per_year: int = 52,
        months_per_year: int = 12,
    ) -> "Amount":
        return cls(
            annual=annual,
            weekly=annual / weeks_per_year,
            monthly=annual / months_per_year,
        )

    def display(self, prefix: str, unsigned: bool = False) -> Dict[str, str]:
        """Formatted weekly/monthly/annual strings keyed by prefix."""
        values = {
            "weekly": self.weekly,
            "monthly": self.monthly,
            "annual": self.annual,
        }
        return {
            f"{prefix}_{period}": format_money(abs(v) if unsigned else v)
            for period, v in values.items()
        }


@dataclass(frozen=True)
class CashflowResult:
    """Complete cashflow projection for one property, jurisdiction and loan type.

    Monetary values are numeric; to_display_dict() renders them for the
    report templates. Cashflow amounts keep their sign here and are shown
    unsigned in the display mapping.
    """

    # === Context ===
    jurisdiction: str  # Resolved code, "UNKNOWN" for unrecognised input
    jurisdiction_known: bool
    loan_type: LoanType
    as_of: date

    # === Purchase & funds required ===
    purchase_price: float
    deposit_pct: float
    deposit: float
    stamp_duty: float
    mortgage_fee: float
    lmi: float
    legal_fees: float
    pest_report: float
    strata_report: float
    buyers_agency_fee: float
    renovation: float
    total_funds_required: float

    # === Financing ===
    loan: LoanServicing

    # === Revenue ===
    lower_rent: Amount
    higher_rent: Amount
    lower_yield: float
    higher_yield: float

    # === Expenses ===
    council_rates: Amount
    strata_fees: Amount
    building_insurance: Amount
    landlord_insurance: Amount
    miscellaneous: Amount
    management_fee_pct: float
    management_fee: Amount
    interest_only_cost: Amount
    principal_interest_cost: Amount
    servicing: ServicingMode
    loan_servicing_cost: Amount
    total_expenses: Amount
    expense_label: str

    # === Cashflow ===
    tax_bracket: float
    lower_pre_tax: Amount
    higher_pre_tax: Amount
    lower_post_tax: Amount
    higher_post_tax: Amount

    overrides_applied: Tuple[str, ...] = ()
    trace_context: Optional[TraceContext] = field(default=None, compare=False, repr=False)

    @property
    def loan_principal(self) -> float:
        return self.loan.principal

    @property
    def lvr(self) -> float:
        return self.loan.lvr

    def expense_lines(self) -> List[Tuple[str, Amount]]:
        """Recurring expense lines in report order, ending with the total."""
        return [
            ("Council Rates", self.council_rates),
            ("Strata Fees", self.strata_fees),
            ("Building Insurance", self.building_insurance),
            ("Landlord Insurance", self.landlord_insurance),
            ("Miscellaneous", self.miscellaneous),
            (f"Management Fee ({format_percent(self.management_fee_pct)})", self.management_fee),
            (f"Loan Servicing ({self.servicing.value})", self.loan_servicing_cost),
            (self.expense_label, self.total_expenses),
        ]

    def to_display_dict(self) -> Dict[str, str]:
        """Flat mapping of formatted strings for the rendering layer."""
        out: Dict[str, str] = {
            "as_of": self.as_of.isoformat(),
            "jurisdiction": self.jurisdiction,
            "loan_type": self.loan_type.value,
            "purchase_price": format_money(self.purchase_price),
            "deposit_percent": format_percent(self.deposit_pct),
            "deposit": format_money(self.deposit),
            "loan_amount": format_money(self.loan.principal),
            "lvr_percent": format_percent(self.loan.lvr),
            "stamp_duty": format_money(self.stamp_duty),
            "mortgage_fee": format_money(self.mortgage_fee),
            "lmi": format_money(self.lmi),
            "legal_fees": format_money(self.legal_fees),
            "pest_report": format_money(self.pest_report),
            "strata_report": format_money(self.strata_report),
            "buyers_agency_fee": format_money(self.buyers_agency_fee),
            "renovation": format_money(self.renovation),
            "total_funds_required": format_money(self.total_funds_required),
            "lower_yield": format_yield(self.lower_yield),
            "higher_yield": format_yield(self.higher_yield),
            "management_fee_percent": format_percent(self.management_fee_pct),
            "interest_only_rate": format_percent(self.loan.interest_only_rate),
            "principal_interest_rate": format_percent(self.loan.principal_interest_rate),
            "tax_bracket": format_percent(self.tax_bracket),
            "expense_label": self.expense_label,
        }

        amounts = {
            "lower_rent": self.lower_rent,
            "higher_rent": self.higher_rent,
            "council_rates": self.council_rates,
            "strata_fees": self.strata_fees,
            "building_insurance": self.building_insurance,
            "landlord_insurance": self.landlord_insurance,
            "miscellaneous": self.miscellaneous,
            "management_fee": self.management_fee,
            "interest_only_cost": self.interest_only_cost,
            "principal_interest_cost": self.principal_interest_cost,
            "total_expenses": self.total_expenses,
        }
        for prefix, amount in amounts.items():
            out.update(amount.display(prefix))

        for tier in ("lower", "higher"):
            pre_tax: Amount = getattr(self, f"{tier}_pre_tax")
            post_tax: Amount = getattr(self, f"{tier}_post_tax")
            out.update(pre_tax.display(f"{tier}_pre_tax_cashflow", unsigned=True))
            out.update(post_tax.display(f"{tier}_post_tax_cashflow", unsigned=True))
            out[f"{tier}_cashflow_direction"] = "positive" if pre_tax.annual >= 0 else "negative"

        return out

    def to_dict(self) -> Dict[str, Any]:
        """Flat mapping of the underlying numeric values."""
        out: Dict[str, Any] = {
            "as_of": self.as_of,
            "jurisdiction": self.jurisdiction,
            "loan_type": self.loan_type.value,
            "purchase_price": self.purchase_price,
            "deposit_pct": self.deposit_pct,
            "deposit": self.deposit,
            "loan_amount": self.loan.principal,
            "lvr": self.loan.lvr,
            "stamp_duty": self.stamp_duty,
            "mortgage_fee": self.mortgage_fee,
            "lmi": self.lmi,
            "legal_fees": self.legal_fees,
            "pest_report": self.pest_report,
            "strata_report": self.strata_report,
            "buyers_agency_fee": self.buyers_agency_fee,
            "renovation": self.renovation,
            "total_funds_required": self.total_funds_required,
            "lower_yield": self.lower_yield,
            "higher_yield": self.higher_yield,
            "management_fee_pct": self.management_fee_pct,
            "interest_only_rate": self.loan.interest_only_rate,
            "principal_interest_rate": self.loan.principal_interest_rate,
            "first_year_principal_repaid": self.loan.first_year_principal_repaid,
            "tax_bracket": self.tax_bracket,
            "servicing": self.servicing.value,
        }
        for name in (
            "lower_rent", "higher_rent", "council_rates", "strata_fees",
            "building_insurance", "landlord_insurance", "miscellaneous",
            "management_fee", "interest_only_cost", "principal_interest_cost",
            "loan_servicing_cost", "total_expenses", "lower_pre_tax",
            "higher_pre_tax", "lower_post_tax", "higher_post_tax",
        ):
            out[f"{name}_annual"] = getattr(self, name).annual
        return out

    def to_dataframe(self) -> pd.DataFrame:
        """Weekly/monthly/annual breakdown of income, expenses and cashflow."""
        rows = [("Rent (Lower)", self.lower_rent), ("Rent (Higher)", self.higher_rent)]
        rows += self.expense_lines()
        rows += [
            ("Pre-Tax Cashflow (Lower)", self.lower_pre_tax),
            ("Pre-Tax Cashflow (Higher)", self.higher_pre_tax),
            ("Post-Tax Cashflow (Lower)", self.lower_post_tax),
            ("Post-Tax Cashflow (Higher)", self.higher_post_tax),
        ]
        return pd.DataFrame(
            [
                {"Item": label, "Weekly": a.weekly, "Monthly": a.monthly, "Annual": a.annual}
                for label, a in rows
            ]
        )


def _yield(annual_rent: float, cost_base: float) -> float:
    if cost_base == 0:
        logger.debug("Zero price and renovation, reporting 0%% yield")
        return 0.0
    return annual_rent / cost_base


def calculate_cashflow(
    inputs: CashflowInput,
    jurisdiction,
    loan_type: LoanType = LoanType.STANDARD,
    assumptions: CashflowAssumptions = DEFAULT_ASSUMPTIONS,
) -> CashflowResult:
    """Calculate the full investment cashflow for a property.

    Steps, each substituting a default when the input is blank:
    1. Deposit, loan principal and LVR
    2. Stamp duty, mortgage fee and LMI
    3. One-off costs and total funds required
    4. Rent and gross yield for both rent estimates
    5. Recurring expenses and management fee (on the lower rent)
    6. Interest-only and P&I costs; the loan type picks which one counts
    7. Pre-tax cashflow, then post-tax at the tax bracket

    Args:
        inputs: Sparse property inputs; raw form strings are accepted.
        jurisdiction: Jurisdiction enum member or state code. Unknown codes
            use the unknown region rates rather than failing.
        loan_type: STANDARD (interest only) or SMSF (principal & interest).
        assumptions: Global defaults, injectable for what-if runs.

    Returns:
        CashflowResult with numeric fields and display formatting.

    Example:
        >>> result = calculate_cashflow(
        ...     CashflowInput(purchase_price=600_000, lower_rent_weekly=500,
        ...                   deposit_pct=0.20),
        ...     "NSW",
        ... )
        >>> result.deposit, result.loan_principal, result.lmi
        (120000.0, 480000.0, 0.0)
    """
    loan_type = LoanType.parse(loan_type)
    rates = get_jurisdiction_rates(jurisdiction)
    if rates.is_fallback:
        logger.warning("Unknown jurisdiction %r, using unknown region rates", jurisdiction)
    loan_defaults = assumptions.for_loan_type(loan_type)
    overrides: List[str] = []

    def resolve(name: str, value: Optional[float], default: float) -> float:
        if value is None:
            return default
        overrides.append(name)
        return value

    def parse_fraction(raw) -> Optional[float]:
        value = parse_percent_override(raw)
        return None if value is None else clamp_fraction(value)

    def note(name: str) -> str:
        return "override" if name in overrides else "default"

    def to_amount(annual: float) -> Amount:
        return Amount.from_annual(
            annual, assumptions.weeks_per_year, assumptions.months_per_year
        )

    # --- 1. Deposit and loan ---
    price = max(parse_number(inputs.purchase_price), 0.0)
    trace("inputs.purchase_price", price, {})

    deposit_pct = resolve(
        "deposit_pct",
        parse_fraction(inputs.deposit_pct),
        assumptions.default_deposit_pct,
    )
    trace("inputs.deposit_pct", deposit_pct, {}, notes=note("deposit_pct"))
    deposit = trace("acquisition.deposit", price * deposit_pct, {
        "inputs.purchase_price": price,
        "inputs.deposit_pct": deposit_pct,
    })

    io_rate = resolve(
        "interest_only_rate",
        parse_fraction(inputs.interest_only_rate),
        loan_defaults.interest_only_rate,
    )
    pi_rate = resolve(
        "principal_interest_rate",
        parse_fraction(inputs.principal_interest_rate),
        loan_defaults.principal_interest_rate,
    )
    trace("inputs.interest_only_rate", io_rate, {}, notes=note("interest_only_rate"))
    trace("inputs.principal_interest_rate", pi_rate, {}, notes=note("principal_interest_rate"))

    loan = size_loan(
        price=price,
        deposit_ratio=deposit_pct,
        interest_only_rate=io_rate,
        principal_interest_rate=pi_rate,
        term_years=loan_defaults.term_years,
    )
    trace("financing.loan_principal", loan.principal, {
        "inputs.purchase_price": price,
        "inputs.deposit_pct": deposit_pct,
    })
    trace("financing.lvr", loan.lvr, {"inputs.deposit_pct": deposit_pct})

    # --- 2. Government charges and LMI ---
    stamp_duty = resolve(
        "stamp_duty",
        parse_override(inputs.stamp_duty),
        calculate_stamp_duty(price, jurisdiction),
    )
    trace("acquisition.stamp_duty", stamp_duty, {"inputs.purchase_price": price},
          notes=note("stamp_duty"))

    mortgage_fee = resolve(
        "mortgage_fee",
        parse_override(inputs.mortgage_fee),
        calculate_mortgage_fee(jurisdiction, price),
    )
    trace("acquisition.mortgage_fee", mortgage_fee, {}, notes=note("mortgage_fee"))

    lmi = resolve(
        "lmi",
        parse_override(inputs.lmi),
        calculate_lmi(deposit_pct, loan.principal),
    )
    trace("acquisition.lmi", lmi, {
        "financing.loan_principal": loan.principal,
        "inputs.deposit_pct": deposit_pct,
    }, notes=note("lmi"))

    # --- 3. One-off costs and funds required ---
    one_off = {}
    for name in ("legal_fees", "pest_report", "strata_report", "buyers_agency_fee", "renovation"):
        one_off[name] = resolve(
            name, parse_override(getattr(inputs, name)), getattr(assumptions, name)
        )
        trace(f"acquisition.{name}", one_off[name], {}, notes=note(name))

    total_funds_required = trace(
        "acquisition.total_funds_required",
        deposit + stamp_duty + mortgage_fee + lmi + sum(one_off.values()),
        {
            "acquisition.deposit": deposit,
            "acquisition.stamp_duty": stamp_duty,
            "acquisition.mortgage_fee": mortgage_fee,
            "acquisition.lmi": lmi,
            **{f"acquisition.{name}": value for name, value in one_off.items()},
        },
    )

    # --- 4. Rent and yield ---
    lower_weekly = parse_override(inputs.lower_rent_weekly)
    higher_weekly = parse_override(inputs.higher_rent_weekly)
    if lower_weekly is None:
        lower_weekly = higher_weekly
    if higher_weekly is None:
        higher_weekly = lower_weekly
    if lower_weekly is None:
        logger.warning("No weekly rent supplied, reporting zero rent")
        lower_weekly = higher_weekly = 0.0
    trace("inputs.lower_rent_weekly", lower_weekly, {})
    trace("inputs.higher_rent_weekly", higher_weekly, {})

    lower_rent = to_amount(lower_weekly * assumptions.weeks_per_year)
    higher_rent = to_amount(higher_weekly * assumptions.weeks_per_year)
    trace("revenue.lower_rent_annual", lower_rent.annual,
          {"inputs.lower_rent_weekly": lower_weekly})
    trace("revenue.higher_rent_annual", higher_rent.annual,
          {"inputs.higher_rent_weekly": higher_weekly})

    cost_base = price + one_off["renovation"]
    lower_yield = _yield(lower_rent.annual, cost_base)
    higher_yield = _yield(higher_rent.annual, cost_base)
    for tier, value, rent in (("lower", lower_yield, lower_rent), ("higher", higher_yield, higher_rent)):
        trace(f"revenue.{tier}_yield", value, {
            f"revenue.{tier}_rent_annual": rent.annual,
            "inputs.purchase_price": price,
            "acquisition.renovation": one_off["renovation"],
        })

    # --- 5. Recurring expenses ---
    recurring_defaults = {
        "council_rates": assumptions.council_rates,
        "strata_fees": assumptions.strata_fees,
        "building_insurance": assumptions.building_insurance,
        "landlord_insurance": rates.landlord_insurance,
        "miscellaneous": assumptions.miscellaneous,
    }
    recurring = {}
    for name, default in recurring_defaults.items():
        recurring[name] = resolve(name, parse_override(getattr(inputs, name)), default)
        trace(f"expenses.{name}", recurring[name], {}, notes=note(name))

    management_fee_pct = resolve(
        "management_fee_pct",
        parse_fraction(inputs.management_fee_pct),
        rates.management_fee_pct,
    )
    trace("inputs.management_fee_pct", management_fee_pct, {}, notes=note("management_fee_pct"))
    management_fee = trace("expenses.management_fee", lower_rent.annual * management_fee_pct, {
        "revenue.lower_rent_annual": lower_rent.annual,
        "inputs.management_fee_pct": management_fee_pct,
    })

    # --- 6. Loan servicing ---
    trace("financing.interest_only_cost", loan.interest_only_annual, {
        "financing.loan_principal": loan.principal,
        "inputs.interest_only_rate": io_rate,
    })
    trace("financing.principal_interest_cost", loan.principal_interest_annual, {
        "financing.loan_principal": loan.principal,
        "inputs.principal_interest_rate": pi_rate,
    })

    servicing = loan_defaults.servicing
    if servicing == ServicingMode.INTEREST_ONLY:
        servicing_cost = loan.interest_only_annual
    else:
        servicing_cost = loan.principal_interest_annual
    trace("expenses.loan_servicing", servicing_cost, {
        "financing.interest_only_cost": loan.interest_only_annual,
        "financing.principal_interest_cost": loan.principal_interest_annual,
    }, notes=servicing.value)

    total_expenses = trace(
        "expenses.total",
        sum(recurring.values()) + management_fee + servicing_cost,
        {
            **{f"expenses.{name}": value for name, value in recurring.items()},
            "expenses.management_fee": management_fee,
            "expenses.loan_servicing": servicing_cost,
        },
    )
    expense_label = normalize_label(inputs.expense_label) or servicing.expense_label

    # --- 7. Cashflow ---
    tax_bracket = resolve(
        "tax_bracket",
        parse_fraction(inputs.tax_bracket),
        loan_defaults.tax_bracket,
    )
    trace("inputs.tax_bracket", tax_bracket, {}, notes=note("tax_bracket"))

    cashflows = {}
    for tier, rent in (("lower", lower_rent), ("higher", higher_rent)):
        pre_tax = trace(f"cashflow.{tier}_pre_tax", rent.annual - total_expenses, {
            f"revenue.{tier}_rent_annual": rent.annual,
            "expenses.total": total_expenses,
        })
        post_tax = trace(f"cashflow.{tier}_post_tax", pre_tax * (1 - tax_bracket), {
            f"cashflow.{tier}_pre_tax": pre_tax,
            "inputs.tax_bracket": tax_bracket,
        })
        cashflows[tier] = (to_amount(pre_tax), to_amount(post_tax))

    return CashflowResult(
        jurisdiction=rates.code,
        jurisdiction_known=not rates.is_fallback,
        loan_type=loan_type,
        as_of=parse_report_date(inputs.as_of) or date.today(),
        purchase_price=price,
        deposit_pct=deposit_pct,
        deposit=deposit,
        stamp_duty=stamp_duty,
        mortgage_fee=mortgage_fee,
        lmi=lmi,
        legal_fees=one_off["legal_fees"],
        pest_report=one_off["pest_report"],
        strata_report=one_off["strata_report"],
        buyers_agency_fee=one_off["buyers_agency_fee"],
        renovation=one_off["renovation"],
        total_funds_required=total_funds_required,
        loan=loan,
        lower_rent=lower_rent,
        higher_rent=higher_rent,
        lower_yield=lower_yield,
        higher_yield=higher_yield,
        council_rates=to_amount(recurring["council_rates"]),
        strata_fees=to_amount(recurring["strata_fees"]),
        building_insurance=to_amount(recurring["building_insurance"]),
        landlord_insurance=to_amount(recurring["landlord_insurance"]),
        miscellaneous=to_amount(recurring["miscellaneous"]),
        management_fee_pct=management_fee_pct,
        management_fee=to_amount(management_fee),
        interest_only_cost=to_amount(loan.interest_only_annual),
        principal_interest_cost=to_amount(loan.principal_interest_annual),
        servicing=servicing,
        loan_servicing_cost=to_amount(servicing_cost),
        total_expenses=to_amount(total_expenses),
        expense_label=expense_label,
        tax_bracket=tax_bracket,
        lower_pre_tax=cashflows["lower"][0],
        higher_pre_tax=cashflows["higher"][0],
        lower_post_tax=cashflows["lower"][1],
        higher_post_tax=cashflows["higher"][1],
        overrides_applied=tuple(overrides),
        trace_context=TraceContext.current(),
    )


def calculate_cashflow_from_mapping(
    data: Mapping[str, Any],
    jurisdiction,
    loan_type=LoanType.STANDARD,
    assumptions: CashflowAssumptions = DEFAULT_ASSUMPTIONS,
) -> CashflowResult:
    """Calculate a cashflow straight from a form submission mapping."""
    return calculate_cashflow(
        CashflowInput.from_mapping(data), jurisdiction, loan_type, assumptions
    )
