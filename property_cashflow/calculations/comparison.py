"""Side-by-side comparison of cashflow scenarios."""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models.assumptions import CashflowAssumptions, DEFAULT_ASSUMPTIONS, LoanType
from ..models.inputs import CashflowInput
from .cashflow import CashflowResult, calculate_cashflow


@dataclass
class LoanTypeComparison:
    """Standard vs SMSF structure for the same property."""

    standard: CashflowResult
    smsf: CashflowResult

    # Differences (SMSF - standard)
    total_expenses_difference: float
    servicing_cost_difference: float
    lower_post_tax_difference: float
    higher_post_tax_difference: float

    better_structure: LoanType  # Higher lower-tier post-tax cashflow


def compare_loan_types(
    inputs: CashflowInput,
    jurisdiction,
    assumptions: CashflowAssumptions = DEFAULT_ASSUMPTIONS,
) -> LoanTypeComparison:
    """Run the same inputs as a standard and an SMSF purchase.

    Args:
        inputs: Property inputs shared by both runs.
        jurisdiction: Jurisdiction enum member or state code.
        assumptions: Global defaults.

    Returns:
        LoanTypeComparison with both results and their differences.
    """
    standard = calculate_cashflow(inputs, jurisdiction, LoanType.STANDARD, assumptions)
    smsf = calculate_cashflow(inputs, jurisdiction, LoanType.SMSF, assumptions)

    lower_diff = smsf.lower_post_tax.annual - standard.lower_post_tax.annual

    return LoanTypeComparison(
        standard=standard,
        smsf=smsf,
        total_expenses_difference=smsf.total_expenses.annual - standard.total_expenses.annual,
        servicing_cost_difference=(
            smsf.loan_servicing_cost.annual - standard.loan_servicing_cost.annual
        ),
        lower_post_tax_difference=lower_diff,
        higher_post_tax_difference=smsf.higher_post_tax.annual - standard.higher_post_tax.annual,
        better_structure=LoanType.SMSF if lower_diff > 0 else LoanType.STANDARD,
    )


def compare_jurisdictions(
    inputs: CashflowInput,
    jurisdictions: Iterable,
    loan_type: LoanType = LoanType.STANDARD,
    assumptions: CashflowAssumptions = DEFAULT_ASSUMPTIONS,
) -> List[CashflowResult]:
    """Run the same purchase in several jurisdictions.

    Returns:
        Results ordered by total funds required, cheapest first.
    """
    results = [
        calculate_cashflow(inputs, code, loan_type, assumptions)
        for code in jurisdictions
    ]
    return sorted(results, key=lambda r: r.total_funds_required)


def format_comparison_table(
    results: List[CashflowResult],
    headers: Optional[List[str]] = None,
) -> str:
    """Format cashflow results as a text table, one column per result.

    Args:
        results: Results to compare.
        headers: Column titles; defaults to "<jurisdiction> <loan type>".

    Returns:
        Formatted string table.
    """
    if headers is None:
        headers = [f"{r.jurisdiction} {r.loan_type.value.upper()}" for r in results]

    width = 25 + 16 * len(results)

    def money_row(label: str, values) -> str:
        return f"{label:<25}" + "".join(f" ${v:>14,.0f}" for v in values)

    def pct_row(label: str, values) -> str:
        return f"{label:<25}" + "".join(f" {v:>15.2%}" for v in values)

    lines = [
        "=" * width,
        "CASHFLOW COMPARISON",
        "=" * width,
        f"{'Metric':<25}" + "".join(f" {h:>15}" for h in headers),
        "-" * width,
        money_row("Purchase Price", [r.purchase_price for r in results]),
        money_row("Deposit", [r.deposit for r in results]),
        money_row("Stamp Duty", [r.stamp_duty for r in results]),
        money_row("Mortgage Fee", [r.mortgage_fee for r in results]),
        money_row("LMI", [r.lmi for r in results]),
        money_row("Total Funds Required", [r.total_funds_required for r in results]),
        "",
        money_row("Annual Rent (Lower)", [r.lower_rent.annual for r in results]),
        pct_row("Gross Yield (Lower)", [r.lower_yield for r in results]),
        money_row("Loan Servicing", [r.loan_servicing_cost.annual for r in results]),
        money_row("Total Expenses", [r.total_expenses.annual for r in results]),
        "",
        money_row("Pre-Tax (Lower)", [r.lower_pre_tax.annual for r in results]),
        money_row("Post-Tax (Lower)", [r.lower_post_tax.annual for r in results]),
        money_row("Post-Tax (Higher)", [r.higher_post_tax.annual for r in results]),
        "=" * width,
    ]

    return "\n".join(lines)
