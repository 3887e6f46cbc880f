#!/usr/bin/env python3
"""Example script to run the cashflow engine on a sample purchase."""

import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from property_cashflow.models import CashflowInput, Jurisdiction, LoanType
from property_cashflow.calculations import (
    TraceContext,
    calculate_cashflow,
    compare_jurisdictions,
    compare_loan_types,
    format_comparison_table,
)
from property_cashflow.export import AuditReportConfig, generate_audit_excel


def get_example_inputs() -> CashflowInput:
    """Sample inputs: $600k purchase, $500/week rent, 20% deposit."""
    return CashflowInput(
        purchase_price=600_000,
        lower_rent_weekly=500,
        higher_rent_weekly=550,
        deposit_pct=0.20,
        as_of=date(2026, 1, 1),
    )


def print_result(result) -> None:
    """Print the display fields of a cashflow result."""
    display = result.to_display_dict()

    print("\n" + "=" * 60)
    print(f"CASHFLOW - {display['jurisdiction']} ({display['loan_type'].upper()})")
    print("=" * 60)

    sections = [
        ("Funds Required", [
            "purchase_price", "deposit", "stamp_duty", "mortgage_fee", "lmi",
            "legal_fees", "pest_report", "buyers_agency_fee", "renovation",
            "total_funds_required",
        ]),
        ("Loan", ["loan_amount", "lvr_percent", "interest_only_rate", "principal_interest_rate"]),
        ("Revenue", ["lower_rent_weekly", "lower_rent_annual", "lower_yield", "higher_yield"]),
        ("Expenses (Annual)", [
            "council_rates_annual", "strata_fees_annual", "building_insurance_annual",
            "landlord_insurance_annual", "miscellaneous_annual", "management_fee_annual",
            "interest_only_cost_annual", "principal_interest_cost_annual",
            "total_expenses_annual",
        ]),
        ("Cashflow (Annual)", [
            "lower_pre_tax_cashflow_annual", "lower_post_tax_cashflow_annual",
            "higher_pre_tax_cashflow_annual", "higher_post_tax_cashflow_annual",
            "lower_cashflow_direction", "tax_bracket",
        ]),
    ]

    for title, keys in sections:
        print(f"\n{title}")
        print("-" * 60)
        for key in keys:
            print(f"  {key:<34} {display[key]:>20}")

    print(f"\n  {'expense_label':<34} {display['expense_label']:>20}")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Property investment cashflow")
    parser.add_argument("--state", default="NSW", help="Jurisdiction code (default NSW)")
    parser.add_argument("--smsf", action="store_true", help="Use the SMSF loan profile")
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Compare loan types and all jurisdictions",
    )
    parser.add_argument("--excel", type=Path, help="Write an audit workbook to this path")
    parser.add_argument("--trace", action="store_true", help="Print the calculation trace")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    inputs = get_example_inputs()
    loan_type = LoanType.SMSF if args.smsf else LoanType.STANDARD

    with TraceContext() as ctx:
        result = calculate_cashflow(inputs, args.state, loan_type)

    print_result(result)

    if args.trace:
        print("\n" + ctx.summary())

    if args.compare:
        loan_comparison = compare_loan_types(inputs, args.state)
        print("\n" + format_comparison_table(
            [loan_comparison.standard, loan_comparison.smsf],
            headers=["Standard", "SMSF"],
        ))
        print(f"Better structure: {loan_comparison.better_structure.value.upper()}")

        by_state = compare_jurisdictions(inputs, list(Jurisdiction), loan_type)
        print("\n" + format_comparison_table(by_state))

    if args.excel:
        args.excel.write_bytes(
            generate_audit_excel(result, AuditReportConfig(property_name="Example Purchase"))
        )
        print(f"\nAudit workbook written to {args.excel}")

    print("\nDone.")


if __name__ == "__main__":
    main()
