"""Calculation modules for the property investment cashflow engine."""

from .parsing import (
    parse_number,
    parse_override,
    parse_percent,
    parse_percent_override,
    normalize_percent,
    clamp_fraction,
)
from .stamp_duty import calculate_stamp_duty, calculate_stamp_duty_detailed, StampDutyResult
from .lmi import calculate_lmi, lmi_premium_rate
from .mortgage_fee import calculate_mortgage_fee
from .debt import (
    LoanServicing,
    calculate_annual_repayment,
    calculate_interest_only_cost,
    calculate_loan_balance,
    calculate_monthly_repayment,
    size_loan,
)

# Cashflow aggregator - single entry point for a full projection
from .cashflow import (
    Amount,
    CashflowResult,
    calculate_cashflow,
    calculate_cashflow_from_mapping,
    format_money,
    format_percent,
    format_yield,
)
from .comparison import (
    LoanTypeComparison,
    compare_loan_types,
    compare_jurisdictions,
    format_comparison_table,
)

# Tracing and formula registry
from .formula_registry import FormulaCategory, FormulaDefinition, FormulaRegistry
from .trace import TraceContext, TracedValue, trace

__all__ = [
    "parse_number",
    "parse_override",
    "parse_percent",
    "parse_percent_override",
    "normalize_percent",
    "clamp_fraction",
    "calculate_stamp_duty",
    "calculate_stamp_duty_detailed",
    "StampDutyResult",
    "calculate_lmi",
    "lmi_premium_rate",
    "calculate_mortgage_fee",
    "LoanServicing",
    "calculate_annual_repayment",
    "calculate_interest_only_cost",
    "calculate_loan_balance",
    "calculate_monthly_repayment",
    "size_loan",
    "Amount",
    "CashflowResult",
    "calculate_cashflow",
    "calculate_cashflow_from_mapping",
    "format_money",
    "format_percent",
    "format_yield",
    "LoanTypeComparison",
    "compare_loan_types",
    "compare_jurisdictions",
    "format_comparison_table",
    "FormulaCategory",
    "FormulaDefinition",
    "FormulaRegistry",
    "TraceContext",
    "TracedValue",
    "trace",
]
