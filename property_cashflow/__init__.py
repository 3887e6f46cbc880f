"""Property investment cashflow engine."""

from .models import CashflowInput, Jurisdiction, LoanType
from .calculations import CashflowResult, calculate_cashflow, calculate_cashflow_from_mapping

__all__ = [
    "CashflowInput",
    "Jurisdiction",
    "LoanType",
    "CashflowResult",
    "calculate_cashflow",
    "calculate_cashflow_from_mapping",
]
