"""Audit Report Generator - Export cashflow calculation documentation.

Generates an Excel workbook showing the cashflow figures, the formulas
behind them, and the traced values actually used.
"""

import io
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils.dataframe import dataframe_to_rows

from ..calculations.cashflow import CashflowResult, format_percent
from ..calculations.formula_registry import FormulaCategory, FormulaRegistry
from ..calculations.trace import TraceContext, format_trace_value


@dataclass
class AuditReportConfig:
    """Configuration for audit report generation."""
    include_summary: bool = True
    include_funds_required: bool = True
    include_cashflow: bool = True
    include_formula_registry: bool = True
    include_traced_values: bool = True
    property_name: str = "Investment Property"
    generated_at: Optional[datetime] = None  # Defaults to now


def _add_header_style(ws, row: int, cols: int) -> None:
    """Apply header styling to a row."""
    header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True)

    for col in range(1, cols + 1):
        cell = ws.cell(row=row, column=col)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center")


def _add_section_header(ws, title: str, row: int) -> int:
    """Add a section header and return next row."""
    ws.cell(row=row, column=1, value=title)
    ws.cell(row=row, column=1).font = Font(bold=True, size=14)
    return row + 1


def generate_audit_excel(
    result: CashflowResult,
    config: Optional[AuditReportConfig] = None,
) -> bytes:
    """Generate an Excel audit report for a cashflow result.

    Args:
        result: The CashflowResult from calculate_cashflow()
        config: Optional configuration for the report

    Returns:
        Excel file as bytes
    """
    if config is None:
        config = AuditReportConfig()

    wb = Workbook()
    wb.remove(wb.active)

    if config.include_summary:
        _create_summary_sheet(wb.create_sheet("Summary"), result, config)

    if config.include_funds_required:
        _create_funds_required_sheet(wb.create_sheet("Funds Required"), result)

    if config.include_cashflow:
        _create_cashflow_sheet(wb.create_sheet("Cashflow"), result)

    if config.include_formula_registry:
        _create_formula_registry_sheet(wb.create_sheet("Formula Registry"))

    if config.include_traced_values and result.trace_context:
        _create_traced_calculations_sheet(
            wb.create_sheet("Traced Calculations"), result.trace_context
        )

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()


def _create_summary_sheet(ws, result: CashflowResult, config: AuditReportConfig) -> None:
    """Create the summary sheet."""
    generated = config.generated_at or datetime.now()
    row = 1

    ws.cell(row=row, column=1, value=f"Cashflow Report: {config.property_name}")
    ws.cell(row=row, column=1).font = Font(bold=True, size=16)
    row += 1

    ws.cell(row=row, column=1, value=f"Jurisdiction: {result.jurisdiction}")
    row += 1
    ws.cell(row=row, column=1, value=f"Loan Type: {result.loan_type.value.upper()}")
    row += 1
    ws.cell(row=row, column=1, value=f"As Of: {result.as_of.isoformat()}")
    row += 1
    ws.cell(row=row, column=1, value=f"Generated: {generated.strftime('%Y-%m-%d %H:%M:%S')}")
    row += 2

    row = _add_section_header(ws, "Key Metrics", row)
    row += 1

    metrics = [
        ("Purchase Price", f"${result.purchase_price:,.2f}"),
        ("Deposit", f"${result.deposit:,.2f} ({format_percent(result.deposit_pct)})"),
        ("Loan Amount", f"${result.loan_principal:,.2f} (LVR {format_percent(result.lvr)})"),
        ("Total Funds Required", f"${result.total_funds_required:,.2f}"),
        ("", ""),
        ("Gross Yield (Lower)", f"{result.lower_yield:.2%}"),
        ("Gross Yield (Higher)", f"{result.higher_yield:.2%}"),
        ("", ""),
        (result.expense_label, f"${result.total_expenses.annual:,.2f}"),
        ("Pre-Tax Cashflow (Lower)", f"${result.lower_pre_tax.annual:,.2f}"),
        ("Post-Tax Cashflow (Lower)", f"${result.lower_post_tax.annual:,.2f}"),
        ("Tax Bracket", format_percent(result.tax_bracket)),
    ]

    for label, value in metrics:
        if label:
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=value)
        row += 1

    if result.overrides_applied:
        row += 1
        ws.cell(row=row, column=1, value="Overrides")
        ws.cell(row=row, column=2, value=", ".join(result.overrides_applied))

    ws.column_dimensions['A'].width = 38
    ws.column_dimensions['B'].width = 32


def _create_funds_required_sheet(ws, result: CashflowResult) -> None:
    """Create the Funds Required sheet."""
    row = 1
    row = _add_section_header(ws, "Funds Required", row)
    row += 1

    headers = ["Item", "Amount", "Formula"]
    for col, header in enumerate(headers, 1):
        ws.cell(row=row, column=col, value=header)
    _add_header_style(ws, row, len(headers))
    row += 1

    items = [
        ("Deposit", result.deposit, "acquisition.deposit"),
        ("Stamp Duty", result.stamp_duty, "acquisition.stamp_duty"),
        ("Mortgage Registration Fee", result.mortgage_fee, "acquisition.mortgage_fee"),
        ("Lenders Mortgage Insurance", result.lmi, "acquisition.lmi"),
        ("Legal Fees", result.legal_fees, "acquisition.legal_fees"),
        ("Building & Pest Report", result.pest_report, "acquisition.pest_report"),
        ("Strata Report", result.strata_report, "acquisition.strata_report"),
        ("Buyer's Agency Fee", result.buyers_agency_fee, "acquisition.buyers_agency_fee"),
        ("Renovation", result.renovation, "acquisition.renovation"),
        ("Total Funds Required", result.total_funds_required, "acquisition.total_funds_required"),
    ]

    for label, amount, field_path in items:
        definition = FormulaRegistry.get(field_path)
        ws.cell(row=row, column=1, value=label)
        ws.cell(row=row, column=2, value=round(amount, 2))
        ws.cell(row=row, column=2).number_format = "#,##0.00"
        ws.cell(row=row, column=3, value=definition.formula if definition else "-")
        if label == "Total Funds Required":
            ws.cell(row=row, column=1).font = Font(bold=True)
            ws.cell(row=row, column=2).font = Font(bold=True)
        row += 1

    ws.column_dimensions['A'].width = 30
    ws.column_dimensions['B'].width = 18
    ws.column_dimensions['C'].width = 80


def _create_cashflow_sheet(ws, result: CashflowResult) -> None:
    """Create the weekly/monthly/annual Cashflow sheet from the result's DataFrame."""
    row = 1
    row = _add_section_header(ws, "Income, Expenses & Cashflow", row)
    row += 1

    df = result.to_dataframe().round(2)
    header_row = row
    for r in dataframe_to_rows(df, index=False, header=True):
        for col, value in enumerate(r, 1):
            cell = ws.cell(row=row, column=col, value=value)
            if row > header_row and col > 1:
                cell.number_format = "#,##0.00"
        row += 1
    _add_header_style(ws, header_row, len(df.columns))

    ws.column_dimensions['A'].width = 38
    for letter in ("B", "C", "D"):
        ws.column_dimensions[letter].width = 16


def _create_formula_registry_sheet(ws) -> None:
    """Create the Formula Registry sheet."""
    all_formulas = FormulaRegistry.get_all()

    row = 1
    row = _add_section_header(ws, "Formula Registry - All Calculation Definitions", row)
    row += 2

    headers = ["Category", "Name", "Field Path", "Formula", "Inputs", "Notes"]
    for col, header in enumerate(headers, 1):
        ws.cell(row=row, column=col, value=header)
    _add_header_style(ws, row, len(headers))
    row += 1

    by_category: Dict[FormulaCategory, List] = {}
    for field_path, formula in all_formulas.items():
        by_category.setdefault(formula.category, []).append((field_path, formula))

    for category in FormulaCategory:
        for field_path, formula in sorted(by_category.get(category, []), key=lambda x: x[0]):
            ws.cell(row=row, column=1, value=category.value)
            ws.cell(row=row, column=2, value=formula.name)
            ws.cell(row=row, column=3, value=field_path)
            ws.cell(row=row, column=4, value=formula.formula)
            ws.cell(row=row, column=5, value=", ".join(formula.inputs) if formula.inputs else "-")
            ws.cell(row=row, column=6, value=formula.notes if formula.notes else "-")
            row += 1

    ws.column_dimensions['A'].width = 15
    ws.column_dimensions['B'].width = 30
    ws.column_dimensions['C'].width = 34
    ws.column_dimensions['D'].width = 60
    ws.column_dimensions['E'].width = 50
    ws.column_dimensions['F'].width = 45


def _create_traced_calculations_sheet(ws, trace_context: TraceContext) -> None:
    """Create the Traced Calculations sheet."""
    row = 1
    row = _add_section_header(ws, "Traced Calculations - Actual Values Used", row)
    row += 2

    headers = ["Field Path", "Result", "Inputs Used", "Computed Formula", "Notes"]
    for col, header in enumerate(headers, 1):
        ws.cell(row=row, column=col, value=header)
    _add_header_style(ws, row, len(headers))
    row += 1

    for trace_key in sorted(trace_context.traces.keys()):
        traced = trace_context.traces[trace_key]

        ws.cell(row=row, column=1, value=traced.field_path)
        ws.cell(row=row, column=2, value=format_trace_value(traced.value, traced.unit))
        ws.cell(row=row, column=3, value=traced.format_inputs() or "-")
        ws.cell(row=row, column=4, value=traced.computed_formula)
        ws.cell(row=row, column=5, value=traced.notes if traced.notes else "-")
        row += 1

    ws.column_dimensions['A'].width = 34
    ws.column_dimensions['B'].width = 18
    ws.column_dimensions['C'].width = 70
    ws.column_dimensions['D'].width = 80
    ws.column_dimensions['E'].width = 22
