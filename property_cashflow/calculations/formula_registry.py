"""Formula Registry for transparent calculation auditing.

Central registry of every cashflow formula, so a report can explain
exactly how each value is computed and what it depends on.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set

import networkx as nx


class FormulaCategory(str, Enum):
    """Categories for organizing formulas."""
    INPUT = "Input"
    ACQUISITION = "Acquisition"
    FINANCING = "Financing"
    REVENUE = "Revenue"
    EXPENSES = "Expenses"
    CASHFLOW = "Cashflow"


@dataclass
class FormulaDefinition:
    """Definition of a single calculation formula.

    Attributes:
        field_path: Dot-notation path to the field (e.g., "acquisition.lmi")
        name: Human-readable name (e.g., "Lenders Mortgage Insurance")
        formula: Symbolic formula (e.g., "loan_principal × lmi_rate(deposit_pct)")
        inputs: List of input field paths that feed into this formula
        category: Category for grouping formulas
        unit: Display unit ("$" or "%")
        notes: Optional explanation or caveats
    """
    field_path: str
    name: str
    formula: str
    inputs: List[str]
    category: FormulaCategory
    unit: str = "$"
    notes: str = ""


class FormulaRegistry:
    """Central registry of all calculation formulas.

    Populated once when this module is imported and read-only afterwards.
    reset() exists for tests; the next lookup repopulates under a lock.
    """
    _formulas: Dict[str, FormulaDefinition] = {}
    _initialized: bool = False
    _lock = threading.Lock()

    @classmethod
    def register(cls, definition: FormulaDefinition) -> None:
        """Register a formula definition."""
        cls._formulas[definition.field_path] = definition

    @classmethod
    def get(cls, field_path: str) -> Optional[FormulaDefinition]:
        """Get formula definition by field path."""
        cls._ensure_initialized()
        return cls._formulas.get(field_path)

    @classmethod
    def get_all(cls) -> Dict[str, FormulaDefinition]:
        """Get all registered formulas."""
        cls._ensure_initialized()
        return cls._formulas.copy()

    @classmethod
    def get_by_category(cls, category: FormulaCategory) -> List[FormulaDefinition]:
        """Get all formulas in a category."""
        cls._ensure_initialized()
        return [f for f in cls._formulas.values() if f.category == category]

    @classmethod
    def get_inputs(cls, field_path: str) -> List[str]:
        """Get the input field paths for a formula."""
        formula = cls.get(field_path)
        return formula.inputs if formula else []

    @classmethod
    def get_dependents(cls, field_path: str) -> List[str]:
        """Get all formulas that use this field as an input."""
        cls._ensure_initialized()
        return [
            path for path, formula in cls._formulas.items()
            if field_path in formula.inputs
        ]

    @classmethod
    def get_all_ancestors(cls, field_path: str) -> Set[str]:
        """Get all upstream dependencies recursively."""
        ancestors = set()
        to_process = list(cls.get_inputs(field_path))

        while to_process:
            current = to_process.pop()
            if current not in ancestors:
                ancestors.add(current)
                to_process.extend(cls.get_inputs(current))

        return ancestors

    @classmethod
    def get_all_descendants(cls, field_path: str) -> Set[str]:
        """Get all downstream dependencies recursively."""
        descendants = set()
        to_process = list(cls.get_dependents(field_path))

        while to_process:
            current = to_process.pop()
            if current not in descendants:
                descendants.add(current)
                to_process.extend(cls.get_dependents(current))

        return descendants

    @classmethod
    def build_dependency_graph(cls) -> nx.DiGraph:
        """Build a networkx DiGraph with an edge from each input to its formula."""
        cls._ensure_initialized()
        graph = nx.DiGraph()

        for path, formula in cls._formulas.items():
            graph.add_node(path, **{
                "name": formula.name,
                "category": formula.category.value,
                "formula": formula.formula,
            })

        for path, formula in cls._formulas.items():
            for input_path in formula.inputs:
                graph.add_edge(input_path, path)

        return graph

    @classmethod
    def evaluation_order(cls) -> List[str]:
        """Field paths in an order where every input precedes its dependents."""
        return list(nx.topological_sort(cls.build_dependency_graph()))

    @classmethod
    def _ensure_initialized(cls) -> None:
        """Ensure the registry is populated with formulas."""
        if cls._initialized:
            return
        with cls._lock:
            if not cls._initialized:
                _populate_registry()
                cls._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Reset the registry (mainly for testing)."""
        with cls._lock:
            cls._formulas = {}
            cls._initialized = False


def _input(field_path: str, name: str, unit: str = "$", notes: str = "") -> FormulaDefinition:
    return FormulaDefinition(
        field_path=field_path,
        name=name,
        formula="User input",
        inputs=[],
        category=FormulaCategory.INPUT,
        unit=unit,
        notes=notes,
    )


def _override(
    field_path: str,
    name: str,
    default: str,
    category: FormulaCategory,
    inputs: Optional[List[str]] = None,
) -> FormulaDefinition:
    return FormulaDefinition(
        field_path=field_path,
        name=name,
        formula=f"override or {default}",
        inputs=inputs or [],
        category=category,
    )


def _populate_registry() -> None:
    """Populate the registry with all calculation formulas."""

    # =========================================================================
    # INPUTS
    # =========================================================================
    inputs = [
        _input("inputs.purchase_price", "Purchase Price"),
        _input("inputs.deposit_pct", "Deposit", unit="%",
               notes="Defaults to 20%; values above 1 are whole percentages"),
        _input("inputs.lower_rent_weekly", "Weekly Rent (Lower)",
               notes="Falls back to the higher estimate when blank"),
        _input("inputs.higher_rent_weekly", "Weekly Rent (Higher)",
               notes="Falls back to the lower estimate when blank"),
        _input("inputs.interest_only_rate", "Interest Only Rate", unit="%"),
        _input("inputs.principal_interest_rate", "Principal & Interest Rate", unit="%"),
        _input("inputs.management_fee_pct", "Management Fee", unit="%",
               notes="Defaults to the jurisdiction's typical fee"),
        _input("inputs.tax_bracket", "Tax Bracket", unit="%",
               notes="Defaults to 37% (standard) or 0% (SMSF)"),
    ]

    # =========================================================================
    # ACQUISITION / FUNDS REQUIRED
    # =========================================================================
    acquisition = [
        FormulaDefinition(
            field_path="acquisition.deposit",
            name="Deposit",
            formula="purchase_price × deposit_pct",
            inputs=["inputs.purchase_price", "inputs.deposit_pct"],
            category=FormulaCategory.ACQUISITION,
        ),
        FormulaDefinition(
            field_path="acquisition.stamp_duty",
            name="Stamp Duty",
            formula="override or duty_schedule(jurisdiction, purchase_price)",
            inputs=["inputs.purchase_price"],
            category=FormulaCategory.ACQUISITION,
            notes="Marginal brackets; per-$100 in ACT; rate on total in NT; 4% if unknown",
        ),
        FormulaDefinition(
            field_path="acquisition.mortgage_fee",
            name="Mortgage Registration Fee",
            formula="override or ceil100(2 × transfer_fee + mortgage_registration_fee)",
            inputs=[],
            category=FormulaCategory.ACQUISITION,
            notes="Fixed per jurisdiction; price is not used",
        ),
        FormulaDefinition(
            field_path="acquisition.lmi",
            name="Lenders Mortgage Insurance",
            formula="override or loan_principal × lmi_rate(deposit_pct)",
            inputs=["financing.loan_principal", "inputs.deposit_pct"],
            category=FormulaCategory.ACQUISITION,
            notes="Zero with a deposit of 20% or more",
        ),
        _override("acquisition.legal_fees", "Legal Fees", "$1,500", FormulaCategory.ACQUISITION),
        _override("acquisition.pest_report", "Building & Pest Report", "$500", FormulaCategory.ACQUISITION),
        _override("acquisition.strata_report", "Strata Report", "$0", FormulaCategory.ACQUISITION),
        _override("acquisition.buyers_agency_fee", "Buyer's Agency Fee", "$15,000",
                  FormulaCategory.ACQUISITION),
        _override("acquisition.renovation", "Renovation Budget", "$0", FormulaCategory.ACQUISITION),
        FormulaDefinition(
            field_path="acquisition.total_funds_required",
            name="Total Funds Required",
            formula=(
                "deposit + stamp_duty + mortgage_fee + lmi + legal_fees + pest_report"
                " + strata_report + buyers_agency_fee + renovation"
            ),
            inputs=[
                "acquisition.deposit",
                "acquisition.stamp_duty",
                "acquisition.mortgage_fee",
                "acquisition.lmi",
                "acquisition.legal_fees",
                "acquisition.pest_report",
                "acquisition.strata_report",
                "acquisition.buyers_agency_fee",
                "acquisition.renovation",
            ],
            category=FormulaCategory.ACQUISITION,
            notes="Cash the buyer must bring to settlement",
        ),
    ]

    # =========================================================================
    # FINANCING
    # =========================================================================
    financing = [
        FormulaDefinition(
            field_path="financing.loan_principal",
            name="Loan Amount",
            formula="purchase_price × (1 - deposit_pct)",
            inputs=["inputs.purchase_price", "inputs.deposit_pct"],
            category=FormulaCategory.FINANCING,
        ),
        FormulaDefinition(
            field_path="financing.lvr",
            name="Loan to Value Ratio",
            formula="1 - deposit_pct",
            inputs=["inputs.deposit_pct"],
            category=FormulaCategory.FINANCING,
            unit="%",
        ),
        FormulaDefinition(
            field_path="financing.interest_only_cost",
            name="Interest Only Cost (Annual)",
            formula="loan_principal × interest_only_rate",
            inputs=["financing.loan_principal", "inputs.interest_only_rate"],
            category=FormulaCategory.FINANCING,
        ),
        FormulaDefinition(
            field_path="financing.principal_interest_cost",
            name="Principal & Interest Cost (Annual)",
            formula="12 × PMT(principal_interest_rate / 12, term_years × 12, loan_principal)",
            inputs=["financing.loan_principal", "inputs.principal_interest_rate"],
            category=FormulaCategory.FINANCING,
            notes="Zero rate repays principal in equal monthly parts",
        ),
    ]

    # =========================================================================
    # REVENUE
    # =========================================================================
    revenue = [
        FormulaDefinition(
            field_path="revenue.lower_rent_annual",
            name="Annual Rent (Lower)",
            formula="lower_rent_weekly × 52",
            inputs=["inputs.lower_rent_weekly"],
            category=FormulaCategory.REVENUE,
        ),
        FormulaDefinition(
            field_path="revenue.higher_rent_annual",
            name="Annual Rent (Higher)",
            formula="higher_rent_weekly × 52",
            inputs=["inputs.higher_rent_weekly"],
            category=FormulaCategory.REVENUE,
        ),
        FormulaDefinition(
            field_path="revenue.lower_yield",
            name="Gross Yield (Lower)",
            formula="lower_rent_annual / (purchase_price + renovation)",
            inputs=[
                "revenue.lower_rent_annual",
                "inputs.purchase_price",
                "acquisition.renovation",
            ],
            category=FormulaCategory.REVENUE,
            unit="%",
            notes="0 when price and renovation are both 0",
        ),
        FormulaDefinition(
            field_path="revenue.higher_yield",
            name="Gross Yield (Higher)",
            formula="higher_rent_annual / (purchase_price + renovation)",
            inputs=[
                "revenue.higher_rent_annual",
                "inputs.purchase_price",
                "acquisition.renovation",
            ],
            category=FormulaCategory.REVENUE,
            unit="%",
            notes="0 when price and renovation are both 0",
        ),
    ]

    # =========================================================================
    # EXPENSES
    # =========================================================================
    expenses = [
        _override("expenses.council_rates", "Council Rates", "$2,000", FormulaCategory.EXPENSES),
        _override("expenses.strata_fees", "Strata Fees", "$0", FormulaCategory.EXPENSES),
        _override("expenses.building_insurance", "Building Insurance", "$1,200",
                  FormulaCategory.EXPENSES),
        _override("expenses.landlord_insurance", "Landlord Insurance",
                  "jurisdiction default", FormulaCategory.EXPENSES),
        _override("expenses.miscellaneous", "Miscellaneous", "$500", FormulaCategory.EXPENSES),
        FormulaDefinition(
            field_path="expenses.management_fee",
            name="Property Management Fee",
            formula="lower_rent_annual × management_fee_pct",
            inputs=["revenue.lower_rent_annual", "inputs.management_fee_pct"],
            category=FormulaCategory.EXPENSES,
            notes="Always sized to the lower rent estimate",
        ),
        FormulaDefinition(
            field_path="expenses.loan_servicing",
            name="Loan Servicing Cost",
            formula="interest_only_cost (standard) or principal_interest_cost (SMSF)",
            inputs=["financing.interest_only_cost", "financing.principal_interest_cost"],
            category=FormulaCategory.EXPENSES,
        ),
        FormulaDefinition(
            field_path="expenses.total",
            name="Total Expenses",
            formula=(
                "council_rates + strata_fees + building_insurance + landlord_insurance"
                " + miscellaneous + management_fee + loan_servicing"
            ),
            inputs=[
                "expenses.council_rates",
                "expenses.strata_fees",
                "expenses.building_insurance",
                "expenses.landlord_insurance",
                "expenses.miscellaneous",
                "expenses.management_fee",
                "expenses.loan_servicing",
            ],
            category=FormulaCategory.EXPENSES,
        ),
    ]

    # =========================================================================
    # CASHFLOW
    # =========================================================================
    cashflow = []
    for tier, label in (("lower", "Lower"), ("higher", "Higher")):
        cashflow.extend([
            FormulaDefinition(
                field_path=f"cashflow.{tier}_pre_tax",
                name=f"Pre-Tax Cashflow ({label})",
                formula=f"{tier}_rent_annual - total_expenses",
                inputs=[f"revenue.{tier}_rent_annual", "expenses.total"],
                category=FormulaCategory.CASHFLOW,
                notes="Displayed without sign",
            ),
            FormulaDefinition(
                field_path=f"cashflow.{tier}_post_tax",
                name=f"Post-Tax Cashflow ({label})",
                formula=f"{tier}_pre_tax × (1 - tax_bracket)",
                inputs=[f"cashflow.{tier}_pre_tax", "inputs.tax_bracket"],
                category=FormulaCategory.CASHFLOW,
            ),
        ])

    all_formulas = inputs + acquisition + financing + revenue + expenses + cashflow
    for formula in all_formulas:
        FormulaRegistry.register(formula)


FormulaRegistry._ensure_initialized()
