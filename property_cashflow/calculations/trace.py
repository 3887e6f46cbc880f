"""Calculation tracing for transparent audit trails.

Captures the actual values used in each cashflow formula so a report
can show how every figure was reached.
"""

from contextvars import ContextVar
from dataclasses import dataclass
from typing import Dict, List, Optional

from .formula_registry import FormulaRegistry, FormulaDefinition

_active_context: ContextVar[Optional["TraceContext"]] = ContextVar(
    "trace_context", default=None
)


def format_trace_value(value: float, unit: str = "$") -> str:
    """Format a value for display in a trace line."""
    if unit == "%":
        return f"{value:.2%}"
    if value == 0:
        return "$0"
    return f"${value:,.2f}"


@dataclass
class TracedValue:
    """A single traced calculation."""
    field_path: str
    value: float
    formula_def: Optional[FormulaDefinition]
    input_values: Dict[str, float]
    computed_formula: str  # Formula with values substituted
    notes: str = ""

    @property
    def unit(self) -> str:
        return self.formula_def.unit if self.formula_def else "$"

    def format_inputs(self) -> str:
        """Format input values for display."""
        parts = []
        for name, val in self.input_values.items():
            definition = FormulaRegistry.get(name)
            unit = definition.unit if definition else "$"
            parts.append(f"{name.split('.')[-1]}={format_trace_value(val, unit)}")
        return ", ".join(parts)


class TraceContext:
    """Context manager for capturing calculation traces.

    Usage:
        with TraceContext() as ctx:
            result = calculate_cashflow(inputs, "NSW")
            # ctx.traces now contains all traced calculations

    The active context is held in a ContextVar, so each thread or async
    task only sees the context it opened.
    """

    def __init__(self, enabled: bool = True):
        """Initialize trace context.

        Args:
            enabled: If False, trace() calls are no-ops.
        """
        self.enabled = enabled
        self.traces: Dict[str, TracedValue] = {}
        self._token = None

    def __enter__(self) -> "TraceContext":
        self._token = _active_context.set(self)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        _active_context.reset(self._token)
        self._token = None

    def trace(
        self,
        field_path: str,
        value: float,
        input_values: Dict[str, float],
        notes: str = "",
    ) -> None:
        """Record a traced calculation.

        Args:
            field_path: The formula field path (e.g., "acquisition.stamp_duty")
            value: The calculated result
            input_values: Dict of input field path -> value used
            notes: Optional notes, e.g. whether a default was substituted
        """
        if not self.enabled:
            return

        formula_def = FormulaRegistry.get(field_path)
        formula = formula_def.formula if formula_def else field_path
        unit = formula_def.unit if formula_def else "$"

        self.traces[field_path] = TracedValue(
            field_path=field_path,
            value=value,
            formula_def=formula_def,
            input_values=dict(input_values),
            computed_formula=f"{formula} = {format_trace_value(value, unit)}",
            notes=notes,
        )

    def get_trace(self, field_path: str) -> Optional[TracedValue]:
        """Get a specific trace by field path."""
        return self.traces.get(field_path)

    def get_traces_by_category(self, category: str) -> Dict[str, TracedValue]:
        """Get all traces in a specific category."""
        return {
            k: v for k, v in self.traces.items()
            if v.formula_def and v.formula_def.category.value == category
        }

    def get_calculation_chain(self, field_path: str) -> List[TracedValue]:
        """Get the full calculation chain for a value (all upstream traces).

        Returns traces in order from inputs to final value.
        """
        chain = []
        visited = set()

        def _collect_chain(path: str):
            if path in visited:
                return
            visited.add(path)

            traced = self.get_trace(path)
            if traced:
                for input_path in traced.input_values:
                    _collect_chain(input_path)
                chain.append(traced)

        _collect_chain(field_path)
        return chain

    def summary(self) -> str:
        """Generate a summary of all traces grouped by category."""
        lines = [f"Trace Summary ({len(self.traces)} calculations traced)", ""]

        by_category: Dict[str, List[TracedValue]] = {}
        for traced in self.traces.values():
            cat = traced.formula_def.category.value if traced.formula_def else "Unknown"
            by_category.setdefault(cat, []).append(traced)

        for category, traces in sorted(by_category.items()):
            lines.append(f"=== {category} ({len(traces)} traces) ===")
            for traced in traces:
                suffix = f"  [{traced.notes}]" if traced.notes else ""
                lines.append(f"  {traced.field_path}: {traced.computed_formula}{suffix}")
            lines.append("")

        return "\n".join(lines)

    @staticmethod
    def current() -> Optional["TraceContext"]:
        """Get the trace context active in this thread or task."""
        return _active_context.get()


def trace(
    field_path: str,
    value: float,
    input_values: Dict[str, float],
    notes: str = "",
) -> float:
    """Trace a calculation and return the value unchanged.

    This can be used inline in calculations:
        lvr = trace("financing.lvr", 1 - deposit, {"inputs.deposit_pct": deposit})
    """
    ctx = TraceContext.current()
    if ctx:
        ctx.trace(field_path, value, input_values, notes)
    return value
