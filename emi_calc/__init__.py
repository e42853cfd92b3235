"""EMI calculator: installments, amortization schedules and rate comparison."""

from .data_models import (
    AmortizationEntry,
    Calculation,
    Currency,
    EmiResult,
    LoanTerms,
    ScenarioResult,
    TenureUnit,
)
from .engine import MAX_TERM_MONTHS, build_schedule, compare_scenarios, compute_emi, run_calculation

__all__ = [
    "AmortizationEntry",
    "Calculation",
    "Currency",
    "EmiResult",
    "LoanTerms",
    "ScenarioResult",
    "TenureUnit",
    "MAX_TERM_MONTHS",
    "build_schedule",
    "compare_scenarios",
    "compute_emi",
    "run_calculation",
]
