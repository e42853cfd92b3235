"""Core calculation engine for the EMI calculator.

This module implements the financial logic: the Equated Monthly Installment
(EMI) of a fixed-rate loan, the month-by-month amortization schedule derived
from it, and a comparison of EMI outcomes across several candidate rates.
Every function is pure; results are freshly built value objects from
:mod:`emi_calc.data_models`.

Invalid terms are reported by returning ``None`` rather than raising, so a
caller can clear whatever result it was showing and wait for corrected input.
"""

from __future__ import annotations

import logging
import math
from numbers import Integral, Real
from typing import Iterable, List, Optional

from .data_models import (
    AmortizationEntry,
    Calculation,
    EmiResult,
    LoanTerms,
    ScenarioResult,
    monthly_rate_from_annual,
)

logger = logging.getLogger(__name__)

# Upper bound on the number of installments (100 years). The schedule builder
# is linear in the term with no early exit.
MAX_TERM_MONTHS = 1200


def _is_number(value: object) -> bool:
    if not isinstance(value, Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a double
        return False


def _valid_term(term_months: object) -> bool:
    return (
        isinstance(term_months, Integral)
        and not isinstance(term_months, bool)
        and 0 < term_months <= MAX_TERM_MONTHS
    )


def _calculate_emi(principal: float, rate_per_month: float, term: int) -> float:
    """Return the equal monthly installment for a loan.

    The formula is:

        emi = P * i * (1 + i)^n / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. May raise ``OverflowError`` or
    ``ZeroDivisionError`` for pathological rate/term combinations.
    """
    factor = (1 + rate_per_month) ** term
    return principal * rate_per_month * factor / (factor - 1)


def compute_emi(principal: float, annual_rate_percent: float, term_months: int) -> Optional[EmiResult]:
    """Compute the EMI and aggregate totals for a loan.

    Parameters
    ----------
    principal: float
        Borrowed amount, must be positive.
    annual_rate_percent: float
        Nominal annual rate in percent, must be positive.
    term_months: int
        Number of monthly installments, between 1 and ``MAX_TERM_MONTHS``.

    Returns
    -------
    EmiResult or None
        ``None`` when the terms are invalid or the formula does not produce a
        finite number. The two cases are not distinguished.
    """
    if not (_is_number(principal) and _is_number(annual_rate_percent)):
        return None
    if principal <= 0 or annual_rate_percent <= 0 or not _valid_term(term_months):
        return None

    term = int(term_months)
    rate_per_month = monthly_rate_from_annual(annual_rate_percent)
    try:
        emi = _calculate_emi(float(principal), rate_per_month, term)
    except (OverflowError, ZeroDivisionError):
        return None
    if not math.isfinite(emi):
        return None

    total_repayment = emi * term
    return EmiResult(
        monthly_emi=emi,
        principal=float(principal),
        total_interest=total_repayment - principal,
        total_repayment=total_repayment,
    )


def build_schedule(
    principal: float,
    monthly_rate: float,
    term_months: int,
    monthly_emi: float,
) -> List[AmortizationEntry]:
    """Amortize a loan month by month.

    Only call this with the EMI that :func:`compute_emi` produced for the same
    principal, rate and term. The schedule always has exactly ``term_months``
    entries; ``remaining_balance`` is clamped at zero to absorb floating point
    overshoot on the last installment.

    Raises
    ------
    ValueError
        If ``term_months`` is outside ``1..MAX_TERM_MONTHS``.
    """
    if not _valid_term(term_months):
        raise ValueError(f"Term must be between 1 and {MAX_TERM_MONTHS} months; got {term_months}")

    schedule: List[AmortizationEntry] = []
    balance = float(principal)
    for month in range(1, int(term_months) + 1):
        interest_payment = balance * monthly_rate
        principal_payment = monthly_emi - interest_payment
        balance -= principal_payment
        schedule.append(
            AmortizationEntry(
                month=month,
                principal=principal_payment,
                interest=interest_payment,
                total_payment=monthly_emi,
                remaining_balance=max(balance, 0.0),
            )
        )
    return schedule


def scenario_label(rate: float, is_current: bool) -> str:
    if is_current:
        return f"Current ({rate:.2f}%)"
    return f"{rate:.2f}%"


def _candidate_rates(primary_rate: float, extra_rates: Iterable[float]) -> List[float]:
    """Primary rate followed by the extra rates, without repeated values."""
    seen = set()
    rates: List[float] = []
    for rate in [primary_rate, *extra_rates]:
        if rate in seen:
            continue
        seen.add(rate)
        rates.append(rate)
    return rates


def compare_scenarios(
    terms: LoanTerms,
    primary_rate: float,
    extra_rates: Iterable[float],
) -> List[ScenarioResult]:
    """Evaluate the EMI at the primary rate and every extra rate.

    Rates are deduplicated by value, so an extra rate equal to the primary
    rate is computed once, as the current scenario. Rates for which
    :func:`compute_emi` gives no result are left out of the comparison. The
    result is ordered by ascending rate.
    """
    scenarios: List[ScenarioResult] = []
    for rate in _candidate_rates(primary_rate, extra_rates):
        result = compute_emi(terms.principal, rate, terms.term_months)
        if result is None:
            logger.debug("Dropping comparison rate %r: no valid EMI", rate)
            continue
        is_current = rate == primary_rate
        scenarios.append(
            ScenarioResult.from_result(
                result,
                rate=rate,
                label=scenario_label(rate, is_current),
                is_current=is_current,
            )
        )
    scenarios.sort(key=lambda s: s.rate)
    return scenarios


def run_calculation(terms: LoanTerms, extra_rates: Iterable[float] = ()) -> Optional[Calculation]:
    """Derive the result, schedule and rate comparison for a set of terms.

    Returns ``None`` when the terms do not yield a valid EMI; no schedule or
    comparison is built in that case.
    """
    result = compute_emi(terms.principal, terms.annual_rate_percent, terms.term_months)
    if result is None:
        return None
    schedule = build_schedule(
        result.principal,
        terms.monthly_rate,
        terms.term_months,
        result.monthly_emi,
    )
    scenarios = compare_scenarios(terms, terms.annual_rate_percent, extra_rates)
    return Calculation(terms=terms, result=result, schedule=schedule, scenarios=scenarios)
