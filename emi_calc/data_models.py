"""Data models for the EMI calculator.

This module defines dataclasses representing the entities used by the
calculator: the loan terms supplied by the user, the EMI result, individual
amortization entries and the per-rate comparison scenarios. All of them are
frozen value objects; every calculation builds fresh instances instead of
mutating previous ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


def monthly_rate_from_annual(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return annual_rate_percent / 12 / 100


class TenureUnit(str, Enum):
    """Unit in which the user expresses the loan tenure."""

    YEARS = "years"
    MONTHS = "months"


@dataclass(frozen=True)
class Currency:
    """Display metadata for a currency.

    Currency never affects computed values; amounts are dimensionless and the
    currency is only used when rendering them.
    """

    code: str
    symbol: str
    label: str


@dataclass(frozen=True)
class LoanTerms:
    """Inputs to every calculation.

    Attributes
    ----------
    principal: float
        The borrowed amount.
    annual_rate_percent: float
        Nominal annual interest rate in percent (``8.5`` means 8.5 %).
    term_months: int
        Number of monthly installments.
    """

    principal: float
    annual_rate_percent: float
    term_months: int

    @property
    def monthly_rate(self) -> float:
        return monthly_rate_from_annual(self.annual_rate_percent)


@dataclass(frozen=True)
class EmiResult:
    """Outcome of the EMI formula for one set of terms.

    ``total_repayment`` is ``monthly_emi * term_months`` and ``total_interest``
    is ``total_repayment - principal``.
    """

    monthly_emi: float
    principal: float
    total_interest: float
    total_repayment: float

    @property
    def interest_share(self) -> float:
        """Fraction of the total repayment that goes to interest."""
        if self.total_repayment <= 0:
            return 0.0
        return self.total_interest / self.total_repayment


@dataclass(frozen=True)
class AmortizationEntry:
    """An entry in the amortization schedule.

    Each entry corresponds to one month. ``principal + interest`` equals
    ``total_payment``, which is the constant EMI.
    """

    month: int
    principal: float
    interest: float
    total_payment: float
    remaining_balance: float


@dataclass(frozen=True)
class ScenarioResult(EmiResult):
    """An EMI result evaluated at one candidate rate of a comparison.

    ``rate`` is the numeric annual rate in percent and is what comparisons are
    ordered by; ``label`` is display text only.

    The defaults on ``rate``, ``label`` and ``is_current`` exist only because
    they follow the fields of ``EmiResult``, which have none; build
    instances with :meth:`from_result`, which requires all three.
    """

    rate: float = 0.0
    label: str = ""
    is_current: bool = False

    @classmethod
    def from_result(cls, result: EmiResult, *, rate: float, label: str, is_current: bool) -> "ScenarioResult":
        return cls(
            monthly_emi=result.monthly_emi,
            principal=result.principal,
            total_interest=result.total_interest,
            total_repayment=result.total_repayment,
            rate=float(rate),
            label=label,
            is_current=is_current,
        )


@dataclass(frozen=True)
class Calculation:
    """Everything derived from one set of loan terms."""

    terms: LoanTerms
    result: EmiResult
    schedule: List[AmortizationEntry] = field(default_factory=list)
    scenarios: List[ScenarioResult] = field(default_factory=list)

    @property
    def current_scenario(self) -> Optional[ScenarioResult]:
        for scenario in self.scenarios:
            if scenario.is_current:
                return scenario
        return None
