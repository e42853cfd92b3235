"""Output helpers for the EMI calculator.

This module holds the supported display currencies, number formatting with
Indian (lakh/crore) digit grouping, and functions that render results,
schedules and rate comparisons as simple text tables through ``click.echo``.
Formatting never changes computed values.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional

import click

from .data_models import AmortizationEntry, Currency, EmiResult, ScenarioResult

SUPPORTED_CURRENCIES: Dict[str, Currency] = {
    "INR": Currency(code="INR", symbol="₹", label="Indian rupee"),
    "NPR": Currency(code="NPR", symbol="रू", label="Nepalese rupee"),
}
DEFAULT_CURRENCY_CODE = "NPR"


def default_currency_code() -> str:
    code = os.environ.get("EMI_CALC_CURRENCY", DEFAULT_CURRENCY_CODE).upper()
    return code if code in SUPPORTED_CURRENCIES else DEFAULT_CURRENCY_CODE


def get_currency(code: Optional[str] = None) -> Currency:
    """Return the currency for ``code``, falling back to the default one.

    Anything that is not a known code, including non-string values from a
    JSON body, selects the default.
    """
    if isinstance(code, str) and code:
        currency = SUPPORTED_CURRENCIES.get(code.strip().upper())
        if currency is not None:
            return currency
    return SUPPORTED_CURRENCIES[default_currency_code()]


def group_digits(value: float, decimals: int = 2) -> str:
    """Format a number with lakh/crore grouping, e.g. ``12,34,567.89``.

    The last three integer digits form one group and the rest are grouped in
    pairs, which is how both ``en-IN`` and ``ne-NP`` write amounts.
    """
    text = f"{abs(value):.{decimals}f}"
    whole, _, frac = text.partition(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    # no "-0.00"
    sign = "-" if value < 0 and float(text) != 0 else ""
    return f"{sign}{whole}.{frac}" if frac else f"{sign}{whole}"


def format_money(value: float, currency: Currency, decimals: int = 2) -> str:
    return f"{currency.symbol}{group_digits(value, decimals)}"


def print_summary(result: EmiResult, currency: Currency) -> None:
    """Print the EMI and totals in a human-readable format."""
    click.echo("Summary")
    click.echo("-" * 72)
    click.echo(f"Monthly EMI        : {format_money(result.monthly_emi, currency)}")
    click.echo(f"Principal amount   : {format_money(result.principal, currency, 0)}")
    click.echo(f"Total interest     : {format_money(result.total_interest, currency, 0)}")
    click.echo(f"Total repayment    : {format_money(result.total_repayment, currency, 0)}")
    click.echo(f"Interest share     : {result.interest_share * 100:.1f}%")
    click.echo("-" * 72)


def print_schedule(schedule: Iterable[AmortizationEntry], currency: Currency) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Month", "Principal", "Interest", "Payment", "Balance"]
    click.echo("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.month),
            format_money(entry.principal, currency),
            format_money(entry.interest, currency),
            format_money(entry.total_payment, currency),
            format_money(entry.remaining_balance, currency),
        ]
        click.echo("\t".join(row))


def print_comparison(scenarios: Iterable[ScenarioResult], currency: Currency) -> None:
    """Print one row per compared rate, in the order given."""
    click.echo("Loan comparison")
    click.echo("=" * 72)
    click.echo(f"{'Scenario':18s} {'Monthly EMI':>17s} {'Total interest':>17s} {'Total repayment':>17s}")
    for s in scenarios:
        click.echo(
            f"{s.label:18s} "
            f"{format_money(s.monthly_emi, currency):>17s} "
            f"{format_money(s.total_interest, currency, 0):>17s} "
            f"{format_money(s.total_repayment, currency, 0):>17s}"
        )
    click.echo("=" * 72)
