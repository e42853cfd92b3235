"""Command-line interface for the EMI calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute the EMI of a loan, print its full amortization
schedule or compare the EMI across several interest rates. Schedules can be
exported to JSON or CSV files.

    emi-calc emi -a 10l -r 8.5 -t 10
    emi-calc schedule -a 1000000 -r 8.5 -t 120 --tenure-unit months --output plan.csv
    emi-calc compare -a 10l -r 8.5 -t 10 --compare "8, 8.25, 9"
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import click

from .data_models import AmortizationEntry, Calculation, EmiResult, LoanTerms, ScenarioResult, TenureUnit
from .engine import run_calculation
from .formatter import (
    SUPPORTED_CURRENCIES,
    default_currency_code,
    get_currency,
    print_comparison,
    print_schedule,
    print_summary,
)
from .utils import parse_rate_list, terms_from_inputs

logger = logging.getLogger(__name__)

MAX_PRINTED_ROWS = 120


def build_terms_from_options(amount: str, rate: str, tenure: str, tenure_unit: str) -> LoanTerms:
    try:
        return terms_from_inputs(amount, rate, tenure, tenure_unit)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def result_to_dict(result: EmiResult) -> Dict[str, float]:
    return {
        "monthly_emi": result.monthly_emi,
        "principal": result.principal,
        "total_interest": result.total_interest,
        "total_repayment": result.total_repayment,
    }


def schedule_to_records(schedule: Iterable[AmortizationEntry]) -> List[Dict[str, Any]]:
    return [asdict(entry) for entry in schedule]


def scenarios_to_records(scenarios: Iterable[ScenarioResult]) -> List[Dict[str, Any]]:
    return [
        {
            "label": s.label,
            "rate": s.rate,
            "is_current": s.is_current,
            **result_to_dict(s),
        }
        for s in scenarios
    ]


def export_to_json(
    path: Path,
    calculation: Calculation,
    currency_code: str,
    provider_name: Optional[str] = None,
    receiver_name: Optional[str] = None,
) -> None:
    """Export the result, schedule and comparison to a JSON file."""
    data = {
        "report": {
            "provider_name": provider_name or None,
            "receiver_name": receiver_name or None,
            "currency": currency_code,
        },
        "terms": asdict(calculation.terms),
        "summary": result_to_dict(calculation.result),
        "schedule": schedule_to_records(calculation.schedule),
        "comparison": scenarios_to_records(calculation.scenarios),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def export_to_csv(path: Path, schedule: Iterable[AmortizationEntry]) -> None:
    """Export the schedule to a CSV file."""
    header = ["Month", "Principal", "Interest", "Total_Payment", "Remaining_Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.month,
                    f"{e.principal:.2f}",
                    f"{e.interest:.2f}",
                    f"{e.total_payment:.2f}",
                    f"{e.remaining_balance:.2f}",
                ]
            )


def loan_options(func: Callable) -> Callable:
    """Attach the options shared by every command."""
    options = [
        click.option("--amount", "-a", "amount", required=True, help="Loan amount (e.g. 1000000, 10l, 1.5cr)"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--tenure", "-t", "tenure", required=True, help="Loan tenure"),
        click.option(
            "--tenure-unit",
            "tenure_unit",
            type=click.Choice([u.value for u in TenureUnit]),
            default=TenureUnit.YEARS.value,
            show_default=True,
            help="Unit of --tenure",
        ),
        click.option(
            "--currency",
            "currency_code",
            type=click.Choice(sorted(SUPPORTED_CURRENCIES), case_sensitive=False),
            default=default_currency_code,
            help="Display currency (EMI_CALC_CURRENCY sets the default)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _calculate(terms: LoanTerms, extra_rates: Iterable[float] = ()) -> Calculation:
    calculation = run_calculation(terms, extra_rates)
    if calculation is None:
        logger.info("No EMI for %s", terms)
        raise click.ClickException(
            "Cannot calculate an EMI: amount, rate and tenure must be positive "
            "and produce a finite installment."
        )
    return calculation


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """An EMI calculator with amortization schedules and rate comparison."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
def emi(amount: str, rate: str, tenure: str, tenure_unit: str, currency_code: str) -> None:
    """Compute and print the EMI and totals for a loan."""
    terms = build_terms_from_options(amount, rate, tenure, tenure_unit)
    calculation = _calculate(terms)
    print_summary(calculation.result, get_currency(currency_code))


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
@click.option("--provider-name", "provider_name", help="Loan provider name for the JSON report")
@click.option("--receiver-name", "receiver_name", help="Loan receiver name for the JSON report")
@click.option("--all-rows", "all_rows", is_flag=True, help=f"Print every row instead of the first {MAX_PRINTED_ROWS}")
def schedule(
    amount: str,
    rate: str,
    tenure: str,
    tenure_unit: str,
    currency_code: str,
    output: Optional[str],
    provider_name: Optional[str],
    receiver_name: Optional[str],
    all_rows: bool,
) -> None:
    """Compute and print the full amortization schedule."""
    terms = build_terms_from_options(amount, rate, tenure, tenure_unit)
    calculation = _calculate(terms)
    currency = get_currency(currency_code)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, calculation, currency.code, provider_name, receiver_name)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, calculation.schedule)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(calculation.result, currency)
    entries = calculation.schedule
    if not all_rows and len(entries) > MAX_PRINTED_ROWS:
        click.echo(f"Schedule has {len(entries)} rows; showing first {MAX_PRINTED_ROWS} rows.")
        entries = entries[:MAX_PRINTED_ROWS]
    print_schedule(entries, currency)


@cli.command()
@loan_options
@click.option(
    "--compare",
    "compare_rates",
    default="",
    help="Comma separated rates to compare against --rate, e.g. \"8, 8.25, 9\"",
)
def compare(amount: str, rate: str, tenure: str, tenure_unit: str, currency_code: str, compare_rates: str) -> None:
    """Compare the EMI of a loan across several interest rates.

    Entries of --compare that are blank, not numbers or not positive are
    ignored, as are rates that do not produce a valid EMI.
    """
    terms = build_terms_from_options(amount, rate, tenure, tenure_unit)
    calculation = _calculate(terms, parse_rate_list(compare_rates))
    print_comparison(calculation.scenarios, get_currency(currency_code))


if __name__ == "__main__":
    cli()
