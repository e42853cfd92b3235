"""Utility functions for the EMI calculator.

This module turns raw user text (CLI options, web form fields) into the
numeric values the engine works with. The engine itself never parses text;
anything that cannot be parsed is rejected here with ``ValueError``.
"""

from __future__ import annotations

import math
from typing import List, Tuple, Union

from .data_models import LoanTerms, TenureUnit

_AMOUNT_SUFFIXES = (
    ("cr", 10_000_000.0),
    ("k", 1_000.0),
    ("m", 1_000_000.0),
    ("l", 100_000.0),
)


def _is_plain_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_float(value: Union[str, float, int]) -> float:
    try:
        number = float(value)
    except OverflowError as exc:
        raise ValueError from exc
    if not math.isfinite(number):
        raise ValueError
    return number


def parse_amount(value: Union[str, float, int]) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000", "5,00,000") and shorthand with ``k``,
    ``m``, ``l`` (lakh) or ``cr`` (crore) suffixes, e.g. "10l" meaning
    1_000_000. Returns a float.

    Raises
    ------
    ValueError
        If the value is not a finite number.
    """
    if _is_plain_number(value):
        text, factor = value, 1.0
    else:
        text, factor = _split_amount_suffix(str(value))
    try:
        return _to_float(_to_float(text) * factor)
    except ValueError as exc:
        raise ValueError(f"Invalid amount: {value}") from exc


def _split_amount_suffix(value: str) -> Tuple[str, float]:
    text = value.strip().lower().replace(",", "").replace("_", "")
    factor = 1.0
    for suffix, multiplier in _AMOUNT_SUFFIXES:
        if text.endswith(suffix):
            factor = multiplier
            text = text[: -len(suffix)].strip()
            break
    return text, factor


def parse_rate(value: Union[str, float, int]) -> float:
    """Parse an annual rate in percent (e.g. "8.5" or "8.5%")."""
    text = value if _is_plain_number(value) else str(value).strip()
    if isinstance(text, str) and text.endswith("%"):
        text = text[:-1].strip()
    try:
        return _to_float(text)
    except ValueError as exc:
        raise ValueError(f"Invalid interest rate: {value}") from exc


def parse_rate_list(value: str) -> List[float]:
    """Parse a comma separated list of comparison rates.

    Blank entries, entries that are not numbers and entries that are not
    positive are skipped, so this never raises. Order is preserved and
    duplicates are kept; deduplication belongs to the comparison.
    """
    if not value:
        return []
    rates: List[float] = []
    for part in value.replace("\n", ",").split(","):
        part = part.strip()
        if not part:
            continue
        try:
            rate = parse_rate(part)
        except ValueError:
            continue
        if rate > 0:
            rates.append(rate)
    return rates


def parse_tenure_unit(value: Union[str, TenureUnit, None]) -> TenureUnit:
    if isinstance(value, TenureUnit):
        return value
    if value is None:
        return TenureUnit.YEARS
    if not isinstance(value, str):
        raise ValueError(f"Tenure unit must be 'years' or 'months'; got {value!r}")
    text = (value.strip() or TenureUnit.YEARS.value).lower()
    try:
        return TenureUnit(text)
    except ValueError as exc:
        raise ValueError(f"Tenure unit must be 'years' or 'months'; got {value}") from exc


def tenure_to_months(tenure: int, unit: Union[str, TenureUnit]) -> int:
    """Convert a tenure in ``unit`` to a number of monthly installments."""
    if parse_tenure_unit(unit) is TenureUnit.YEARS:
        return tenure * 12
    return tenure


def parse_tenure(value: Union[str, int]) -> int:
    """Parse a whole-number tenure ("10", " 120 ")."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Invalid tenure: {value}") from exc


def terms_from_inputs(
    amount: Union[str, float],
    rate: Union[str, float],
    tenure: Union[str, int],
    unit: Union[str, TenureUnit] = TenureUnit.YEARS,
) -> LoanTerms:
    """Build ``LoanTerms`` from raw user input.

    Only parsing happens here. Range checks (positive principal, rate and
    term) are left to :func:`emi_calc.engine.compute_emi`, which reports
    out-of-range terms by returning ``None``.
    """
    return LoanTerms(
        principal=parse_amount(amount),
        annual_rate_percent=parse_rate(rate),
        term_months=tenure_to_months(parse_tenure(tenure), unit),
    )
