"""Utility functions for the mortgage engine.

This module provides helpers for parsing user input into Python data types and
for handling dates, including adding months to a date and parsing ISO and
year-month strings into ``datetime.date`` instances.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation, getcontext
import calendar
from typing import Optional, Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` or ``YYYY-MM`` string into a ``date``.

    A bare year-month is normalized to the first day of the month. Any time
    component after a ``T`` (as produced by ``Date.toISOString``) is ignored.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    try:
        parts = value.strip().split("T")[0].split("-")
        if len(parts) not in (2, 3):
            raise ValueError
        year = int(parts[0])
        month = int(parts[1])
        day = int(parts[2]) if len(parts) == 3 else 1
        return date(year, month, day)
    except Exception as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def coerce_date(value: Union[date, str, None]) -> Optional[date]:
    """Return ``value`` as a date, or ``None`` when it cannot be read as one."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return parse_date(value)
    except ValueError:
        return None


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    Commas and surrounding whitespace are stripped. Raises ``ValueError`` if
    conversion fails or the value is not finite.
    """
    try:
        result = Decimal(str(value).replace(",", "").strip())
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse an amount with optional ``k``/``m`` suffixes ("500k" = 500000)."""
    cleaned = str(value).strip().lower().replace(",", "")
    factor = Decimal("1")
    if cleaned.endswith("k"):
        factor = Decimal("1000")
        cleaned = cleaned[:-1]
    elif cleaned.endswith("m"):
        factor = Decimal("1000000")
        cleaned = cleaned[:-1]
    try:
        return decimal_from_str(cleaned) * factor
    except ValueError as exc:
        raise ValueError(f"Invalid amount: {value}") from exc


def as_decimal(value) -> Decimal:
    """Return ``value`` as a ``Decimal``.

    Floats go through ``str`` so ``6.5`` becomes ``Decimal("6.5")`` rather than
    its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def months_to_calendar_end(dt: date) -> int:
    """Return how many months can be added to ``dt`` before ``date`` overflows."""
    return (date.max.year - dt.year) * 12 + (12 - dt.month)
