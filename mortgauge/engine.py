"""Core calculation engine for the mortgage comparison.

This module implements the financial logic: the closed-form monthly payment,
the month-by-month schedule simulation and the comparison of a standard
(minimum-payment) schedule against an accelerated one that layers recurring
and custom extra principal payments on top. Every function is pure; results
are freshly built ``PaymentRow`` and ``ComparisonResult`` objects.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, getcontext
from typing import Dict, List, Optional, Tuple

from .data_models import (
    AnnualPayment,
    ComparisonResult,
    CustomPayment,
    ExtraPayments,
    LoanDetails,
    OneTimePayment,
    PaymentRow,
)
from .utils import add_months, as_decimal, coerce_date, months_to_calendar_end

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

MAX_MONTHS = 1200
PAYOFF_EPSILON = Decimal("0.01")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def _monthly_rate(annual_rate: Decimal) -> Decimal:
    return (as_decimal(annual_rate) / _HUNDRED) / Decimal(12)


def monthly_payment(principal: Decimal, annual_rate: Decimal, term_years: int) -> Decimal:
    """Return the fixed monthly payment that amortizes ``principal``.

    The formula is:

        payment = P * (r * (1 + r)^n) / ((1 + r)^n - 1)

    where ``r`` is the monthly rate (``annual_rate / 1200``) and ``n`` is the
    number of monthly payments (``term_years * 12``). When the rate is zero,
    the payment simplifies to ``P / n``. Inputs are not validated; floats and
    ints are read as decimals and a term with no payments yields zero rather
    than a division error.
    """
    months = int(term_years) * 12
    if months <= 0:
        return _ZERO
    principal = as_decimal(principal)
    annual_rate = as_decimal(annual_rate)
    if annual_rate == 0:
        return principal / Decimal(months)
    rate = _monthly_rate(annual_rate)
    factor = (1 + rate) ** months
    return principal * (rate * factor) / (factor - 1)


def _grown(amount: Decimal, percentage: Optional[Decimal], years: int) -> Decimal:
    """Compound ``amount`` by ``percentage`` per year for ``years`` years."""
    amount = as_decimal(amount)
    if not percentage or percentage <= 0 or years <= 0:
        return amount
    return amount * (1 + as_decimal(percentage) / _HUNDRED) ** years


def _custom_amount(payment: CustomPayment, current: date) -> Optional[Decimal]:
    """Return the amount ``payment`` contributes in ``current``'s month, if any."""
    anchor = coerce_date(payment.date)
    amount = as_decimal(payment.amount)
    if anchor is None or amount <= 0:
        return None
    if isinstance(payment, OneTimePayment):
        if (current.year, current.month) == (anchor.year, anchor.month):
            return amount
        return None
    if isinstance(payment, AnnualPayment):
        if current.month == anchor.month and current.year >= anchor.year:
            return _grown(amount, payment.annual_increase_percentage, current.year - anchor.year)
        return None
    return None


def _extra_for_month(extras: ExtraPayments, month: int, current: date) -> Tuple[Decimal, bool]:
    """Return the extra principal due in a month and whether any source applied."""
    total = _ZERO
    applied = False
    monthly = as_decimal(extras.monthly_extra)
    if monthly > 0:
        # Steps up once per completed 12-month block: months 1-12 are year 0.
        years_elapsed = (month - 1) // 12
        total += _grown(monthly, extras.monthly_extra_increase_percentage, years_elapsed)
        applied = True
    for payment in extras.custom_payments:
        amount = _custom_amount(payment, current)
        if amount is not None:
            total += amount
            applied = True
    return total, applied


def _step_month(
    month: int,
    current: date,
    balance: Decimal,
    total_interest: Decimal,
    base_payment: Decimal,
    rate: Decimal,
    extra: Decimal,
    applied: bool,
) -> PaymentRow:
    """Simulate one month and return its row."""
    interest = balance * rate
    standard_principal = base_payment - interest
    if standard_principal < 0:
        # Payment does not cover interest; never let principal go negative.
        standard_principal = _ZERO

    principal_payment = standard_principal + extra
    if balance - principal_payment < 0:
        principal_payment = balance
        if extra > principal_payment - standard_principal:
            extra = max(_ZERO, principal_payment - standard_principal)
    payment = principal_payment + interest

    return PaymentRow(
        month=month,
        date=current,
        payment=payment,
        principal=principal_payment,
        interest=interest,
        remaining_balance=max(_ZERO, balance - principal_payment),
        total_interest_paid=total_interest + interest,
        is_extra_payment=applied,
        min_payment=base_payment,
        extra_payment=extra,
    )


def _simulate(loan: LoanDetails, extras: Optional[ExtraPayments]) -> List[PaymentRow]:
    """Walk the loan to payoff. ``extras`` of ``None`` means the standard run."""
    rate = _monthly_rate(loan.annual_rate)
    base_payment = monthly_payment(loan.principal, loan.annual_rate, loan.term_years)

    schedule: List[PaymentRow] = []
    balance = as_decimal(loan.principal)
    total_interest = _ZERO
    # Rows past year 9999 cannot be dated.
    last_month = min(MAX_MONTHS, months_to_calendar_end(loan.start_date) + 1)
    month = 1
    while balance > PAYOFF_EPSILON and month <= last_month:
        # Offsets are taken from the start date so a 31st keeps landing on
        # the last day of shorter months instead of drifting.
        current = add_months(loan.start_date, month - 1)
        extra, applied = (_ZERO, False) if extras is None else _extra_for_month(extras, month, current)
        row = _step_month(month, current, balance, total_interest, base_payment, rate, extra, applied)
        schedule.append(row)
        balance = balance - row.principal
        total_interest = row.total_interest_paid
        month += 1

    if balance > PAYOFF_EPSILON:
        logger.warning(
            "Schedule stopped at the %d-month ceiling with %.2f outstanding",
            last_month,
            balance,
        )
    logger.debug(
        "Simulated %d months (%s)", len(schedule), "standard" if extras is None else "accelerated"
    )
    return schedule


def standard_schedule(loan: LoanDetails) -> List[PaymentRow]:
    """Return the minimum-payment schedule for ``loan``."""
    return _simulate(loan, None)


def accelerated_schedule(loan: LoanDetails, extras: ExtraPayments) -> List[PaymentRow]:
    """Return the schedule for ``loan`` with ``extras`` applied every month they match."""
    return _simulate(loan, extras)


def generate_schedule(loan: LoanDetails, extras: ExtraPayments, accelerate: bool) -> List[PaymentRow]:
    """Return the accelerated schedule when ``accelerate`` is set, else the standard one."""
    if accelerate:
        return accelerated_schedule(loan, extras)
    return standard_schedule(loan)


def compare_strategies(loan: LoanDetails, extras: ExtraPayments) -> ComparisonResult:
    """Compare the standard schedule with the accelerated one.

    Parameters
    ----------
    loan: LoanDetails
        The loan to simulate.
    extras: ExtraPayments
        Extra payments applied to the accelerated run only.

    Returns
    -------
    ComparisonResult
        Both schedules, their total interest and payoff dates, the interest
        saved and the number of months saved. Empty schedules (degenerate
        loans) report zero interest and the loan's start date.
    """
    standard = standard_schedule(loan)
    accelerated = accelerated_schedule(loan, extras)

    standard_interest = standard[-1].total_interest_paid if standard else _ZERO
    accelerated_interest = accelerated[-1].total_interest_paid if accelerated else _ZERO

    return ComparisonResult(
        standard_schedule=standard,
        accelerated_schedule=accelerated,
        standard_total_interest=standard_interest,
        accelerated_total_interest=accelerated_interest,
        standard_payoff_date=standard[-1].date if standard else loan.start_date,
        accelerated_payoff_date=accelerated[-1].date if accelerated else loan.start_date,
        interest_saved=standard_interest - accelerated_interest,
        time_saved_months=len(standard) - len(accelerated),
    )


def summarize_comparison(
    loan: LoanDetails, extras: ExtraPayments, result: ComparisonResult
) -> Dict[str, object]:
    """Flatten a comparison into JSON-friendly summary metrics."""
    min_payment = monthly_payment(loan.principal, loan.annual_rate, loan.term_years)
    original_end_date = add_months(
        loan.start_date, min(int(loan.term_years) * 12 - 1, months_to_calendar_end(loan.start_date))
    )
    total_extra_paid = sum((row.extra_payment for row in result.accelerated_schedule), _ZERO)

    return {
        "principal": float(loan.principal),
        "annual_rate": float(loan.annual_rate),
        "term_years": loan.term_years,
        "min_payment": float(min_payment),
        "target_payment": float(min_payment + as_decimal(extras.monthly_extra)),
        "standard_total_interest": float(result.standard_total_interest),
        "accelerated_total_interest": float(result.accelerated_total_interest),
        "standard_payoff_date": result.standard_payoff_date.isoformat(),
        "accelerated_payoff_date": result.accelerated_payoff_date.isoformat(),
        "original_end_date": original_end_date.isoformat(),
        "interest_saved": float(result.interest_saved),
        "time_saved_months": result.time_saved_months,
        "total_extra_paid": float(total_extra_paid),
        "standard_payments": len(result.standard_schedule),
        "accelerated_payments": len(result.accelerated_schedule),
    }
