"""Data models for the mortgage engine.

This module defines dataclasses for the engine's inputs (the loan itself and
the extra payments layered on top of it) and its outputs (one row per
simulated month and the comparison of the standard and accelerated
schedules). All records are frozen: the engine builds fresh objects on every
call and never mutates what the caller passed in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Union

ONE_TIME = "one-time"
ANNUAL = "annual"


@dataclass(frozen=True)
class LoanDetails:
    """A fixed-rate, fixed-term loan.

    Attributes
    ----------
    principal: Decimal
        The amount borrowed.
    annual_rate: Decimal
        Annual nominal interest rate in percent (``6.5`` means 6.5 %).
    term_years: int
        Loan term in whole years.
    start_date: date
        Date of the first payment. The day of month is kept when stepping
        forward month by month.
    """

    principal: Decimal
    annual_rate: Decimal
    term_years: int
    start_date: date


@dataclass(frozen=True)
class OneTimePayment:
    """A lump sum applied once, in the month and year of ``date``.

    ``date`` may be a ``date`` or an ISO string as stored by the caller. An
    anchor that cannot be parsed never matches any month.
    """

    id: str
    amount: Decimal
    date: Union[date, str]

    @property
    def frequency(self) -> str:
        return ONE_TIME


@dataclass(frozen=True)
class AnnualPayment:
    """A payment repeated every year in the month of ``date``.

    The first occurrence is the anchor's own year. When
    ``annual_increase_percentage`` is set, each later occurrence grows by that
    percentage per elapsed year.
    """

    id: str
    amount: Decimal
    date: Union[date, str]
    annual_increase_percentage: Optional[Decimal] = None

    @property
    def frequency(self) -> str:
        return ANNUAL


CustomPayment = Union[OneTimePayment, AnnualPayment]


@dataclass(frozen=True)
class ExtraPayments:
    """Extra principal applied on top of the required payment."""

    monthly_extra: Decimal = Decimal("0")
    monthly_extra_increase_percentage: Optional[Decimal] = None
    custom_payments: List[CustomPayment] = field(default_factory=list)

    @classmethod
    def none(cls) -> "ExtraPayments":
        return cls(monthly_extra=Decimal("0"), custom_payments=[])


@dataclass(frozen=True)
class PaymentRow:
    """One simulated month of the schedule.

    ``payment`` is always ``principal + interest``. ``min_payment`` is the
    required installment and ``extra_payment`` the part of ``principal`` paid
    on top of it (never negative, see the final-month clamp in the engine).
    """

    month: int
    date: date
    payment: Decimal
    principal: Decimal
    interest: Decimal
    remaining_balance: Decimal
    total_interest_paid: Decimal
    is_extra_payment: bool
    min_payment: Decimal
    extra_payment: Decimal


@dataclass(frozen=True)
class ComparisonResult:
    standard_schedule: List[PaymentRow]
    accelerated_schedule: List[PaymentRow]
    standard_total_interest: Decimal
    accelerated_total_interest: Decimal
    standard_payoff_date: date
    accelerated_payoff_date: date
    interest_saved: Decimal
    time_saved_months: int
