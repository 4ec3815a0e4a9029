# tests/utils.py
from __future__ import annotations

from datetime import date
from decimal import Decimal

from mortgauge.data_models import AnnualPayment, ExtraPayments, LoanDetails, OneTimePayment


def make_loan(
    principal: str = "600000",
    rate: str = "6",
    term_years: int = 30,
    start_date: date = date(2026, 3, 1),
) -> LoanDetails:
    return LoanDetails(
        principal=Decimal(principal),
        annual_rate=Decimal(rate),
        term_years=term_years,
        start_date=start_date,
    )


def make_extras(monthly: str = "0", growth: str | None = None, custom=()) -> ExtraPayments:
    return ExtraPayments(
        monthly_extra=Decimal(monthly),
        monthly_extra_increase_percentage=Decimal(growth) if growth is not None else None,
        custom_payments=list(custom),
    )


def one_time(amount: str, anchor, payment_id: str = "lump") -> OneTimePayment:
    return OneTimePayment(id=payment_id, amount=Decimal(amount), date=anchor)


def annual(amount: str, anchor, growth: str | None = None, payment_id: str = "bonus") -> AnnualPayment:
    return AnnualPayment(
        id=payment_id,
        amount=Decimal(amount),
        date=anchor,
        annual_increase_percentage=Decimal(growth) if growth is not None else None,
    )
