"""Conversion between engine records and JSON-friendly dictionaries.

Loan and extra-payment settings are usually stored by the surrounding
application as opaque JSON blobs with camelCase keys (``loanAmount``,
``customPayments`` and so on). The readers below accept those blobs as well
as the snake_case field names used by the dataclasses. The writers produce
plain dicts with floats and ISO dates, suitable for ``json.dump`` or for
charting.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from .data_models import (
    ANNUAL,
    ONE_TIME,
    AnnualPayment,
    ComparisonResult,
    CustomPayment,
    ExtraPayments,
    LoanDetails,
    OneTimePayment,
    PaymentRow,
)
from .utils import decimal_from_str, parse_date


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _optional_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return decimal_from_str(str(value))


def loan_from_dict(data: Mapping[str, Any]) -> LoanDetails:
    """Build ``LoanDetails`` from a stored blob.

    Raises
    ------
    ValueError
        If a required field is missing or cannot be parsed.
    """
    principal = _pick(data, "loanAmount", "principal")
    rate = _pick(data, "interestRate", "annual_rate")
    term = _pick(data, "loanTermYears", "term_years")
    start = _pick(data, "startDate", "start_date")
    missing = [
        name
        for name, value in (("principal", principal), ("rate", rate), ("term", term), ("start date", start))
        if value is None
    ]
    if missing:
        raise ValueError(f"Loan is missing required fields: {', '.join(missing)}")
    try:
        term_value = decimal_from_str(str(term))
    except ValueError as exc:
        raise ValueError(f"Invalid loan term: {term}") from exc
    if term_value != term_value.to_integral_value():
        raise ValueError(f"Loan term must be a whole number of years; got {term}")
    term_years = int(term_value)
    start_date = start if isinstance(start, date) else parse_date(str(start))
    return LoanDetails(
        principal=decimal_from_str(str(principal)),
        annual_rate=decimal_from_str(str(rate)),
        term_years=term_years,
        start_date=start_date,
    )


def custom_payment_from_dict(data: Mapping[str, Any]) -> CustomPayment:
    """Build a one-time or annual payment from its stored form.

    The anchor date is kept as given: an unreadable date is not an error here,
    the engine simply never matches it.
    """
    kind = str(_pick(data, "type", "frequency", default=ONE_TIME)).lower()
    payment_id = str(_pick(data, "id", default="") or uuid4().hex)
    amount = decimal_from_str(str(_pick(data, "amount", default="0")))
    anchor = _pick(data, "date", default="")
    if kind == ONE_TIME:
        return OneTimePayment(id=payment_id, amount=amount, date=anchor)
    if kind == ANNUAL:
        growth = _optional_decimal(
            _pick(data, "annualIncreasePercentage", "annual_increase_percentage")
        )
        return AnnualPayment(
            id=payment_id, amount=amount, date=anchor, annual_increase_percentage=growth
        )
    raise ValueError(f"Custom payment type must be '{ONE_TIME}' or '{ANNUAL}'; got {kind}")


def extras_from_dict(data: Optional[Mapping[str, Any]]) -> ExtraPayments:
    """Build ``ExtraPayments`` from a stored blob; ``None`` means no extras."""
    if data is None:
        return ExtraPayments.none()
    if not isinstance(data, Mapping):
        raise ValueError(f"Extra payments must be an object; got {data!r}")
    monthly = _optional_decimal(_pick(data, "monthlyExtra", "monthly_extra")) or Decimal("0")
    growth = _optional_decimal(
        _pick(data, "monthlyExtraIncreasePercentage", "monthly_extra_increase_percentage")
    )
    custom: List[CustomPayment] = []
    items = _pick(data, "customPayments", "custom_payments", default=[])
    if not isinstance(items, (list, tuple)):
        raise ValueError(f"customPayments must be a list; got {items!r}")
    for item in items:
        if not isinstance(item, Mapping):
            raise ValueError(f"Custom payment must be an object; got {item!r}")
        custom.append(custom_payment_from_dict(item))
    return ExtraPayments(
        monthly_extra=monthly,
        monthly_extra_increase_percentage=growth,
        custom_payments=custom,
    )


def _anchor_to_str(value: Any) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


def loan_to_dict(loan: LoanDetails) -> Dict[str, Any]:
    return {
        "loanAmount": float(loan.principal),
        "interestRate": float(loan.annual_rate),
        "loanTermYears": loan.term_years,
        "startDate": loan.start_date.isoformat(),
    }


def extras_to_dict(extras: ExtraPayments) -> Dict[str, Any]:
    custom: List[Dict[str, Any]] = []
    for payment in extras.custom_payments:
        item: Dict[str, Any] = {
            "id": payment.id,
            "amount": float(payment.amount),
            "date": _anchor_to_str(payment.date),
            "type": payment.frequency,
        }
        if isinstance(payment, AnnualPayment) and payment.annual_increase_percentage is not None:
            item["annualIncreasePercentage"] = float(payment.annual_increase_percentage)
        custom.append(item)
    data: Dict[str, Any] = {"monthlyExtra": float(extras.monthly_extra), "customPayments": custom}
    if extras.monthly_extra_increase_percentage is not None:
        data["monthlyExtraIncreasePercentage"] = float(extras.monthly_extra_increase_percentage)
    return data


def row_to_dict(row: PaymentRow) -> Dict[str, Any]:
    return {
        "month": row.month,
        "date": row.date.isoformat(),
        "payment": float(row.payment),
        "principal": float(row.principal),
        "interest": float(row.interest),
        "remaining_balance": float(row.remaining_balance),
        "total_interest_paid": float(row.total_interest_paid),
        "is_extra_payment": row.is_extra_payment,
        "min_payment": float(row.min_payment),
        "extra_payment": float(row.extra_payment),
    }


def comparison_to_dict(result: ComparisonResult) -> Dict[str, Any]:
    return {
        "standard_schedule": [row_to_dict(r) for r in result.standard_schedule],
        "accelerated_schedule": [row_to_dict(r) for r in result.accelerated_schedule],
        "standard_total_interest": float(result.standard_total_interest),
        "accelerated_total_interest": float(result.accelerated_total_interest),
        "standard_payoff_date": result.standard_payoff_date.isoformat(),
        "accelerated_payoff_date": result.accelerated_payoff_date.isoformat(),
        "interest_saved": float(result.interest_saved),
        "time_saved_months": result.time_saved_months,
    }


def balance_trajectory(result: ComparisonResult, step: int = 6) -> List[Dict[str, Any]]:
    """Merge both schedules into chart points, keeping every ``step``-th month.

    Points follow the standard schedule. Once the accelerated loan is paid off
    its balance reads 0 and its cumulative interest stays at its final total.
    """
    points: List[Dict[str, Any]] = []
    accelerated = result.accelerated_schedule
    for index, std_row in enumerate(result.standard_schedule):
        if index % step:
            continue
        acc_row = accelerated[index] if index < len(accelerated) else None
        points.append(
            {
                "name": std_row.date.strftime("%Y-%m"),
                "standard_balance": round(float(std_row.remaining_balance)),
                "accelerated_balance": round(float(acc_row.remaining_balance)) if acc_row else 0,
                "standard_interest": round(float(std_row.total_interest_paid)),
                "accelerated_interest": round(
                    float(acc_row.total_interest_paid if acc_row else result.accelerated_total_interest)
                ),
            }
        )
    return points
