"""Output helpers for the mortgage engine.

This module renders amortization schedules and comparison summaries as plain
text tables, and formats the figures (currency, percentages, dates) handed to
anything that writes prose about a strategy. Printing goes through
``click.echo`` so output behaves under the CLI test runner.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Union

import click

from .data_models import ComparisonResult, ExtraPayments, LoanDetails, PaymentRow
from .engine import monthly_payment

Number = Union[Decimal, float, int]


def format_currency(value: Number, cents: bool = False) -> str:
    """Format ``value`` as US dollars, e.g. ``$1,234`` or ``-$12.50``."""
    amount = float(value)
    text = f"{abs(amount):,.2f}" if cents else f"{abs(amount):,.0f}"
    sign = "-" if round(amount, 2 if cents else 0) < 0 else ""
    return f"{sign}${text}"


def format_month_year(value: date) -> str:
    return value.strftime("%B %Y")


def format_time_saved(months: int) -> str:
    """Render a month count as ``"2y 3m"``."""
    sign = "-" if months < 0 else ""
    years, rest = divmod(abs(months), 12)
    return f"{sign}{years}y {rest}m"


def strategy_figures(
    loan: LoanDetails, extras: ExtraPayments, result: ComparisonResult
) -> Dict[str, str]:
    """Return the formatted figures describing a payoff strategy.

    These are the numbers quoted to a narrative report generator, already in
    their display form.
    """
    base = monthly_payment(loan.principal, loan.annual_rate, loan.term_years)
    growth = extras.monthly_extra_increase_percentage or Decimal("0")
    return {
        "principal": format_currency(loan.principal),
        "interest_rate": f"{loan.annual_rate}%",
        "term": f"{loan.term_years} years",
        "start_date": loan.start_date.isoformat(),
        "base_payment": format_currency(base, cents=True),
        "monthly_extra": format_currency(extras.monthly_extra, cents=True),
        "monthly_extra_increase": f"{growth}%",
        "custom_payment_count": str(len(extras.custom_payments)),
        "interest_saved": format_currency(result.interest_saved, cents=True),
        "time_saved_years": f"{result.time_saved_months / 12:.1f}",
        "payoff_date": format_month_year(result.accelerated_payoff_date),
        "total_interest": format_currency(result.accelerated_total_interest, cents=True),
    }


def print_summary(summary: Dict[str, object]) -> None:
    """Print comparison summary metrics in a human-readable format."""
    click.echo("Summary")
    click.echo("-" * 72)
    click.echo(f"Principal          : {summary['principal']:.2f}")
    click.echo(f"Interest rate      : {summary['annual_rate']:.3f}%")
    click.echo(f"Minimum payment    : {summary['min_payment']:.2f}")
    if summary["target_payment"] != summary["min_payment"]:
        click.echo(f"Target payment     : {summary['target_payment']:.2f}")
    click.echo(f"Standard interest  : {summary['standard_total_interest']:.2f}")
    click.echo(f"Accelerated int.   : {summary['accelerated_total_interest']:.2f}")
    if summary.get("total_extra_paid"):
        click.echo(f"Total extra paid   : {summary['total_extra_paid']:.2f}")
    click.echo(f"Standard payoff    : {summary['standard_payoff_date']}")
    click.echo(f"Accelerated payoff : {summary['accelerated_payoff_date']}")
    click.echo(f"Interest saved     : {summary['interest_saved']:.2f}")
    click.echo(f"Time saved         : {format_time_saved(int(summary['time_saved_months']))}")
    click.echo("-" * 72)


def print_schedule(schedule: Iterable[PaymentRow]) -> None:
    """Print a schedule as a tab-separated table."""
    headers = ["Month", "Date", "MinPay", "Extra", "Payment", "Principal", "Interest", "Balance"]
    click.echo("\t".join(headers))
    for row in schedule:
        click.echo(
            "\t".join(
                [
                    str(row.month),
                    row.date.isoformat(),
                    f"{row.min_payment:.2f}",
                    f"{row.extra_payment:.2f}" if row.extra_payment > 0 else "-",
                    f"{row.payment:.2f}",
                    f"{row.principal:.2f}",
                    f"{row.interest:.2f}",
                    f"{row.remaining_balance:.2f}",
                ]
            )
        )


def print_comparison(result: ComparisonResult) -> None:
    """Print the standard and accelerated outcomes side by side.

    The difference column is accelerated minus standard, so a negative value
    means the accelerated strategy is cheaper or shorter.
    """
    click.echo("Comparison")
    click.echo("=" * 72)
    click.echo(f"{'Metric':20s} {'Standard':>15s} {'Accelerated':>15s} {'Difference':>15s}")
    rows = [
        ("total_interest", result.standard_total_interest, result.accelerated_total_interest),
        ("payments", len(result.standard_schedule), len(result.accelerated_schedule)),
    ]
    for key, v1, v2 in rows:
        click.echo(f"{key:20s} {float(v1):15.2f} {float(v2):15.2f} {float(v2) - float(v1):15.2f}")
    click.echo(
        f"{'payoff_date':20s} {result.standard_payoff_date.isoformat():>15s} "
        f"{result.accelerated_payoff_date.isoformat():>15s} "
        f"{format_time_saved(-result.time_saved_months):>15s}"
    )
    click.echo("=" * 72)
