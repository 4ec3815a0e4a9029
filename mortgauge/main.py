"""Command-line interface for the mortgage engine.

This module uses the ``click`` library to implement a multi-command
interface. Users can print the base monthly payment, full amortization
schedules, comparison summaries and a side-by-side comparison of the standard
and accelerated strategies. Results can be printed to the terminal or
exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

import click

from .data_models import AnnualPayment, CustomPayment, ExtraPayments, LoanDetails, OneTimePayment, PaymentRow
from .engine import compare_strategies, monthly_payment, summarize_comparison
from .formatter import print_comparison, print_schedule, print_summary
from .serialization import extras_from_dict, loan_from_dict, row_to_dict
from .utils import decimal_from_str, parse_amount, parse_date

logger = logging.getLogger(__name__)

MAX_SCREEN_ROWS = 120


def _bad_parameter(exc: Exception) -> click.BadParameter:
    return click.BadParameter(str(exc))


def parse_one_time_strings(values: Tuple[str, ...]) -> List[CustomPayment]:
    payments: List[CustomPayment] = []
    for item in values:
        parts = item.split(":")
        if len(parts) != 2:
            raise click.BadParameter(f"One-time payment must be in DATE:AMOUNT format; got {item}")
        date_str, amount_str = parts
        try:
            anchor = parse_date(date_str)
            amount = parse_amount(amount_str)
        except ValueError as exc:
            raise _bad_parameter(exc)
        payments.append(OneTimePayment(id=uuid4().hex, amount=amount, date=anchor))
    return payments


def parse_annual_strings(values: Tuple[str, ...]) -> List[CustomPayment]:
    payments: List[CustomPayment] = []
    for item in values:
        parts = item.split(":")
        if len(parts) not in (2, 3):
            raise click.BadParameter(
                f"Annual payment must be in DATE:AMOUNT[:GROWTH] format; got {item}"
            )
        try:
            anchor = parse_date(parts[0])
            amount = parse_amount(parts[1])
            growth = decimal_from_str(parts[2].rstrip("%")) if len(parts) == 3 else None
        except ValueError as exc:
            raise _bad_parameter(exc)
        payments.append(
            AnnualPayment(id=uuid4().hex, amount=amount, date=anchor, annual_increase_percentage=growth)
        )
    return payments


def load_config_file(path: str) -> Tuple[LoanDetails, ExtraPayments]:
    """Read a ``{"loan": ..., "extras": ...}`` JSON blob."""
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise click.BadParameter(f"Cannot read config file {path}: {exc}")
    if not isinstance(data, dict) or "loan" not in data:
        raise click.BadParameter(f"Config file {path} must contain a 'loan' object")
    logger.debug("Loaded loan settings from %s", path)
    try:
        return loan_from_dict(data["loan"]), extras_from_dict(data.get("extras"))
    except ValueError as exc:
        raise _bad_parameter(exc)


def build_inputs_from_options(
    config: Optional[str],
    principal: Optional[str],
    rate: Optional[float],
    term: Optional[int],
    start_date: Optional[str],
    monthly_extra: Optional[str],
    monthly_extra_growth: Optional[float],
    one_time: Tuple[str, ...],
    annual: Tuple[str, ...],
) -> Tuple[LoanDetails, ExtraPayments]:
    if config:
        return load_config_file(config)
    missing = [
        name
        for name, value in (("--principal", principal), ("--rate", rate), ("--term", term), ("--start-date", start_date))
        if value is None
    ]
    if missing:
        raise click.UsageError(f"Missing option(s): {', '.join(missing)} (or pass --config)")
    try:
        loan = LoanDetails(
            principal=parse_amount(principal),
            annual_rate=decimal_from_str(str(rate)),
            term_years=term,
            start_date=parse_date(start_date),
        )
        extra_amount = parse_amount(monthly_extra) if monthly_extra else decimal_from_str("0")
        growth = decimal_from_str(str(monthly_extra_growth)) if monthly_extra_growth is not None else None
    except ValueError as exc:
        raise _bad_parameter(exc)
    custom = parse_one_time_strings(one_time) + parse_annual_strings(annual)
    extras = ExtraPayments(
        monthly_extra=extra_amount,
        monthly_extra_increase_percentage=growth,
        custom_payments=custom,
    )
    return loan, extras


def export_to_json(path: Path, schedule: List[PaymentRow], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": summary, "schedule": [row_to_dict(r) for r in schedule]}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[PaymentRow]) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Month",
        "Date",
        "Min_Payment",
        "Extra_Payment",
        "Payment",
        "Principal",
        "Interest",
        "Remaining_Balance",
        "Total_Interest_Paid",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in schedule:
            writer.writerow(
                [
                    row.month,
                    row.date.isoformat(),
                    float(row.min_payment),
                    float(row.extra_payment),
                    float(row.payment),
                    float(row.principal),
                    float(row.interest),
                    float(row.remaining_balance),
                    float(row.total_interest_paid),
                ]
            )


def loan_options(func):
    """Attach the shared loan and extra-payment options to a command."""
    options = [
        click.option("--config", "-c", "config", type=click.Path(exists=True, dir_okay=False), help="JSON file with 'loan' and 'extras' objects"),
        click.option("--principal", "-p", "principal", help="Loan amount (500k and 1.2m shorthands accepted)"),
        click.option("--rate", "-r", "rate", type=float, help="Annual interest rate (percent)"),
        click.option("--term", "-t", "term", type=int, help="Loan term in years"),
        click.option("--start-date", "-s", "start_date", help="First payment date (YYYY-MM-DD or YYYY-MM)"),
        click.option("--monthly-extra", "monthly_extra", help="Extra principal paid every month"),
        click.option("--monthly-extra-growth", "monthly_extra_growth", type=float, help="Yearly increase of the monthly extra (percent)"),
        click.option("--one-time", "one_time", multiple=True, help="One-time payment in DATE:AMOUNT format"),
        click.option("--annual", "annual", multiple=True, help="Annual payment in DATE:AMOUNT[:GROWTH] format"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Compare a standard mortgage schedule with an accelerated payoff."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Loan amount")
@click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)")
@click.option("--term", "-t", "term", required=True, type=int, help="Loan term in years")
def payment(principal: str, rate: float, term: int) -> None:
    """Print the required monthly payment."""
    try:
        amount = monthly_payment(parse_amount(principal), decimal_from_str(str(rate)), term)
    except ValueError as exc:
        raise _bad_parameter(exc)
    click.echo(f"Monthly payment: {amount:.2f}")


@cli.command()
@loan_options
@click.option("--standard", "standard", is_flag=True, help="Show the minimum-payment schedule instead of the accelerated one")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(standard: bool, output: Optional[str], **options: Any) -> None:
    """Compute and print the full amortization schedule."""
    loan, extras = build_inputs_from_options(**options)
    result = compare_strategies(loan, extras)
    rows = result.standard_schedule if standard else result.accelerated_schedule
    summary_data = summarize_comparison(loan, extras, result)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, rows, summary_data)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, rows)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(summary_data)
    # Limit schedule length printed to avoid flooding the terminal
    if len(rows) > MAX_SCREEN_ROWS:
        click.echo(f"Schedule has {len(rows)} rows; showing first {MAX_SCREEN_ROWS} rows.")
        rows = rows[:MAX_SCREEN_ROWS]
    print_schedule(rows)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(output: Optional[str], **options: Any) -> None:
    """Compute and print only the comparison summary."""
    loan, extras = build_inputs_from_options(**options)
    summary_data = summarize_comparison(loan, extras, compare_strategies(loan, extras))
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


@cli.command()
@loan_options
def compare(**options: Any) -> None:
    """Compare the standard and accelerated strategies side by side."""
    loan, extras = build_inputs_from_options(**options)
    print_comparison(compare_strategies(loan, extras))


if __name__ == "__main__":
    cli()
