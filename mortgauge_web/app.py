import logging
import os

from flask import Flask, jsonify, request

from mortgauge.engine import compare_strategies, monthly_payment, summarize_comparison
from mortgauge.formatter import strategy_figures
from mortgauge.serialization import (
    balance_trajectory,
    extras_from_dict,
    loan_from_dict,
    row_to_dict,
)

logging.basicConfig(level=os.environ.get("MORTGAUGE_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["PREVIEW_ROWS"] = int(os.environ.get("MORTGAUGE_PREVIEW_ROWS", "120"))


def _request_payload() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    if not isinstance(payload.get("loan"), dict):
        raise ValueError("Request body must contain a 'loan' object")
    if payload.get("extras") is not None and not isinstance(payload["extras"], dict):
        raise ValueError("'extras' must be a JSON object")
    return payload


def _schedule_for_view(schedule: list, show_full_schedule: bool):
    """Return the rows to send and how many were left out."""
    if show_full_schedule:
        return schedule, 0
    preview = schedule[: app.config["PREVIEW_ROWS"]]
    return preview, len(schedule) - len(preview)


@app.errorhandler(ValueError)
def _invalid_input(exc: ValueError):
    logger.info("Rejected request: %s", exc)
    return jsonify({"error": str(exc)}), 400


@app.get("/healthz")
def healthz():
    return jsonify({"status": "ok"})


@app.post("/api/payment")
def payment():
    loan = loan_from_dict(_request_payload()["loan"])
    amount = monthly_payment(loan.principal, loan.annual_rate, loan.term_years)
    return jsonify({"monthly_payment": float(amount)})


@app.post("/api/compare")
def compare():
    payload = _request_payload()
    loan = loan_from_dict(payload["loan"])
    extras = extras_from_dict(payload.get("extras"))
    show_full_schedule = bool(payload.get("full_schedule"))

    result = compare_strategies(loan, extras)
    summary = summarize_comparison(loan, extras, result)
    standard, standard_truncated = _schedule_for_view(result.standard_schedule, show_full_schedule)
    accelerated, accelerated_truncated = _schedule_for_view(result.accelerated_schedule, show_full_schedule)
    if standard_truncated or accelerated_truncated:
        summary["truncated"] = {"standard": standard_truncated, "accelerated": accelerated_truncated}

    return jsonify(
        {
            "summary": summary,
            "figures": strategy_figures(loan, extras, result),
            "trajectory": balance_trajectory(result),
            "standard_schedule": [row_to_dict(r) for r in standard],
            "accelerated_schedule": [row_to_dict(r) for r in accelerated],
        }
    )


if __name__ == "__main__":
    print("Starting MortGauge API...")
    app.run(host="0.0.0.0", port=8710, debug=True)
