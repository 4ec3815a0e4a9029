# tests/test_cli.py
import csv
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from mortgauge.main import cli

LOAN_ARGS = ["-p", "600k", "-r", "6", "-t", "30", "-s", "2026-03-01"]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "scenario.json"
    path.write_text(
        json.dumps(
            {
                "loan": {"loanAmount": 600000, "interestRate": 6, "loanTermYears": 30, "startDate": "2026-03-01"},
                "extras": {"monthlyExtra": 200, "customPayments": []},
            }
        ),
        encoding="utf-8",
    )
    return path


def test_payment_command(runner):
    result = runner.invoke(cli, ["payment", "-p", "600000", "-r", "6", "-t", "30"])
    assert result.exit_code == 0, result.output
    assert "Monthly payment: 3597.30" in result.output


def test_summary_command_with_extras(runner):
    result = runner.invoke(cli, ["summary", *LOAN_ARGS, "--monthly-extra", "200"])
    assert result.exit_code == 0, result.output
    assert "Target payment     : 3797.30" in result.output
    assert "Time saved" in result.output


def test_summary_from_config_matches_options(runner, config_file):
    from_options = runner.invoke(cli, ["summary", *LOAN_ARGS, "--monthly-extra", "200"])
    from_config = runner.invoke(cli, ["summary", "--config", str(config_file)])
    assert from_config.exit_code == 0, from_config.output
    assert from_config.output == from_options.output


def test_schedule_command_truncates_screen_output(runner):
    result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "--standard"])
    assert result.exit_code == 0, result.output
    assert "Schedule has 360 rows; showing first 120 rows." in result.output


def test_schedule_exports_json(runner, tmp_path):
    out = tmp_path / "schedule.json"
    result = runner.invoke(
        cli,
        ["schedule", *LOAN_ARGS, "--one-time", "2027-06-15:10000", "--annual", "2026-12-01:2000:3", "--output", str(out)],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["summary"]["time_saved_months"] > 0
    extras = [row for row in data["schedule"] if row["extra_payment"] > 0]
    assert extras[0]["date"] == "2026-12-01"
    assert extras[0]["extra_payment"] == 2000.0
    assert any(row["date"] == "2027-06-01" and row["extra_payment"] == 10000.0 for row in extras)


def test_schedule_exports_csv(runner, tmp_path):
    out = tmp_path / "schedule.csv"
    result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "--standard", "--output", str(out)])
    assert result.exit_code == 0, result.output
    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "Month"
    assert len(rows) == 361


def test_schedule_rejects_unknown_export_format(runner, tmp_path):
    result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "--output", str(tmp_path / "x.txt")])
    assert result.exit_code != 0
    assert "Unsupported output format" in result.output


def test_compare_command(runner):
    result = runner.invoke(cli, ["compare", *LOAN_ARGS, "--monthly-extra", "500", "--monthly-extra-growth", "2"])
    assert result.exit_code == 0, result.output
    assert "Standard" in result.output
    assert "2056-02-01" in result.output


@pytest.mark.parametrize(
    "extra_args",
    [
        ["--one-time", "2027-06-15"],
        ["--one-time", "June:5000"],
        ["--annual", "2027-06-15:5000:3:1"],
        ["--monthly-extra", "plenty"],
    ],
)
def test_malformed_options_are_rejected(runner, extra_args):
    result = runner.invoke(cli, ["summary", *LOAN_ARGS, *extra_args])
    assert result.exit_code == 2
    assert "Invalid value" in result.output


def test_missing_loan_options(runner):
    result = runner.invoke(cli, ["summary", "-p", "600k"])
    assert result.exit_code == 2
    assert "--rate" in result.output


def test_bad_config_file(runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    result = runner.invoke(cli, ["summary", "--config", str(path)])
    assert result.exit_code == 2
    assert "Cannot read config file" in result.output
