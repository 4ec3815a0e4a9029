# tests/test_web.py
import pytest

from mortgauge_web.app import app

LOAN = {"loanAmount": 600000, "interestRate": 6, "loanTermYears": 30, "startDate": "2026-03-01"}


@pytest.fixture
def client():
    app.config.update(TESTING=True)
    return app.test_client()


def test_healthz(client):
    assert client.get("/healthz").get_json() == {"status": "ok"}


def test_payment_endpoint(client):
    resp = client.post("/api/payment", json={"loan": LOAN})
    assert resp.status_code == 200
    assert round(resp.get_json()["monthly_payment"], 2) == 3597.30


def test_compare_endpoint_previews_schedules(client):
    resp = client.post(
        "/api/compare",
        json={
            "loan": LOAN,
            "extras": {
                "monthlyExtra": 200,
                "customPayments": [{"id": "x", "amount": 10000, "date": "2027-06-15", "type": "one-time"}],
            },
        },
    )
    assert resp.status_code == 200
    data = resp.get_json()
    summary = data["summary"]
    assert summary["interest_saved"] > 0
    assert summary["time_saved_months"] > 0
    assert summary["truncated"]["standard"] == 240
    assert len(data["standard_schedule"]) == 120
    assert len(data["accelerated_schedule"]) == 120
    assert data["figures"]["base_payment"] == "$3,597.30"
    assert data["trajectory"][0]["name"] == "2026-03"


def test_compare_endpoint_full_schedule(client):
    resp = client.post("/api/compare", json={"loan": LOAN, "full_schedule": True})
    data = resp.get_json()
    assert resp.status_code == 200
    assert "truncated" not in data["summary"]
    assert len(data["standard_schedule"]) == 360
    assert data["standard_schedule"] == data["accelerated_schedule"]


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"loan": "600k"},
        {"loan": {**LOAN, "startDate": "whenever"}},
        {"loan": LOAN, "extras": {"customPayments": [{"amount": 1, "date": "2030-01-01", "type": "weekly"}]}},
        {"loan": LOAN, "extras": {"customPayments": 5}},
        {"loan": LOAN, "extras": "200 a month"},
        {"loan": {**LOAN, "loanTermYears": 30.9}},
    ],
)
def test_invalid_requests_get_400(client, body):
    resp = client.post("/api/compare", json=body)
    assert resp.status_code == 400
    assert resp.get_json()["error"]


def test_non_json_body_gets_400(client):
    resp = client.post("/api/payment", data="nope", content_type="text/plain")
    assert resp.status_code == 400
