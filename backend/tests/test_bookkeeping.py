from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from tests.conftest import auth_headers
from trainer_planner.services.bookkeeping_service import input_vat

TRAINER = "anna@example.com"


def test_input_vat_is_extracted_from_gross_amount():
    assert input_vat(119, 19) == Decimal("19.00")
    assert input_vat(10.70, 7) == Decimal("0.70")


def _complete_session(client, headers, day, client_id, plan_id, cash_paid=False):
    resp = client.post("/api/sessions", json={
        "session_date": day,
        "start_time": "10:00",
        "end_time": "11:00",
        "client_ids": [client_id],
        "rate_plan_id": plan_id,
        "status": "completed",
        "cash_paid": cash_paid,
    }, headers=headers)
    assert resp.status_code == 200, resp.text


def test_quarterly_vat_report_nets_input_vat(client, seed_profile, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    mia = seed_clients["mia"].client_id
    leo = seed_clients["leo"].client_id
    plan = seed_plans["single"].rate_plan_id
    _complete_session(client, headers, "2024-02-05", mia, plan)
    _complete_session(client, headers, "2024-02-06", leo, plan)
    _complete_session(client, headers, "2024-05-06", mia, plan, cash_paid=True)
    client.put("/api/payments", json={"month": "2024-02", "client_id": mia, "paid": True}, headers=headers)
    client.post("/api/expenses", json={
        "expense_date": "2024-03-10", "amount": 119, "category": "equipment",
        "has_input_vat": True, "input_vat_rate": 19,
    }, headers=headers)
    client.post("/api/expenses", json={
        "expense_date": "2024-03-11", "amount": 50, "category": "travel", "has_input_vat": False,
    }, headers=headers)

    resp = client.get("/api/billing/vat-report", params={"year": 2024, "period": "quarter"}, headers=headers)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    periods = {p["period"]: p for p in data["periods"]}
    assert list(periods) == ["2024-Q1", "2024-Q2", "2024-Q3", "2024-Q4"]
    # 2월에는 수금 완료된 Mia만 과세표준에 포함된다
    assert periods["2024-Q1"]["income_net"] == 60.0
    assert periods["2024-Q1"]["output_vat"] == 11.4
    assert periods["2024-Q1"]["input_vat"] == 19.0
    assert periods["2024-Q1"]["payable"] == -7.6
    assert periods["2024-Q2"]["income_net"] == 60.0
    assert data["total_payable"] == 3.8

    without_cash = client.get(
        "/api/billing/vat-report",
        params={"year": 2024, "period": "quarter", "include_cash": False},
        headers=headers,
    ).json()
    assert without_cash["periods"][1]["income_net"] == 0


def test_small_business_vat_report_is_empty(client, seed_profile, seed_clients, seed_plans, db):
    seed_profile.small_business = True
    db.commit()
    headers = auth_headers(client, TRAINER)
    data = client.get("/api/billing/vat-report", params={"year": 2024}, headers=headers).json()
    assert data["small_business"] is True
    assert data["periods"] == []
    assert data["total_payable"] == 0


def test_expense_requires_rate_when_input_vat_claimed(client, seed_users):
    headers = auth_headers(client, TRAINER)
    resp = client.post("/api/expenses", json={
        "expense_date": "2024-03-10", "amount": 20, "has_input_vat": True,
    }, headers=headers)
    assert resp.status_code == 400

    resp = client.post("/api/expenses", json={
        "expense_date": "2024-03-10", "amount": 20, "has_input_vat": False, "input_vat_rate": 19,
    }, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["input_vat_rate"] is None

    resp = client.post("/api/expenses", json={
        "expense_date": "2024-03-10", "amount": 20, "has_input_vat": True, "input_vat_rate": 16,
    }, headers=headers)
    assert resp.status_code == 422
