from tests.conftest import auth_headers

TRAINER = "anna@example.com"


def test_payment_upsert_is_idempotent(client, seed_users, seed_clients):
    headers = auth_headers(client, TRAINER)
    body = {"month": "2024-12", "client_id": seed_clients["mia"].client_id, "paid": True}

    first = client.put("/api/payments", json=body, headers=headers)
    second = client.put("/api/payments", json=body, headers=headers)
    assert first.status_code == 200, first.text
    assert first.json()["payment_id"] == second.json()["payment_id"]

    rows = client.get("/api/payments", params={"month": "2024-12"}, headers=headers).json()
    assert len(rows) == 1
    assert rows[0]["paid"] is True

    client.put("/api/payments", json={**body, "paid": False}, headers=headers)
    rows = client.get("/api/payments", params={"month": "2024-12"}, headers=headers).json()
    assert [r["paid"] for r in rows] == [False]


def test_payment_validation(client, seed_users, seed_clients):
    headers = auth_headers(client, TRAINER)
    foreign = seed_clients["foreign"].client_id
    assert client.put("/api/payments", json={"month": "2024-12", "client_id": foreign}, headers=headers).status_code == 404
    assert client.put("/api/payments", json={"month": "2024-13", "client_id": foreign}, headers=headers).status_code == 422
    assert client.get("/api/payments", headers=headers).status_code == 422


def test_adjustments_crud(client, seed_users, seed_clients):
    headers = auth_headers(client, TRAINER)
    mia = seed_clients["mia"].client_id
    resp = client.post(
        "/api/adjustments",
        json={"month": "2024-12", "client_id": mia, "amount": -15.5, "reason": "Ausfall"},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    adjustment_id = resp.json()["adjustment_id"]

    rows = client.get("/api/adjustments", params={"month": "2024-12"}, headers=headers).json()
    assert [r["amount"] for r in rows] == [-15.5]

    other = auth_headers(client, "ben@example.com")
    assert client.delete(f"/api/adjustments/{adjustment_id}", headers=other).status_code == 404
    assert client.delete(f"/api/adjustments/{adjustment_id}", headers=headers).status_code == 200
    assert client.get("/api/adjustments", params={"month": "2024-12"}, headers=headers).json() == []
