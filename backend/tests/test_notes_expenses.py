"""메모와 지출 CRUD, 트레이너 간 격리를 검증합니다."""

from tests.conftest import auth_headers

TRAINER = "anna@example.com"
OTHER = "ben@example.com"


def test_note_crud(client, seed_users):
    headers = auth_headers(client, TRAINER)
    resp = client.post("/api/notes", json={"title": "Platzbuchung", "body": "Halle ab Oktober"}, headers=headers)
    assert resp.status_code == 200
    note_id = resp.json()["note_id"]

    resp = client.put(f"/api/notes/{note_id}", json={"body": "Halle ab November"}, headers=headers)
    assert resp.json()["title"] == "Platzbuchung"
    assert resp.json()["body"] == "Halle ab November"

    assert client.get(f"/api/notes/{note_id}", headers=auth_headers(client, OTHER)).status_code == 404
    assert client.delete(f"/api/notes/{note_id}", headers=headers).status_code == 200
    assert client.get("/api/notes", headers=headers).json() == []


def test_note_title_required(client, seed_users):
    headers = auth_headers(client, TRAINER)
    assert client.post("/api/notes", json={"title": ""}, headers=headers).status_code == 422


def test_expense_range_filter_and_update(client, seed_users):
    headers = auth_headers(client, TRAINER)
    for day, amount in (("2024-03-01", 30), ("2024-04-15", 45)):
        resp = client.post("/api/expenses", json={
            "expense_date": day, "amount": amount, "category": "venue-rental",
        }, headers=headers)
        assert resp.status_code == 200, resp.text

    march = client.get("/api/expenses", params={"start": "2024-03-01", "end": "2024-03-31"}, headers=headers).json()
    assert [e["amount"] for e in march] == [30.0]

    expense_id = march[0]["expense_id"]
    resp = client.put(f"/api/expenses/{expense_id}", json={"has_input_vat": True}, headers=headers)
    assert resp.status_code == 400

    resp = client.put(
        f"/api/expenses/{expense_id}",
        json={"has_input_vat": True, "input_vat_rate": 19},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["input_vat_rate"] == 19

    other = auth_headers(client, OTHER)
    assert client.get("/api/expenses", headers=other).json() == []
    assert client.delete(f"/api/expenses/{expense_id}", headers=other).status_code == 404
