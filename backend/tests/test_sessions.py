from datetime import date, timedelta

from tests.conftest import auth_headers

TRAINER = "anna@example.com"


def _payload(seed_clients, seed_plans, **extra):
    payload = {
        "session_date": "2024-12-02",
        "start_time": "9:00",
        "end_time": "10:30",
        "client_ids": [seed_clients["mia"].client_id],
        "rate_plan_id": seed_plans["single"].rate_plan_id,
    }
    payload.update(extra)
    return payload


def test_create_single_session_normalizes_times(client, seed_users, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    resp = client.post("/api/sessions", json=_payload(seed_clients, seed_plans), headers=headers)
    assert resp.status_code == 200, resp.text
    rows = resp.json()
    assert len(rows) == 1
    assert rows[0]["start_time"] == "09:00"
    assert rows[0]["status"] == "planned"
    assert rows[0]["series_id"] is None
    assert rows[0]["client_ids"] == [seed_clients["mia"].client_id]


def test_create_rejects_invalid_times_and_foreign_clients(client, seed_users, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    resp = client.post("/api/sessions", json=_payload(seed_clients, seed_plans, end_time="08:00"), headers=headers)
    assert resp.status_code == 400

    foreign = seed_clients["foreign"].client_id
    resp = client.post("/api/sessions", json=_payload(seed_clients, seed_plans, client_ids=[foreign]), headers=headers)
    assert resp.status_code == 400

    resp = client.post("/api/sessions", json=_payload(seed_clients, seed_plans, client_ids=[]), headers=headers)
    assert resp.status_code == 422

    resp = client.post(
        "/api/sessions",
        json=_payload(seed_clients, seed_plans, custom_billing_mode="per_client"),
        headers=headers,
    )
    assert resp.status_code == 400


def test_weekly_series_and_list_by_week(client, seed_users, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    resp = client.post(
        "/api/sessions",
        json=_payload(seed_clients, seed_plans, repeat_until="2024-12-23"),
        headers=headers,
    )
    rows = resp.json()
    assert [r["session_date"] for r in rows] == ["2024-12-02", "2024-12-09", "2024-12-16", "2024-12-23"]
    assert len({r["series_id"] for r in rows}) == 1

    week = client.get("/api/sessions", params={"week": "2024-12-15"}, headers=headers).json()
    assert [r["session_date"] for r in week] == ["2024-12-09"]

    ranged = client.get("/api/sessions", params={"start": "2024-12-10", "end": "2024-12-31"}, headers=headers).json()
    assert len(ranged) == 2


def test_update_following_shifts_rest_of_series(client, seed_users, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    rows = client.post(
        "/api/sessions",
        json=_payload(seed_clients, seed_plans, repeat_until="2024-12-23"),
        headers=headers,
    ).json()
    second = rows[1]

    resp = client.put(
        f"/api/sessions/{second['session_id']}",
        params={"scope": "following"},
        json={"session_date": "2024-12-10", "start_time": "17:00", "end_time": "18:00",
              "client_ids": [seed_clients["leo"].client_id]},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    updated = resp.json()
    assert [r["session_date"] for r in updated] == ["2024-12-10", "2024-12-17", "2024-12-24"]
    assert all(r["start_time"] == "17:00" for r in updated)
    assert all(r["client_ids"] == [seed_clients["leo"].client_id] for r in updated)

    first = client.get(f"/api/sessions/{rows[0]['session_id']}", headers=headers).json()
    assert first["session_date"] == "2024-12-02"
    assert first["start_time"] == "09:00"


def test_update_single_leaves_series_untouched(client, seed_users, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    rows = client.post(
        "/api/sessions",
        json=_payload(seed_clients, seed_plans, repeat_until="2024-12-16"),
        headers=headers,
    ).json()

    resp = client.put(f"/api/sessions/{rows[0]['session_id']}", json={"note": "Regen"}, headers=headers)
    assert [r["note"] for r in resp.json()] == ["Regen"]
    assert client.get(f"/api/sessions/{rows[1]['session_id']}", headers=headers).json()["note"] is None


def test_update_rejects_clearing_required_fields(client, seed_users, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    row = client.post("/api/sessions", json=_payload(seed_clients, seed_plans), headers=headers).json()[0]

    for field in ("status", "cash_paid", "start_time", "session_date"):
        resp = client.put(f"/api/sessions/{row['session_id']}", json={field: None}, headers=headers)
        assert resp.status_code == 400, field
    current = client.get(f"/api/sessions/{row['session_id']}", headers=headers).json()
    assert current["status"] == "planned"
    assert current["cash_paid"] is False


def test_delete_following(client, seed_users, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    rows = client.post(
        "/api/sessions",
        json=_payload(seed_clients, seed_plans, repeat_until="2024-12-23"),
        headers=headers,
    ).json()

    resp = client.delete(f"/api/sessions/{rows[2]['session_id']}", params={"scope": "following"}, headers=headers)
    assert resp.json()["deleted"] == 2
    remaining = client.get("/api/sessions", headers=headers).json()
    assert [r["session_date"] for r in remaining] == ["2024-12-02", "2024-12-09"]


def test_status_patch_and_tenant_isolation(client, seed_users, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    session_id = client.post("/api/sessions", json=_payload(seed_clients, seed_plans), headers=headers).json()[0]["session_id"]

    resp = client.patch(f"/api/sessions/{session_id}/status", json={"status": "completed", "cash_paid": True}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"
    assert resp.json()["cash_paid"] is True

    other = auth_headers(client, "ben@example.com")
    assert client.get(f"/api/sessions/{session_id}", headers=other).status_code == 404
    assert client.patch(f"/api/sessions/{session_id}/status", json={"status": "cancelled"}, headers=other).status_code == 404
    assert client.delete(f"/api/sessions/{session_id}", headers=other).status_code == 404
    assert client.get("/api/sessions", headers=other).json() == []


def test_series_length_is_bounded(client, seed_users, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    too_far = (date(2024, 12, 2) + timedelta(weeks=200)).isoformat()
    resp = client.post("/api/sessions", json=_payload(seed_clients, seed_plans, repeat_until=too_far), headers=headers)
    assert resp.status_code == 400
