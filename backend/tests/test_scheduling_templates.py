from tests.conftest import auth_headers

TRAINER = "anna@example.com"


def _create(client, headers, name, data=None, is_active=False):
    body = {"name": name, "is_active": is_active}
    if data is not None:
        body["data"] = data
    resp = client.post("/api/scheduling-templates", json=body, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_first_template_is_active_with_default_slots(client, seed_users):
    headers = auth_headers(client, TRAINER)
    first = _create(client, headers, "Winter")
    assert first["is_active"] is True
    assert first["data"]["time_slots"][0] == "08:00"
    assert first["data"]["days"] == {}

    second = _create(client, headers, "Sommer")
    assert second["is_active"] is False


def test_only_one_template_is_active(client, seed_users):
    headers = auth_headers(client, TRAINER)
    first = _create(client, headers, "Winter")
    second = _create(client, headers, "Sommer")

    resp = client.post(f"/api/scheduling-templates/{second['template_id']}/activate", headers=headers)
    assert resp.json()["is_active"] is True
    listing = client.get("/api/scheduling-templates", headers=headers).json()
    assert {t["name"]: t["is_active"] for t in listing} == {"Winter": False, "Sommer": True}
    assert first["template_id"] != second["template_id"]


def test_last_template_cannot_be_deleted(client, seed_users):
    headers = auth_headers(client, TRAINER)
    first = _create(client, headers, "Winter")
    assert client.delete(f"/api/scheduling-templates/{first['template_id']}", headers=headers).status_code == 400

    second = _create(client, headers, "Sommer")
    assert client.delete(f"/api/scheduling-templates/{first['template_id']}", headers=headers).status_code == 200
    remaining = client.get("/api/scheduling-templates", headers=headers).json()
    assert [(t["template_id"], t["is_active"]) for t in remaining] == [(second["template_id"], True)]


def test_invalid_day_key_is_rejected(client, seed_users):
    headers = auth_headers(client, TRAINER)
    resp = client.post(
        "/api/scheduling-templates",
        json={"name": "X", "data": {"time_slots": ["08:00"], "days": {"7": {"08:00": [1]}}}},
        headers=headers,
    )
    assert resp.status_code == 422


def test_apply_creates_planned_sessions_for_filled_cells(client, seed_users, seed_clients, seed_plans):
    headers = auth_headers(client, TRAINER)
    mia = seed_clients["mia"].client_id
    leo = seed_clients["leo"].client_id
    foreign = seed_clients["foreign"].client_id
    template = _create(client, headers, "Winter", data={
        "time_slots": ["08:00", "17:00"],
        "days": {
            "0": {"08:00": [mia], "17:00": []},
            "2": {"17:00": [mia, leo]},
            "6": {"08:00": [foreign]},
        },
    })

    resp = client.post(
        f"/api/scheduling-templates/{template['template_id']}/apply",
        json={"week_of": "2024-12-12", "rate_plan_id": seed_plans["shared"].rate_plan_id, "slot_minutes": 90},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["created"] == 2

    sessions = client.get("/api/sessions", params={"week": "2024-12-12"}, headers=headers).json()
    assert [(s["session_date"], s["start_time"], s["end_time"]) for s in sessions] == [
        ("2024-12-09", "08:00", "09:30"),
        ("2024-12-11", "17:00", "18:30"),
    ]
    assert all(s["status"] == "planned" for s in sessions)
    assert sessions[1]["client_ids"] == sorted([mia, leo])


def test_apply_foreign_template_is_not_found(client, seed_users):
    headers = auth_headers(client, TRAINER)
    template = _create(client, headers, "Winter")
    other = auth_headers(client, "ben@example.com")
    resp = client.post(
        f"/api/scheduling-templates/{template['template_id']}/apply",
        json={"week_of": "2024-12-12"},
        headers=other,
    )
    assert resp.status_code == 404
