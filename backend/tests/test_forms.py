"""공개 신청서 관리/공개 접수 흐름을 검증합니다."""

import pytest

from tests.conftest import auth_headers

TRAINER = "anna@example.com"
OTHER = "ben@example.com"

FORM_BODY = {
    "title": "Sommercamp 2025",
    "event_date": "2025-07-14",
    "event_location": "TC Grün-Weiß",
    "fields": [
        {"id": "name", "type": "text", "label": "Name", "required": True},
        {"id": "email", "type": "email", "label": "E-Mail", "required": True},
        {"id": "photos", "type": "checkbox", "label": "Fotoerlaubnis", "required": False},
    ],
}


@pytest.fixture
def form_id(client, seed_users):
    headers = auth_headers(client, TRAINER)
    resp = client.post("/api/forms", json=FORM_BODY, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["form_id"]


def test_form_crud_is_owner_scoped(client, form_id):
    headers = auth_headers(client, TRAINER)
    other = auth_headers(client, OTHER)

    assert [f["form_id"] for f in client.get("/api/forms", headers=headers).json()] == [form_id]
    assert client.get("/api/forms", headers=other).json() == []
    assert client.get(f"/api/forms/{form_id}", headers=other).status_code == 404
    assert client.put(f"/api/forms/{form_id}", json={"is_open": False}, headers=other).status_code == 404

    resp = client.put(f"/api/forms/{form_id}", json={"title": "Wintercamp"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["title"] == "Wintercamp"
    assert len(resp.json()["fields"]) == 3

    assert client.delete(f"/api/forms/{form_id}", headers=headers).status_code == 200
    assert client.get(f"/api/forms/{form_id}", headers=headers).status_code == 404


def test_form_requires_fields(client, seed_users):
    headers = auth_headers(client, TRAINER)
    resp = client.post("/api/forms", json={"title": "Leer", "fields": []}, headers=headers)
    assert resp.status_code == 422


def test_public_submission_without_login(client, form_id):
    resp = client.get(f"/api/public/forms/{form_id}")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Sommercamp 2025"

    resp = client.post(f"/api/public/forms/{form_id}/registrations", json={"data": {
        "name": "Lena",
        "email": "lena@example.com",
        "photos": True,
        "injected": "x",
    }})
    assert resp.status_code == 200, resp.text
    registration = resp.json()
    assert registration["email_sent"] is False
    assert registration["data"] == {"name": "Lena", "email": "lena@example.com", "photos": True}

    headers = auth_headers(client, TRAINER)
    listed = client.get(f"/api/forms/{form_id}/registrations", headers=headers).json()
    assert [r["registration_id"] for r in listed] == [registration["registration_id"]]
    assert client.get(f"/api/forms/{form_id}/registrations", headers=auth_headers(client, OTHER)).status_code == 404


def test_public_submission_checks_required_fields(client, form_id):
    resp = client.post(f"/api/public/forms/{form_id}/registrations", json={"data": {"name": "Lena", "email": "  "}})
    assert resp.status_code == 400
    assert "E-Mail" in resp.json()["detail"]


def test_closed_or_missing_form_rejects_submission(client, form_id):
    headers = auth_headers(client, TRAINER)
    client.put(f"/api/forms/{form_id}", json={"is_open": False}, headers=headers)

    assert client.get(f"/api/public/forms/{form_id}").status_code == 400
    resp = client.post(f"/api/public/forms/{form_id}/registrations", json={"data": {
        "name": "Lena", "email": "lena@example.com",
    }})
    assert resp.status_code == 400
    assert client.get("/api/public/forms/9999").status_code == 404
