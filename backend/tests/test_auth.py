import pytest
from tests.conftest import auth_headers

TRAINER = "anna@example.com"


def test_login_success(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": TRAINER})
    assert resp.status_code == 200
    data = resp.json()
    assert "access_token" in data
    assert data["user"]["name"] == "Anna Trainer"


def test_login_is_case_insensitive(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": "Anna@Example.com"})
    assert resp.status_code == 200


def test_login_unknown_or_inactive(client, seed_users):
    assert client.post("/api/auth/login", json={"email": "nobody@example.com"}).status_code == 401
    assert client.post("/api/auth/login", json={"email": "old@example.com"}).status_code == 401


def test_me_authenticated(client, seed_users):
    headers = auth_headers(client, TRAINER)
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == TRAINER


def test_me_unauthenticated(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code in (401, 403)  # HTTPBearer raises 401 or 403 depending on version


def test_rejects_bad_and_expired_tokens(client, seed_users):
    from datetime import datetime, timedelta
    from jose import jwt
    from trainer_planner.config import settings

    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401

    expired = jwt.encode(
        {"sub": str(seed_users["trainer"].user_id), "exp": datetime.utcnow() - timedelta(minutes=1)},
        settings.SECRET_KEY,
        algorithm="HS256",
    )
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401

    foreign_sub = jwt.encode({"sub": "abc"}, settings.SECRET_KEY, algorithm="HS256")
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {foreign_sub}"})
    assert resp.status_code == 401


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_profile_upsert_and_default_vat_rate(client, seed_users):
    headers = auth_headers(client, TRAINER)
    assert client.get("/api/profile", headers=headers).status_code == 404

    resp = client.put("/api/profile", json={"first_name": "Anna", "last_name": "Schmidt"}, headers=headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["vat_rate"] == 19

    resp = client.put("/api/profile", json={"first_name": "Anna", "small_business": True}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["small_business"] is True
    assert client.get("/api/profile", headers=headers).json()["profile_id"] == resp.json()["profile_id"]
