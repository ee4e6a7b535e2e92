"""LLM/이메일 연동 함수 엔드포인트의 응답 형태와 오류 코드를 검증합니다."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import pytest

from tests.conftest import auth_headers
from trainer_planner.config import settings
from trainer_planner.models.registration import Registration, RegistrationForm
from trainer_planner.services.ai_client import UpstreamError
from trainer_planner.services.ai_service import normalize_receipt, strip_code_fence

TRAINER = "anna@example.com"


def _mock_model(**returns):
    instance = MagicMock()
    instance.model_name = "test-model"
    for name, value in returns.items():
        getattr(instance, name).return_value = value
    return instance


def test_strip_code_fence():
    assert strip_code_fence("```html\n<h1>x</h1>\n```") == "<h1>x</h1>"
    assert strip_code_fence("  <p>plain</p> ") == "<p>plain</p>"


def test_normalize_receipt_maps_categories_and_rates():
    data = normalize_receipt({
        "date": "2024-12-10",
        "amount": "49,99 €",
        "category": "Material",
        "hasVAT": True,
        "vatRate": 16,
        "vendor": " Decathlon ",
    })
    assert data["amount"] == 49.99
    assert data["category"] == "equipment"
    assert data["hasVAT"] is False
    assert data["vatRate"] is None
    assert data["vendor"] == "Decathlon"
    assert data["invoiceDate"] == "2024-12-10"


def test_functions_require_login(client, seed_users):
    assert client.post("/api/functions/generate-invoice-template", json={"prompt": "x"}).status_code in (401, 403)
    assert client.post("/api/functions/parse-receipt", json={}).status_code in (401, 403)


def test_generate_template_success(client, seed_users):
    model = _mock_model(invoke="```html\n<h1>Rechnung</h1>{{line_items_table}}{{totals_block}}\n```")
    with patch("trainer_planner.services.ai_service.AIClient") as MockClient:
        MockClient.get_client.return_value = model
        headers = auth_headers(client, TRAINER)
        resp = client.post(
            "/api/functions/generate-invoice-template",
            json={"prompt": "Mach es modern", "currentTemplate": "<p>alt</p>"},
            headers=headers,
        )

    assert resp.status_code == 200, resp.text
    assert resp.json() == {"success": True, "html": "<h1>Rechnung</h1>{{line_items_table}}{{totals_block}}"}
    prompt = model.invoke.call_args.args[0]
    assert "<p>alt</p>" in prompt
    assert "Mach es modern" in prompt


def test_generate_template_rejects_missing_placeholders(client, seed_users):
    with patch("trainer_planner.services.ai_service.AIClient") as MockClient:
        MockClient.get_client.return_value = _mock_model(invoke="<h1>Rechnung</h1>")
        headers = auth_headers(client, TRAINER)
        resp = client.post("/api/functions/generate-invoice-template", json={"prompt": "x"}, headers=headers)

    assert resp.status_code == 502
    assert resp.json()["success"] is False
    assert "line_items_table" in resp.json()["error"]


def test_generate_template_requires_prompt(client, seed_users):
    headers = auth_headers(client, TRAINER)
    resp = client.post("/api/functions/generate-invoice-template", json={"prompt": "   "}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_generate_template_passes_upstream_failure(client, seed_users):
    model = MagicMock()
    model.invoke.side_effect = UpstreamError("AI API error: 429 rate limited", status_code=429)
    with patch("trainer_planner.services.ai_service.AIClient") as MockClient:
        MockClient.get_client.return_value = model
        headers = auth_headers(client, TRAINER)
        resp = client.post("/api/functions/generate-invoice-template", json={"prompt": "x"}, headers=headers)

    assert resp.status_code == 502
    assert "429" in resp.json()["error"]


def test_parse_receipt_returns_camel_case_fields(client, seed_users):
    raw = (
        'Hier ist das Ergebnis: {"date":"2024-12-10","amount":49.99,"description":"Tennisbälle",'
        '"category":"equipment","hasVAT":true,"vatRate":19,"vendor":"Decathlon",'
        '"invoiceNumber":"RE-1","invoiceDate":null}'
    )
    model = _mock_model(invoke_with_attachment=raw)
    with patch("trainer_planner.services.ai_service.AIClient") as MockClient:
        MockClient.get_client.return_value = model
        headers = auth_headers(client, TRAINER)
        resp = client.post(
            "/api/functions/parse-receipt",
            json={"imageBase64": "aGVsbG8=", "mimeType": "image/png"},
            headers=headers,
        )

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["hasVAT"] is True
    assert data["vatRate"] == 19
    assert data["invoiceNumber"] == "RE-1"
    assert data["invoiceDate"] == "2024-12-10"
    args = model.invoke_with_attachment.call_args.args
    assert args[1:] == ("aGVsbG8=", "image/png")


@pytest.mark.parametrize("body", [{}, {"imageBase64": "aGVsbG8=", "mimeType": "text/plain"}])
def test_parse_receipt_rejects_bad_input(client, seed_users, body):
    headers = auth_headers(client, TRAINER)
    resp = client.post("/api/functions/parse-receipt", json=body, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_parse_receipt_unreadable_response(client, seed_users):
    with patch("trainer_planner.services.ai_service.AIClient") as MockClient:
        MockClient.get_client.return_value = _mock_model(invoke_with_attachment="Kein Beleg erkennbar.")
        headers = auth_headers(client, TRAINER)
        resp = client.post(
            "/api/functions/parse-receipt",
            json={"imageBase64": "aGVsbG8=", "mimeType": "application/pdf"},
            headers=headers,
        )
    assert resp.status_code == 502


@pytest.fixture
def registration(db, seed_users, seed_profile):
    form = RegistrationForm(
        owner_id=seed_users["trainer"].user_id,
        title="Sommercamp",
        fields=[{"id": "name", "type": "text", "label": "Name", "required": True}],
    )
    db.add(form)
    db.commit()
    item = Registration(form_id=form.form_id, data={"name": "Lena <b>"}, email_sent=False)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def test_registration_email_without_provider_is_noop(client, db, registration, monkeypatch):
    monkeypatch.setattr(settings, "RESEND_API_KEY", "")
    resp = client.post("/api/functions/send-registration-email", json={"registrationId": registration.registration_id})
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["delivered"] is False
    db.refresh(registration)
    assert registration.email_sent is False


def test_registration_email_is_sent_to_form_owner(client, db, registration, monkeypatch):
    sent = []

    def _fake_post(url, headers=None, json=None, timeout=None):
        sent.append({"url": url, "headers": headers, "json": json})
        return SimpleNamespace(status_code=200, text="{}")

    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr("httpx.post", _fake_post)
    resp = client.post("/api/functions/send-registration-email", json={"registrationId": registration.registration_id})

    assert resp.status_code == 200, resp.text
    assert resp.json()["delivered"] is True
    assert sent[0]["json"]["to"] == "anna@example.com"
    assert sent[0]["json"]["subject"] == "Neue Anmeldung: Sommercamp"
    assert "Lena &lt;b&gt;" in sent[0]["json"]["html"]
    assert sent[0]["headers"]["Authorization"] == "Bearer re_test"
    db.refresh(registration)
    assert registration.email_sent is True


def test_registration_email_provider_failure(client, db, registration, monkeypatch):
    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr("httpx.post", lambda *a, **kw: SimpleNamespace(status_code=422, text="invalid from"))
    resp = client.post("/api/functions/send-registration-email", json={"registrationId": registration.registration_id})
    assert resp.status_code == 502
    assert "invalid from" in resp.json()["error"]

    def _timeout(*a, **kw):
        raise httpx.ConnectTimeout("timed out")

    monkeypatch.setattr("httpx.post", _timeout)
    resp = client.post("/api/functions/send-registration-email", json={"registrationId": registration.registration_id})
    assert resp.status_code == 502
    db.refresh(registration)
    assert registration.email_sent is False


def test_registration_email_validation(client, seed_users):
    resp = client.post("/api/functions/send-registration-email", json={})
    assert resp.status_code == 400
    resp = client.post("/api/functions/send-registration-email", json={"registrationId": 9999})
    assert resp.status_code == 404
    assert resp.json()["success"] is False
