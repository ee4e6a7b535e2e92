"""Registration Service 도메인 서비스 레이어입니다. 공개 신청서와 접수 알림 메일을 담당합니다."""

import html
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from fastapi import HTTPException
from sqlalchemy.orm import Session

from trainer_planner.config import settings
from trainer_planner.models.registration import Registration, RegistrationForm
from trainer_planner.models.user import TrainerProfile, User
from trainer_planner.schemas.registration import RegistrationFormCreate, RegistrationFormUpdate
from trainer_planner.services.ai_client import UpstreamError
from trainer_planner.utils.dates import format_date_german

logger = logging.getLogger(__name__)


def get_forms(db: Session, owner_id: int) -> List[RegistrationForm]:
    return (
        db.query(RegistrationForm)
        .filter(RegistrationForm.owner_id == owner_id)
        .order_by(RegistrationForm.created_at.desc(), RegistrationForm.form_id.desc())
        .all()
    )


def get_form(db: Session, form_id: int, owner_id: int) -> RegistrationForm:
    form = db.query(RegistrationForm).filter(
        RegistrationForm.form_id == form_id,
        RegistrationForm.owner_id == owner_id,
    ).first()
    if not form:
        raise HTTPException(status_code=404, detail="신청서를 찾을 수 없습니다.")
    return form


def create_form(db: Session, data: RegistrationFormCreate, owner_id: int) -> RegistrationForm:
    payload = data.model_dump()
    form = RegistrationForm(owner_id=owner_id, **payload)
    db.add(form)
    db.commit()
    db.refresh(form)
    return form


def update_form(db: Session, form_id: int, data: RegistrationFormUpdate, owner_id: int) -> RegistrationForm:
    form = get_form(db, form_id, owner_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(form, key, value)
    db.commit()
    db.refresh(form)
    return form


def delete_form(db: Session, form_id: int, owner_id: int):
    form = get_form(db, form_id, owner_id)
    db.delete(form)
    db.commit()


def get_registrations(db: Session, form_id: int, owner_id: int) -> List[Registration]:
    get_form(db, form_id, owner_id)
    return (
        db.query(Registration)
        .filter(Registration.form_id == form_id)
        .order_by(Registration.created_at.desc(), Registration.registration_id.desc())
        .all()
    )


def get_public_form(db: Session, form_id: int) -> RegistrationForm:
    form = db.query(RegistrationForm).filter(RegistrationForm.form_id == form_id).first()
    if not form:
        raise HTTPException(status_code=404, detail="신청서를 찾을 수 없습니다.")
    if not form.is_open:
        raise HTTPException(status_code=400, detail="접수가 마감된 신청서입니다.")
    return form


def _is_blank(value: Any) -> bool:
    return value is None or value is False or (isinstance(value, str) and not value.strip())


def submit_registration(db: Session, form_id: int, data: Dict[str, Any]) -> Registration:
    """인증 없이 공개 신청서를 접수합니다. 폼에 정의되지 않은 키는 버린다."""
    form = get_public_form(db, form_id)

    fields = form.fields or []
    missing = [f.get("label") or f.get("id") for f in fields if f.get("required") and _is_blank(data.get(f.get("id")))]
    if missing:
        raise HTTPException(status_code=400, detail="필수 항목을 입력하세요: " + ", ".join(missing))

    known_ids = {f.get("id") for f in fields}
    registration = Registration(
        form_id=form.form_id,
        data={key: value for key, value in data.items() if key in known_ids},
        email_sent=False,
    )
    db.add(registration)
    db.commit()
    db.refresh(registration)
    return registration


def _display_value(field: Dict[str, Any], value: Any) -> str:
    if field.get("type") == "checkbox":
        return "Ja" if value else "Nein"
    return str(value)


def render_notification(registration: Registration, form: RegistrationForm, trainer_name: str) -> str:
    """접수 내역을 트레이너에게 보낼 HTML 메일 본문으로 만듭니다."""
    data = registration.data or {}
    rows = []
    for field in form.fields or []:
        value = data.get(field.get("id"))
        if value is None or value == "" or value is False:
            continue
        rows.append(
            "<tr>"
            '<td style="padding: 8px 12px; border-bottom: 1px solid #e5e7eb; color: #6b7280; font-weight: 500;">'
            f"{html.escape(str(field.get('label') or field.get('id')))}</td>"
            '<td style="padding: 8px 12px; border-bottom: 1px solid #e5e7eb; color: #1f2937;">'
            f"{html.escape(_display_value(field, value))}</td>"
            "</tr>"
        )

    event_info = []
    if form.event_date:
        event_info.append(f"Datum: {format_date_german(form.event_date)}")
    if form.event_location:
        event_info.append(f"Ort: {html.escape(form.event_location)}")
    event_block = ""
    if event_info:
        event_block = (
            '<div style="background: #f0f9ff; border-radius: 8px; padding: 12px 16px; margin-bottom: 20px;">'
            f'<p style="margin: 0; color: #0369a1; font-size: 14px;">{" | ".join(event_info)}</p></div>'
        )

    submitted_at = registration.created_at or datetime.now()
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; background-color: #f3f4f6; margin: 0; padding: 20px;">
<div style="max-width: 600px; margin: 0 auto; background: white; border-radius: 12px; overflow: hidden;">
  <div style="background: #2563eb; padding: 24px; text-align: center;">
    <h1 style="color: white; margin: 0; font-size: 20px;">Neue Anmeldung eingegangen</h1>
  </div>
  <div style="padding: 24px;">
    <p style="color: #374151;">Hallo {html.escape(trainer_name)},</p>
    <p style="color: #374151;">Es wurde eine neue Anmeldung für <strong>"{html.escape(form.title)}"</strong> eingereicht.</p>
    {event_block}
    <h3 style="color: #1f2937; font-size: 16px;">Anmeldedaten:</h3>
    <table style="width: 100%; border-collapse: collapse; background: #f9fafb;">
{chr(10).join(rows)}
    </table>
    <p style="color: #6b7280; font-size: 13px; margin-top: 20px;">Eingereicht am: {submitted_at:%d.%m.%Y %H:%M}</p>
  </div>
  <div style="background: #f9fafb; padding: 16px; text-align: center; border-top: 1px solid #e5e7eb;">
    <p style="color: #9ca3af; font-size: 12px; margin: 0;">Tennis Trainer Planner</p>
  </div>
</div>
</body>
</html>"""


def _deliver(to: str, subject: str, body: str) -> bool:
    if not settings.RESEND_API_KEY:
        logger.info("[registration] e-mail provider not configured, skipped: to=%s subject=%s", to, subject)
        return False
    try:
        response = httpx.post(
            settings.RESEND_API_URL,
            headers={
                "Authorization": f"Bearer {settings.RESEND_API_KEY}",
                "Content-Type": "application/json",
            },
            json={"from": settings.EMAIL_FROM, "to": to, "subject": subject, "html": body},
            timeout=float(settings.EMAIL_TIMEOUT_SECONDS),
        )
    except httpx.HTTPError as exc:
        logger.warning("[registration] e-mail request failed: %s", exc)
        raise UpstreamError(f"E-Mail API error: {exc}") from exc
    if response.status_code >= 400:
        logger.warning("[registration] e-mail delivery failed: status=%s body=%s", response.status_code, response.text)
        raise UpstreamError(f"E-Mail API error: {response.status_code} {response.text}", status_code=response.status_code)
    return True


def send_registration_email(db: Session, registration_id: Optional[int]) -> Dict[str, Any]:
    """접수 알림 메일을 보냅니다.

    email_sent는 실제 발송에 성공했을 때만 True로 바뀌며, 이미 보낸 접수도 다시
    호출할 수 있습니다. 메일 제공자가 설정되지 않았으면 로그만 남기고 delivered=False.
    """
    if registration_id is None:
        raise ValueError("registrationId는 필수입니다.")
    registration = db.query(Registration).filter(Registration.registration_id == registration_id).first()
    if not registration:
        raise LookupError("접수 내역을 찾을 수 없습니다.")
    form = registration.form
    if form is None:
        raise LookupError("신청서를 찾을 수 없습니다.")
    owner = db.query(User).filter(User.user_id == form.owner_id).first()
    if owner is None or not owner.email:
        raise LookupError("트레이너 이메일을 찾을 수 없습니다.")
    profile = db.query(TrainerProfile).filter(TrainerProfile.owner_id == form.owner_id).first()
    trainer_name = (profile.display_name if profile else "") or owner.name or "Trainer"

    body = render_notification(registration, form, trainer_name)
    delivered = _deliver(owner.email, f"Neue Anmeldung: {form.title}", body)
    if delivered:
        registration.email_sent = True
        db.commit()
    return {
        "success": True,
        "message": "Email-Benachrichtigung verarbeitet" if delivered else "E-Mail-Versand nicht konfiguriert",
        "delivered": delivered,
    }
