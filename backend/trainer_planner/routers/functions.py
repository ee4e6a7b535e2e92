"""외부 LLM/이메일 연동 함수 API 라우터입니다.

응답은 항상 {"success": true, ...} 또는 {"success": false, "error": "..."} 형태이며,
실패 시 상태 코드는 입력 오류 400, 대상 없음 404, 상위 API 오류 502, 그 외 500 이다.
"""

import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from trainer_planner.database import get_db
from trainer_planner.schemas.functions import (
    GenerateTemplateRequest,
    ParseReceiptRequest,
    ReceiptData,
    SendRegistrationEmailRequest,
)
from trainer_planner.services import registration_service
from trainer_planner.services.ai_client import UpstreamError
from trainer_planner.services.ai_service import AIService
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/functions", tags=["functions"])

SUPPORTED_RECEIPT_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif", "application/pdf")


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _run(name: str, handler: Callable[[], Dict[str, Any]]):
    try:
        return handler()
    except ValueError as exc:
        return _failure(400, str(exc))
    except LookupError as exc:
        return _failure(404, str(exc))
    except UpstreamError as exc:
        return _failure(502, str(exc))
    except Exception as exc:
        logger.exception("[functions] %s failed", name)
        return _failure(500, f"서비스 오류: {exc}")


@router.post("/generate-invoice-template")
def generate_invoice_template(
    req: GenerateTemplateRequest = GenerateTemplateRequest(),
    current_user: User = Depends(get_current_user),
):
    def handler():
        prompt = (req.prompt or "").strip()
        if not prompt:
            raise ValueError("prompt는 필수입니다.")
        html = AIService(str(current_user.user_id)).generate_template(prompt, req.current_template)
        return {"success": True, "html": html}

    return _run("generate-invoice-template", handler)


@router.post("/parse-receipt")
def parse_receipt(
    req: ParseReceiptRequest = ParseReceiptRequest(),
    current_user: User = Depends(get_current_user),
):
    def handler():
        if not req.image_base64 or not req.mime_type:
            raise ValueError("imageBase64와 mimeType은 필수입니다.")
        if req.mime_type not in SUPPORTED_RECEIPT_TYPES:
            raise ValueError(f"지원하지 않는 파일 형식입니다: {req.mime_type}")
        fields = AIService(str(current_user.user_id)).parse_receipt(req.image_base64, req.mime_type)
        data = ReceiptData.model_validate(fields)
        return {"success": True, "data": data.model_dump(by_alias=True)}

    return _run("parse-receipt", handler)


@router.post("/send-registration-email")
def send_registration_email(
    req: SendRegistrationEmailRequest = SendRegistrationEmailRequest(),
    db: Session = Depends(get_db),
):
    return _run(
        "send-registration-email",
        lambda: registration_service.send_registration_email(db, req.registration_id),
    )
