"""서비스 레이어 패키지 초기화 모듈입니다."""

from trainer_planner.services import (
    auth_service,
    profile_service,
    client_service,
    session_service,
    payment_service,
    note_service,
    scheduling_template_service,
    expense_service,
    registration_service,
    billing_service,
    bookkeeping_service,
)
