"""주간 스케줄 템플릿 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from trainer_planner.database import get_db
from trainer_planner.schemas.scheduling_template import (
    SchedulingTemplateApply,
    SchedulingTemplateApplyResult,
    SchedulingTemplateCreate,
    SchedulingTemplateOut,
    SchedulingTemplateUpdate,
)
from trainer_planner.services import scheduling_template_service
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

router = APIRouter(prefix="/api/scheduling-templates", tags=["scheduling-templates"])


@router.get("", response_model=List[SchedulingTemplateOut])
def list_templates(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return scheduling_template_service.get_templates(db, current_user.user_id)


@router.post("", response_model=SchedulingTemplateOut)
def create_template(
    data: SchedulingTemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return scheduling_template_service.create_template(db, data, current_user.user_id)


@router.get("/{template_id}", response_model=SchedulingTemplateOut)
def get_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return scheduling_template_service.get_template(db, template_id, current_user.user_id)


@router.put("/{template_id}", response_model=SchedulingTemplateOut)
def update_template(
    template_id: int,
    data: SchedulingTemplateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return scheduling_template_service.update_template(db, template_id, data, current_user.user_id)


@router.post("/{template_id}/activate", response_model=SchedulingTemplateOut)
def activate_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return scheduling_template_service.activate_template(db, template_id, current_user.user_id)


@router.post("/{template_id}/apply", response_model=SchedulingTemplateApplyResult)
def apply_template(
    template_id: int,
    data: SchedulingTemplateApply,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    created = scheduling_template_service.apply_template(db, template_id, data, current_user.user_id)
    return SchedulingTemplateApplyResult(created=len(created), session_ids=[row.session_id for row in created])


@router.delete("/{template_id}")
def delete_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    scheduling_template_service.delete_template(db, template_id, current_user.user_id)
    return {"message": "삭제되었습니다."}
