"""Scheduling Template Service 도메인 서비스 레이어입니다. 주간 스케줄 템플릿과 주 단위 적용을 담당합니다."""

import logging
from datetime import timedelta
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from trainer_planner.config import settings
from trainer_planner.models.client import Client, RatePlan
from trainer_planner.models.scheduling_template import SchedulingTemplate
from trainer_planner.models.session import SessionParticipant, TrainingSession
from trainer_planner.schemas.scheduling_template import (
    SchedulingTemplateApply,
    SchedulingTemplateCreate,
    SchedulingTemplateUpdate,
)
from trainer_planner.utils.dates import InvalidDurationError, add_minutes, week_dates

logger = logging.getLogger(__name__)


def default_data() -> dict:
    return {"time_slots": list(settings.DEFAULT_TIME_SLOTS), "days": {}}


def get_templates(db: Session, owner_id: int) -> List[SchedulingTemplate]:
    return (
        db.query(SchedulingTemplate)
        .filter(SchedulingTemplate.owner_id == owner_id)
        .order_by(SchedulingTemplate.created_at, SchedulingTemplate.template_id)
        .all()
    )


def get_template(db: Session, template_id: int, owner_id: int) -> SchedulingTemplate:
    template = db.query(SchedulingTemplate).filter(
        SchedulingTemplate.template_id == template_id,
        SchedulingTemplate.owner_id == owner_id,
    ).first()
    if not template:
        raise HTTPException(status_code=404, detail="스케줄 템플릿을 찾을 수 없습니다.")
    return template


def _deactivate_others(db: Session, owner_id: int, keep_id: int):
    db.query(SchedulingTemplate).filter(
        SchedulingTemplate.owner_id == owner_id,
        SchedulingTemplate.template_id != keep_id,
    ).update({"is_active": False}, synchronize_session=False)


def create_template(db: Session, data: SchedulingTemplateCreate, owner_id: int) -> SchedulingTemplate:
    has_any = db.query(SchedulingTemplate).filter(SchedulingTemplate.owner_id == owner_id).first() is not None
    template = SchedulingTemplate(
        owner_id=owner_id,
        name=data.name,
        data=data.data.model_dump() if data.data is not None else default_data(),
        # 첫 템플릿은 항상 활성 상태로 만든다.
        is_active=bool(data.is_active) or not has_any,
    )
    db.add(template)
    db.flush()
    if template.is_active:
        _deactivate_others(db, owner_id, template.template_id)
    db.commit()
    db.refresh(template)
    return template


def update_template(db: Session, template_id: int, data: SchedulingTemplateUpdate, owner_id: int) -> SchedulingTemplate:
    template = get_template(db, template_id, owner_id)
    if data.name is not None:
        template.name = data.name
    if data.data is not None:
        template.data = data.data.model_dump()
    db.commit()
    db.refresh(template)
    return template


def activate_template(db: Session, template_id: int, owner_id: int) -> SchedulingTemplate:
    template = get_template(db, template_id, owner_id)
    _deactivate_others(db, owner_id, template.template_id)
    template.is_active = True
    db.commit()
    db.refresh(template)
    return template


def delete_template(db: Session, template_id: int, owner_id: int):
    template = get_template(db, template_id, owner_id)
    remaining = (
        db.query(SchedulingTemplate)
        .filter(
            SchedulingTemplate.owner_id == owner_id,
            SchedulingTemplate.template_id != template_id,
        )
        .order_by(SchedulingTemplate.created_at.desc(), SchedulingTemplate.template_id.desc())
        .all()
    )
    if not remaining:
        raise HTTPException(status_code=400, detail="마지막 스케줄 템플릿은 삭제할 수 없습니다.")
    was_active = bool(template.is_active)
    db.delete(template)
    if was_active:
        remaining[0].is_active = True
    db.commit()


def apply_template(db: Session, template_id: int, data: SchedulingTemplateApply, owner_id: int) -> List[TrainingSession]:
    """템플릿의 채워진 칸마다 해당 주의 예정(planned) 세션을 만듭니다.

    요일 키 "0"은 week_of가 속한 주의 월요일이다. 비어 있는 칸은 건너뛴다.
    """
    template = get_template(db, template_id, owner_id)
    if data.rate_plan_id is not None:
        plan = db.query(RatePlan).filter(RatePlan.rate_plan_id == data.rate_plan_id, RatePlan.owner_id == owner_id).first()
        if not plan:
            raise HTTPException(status_code=400, detail="요금제를 찾을 수 없습니다.")

    owned = {row.client_id for row in db.query(Client.client_id).filter(Client.owner_id == owner_id).all()}
    slot_minutes = data.slot_minutes or settings.DEFAULT_SLOT_MINUTES
    monday = week_dates(data.week_of)[0]
    days = (template.data or {}).get("days") or {}

    created = []
    for day_key in sorted(days, key=int):
        cells = days[day_key] or {}
        for start_time in sorted(cells):
            client_ids = []
            for cid in cells[start_time] or []:
                if cid in owned and cid not in client_ids:
                    client_ids.append(cid)
                elif cid not in owned:
                    logger.warning("[schedule] unknown client skipped: template_id=%s client_id=%s", template_id, cid)
            if not client_ids:
                continue
            try:
                start = add_minutes(start_time, 0)
                end_time = add_minutes(start, slot_minutes)
            except InvalidDurationError as exc:
                raise HTTPException(status_code=400, detail=str(exc))
            session = TrainingSession(
                owner_id=owner_id,
                session_date=monday + timedelta(days=int(day_key)),
                start_time=start,
                end_time=end_time,
                rate_plan_id=data.rate_plan_id,
                status="planned",
                cash_paid=False,
            )
            session.participants = [SessionParticipant(client_id=cid) for cid in client_ids]
            db.add(session)
            created.append(session)
    db.commit()
    for row in created:
        db.refresh(row)
    return created
