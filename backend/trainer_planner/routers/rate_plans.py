"""요금제(RatePlan) API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from trainer_planner.database import get_db
from trainer_planner.schemas.client import RatePlanCreate, RatePlanUpdate, RatePlanOut
from trainer_planner.services import client_service
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

router = APIRouter(prefix="/api/rate-plans", tags=["rate-plans"])


@router.get("", response_model=List[RatePlanOut])
def list_rate_plans(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return client_service.get_rate_plans(db, current_user.user_id)


@router.post("", response_model=RatePlanOut)
def create_rate_plan(data: RatePlanCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return client_service.create_rate_plan(db, data, current_user.user_id)


@router.put("/{rate_plan_id}", response_model=RatePlanOut)
def update_rate_plan(
    rate_plan_id: int,
    data: RatePlanUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return client_service.update_rate_plan(db, rate_plan_id, data, current_user.user_id)


@router.delete("/{rate_plan_id}")
def delete_rate_plan(rate_plan_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    client_service.delete_rate_plan(db, rate_plan_id, current_user.user_id)
    return {"message": "삭제되었습니다."}
