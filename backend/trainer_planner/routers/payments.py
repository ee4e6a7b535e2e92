"""수금 여부(Payment)와 월별 조정 금액(MonthlyAdjustment) API 라우터입니다."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from trainer_planner.database import get_db
from trainer_planner.schemas.payment import (
    MONTH_PATTERN,
    MonthlyAdjustmentCreate,
    MonthlyAdjustmentOut,
    PaymentOut,
    PaymentUpsert,
)
from trainer_planner.services import payment_service
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

router = APIRouter(tags=["payments"])


@router.get("/api/payments", response_model=List[PaymentOut])
def list_payments(
    month: str = Query(..., pattern=MONTH_PATTERN),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return payment_service.get_payments(db, current_user.user_id, month)


@router.put("/api/payments", response_model=PaymentOut)
def upsert_payment(data: PaymentUpsert, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return payment_service.upsert_payment(db, data, current_user.user_id)


@router.get("/api/adjustments", response_model=List[MonthlyAdjustmentOut])
def list_adjustments(
    month: str = Query(..., pattern=MONTH_PATTERN),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return payment_service.get_adjustments(db, current_user.user_id, month)


@router.post("/api/adjustments", response_model=MonthlyAdjustmentOut)
def create_adjustment(
    data: MonthlyAdjustmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return payment_service.create_adjustment(db, data, current_user.user_id)


@router.delete("/api/adjustments/{adjustment_id}")
def delete_adjustment(adjustment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    payment_service.delete_adjustment(db, adjustment_id, current_user.user_id)
    return {"message": "삭제되었습니다."}
