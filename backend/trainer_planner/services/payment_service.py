"""Payment Service 도메인 서비스 레이어입니다. 월별 수금 여부와 조정 금액을 관리합니다."""

from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from trainer_planner.models.client import Client
from trainer_planner.models.payment import MonthlyAdjustment, Payment
from trainer_planner.schemas.payment import MonthlyAdjustmentCreate, PaymentUpsert


def _ensure_client(db: Session, client_id: int, owner_id: int):
    client = db.query(Client).filter(Client.client_id == client_id, Client.owner_id == owner_id).first()
    if not client:
        raise HTTPException(status_code=404, detail="고객을 찾을 수 없습니다.")
    return client


def get_payments(db: Session, owner_id: int, month: str) -> List[Payment]:
    return (
        db.query(Payment)
        .filter(Payment.owner_id == owner_id, Payment.month == month)
        .order_by(Payment.client_id)
        .all()
    )


def upsert_payment(db: Session, data: PaymentUpsert, owner_id: int) -> Payment:
    """(owner, month, client)당 한 행만 유지합니다. 같은 요청을 반복해도 결과가 같습니다.

    group=true면 client_id가 NULL인 행 하나로 그룹 청구서의 수금 여부를 기록합니다.
    """
    q = db.query(Payment).filter(Payment.owner_id == owner_id, Payment.month == data.month)
    if data.group:
        q = q.filter(Payment.client_id.is_(None))
    else:
        _ensure_client(db, data.client_id, owner_id)
        q = q.filter(Payment.client_id == data.client_id)
    payment = q.first()
    if payment is None:
        payment = Payment(owner_id=owner_id, month=data.month, client_id=data.client_id)
        db.add(payment)
    payment.paid = data.paid
    db.commit()
    db.refresh(payment)
    return payment


def get_adjustments(db: Session, owner_id: int, month: str) -> List[MonthlyAdjustment]:
    return (
        db.query(MonthlyAdjustment)
        .filter(MonthlyAdjustment.owner_id == owner_id, MonthlyAdjustment.month == month)
        .order_by(MonthlyAdjustment.client_id, MonthlyAdjustment.adjustment_id)
        .all()
    )


def create_adjustment(db: Session, data: MonthlyAdjustmentCreate, owner_id: int) -> MonthlyAdjustment:
    _ensure_client(db, data.client_id, owner_id)
    adjustment = MonthlyAdjustment(owner_id=owner_id, **data.model_dump())
    db.add(adjustment)
    db.commit()
    db.refresh(adjustment)
    return adjustment


def delete_adjustment(db: Session, adjustment_id: int, owner_id: int):
    adjustment = db.query(MonthlyAdjustment).filter(
        MonthlyAdjustment.adjustment_id == adjustment_id,
        MonthlyAdjustment.owner_id == owner_id,
    ).first()
    if not adjustment:
        raise HTTPException(status_code=404, detail="조정 내역을 찾을 수 없습니다.")
    db.delete(adjustment)
    db.commit()
