"""Client Service 도메인 서비스 레이어입니다. 고객/요금제/보조 트레이너 CRUD를 담당합니다.

모든 조회는 owner_id 범위로 수행하며, 다른 트레이너의 행은 없는 행과 같이 404로 응답한다.
"""

from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from trainer_planner.models.client import Client, RatePlan, StaffTrainer
from trainer_planner.models.payment import MonthlyAdjustment, Payment
from trainer_planner.models.session import SessionParticipant, TrainingSession
from trainer_planner.schemas.client import (
    ClientCreate,
    ClientUpdate,
    RatePlanCreate,
    RatePlanUpdate,
    StaffTrainerCreate,
    StaffTrainerUpdate,
)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

def get_clients(db: Session, owner_id: int) -> List[Client]:
    return db.query(Client).filter(Client.owner_id == owner_id).order_by(Client.name, Client.client_id).all()


def get_client(db: Session, client_id: int, owner_id: int) -> Client:
    client = db.query(Client).filter(Client.client_id == client_id, Client.owner_id == owner_id).first()
    if not client:
        raise HTTPException(status_code=404, detail="고객을 찾을 수 없습니다.")
    return client


def _validate_billing_client(db: Session, owner_id: int, billing_client_id: Optional[int], client_id: Optional[int] = None):
    if billing_client_id is None:
        return
    if client_id is not None and billing_client_id == client_id:
        raise HTTPException(status_code=400, detail="자기 자신을 청구 대상 고객으로 지정할 수 없습니다.")
    target = db.query(Client).filter(Client.client_id == billing_client_id, Client.owner_id == owner_id).first()
    if not target:
        raise HTTPException(status_code=400, detail="청구 대상 고객을 찾을 수 없습니다.")
    if target.billing_client_id is not None:
        raise HTTPException(status_code=400, detail="청구 대상 고객은 다른 고객에게 청구를 위임하지 않은 고객이어야 합니다.")
    if client_id is not None:
        dependant = db.query(Client).filter(
            Client.owner_id == owner_id,
            Client.billing_client_id == client_id,
        ).first()
        if dependant:
            raise HTTPException(status_code=400, detail="다른 고객의 청구 대상인 고객은 청구를 위임할 수 없습니다.")


def create_client(db: Session, data: ClientCreate, owner_id: int) -> Client:
    _validate_billing_client(db, owner_id, data.billing_client_id)
    client = Client(owner_id=owner_id, **data.model_dump())
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


def update_client(db: Session, client_id: int, data: ClientUpdate, owner_id: int) -> Client:
    client = get_client(db, client_id, owner_id)
    payload = data.model_dump(exclude_unset=True)
    if "billing_client_id" in payload:
        _validate_billing_client(db, owner_id, payload["billing_client_id"], client_id)
    for key, value in payload.items():
        setattr(client, key, value)
    db.commit()
    db.refresh(client)
    return client


def delete_client(db: Session, client_id: int, owner_id: int):
    client = get_client(db, client_id, owner_id)
    db.query(Client).filter(
        Client.owner_id == owner_id,
        Client.billing_client_id == client_id,
    ).update({"billing_client_id": None}, synchronize_session=False)
    db.query(SessionParticipant).filter(SessionParticipant.client_id == client_id).delete(synchronize_session=False)
    db.query(Payment).filter(Payment.client_id == client_id).delete(synchronize_session=False)
    db.query(MonthlyAdjustment).filter(MonthlyAdjustment.client_id == client_id).delete(synchronize_session=False)
    db.delete(client)
    db.commit()


# ---------------------------------------------------------------------------
# RatePlan
# ---------------------------------------------------------------------------

def get_rate_plans(db: Session, owner_id: int) -> List[RatePlan]:
    return db.query(RatePlan).filter(RatePlan.owner_id == owner_id).order_by(RatePlan.name, RatePlan.rate_plan_id).all()


def get_rate_plan(db: Session, rate_plan_id: int, owner_id: int) -> RatePlan:
    plan = db.query(RatePlan).filter(RatePlan.rate_plan_id == rate_plan_id, RatePlan.owner_id == owner_id).first()
    if not plan:
        raise HTTPException(status_code=404, detail="요금제를 찾을 수 없습니다.")
    return plan


def create_rate_plan(db: Session, data: RatePlanCreate, owner_id: int) -> RatePlan:
    plan = RatePlan(owner_id=owner_id, **data.model_dump())
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


def update_rate_plan(db: Session, rate_plan_id: int, data: RatePlanUpdate, owner_id: int) -> RatePlan:
    plan = get_rate_plan(db, rate_plan_id, owner_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(plan, key, value)
    db.commit()
    db.refresh(plan)
    return plan


def delete_rate_plan(db: Session, rate_plan_id: int, owner_id: int):
    plan = get_rate_plan(db, rate_plan_id, owner_id)
    # 요금제를 잃은 세션은 개별 가격이 없으면 미청구(unpriced)로 보고된다.
    db.query(TrainingSession).filter(
        TrainingSession.owner_id == owner_id,
        TrainingSession.rate_plan_id == rate_plan_id,
    ).update({"rate_plan_id": None}, synchronize_session=False)
    db.delete(plan)
    db.commit()


# ---------------------------------------------------------------------------
# StaffTrainer
# ---------------------------------------------------------------------------

def get_staff_trainers(db: Session, owner_id: int) -> List[StaffTrainer]:
    return db.query(StaffTrainer).filter(StaffTrainer.owner_id == owner_id).order_by(StaffTrainer.name).all()


def get_staff_trainer(db: Session, staff_trainer_id: int, owner_id: int) -> StaffTrainer:
    trainer = db.query(StaffTrainer).filter(
        StaffTrainer.staff_trainer_id == staff_trainer_id,
        StaffTrainer.owner_id == owner_id,
    ).first()
    if not trainer:
        raise HTTPException(status_code=404, detail="보조 트레이너를 찾을 수 없습니다.")
    return trainer


def create_staff_trainer(db: Session, data: StaffTrainerCreate, owner_id: int) -> StaffTrainer:
    trainer = StaffTrainer(owner_id=owner_id, **data.model_dump())
    db.add(trainer)
    db.commit()
    db.refresh(trainer)
    return trainer


def update_staff_trainer(db: Session, staff_trainer_id: int, data: StaffTrainerUpdate, owner_id: int) -> StaffTrainer:
    trainer = get_staff_trainer(db, staff_trainer_id, owner_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(trainer, key, value)
    db.commit()
    db.refresh(trainer)
    return trainer


def delete_staff_trainer(db: Session, staff_trainer_id: int, owner_id: int):
    trainer = get_staff_trainer(db, staff_trainer_id, owner_id)
    db.query(TrainingSession).filter(
        TrainingSession.owner_id == owner_id,
        TrainingSession.staff_trainer_id == staff_trainer_id,
    ).update({"staff_trainer_id": None}, synchronize_session=False)
    db.delete(trainer)
    db.commit()
