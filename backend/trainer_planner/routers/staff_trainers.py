"""보조 트레이너(StaffTrainer) API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from trainer_planner.database import get_db
from trainer_planner.schemas.client import StaffTrainerCreate, StaffTrainerUpdate, StaffTrainerOut
from trainer_planner.services import client_service
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

router = APIRouter(prefix="/api/staff-trainers", tags=["staff-trainers"])


@router.get("", response_model=List[StaffTrainerOut])
def list_staff_trainers(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return client_service.get_staff_trainers(db, current_user.user_id)


@router.post("", response_model=StaffTrainerOut)
def create_staff_trainer(
    data: StaffTrainerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return client_service.create_staff_trainer(db, data, current_user.user_id)


@router.put("/{staff_trainer_id}", response_model=StaffTrainerOut)
def update_staff_trainer(
    staff_trainer_id: int,
    data: StaffTrainerUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return client_service.update_staff_trainer(db, staff_trainer_id, data, current_user.user_id)


@router.delete("/{staff_trainer_id}")
def delete_staff_trainer(
    staff_trainer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    client_service.delete_staff_trainer(db, staff_trainer_id, current_user.user_id)
    return {"message": "삭제되었습니다."}
