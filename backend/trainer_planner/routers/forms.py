"""공개 신청서(RegistrationForm) 관리 및 공개 접수 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from trainer_planner.database import get_db
from trainer_planner.schemas.registration import (
    RegistrationFormCreate,
    RegistrationFormOut,
    RegistrationFormUpdate,
    RegistrationOut,
    RegistrationSubmit,
)
from trainer_planner.services import registration_service
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

router = APIRouter(tags=["forms"])


@router.get("/api/forms", response_model=List[RegistrationFormOut])
def list_forms(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return registration_service.get_forms(db, current_user.user_id)


@router.post("/api/forms", response_model=RegistrationFormOut)
def create_form(
    data: RegistrationFormCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return registration_service.create_form(db, data, current_user.user_id)


@router.get("/api/forms/{form_id}", response_model=RegistrationFormOut)
def get_form(form_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return registration_service.get_form(db, form_id, current_user.user_id)


@router.put("/api/forms/{form_id}", response_model=RegistrationFormOut)
def update_form(
    form_id: int,
    data: RegistrationFormUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return registration_service.update_form(db, form_id, data, current_user.user_id)


@router.delete("/api/forms/{form_id}")
def delete_form(form_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    registration_service.delete_form(db, form_id, current_user.user_id)
    return {"message": "삭제되었습니다."}


@router.get("/api/forms/{form_id}/registrations", response_model=List[RegistrationOut])
def list_registrations(form_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return registration_service.get_registrations(db, form_id, current_user.user_id)


@router.get("/api/public/forms/{form_id}", response_model=RegistrationFormOut)
def get_public_form(form_id: int, db: Session = Depends(get_db)):
    return registration_service.get_public_form(db, form_id)


@router.post("/api/public/forms/{form_id}/registrations", response_model=RegistrationOut)
def submit_registration(form_id: int, data: RegistrationSubmit, db: Session = Depends(get_db)):
    return registration_service.submit_registration(db, form_id, data.data)
