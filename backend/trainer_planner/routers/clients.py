"""Clients 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from trainer_planner.database import get_db
from trainer_planner.schemas.client import ClientCreate, ClientUpdate, ClientOut
from trainer_planner.services import client_service
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.get("", response_model=List[ClientOut])
def list_clients(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return client_service.get_clients(db, current_user.user_id)


@router.post("", response_model=ClientOut)
def create_client(data: ClientCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return client_service.create_client(db, data, current_user.user_id)


@router.get("/{client_id}", response_model=ClientOut)
def get_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return client_service.get_client(db, client_id, current_user.user_id)


@router.put("/{client_id}", response_model=ClientOut)
def update_client(
    client_id: int,
    data: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return client_service.update_client(db, client_id, data, current_user.user_id)


@router.delete("/{client_id}")
def delete_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    client_service.delete_client(db, client_id, current_user.user_id)
    return {"message": "삭제되었습니다."}
