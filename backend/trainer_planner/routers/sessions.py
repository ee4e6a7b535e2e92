"""Sessions 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from trainer_planner.database import get_db
from trainer_planner.schemas.session import (
    SeriesScope,
    TrainingSessionCreate,
    TrainingSessionOut,
    TrainingSessionStatusUpdate,
    TrainingSessionUpdate,
)
from trainer_planner.services import session_service
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("", response_model=List[TrainingSessionOut])
def list_sessions(
    start: Optional[date] = None,
    end: Optional[date] = None,
    week: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return session_service.get_sessions(db, current_user.user_id, start=start, end=end, week=week)


@router.post("", response_model=List[TrainingSessionOut])
def create_sessions(
    data: TrainingSessionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return session_service.create_sessions(db, data, current_user.user_id)


@router.get("/{session_id}", response_model=TrainingSessionOut)
def get_session(session_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return session_service.get_session(db, session_id, current_user.user_id)


@router.put("/{session_id}", response_model=List[TrainingSessionOut])
def update_session(
    session_id: int,
    data: TrainingSessionUpdate,
    scope: SeriesScope = "single",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return session_service.update_session(db, session_id, data, current_user.user_id, scope=scope)


@router.patch("/{session_id}/status", response_model=TrainingSessionOut)
def update_session_status(
    session_id: int,
    data: TrainingSessionStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return session_service.update_status(db, session_id, data, current_user.user_id)


@router.delete("/{session_id}")
def delete_session(
    session_id: int,
    scope: SeriesScope = "single",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deleted = session_service.delete_session(db, session_id, current_user.user_id, scope=scope)
    return {"message": "삭제되었습니다.", "deleted": deleted}
