"""트레이너 프로필 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from trainer_planner.database import get_db
from trainer_planner.schemas.user import TrainerProfileOut, TrainerProfileUpdate
from trainer_planner.services import profile_service
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=TrainerProfileOut)
def get_profile(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return profile_service.get_profile(db, current_user.user_id)


@router.put("", response_model=TrainerProfileOut)
def update_profile(
    data: TrainerProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return profile_service.upsert_profile(db, data, current_user.user_id)
