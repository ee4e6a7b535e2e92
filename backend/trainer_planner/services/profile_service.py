"""Profile Service 도메인 서비스 레이어입니다. 트레이너 프로필(청구서 발행 정보)을 관리합니다."""

from sqlalchemy.orm import Session
from fastapi import HTTPException
from trainer_planner.config import settings
from trainer_planner.models.user import TrainerProfile
from trainer_planner.schemas.user import TrainerProfileUpdate


def get_profile(db: Session, owner_id: int) -> TrainerProfile:
    profile = db.query(TrainerProfile).filter(TrainerProfile.owner_id == owner_id).first()
    if not profile:
        raise HTTPException(status_code=404, detail="트레이너 프로필이 아직 등록되지 않았습니다.")
    return profile


def upsert_profile(db: Session, data: TrainerProfileUpdate, owner_id: int) -> TrainerProfile:
    payload = data.model_dump()
    if payload.get("vat_rate") is None:
        payload["vat_rate"] = settings.DEFAULT_VAT_RATE
    profile = db.query(TrainerProfile).filter(TrainerProfile.owner_id == owner_id).first()
    if profile is None:
        profile = TrainerProfile(owner_id=owner_id, **payload)
        db.add(profile)
    else:
        for key, value in payload.items():
            setattr(profile, key, value)
    db.commit()
    db.refresh(profile)
    return profile
