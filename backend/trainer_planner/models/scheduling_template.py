"""주간 스케줄 템플릿 저장을 위한 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Index, JSON
from sqlalchemy.sql import func

from trainer_planner.database import Base


class SchedulingTemplate(Base):
    __tablename__ = "scheduling_template"

    template_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    name = Column(String(120), nullable=False)
    is_active = Column(Boolean, default=False)
    # {"time_slots": ["08:00", ...], "days": {"0": {"08:00": [client_id, ...]}}}  (0=월요일)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    __table_args__ = (
        Index("idx_scheduling_template_owner", "owner_id", "is_active"),
    )
