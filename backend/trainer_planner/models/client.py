"""Client/RatePlan/StaffTrainer 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Float, ForeignKey, Index
from sqlalchemy.sql import func
from trainer_planner.database import Base


class Client(Base):
    __tablename__ = "client"

    client_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    name = Column(String(100), nullable=False)
    contact_email = Column(String(200))
    contact_phone = Column(String(50))
    billing_address = Column(Text)
    billing_recipient = Column(String(200))
    separate_billing = Column(Boolean, default=False)
    # 형제 등 다른 고객의 청구서에 함께 청구되는 경우 그 고객 id
    billing_client_id = Column(Integer, ForeignKey("client.client_id"), nullable=True)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_client_owner", "owner_id", "name"),
    )


class RatePlan(Base):
    __tablename__ = "rate_plan"

    rate_plan_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    name = Column(String(100), nullable=False)
    price_per_hour = Column(Float, nullable=False)
    billing_mode = Column(String(20), nullable=False, default="per_session")
    # per_session/per_client/monthly
    description = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_rate_plan_owner", "owner_id"),
    )


class StaffTrainer(Base):
    __tablename__ = "staff_trainer"

    staff_trainer_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    name = Column(String(100), nullable=False)
    hourly_rate = Column(Float, nullable=False, default=0)
    note = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
