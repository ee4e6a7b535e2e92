"""Payment/MonthlyAdjustment 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Float, ForeignKey, Index, UniqueConstraint
from sqlalchemy.sql import func
from trainer_planner.database import Base


class Payment(Base):
    __tablename__ = "payment"

    payment_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    month = Column(String(7), nullable=False)  # YYYY-MM
    # NULL이면 여러 고객이 함께한 세션을 모은 "Gruppe" 청구서의 수금 여부
    client_id = Column(Integer, ForeignKey("client.client_id", ondelete="CASCADE"), nullable=True)
    paid = Column(Boolean, default=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("owner_id", "month", "client_id", name="uq_payment_month_client"),
    )


class MonthlyAdjustment(Base):
    __tablename__ = "monthly_adjustment"

    adjustment_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    month = Column(String(7), nullable=False)
    client_id = Column(Integer, ForeignKey("client.client_id", ondelete="CASCADE"), nullable=False)
    amount = Column(Float, nullable=False)
    reason = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_adjustment_month", "owner_id", "month"),
    )
