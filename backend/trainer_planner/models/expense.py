"""Expense 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, Float, ForeignKey, Index
from sqlalchemy.sql import func
from trainer_planner.database import Base


class Expense(Base):
    __tablename__ = "expense"

    expense_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    expense_date = Column(Date, nullable=False)
    amount = Column(Float, nullable=False)  # 부가세 포함 금액
    category = Column(String(30), nullable=False, default="other")
    # venue-rental/equipment/travel/continuing-education/coaching-fee/other
    description = Column(Text)
    vendor = Column(String(200))
    receipt_number = Column(String(100))
    has_input_vat = Column(Boolean, default=False)
    input_vat_rate = Column(Float, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_expense_owner_date", "owner_id", "expense_date"),
    )
