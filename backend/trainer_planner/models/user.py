"""User/TrainerProfile 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from trainer_planner.database import Base
from trainer_planner.config import settings


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(200), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    profile = relationship("TrainerProfile", back_populates="owner", uselist=False)


class TrainerProfile(Base):
    __tablename__ = "trainer_profile"

    profile_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.user_id"), unique=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100))
    address = Column(Text)
    hourly_rate = Column(Float, default=0)
    iban = Column(String(40))
    vat_id = Column(String(40))
    tax_number = Column(String(40))
    tax_office = Column(String(100))
    small_business = Column(Boolean, default=False)
    vat_rate = Column(Float, default=lambda: settings.DEFAULT_VAT_RATE)
    invoice_template = Column(Text)
    email_template = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    owner = relationship("User", back_populates="profile")

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
