"""공개 신청서(RegistrationForm)와 접수 내역(Registration) 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from trainer_planner.database import Base


class RegistrationForm(Base):
    __tablename__ = "registration_form"

    form_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    title = Column(String(200), nullable=False)
    # [{"id": "name", "type": "text", "label": "Name", "required": true, "options": [...]}]
    fields = Column(JSON, nullable=False)
    event_date = Column(Date, nullable=True)
    event_location = Column(String(200))
    is_open = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    registrations = relationship("Registration", back_populates="form", cascade="all, delete-orphan")


class Registration(Base):
    __tablename__ = "registration"

    registration_id = Column(Integer, primary_key=True, autoincrement=True)
    form_id = Column(Integer, ForeignKey("registration_form.form_id", ondelete="CASCADE"), nullable=False)
    data = Column(JSON, nullable=False)
    email_sent = Column(Boolean, default=False)
    created_at = Column(DateTime, server_default=func.now())

    form = relationship("RegistrationForm", back_populates="registrations")
