from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, Float, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from trainer_planner.database import Base


class TrainingSession(Base):
    __tablename__ = "training_session"

    session_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    session_date = Column(Date, nullable=False)
    start_time = Column(String(10), nullable=False)  # HH:MM
    end_time = Column(String(10), nullable=False)    # HH:MM
    rate_plan_id = Column(Integer, ForeignKey("rate_plan.rate_plan_id", ondelete="SET NULL"), nullable=True)
    staff_trainer_id = Column(Integer, ForeignKey("staff_trainer.staff_trainer_id", ondelete="SET NULL"), nullable=True)
    status = Column(String(20), nullable=False, default="planned")
    # planned/completed/cancelled
    cash_paid = Column(Boolean, default=False)
    series_id = Column(String(64), nullable=True)
    custom_price_per_hour = Column(Float, nullable=True)
    custom_billing_mode = Column(String(20), nullable=True)  # per_session/per_client
    note = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    rate_plan = relationship("RatePlan")
    participants = relationship(
        "SessionParticipant",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionParticipant.client_id",
    )

    __table_args__ = (
        Index("idx_session_owner_date", "owner_id", "session_date"),
        Index("idx_session_series", "owner_id", "series_id"),
    )

    @property
    def client_ids(self) -> list:
        return [p.client_id for p in self.participants]


class SessionParticipant(Base):
    __tablename__ = "session_participant"

    participant_id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(Integer, ForeignKey("training_session.session_id", ondelete="CASCADE"), nullable=False)
    client_id = Column(Integer, ForeignKey("client.client_id", ondelete="CASCADE"), nullable=False)

    session = relationship("TrainingSession", back_populates="participants")

    __table_args__ = (
        UniqueConstraint("session_id", "client_id", name="uq_session_participant"),
    )
