"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from trainer_planner.models.user import User, TrainerProfile
from trainer_planner.models.client import Client, RatePlan, StaffTrainer
from trainer_planner.models.session import TrainingSession, SessionParticipant
from trainer_planner.models.payment import Payment, MonthlyAdjustment
from trainer_planner.models.note import Note
from trainer_planner.models.scheduling_template import SchedulingTemplate
from trainer_planner.models.expense import Expense
from trainer_planner.models.registration import RegistrationForm, Registration

__all__ = [
    "User", "TrainerProfile",
    "Client", "RatePlan", "StaffTrainer",
    "TrainingSession", "SessionParticipant",
    "Payment", "MonthlyAdjustment",
    "Note",
    "SchedulingTemplate",
    "Expense",
    "RegistrationForm", "Registration",
]
