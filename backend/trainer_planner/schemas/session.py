"""TrainingSession 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import date, datetime

from trainer_planner.utils.dates import InvalidDurationError, parse_time_minutes

SessionStatusValue = Literal["planned", "completed", "cancelled"]
OverrideModeValue = Literal["per_session", "per_client"]
SeriesScope = Literal["single", "following"]


def _check_time(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    text = value.strip()
    try:
        minutes = parse_time_minutes(text)
    except InvalidDurationError as exc:
        raise ValueError(str(exc)) from exc
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class TrainingSessionBase(BaseModel):
    session_date: date
    start_time: str
    end_time: str
    client_ids: List[int] = Field(min_length=1)
    rate_plan_id: Optional[int] = None
    staff_trainer_id: Optional[int] = None
    status: SessionStatusValue = "planned"
    cash_paid: bool = False
    custom_price_per_hour: Optional[float] = Field(default=None, ge=0)
    custom_billing_mode: Optional[OverrideModeValue] = None
    note: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, value):
        return _check_time(value)


class TrainingSessionCreate(TrainingSessionBase):
    # 지정하면 session_date부터 repeat_until까지 매주 같은 요일로 시리즈를 만든다.
    repeat_until: Optional[date] = None


class TrainingSessionUpdate(BaseModel):
    session_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    client_ids: Optional[List[int]] = Field(default=None, min_length=1)
    rate_plan_id: Optional[int] = None
    staff_trainer_id: Optional[int] = None
    status: Optional[SessionStatusValue] = None
    cash_paid: Optional[bool] = None
    custom_price_per_hour: Optional[float] = Field(default=None, ge=0)
    custom_billing_mode: Optional[OverrideModeValue] = None
    note: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, value):
        return _check_time(value)


class TrainingSessionStatusUpdate(BaseModel):
    status: SessionStatusValue
    cash_paid: Optional[bool] = None


class TrainingSessionOut(BaseModel):
    session_id: int
    owner_id: int
    session_date: date
    start_time: str
    end_time: str
    client_ids: List[int]
    rate_plan_id: Optional[int] = None
    staff_trainer_id: Optional[int] = None
    status: str
    cash_paid: bool
    series_id: Optional[str] = None
    custom_price_per_hour: Optional[float] = None
    custom_billing_mode: Optional[str] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
