"""주간 스케줄 템플릿 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from trainer_planner.utils.dates import InvalidDurationError, parse_time_minutes


class SchedulingTemplateData(BaseModel):
    time_slots: List[str] = Field(default_factory=list)
    # 요일 키 "0"(월)~"6"(일) -> 시각 -> 고객 id 목록
    days: Dict[str, Dict[str, List[int]]] = Field(default_factory=dict)

    @field_validator("time_slots")
    @classmethod
    def check_slots(cls, value):
        for slot in value:
            try:
                parse_time_minutes(slot)
            except InvalidDurationError as exc:
                raise ValueError(str(exc)) from exc
        return value

    @field_validator("days")
    @classmethod
    def check_days(cls, value):
        for key, cells in value.items():
            if key not in {str(i) for i in range(7)}:
                raise ValueError(f"요일 키는 0~6 이어야 합니다: {key!r}")
            for slot in cells:
                try:
                    parse_time_minutes(slot)
                except InvalidDurationError as exc:
                    raise ValueError(str(exc)) from exc
        return value


class SchedulingTemplateBase(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    is_active: bool = False


class SchedulingTemplateCreate(SchedulingTemplateBase):
    data: Optional[SchedulingTemplateData] = None


class SchedulingTemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    data: Optional[SchedulingTemplateData] = None


class SchedulingTemplateOut(SchedulingTemplateBase):
    template_id: int
    owner_id: int
    data: SchedulingTemplateData
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SchedulingTemplateApply(BaseModel):
    week_of: date
    rate_plan_id: Optional[int] = None
    slot_minutes: Optional[int] = Field(default=None, ge=5, le=600)


class SchedulingTemplateApplyResult(BaseModel):
    created: int
    session_ids: List[int]
