"""공개 신청서/접수 내역 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import date, datetime


class FormField(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    type: str = "text"  # text/email/phone/number/checkbox/select/textarea
    label: str = Field(min_length=1, max_length=200)
    required: bool = False
    options: Optional[List[str]] = None


class RegistrationFormBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    fields: List[FormField] = Field(min_length=1)
    event_date: Optional[date] = None
    event_location: Optional[str] = None
    is_open: bool = True


class RegistrationFormCreate(RegistrationFormBase):
    pass


class RegistrationFormUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    fields: Optional[List[FormField]] = Field(default=None, min_length=1)
    event_date: Optional[date] = None
    event_location: Optional[str] = None
    is_open: Optional[bool] = None


class RegistrationFormOut(RegistrationFormBase):
    form_id: int
    owner_id: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RegistrationSubmit(BaseModel):
    data: Dict[str, Any]


class RegistrationOut(BaseModel):
    registration_id: int
    form_id: int
    data: Dict[str, Any]
    email_sent: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
