"""User/TrainerProfile 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=200)


class UserOut(BaseModel):
    user_id: int
    email: str
    name: str
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class TrainerProfileBase(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: Optional[str] = None
    address: Optional[str] = None
    hourly_rate: float = Field(default=0, ge=0)
    iban: Optional[str] = None
    vat_id: Optional[str] = None
    tax_number: Optional[str] = None
    tax_office: Optional[str] = None
    small_business: bool = False
    vat_rate: Optional[float] = Field(default=None, ge=0, le=100)
    invoice_template: Optional[str] = None
    email_template: Optional[str] = None


class TrainerProfileUpdate(TrainerProfileBase):
    pass


class TrainerProfileOut(TrainerProfileBase):
    profile_id: int
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
