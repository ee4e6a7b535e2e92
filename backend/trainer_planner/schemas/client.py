"""Client/RatePlan/StaffTrainer 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

BillingModeValue = Literal["per_session", "per_client", "monthly"]


class ClientBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    billing_address: Optional[str] = None
    billing_recipient: Optional[str] = None
    separate_billing: bool = False
    billing_client_id: Optional[int] = None
    notes: Optional[str] = None


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    billing_address: Optional[str] = None
    billing_recipient: Optional[str] = None
    separate_billing: Optional[bool] = None
    billing_client_id: Optional[int] = None
    notes: Optional[str] = None


class ClientOut(ClientBase):
    client_id: int
    owner_id: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RatePlanBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    price_per_hour: float = Field(ge=0)
    billing_mode: BillingModeValue = "per_session"
    description: Optional[str] = None


class RatePlanCreate(RatePlanBase):
    pass


class RatePlanUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    price_per_hour: Optional[float] = Field(default=None, ge=0)
    billing_mode: Optional[BillingModeValue] = None
    description: Optional[str] = None


class RatePlanOut(RatePlanBase):
    rate_plan_id: int
    owner_id: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StaffTrainerBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    hourly_rate: float = Field(default=0, ge=0)
    note: Optional[str] = None


class StaffTrainerCreate(StaffTrainerBase):
    pass


class StaffTrainerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    note: Optional[str] = None


class StaffTrainerOut(StaffTrainerBase):
    staff_trainer_id: int
    owner_id: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
