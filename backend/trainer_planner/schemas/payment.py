"""Payment/MonthlyAdjustment 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class PaymentUpsert(BaseModel):
    month: str = Field(pattern=MONTH_PATTERN)
    client_id: Optional[int] = None
    # true면 client_id 없이 그룹 청구서의 수금 여부를 기록한다.
    group: bool = False
    paid: bool = True

    @model_validator(mode="after")
    def check_target(self):
        if self.group == (self.client_id is not None):
            raise ValueError("client_id와 group 중 하나만 지정해야 합니다.")
        return self


class PaymentOut(BaseModel):
    payment_id: int
    owner_id: int
    month: str
    client_id: Optional[int] = None
    paid: bool
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MonthlyAdjustmentCreate(BaseModel):
    month: str = Field(pattern=MONTH_PATTERN)
    client_id: int
    amount: float
    reason: Optional[str] = None


class MonthlyAdjustmentOut(MonthlyAdjustmentCreate):
    adjustment_id: int
    owner_id: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
