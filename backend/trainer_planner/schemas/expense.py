"""Expense 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import date, datetime

ExpenseCategory = Literal["venue-rental", "equipment", "travel", "continuing-education", "coaching-fee", "other"]
EXPENSE_CATEGORIES = ("venue-rental", "equipment", "travel", "continuing-education", "coaching-fee", "other")


class ExpenseBase(BaseModel):
    expense_date: date
    amount: float = Field(ge=0)
    category: ExpenseCategory = "other"
    description: Optional[str] = None
    vendor: Optional[str] = None
    receipt_number: Optional[str] = None
    has_input_vat: bool = False
    input_vat_rate: Optional[Literal[7, 19]] = None


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(BaseModel):
    expense_date: Optional[date] = None
    amount: Optional[float] = Field(default=None, ge=0)
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = None
    vendor: Optional[str] = None
    receipt_number: Optional[str] = None
    has_input_vat: Optional[bool] = None
    input_vat_rate: Optional[Literal[7, 19]] = None


class ExpenseOut(BaseModel):
    expense_id: int
    owner_id: int
    expense_date: date
    amount: float
    category: str
    description: Optional[str] = None
    vendor: Optional[str] = None
    receipt_number: Optional[str] = None
    has_input_vat: bool
    input_vat_rate: Optional[float] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
