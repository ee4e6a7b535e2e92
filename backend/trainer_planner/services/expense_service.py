"""Expense Service 도메인 서비스 레이어입니다. 지출 영수증과 매입세액 정보를 관리합니다."""

from datetime import date
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from trainer_planner.models.expense import Expense
from trainer_planner.schemas.expense import ExpenseCreate, ExpenseUpdate


def _normalize_vat(payload: dict) -> dict:
    if payload.get("has_input_vat"):
        if payload.get("input_vat_rate") is None:
            raise HTTPException(status_code=400, detail="매입세액이 있는 지출은 세율(7 또는 19)을 지정해야 합니다.")
    else:
        payload["input_vat_rate"] = None
    return payload


def get_expenses(db: Session, owner_id: int, start: Optional[date] = None, end: Optional[date] = None) -> List[Expense]:
    q = db.query(Expense).filter(Expense.owner_id == owner_id)
    if start is not None:
        q = q.filter(Expense.expense_date >= start)
    if end is not None:
        q = q.filter(Expense.expense_date <= end)
    return q.order_by(Expense.expense_date.desc(), Expense.expense_id.desc()).all()


def get_expense(db: Session, expense_id: int, owner_id: int) -> Expense:
    expense = db.query(Expense).filter(Expense.expense_id == expense_id, Expense.owner_id == owner_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="지출 내역을 찾을 수 없습니다.")
    return expense


def create_expense(db: Session, data: ExpenseCreate, owner_id: int) -> Expense:
    expense = Expense(owner_id=owner_id, **_normalize_vat(data.model_dump()))
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def update_expense(db: Session, expense_id: int, data: ExpenseUpdate, owner_id: int) -> Expense:
    expense = get_expense(db, expense_id, owner_id)
    payload = data.model_dump(exclude_unset=True)
    merged = _normalize_vat({
        "has_input_vat": payload.get("has_input_vat", expense.has_input_vat),
        "input_vat_rate": payload.get("input_vat_rate", expense.input_vat_rate),
    })
    payload.update(merged)
    for key, value in payload.items():
        setattr(expense, key, value)
    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(db: Session, expense_id: int, owner_id: int):
    expense = get_expense(db, expense_id, owner_id)
    db.delete(expense)
    db.commit()
