"""지출(Expense) API 라우터입니다."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from trainer_planner.database import get_db
from trainer_planner.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseOut
from trainer_planner.services import expense_service
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseOut])
def list_expenses(
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return expense_service.get_expenses(db, current_user.user_id, start=start, end=end)


@router.post("", response_model=ExpenseOut)
def create_expense(data: ExpenseCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return expense_service.create_expense(db, data, current_user.user_id)


@router.get("/{expense_id}", response_model=ExpenseOut)
def get_expense(expense_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return expense_service.get_expense(db, expense_id, current_user.user_id)


@router.put("/{expense_id}", response_model=ExpenseOut)
def update_expense(
    expense_id: int,
    data: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return expense_service.update_expense(db, expense_id, data, current_user.user_id)


@router.delete("/{expense_id}")
def delete_expense(expense_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    expense_service.delete_expense(db, expense_id, current_user.user_id)
    return {"message": "삭제되었습니다."}
