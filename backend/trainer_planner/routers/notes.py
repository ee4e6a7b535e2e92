"""메모(Note) API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from trainer_planner.database import get_db
from trainer_planner.schemas.note import NoteCreate, NoteUpdate, NoteOut
from trainer_planner.services import note_service
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User

router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("", response_model=List[NoteOut])
def list_notes(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return note_service.get_notes(db, current_user.user_id)


@router.post("", response_model=NoteOut)
def create_note(data: NoteCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return note_service.create_note(db, data, current_user.user_id)


@router.get("/{note_id}", response_model=NoteOut)
def get_note(note_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return note_service.get_note(db, note_id, current_user.user_id)


@router.put("/{note_id}", response_model=NoteOut)
def update_note(
    note_id: int,
    data: NoteUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return note_service.update_note(db, note_id, data, current_user.user_id)


@router.delete("/{note_id}")
def delete_note(note_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    note_service.delete_note(db, note_id, current_user.user_id)
    return {"message": "삭제되었습니다."}
