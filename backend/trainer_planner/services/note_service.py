"""Note Service 도메인 서비스 레이어입니다."""

from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from trainer_planner.models.note import Note
from trainer_planner.schemas.note import NoteCreate, NoteUpdate


def get_notes(db: Session, owner_id: int) -> List[Note]:
    return db.query(Note).filter(Note.owner_id == owner_id).order_by(Note.updated_at.desc(), Note.note_id.desc()).all()


def get_note(db: Session, note_id: int, owner_id: int) -> Note:
    note = db.query(Note).filter(Note.note_id == note_id, Note.owner_id == owner_id).first()
    if not note:
        raise HTTPException(status_code=404, detail="메모를 찾을 수 없습니다.")
    return note


def create_note(db: Session, data: NoteCreate, owner_id: int) -> Note:
    note = Note(owner_id=owner_id, **data.model_dump())
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


def update_note(db: Session, note_id: int, data: NoteUpdate, owner_id: int) -> Note:
    note = get_note(db, note_id, owner_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(note, key, value)
    db.commit()
    db.refresh(note)
    return note


def delete_note(db: Session, note_id: int, owner_id: int):
    note = get_note(db, note_id, owner_id)
    db.delete(note)
    db.commit()
