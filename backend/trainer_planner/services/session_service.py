"""Session Service 도메인 서비스 레이어입니다. 트레이닝 세션과 주간 반복 시리즈를 관리합니다."""

import uuid
from datetime import date, timedelta
from typing import Iterable, List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, selectinload

from trainer_planner.models.client import Client, RatePlan, StaffTrainer
from trainer_planner.models.session import SessionParticipant, TrainingSession
from trainer_planner.schemas.session import TrainingSessionCreate, TrainingSessionStatusUpdate, TrainingSessionUpdate
from trainer_planner.utils.dates import InvalidDurationError, duration_minutes, week_dates

MAX_SERIES_OCCURRENCES = 104
REQUIRED_FIELDS = ("session_date", "start_time", "end_time", "status", "cash_paid")


def _query(db: Session, owner_id: int):
    return (
        db.query(TrainingSession)
        .options(selectinload(TrainingSession.participants))
        .filter(TrainingSession.owner_id == owner_id)
    )


def get_sessions(
    db: Session,
    owner_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
    week: Optional[date] = None,
) -> List[TrainingSession]:
    if week is not None:
        days = week_dates(week)
        start, end = days[0], days[-1]
    q = _query(db, owner_id)
    if start is not None:
        q = q.filter(TrainingSession.session_date >= start)
    if end is not None:
        q = q.filter(TrainingSession.session_date <= end)
    return q.order_by(TrainingSession.session_date, TrainingSession.start_time, TrainingSession.session_id).all()


def get_session(db: Session, session_id: int, owner_id: int) -> TrainingSession:
    session = _query(db, owner_id).filter(TrainingSession.session_id == session_id).first()
    if not session:
        raise HTTPException(status_code=404, detail="세션을 찾을 수 없습니다.")
    return session


def _unique(client_ids: Iterable[int]) -> List[int]:
    seen = []
    for cid in client_ids:
        if cid not in seen:
            seen.append(cid)
    return seen


def _validate_references(
    db: Session,
    owner_id: int,
    client_ids: Optional[List[int]] = None,
    rate_plan_id: Optional[int] = None,
    staff_trainer_id: Optional[int] = None,
):
    if client_ids:
        found = {
            row.client_id
            for row in db.query(Client.client_id).filter(
                Client.owner_id == owner_id,
                Client.client_id.in_(client_ids),
            ).all()
        }
        missing = [cid for cid in client_ids if cid not in found]
        if missing:
            raise HTTPException(status_code=400, detail=f"존재하지 않는 고객입니다: {missing}")
    if rate_plan_id is not None:
        plan = db.query(RatePlan).filter(RatePlan.rate_plan_id == rate_plan_id, RatePlan.owner_id == owner_id).first()
        if not plan:
            raise HTTPException(status_code=400, detail="요금제를 찾을 수 없습니다.")
    if staff_trainer_id is not None:
        trainer = db.query(StaffTrainer).filter(
            StaffTrainer.staff_trainer_id == staff_trainer_id,
            StaffTrainer.owner_id == owner_id,
        ).first()
        if not trainer:
            raise HTTPException(status_code=400, detail="보조 트레이너를 찾을 수 없습니다.")


def _validate_times(start_time: str, end_time: str):
    try:
        duration_minutes(start_time, end_time)
    except InvalidDurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _validate_override(custom_price, custom_mode):
    if custom_mode is not None and custom_price is None:
        raise HTTPException(status_code=400, detail="개별 요금 방식은 개별 가격과 함께 지정해야 합니다.")


def _set_participants(session: TrainingSession, client_ids: List[int]):
    wanted = _unique(client_ids)
    # 유니크 제약(session_id, client_id) 때문에 남는 참가자는 그대로 두고 차이만 반영한다.
    for participant in list(session.participants):
        if participant.client_id not in wanted:
            session.participants.remove(participant)
    existing = {p.client_id for p in session.participants}
    for cid in wanted:
        if cid not in existing:
            session.participants.append(SessionParticipant(client_id=cid))


def _series_dates(first: date, repeat_until: date) -> List[date]:
    if repeat_until < first:
        raise HTTPException(status_code=400, detail="반복 종료일은 세션 날짜보다 빠를 수 없습니다.")
    dates = []
    current = first
    while current <= repeat_until:
        dates.append(current)
        current += timedelta(days=7)
    if len(dates) > MAX_SERIES_OCCURRENCES:
        raise HTTPException(status_code=400, detail=f"반복 세션은 최대 {MAX_SERIES_OCCURRENCES}회까지 만들 수 있습니다.")
    return dates


def create_sessions(db: Session, data: TrainingSessionCreate, owner_id: int) -> List[TrainingSession]:
    """세션 하나 또는 repeat_until까지의 주간 시리즈를 만듭니다."""
    payload = data.model_dump()
    client_ids = _unique(payload.pop("client_ids"))
    repeat_until = payload.pop("repeat_until", None)
    _validate_times(payload["start_time"], payload["end_time"])
    _validate_override(payload.get("custom_price_per_hour"), payload.get("custom_billing_mode"))
    _validate_references(db, owner_id, client_ids, payload.get("rate_plan_id"), payload.get("staff_trainer_id"))

    dates = [payload["session_date"]]
    series_id = None
    if repeat_until is not None:
        dates = _series_dates(payload["session_date"], repeat_until)
        series_id = uuid.uuid4().hex

    created = []
    for session_date in dates:
        row = TrainingSession(owner_id=owner_id, series_id=series_id, **{**payload, "session_date": session_date})
        _set_participants(row, client_ids)
        db.add(row)
        created.append(row)
    db.commit()
    for row in created:
        db.refresh(row)
    return created


def _series_targets(db: Session, session: TrainingSession, owner_id: int, scope: str) -> List[TrainingSession]:
    if scope != "following" or not session.series_id:
        return [session]
    return (
        _query(db, owner_id)
        .filter(
            TrainingSession.series_id == session.series_id,
            TrainingSession.session_date >= session.session_date,
        )
        .order_by(TrainingSession.session_date)
        .all()
    )


def update_session(
    db: Session,
    session_id: int,
    data: TrainingSessionUpdate,
    owner_id: int,
    scope: str = "single",
) -> List[TrainingSession]:
    """세션을 수정합니다. scope=following이면 같은 시리즈의 이후 세션에도 같은 변경을 적용합니다.

    날짜 변경은 기준 세션의 이동 일수만큼 각 세션을 옮기는 방식으로 반영됩니다.
    """
    seed = get_session(db, session_id, owner_id)
    payload = data.model_dump(exclude_unset=True)
    cleared = [key for key in REQUIRED_FIELDS if key in payload and payload[key] is None]
    if cleared:
        raise HTTPException(status_code=400, detail=f"비울 수 없는 항목입니다: {', '.join(cleared)}")
    client_ids = payload.pop("client_ids", None)
    if client_ids is not None:
        client_ids = _unique(client_ids)
    _validate_references(db, owner_id, client_ids, payload.get("rate_plan_id"), payload.get("staff_trainer_id"))
    _validate_times(payload.get("start_time", seed.start_time), payload.get("end_time", seed.end_time))
    _validate_override(
        payload.get("custom_price_per_hour", seed.custom_price_per_hour),
        payload.get("custom_billing_mode", seed.custom_billing_mode),
    )

    new_date = payload.pop("session_date", None)
    offset = (new_date - seed.session_date) if new_date is not None else timedelta(0)

    targets = _series_targets(db, seed, owner_id, scope)
    for row in targets:
        for key, value in payload.items():
            setattr(row, key, value)
        if offset:
            row.session_date = row.session_date + offset
        if client_ids is not None:
            _set_participants(row, client_ids)
    db.commit()
    for row in targets:
        db.refresh(row)
    return targets


def update_status(db: Session, session_id: int, data: TrainingSessionStatusUpdate, owner_id: int) -> TrainingSession:
    session = get_session(db, session_id, owner_id)
    session.status = data.status
    if data.cash_paid is not None:
        session.cash_paid = data.cash_paid
    db.commit()
    db.refresh(session)
    return session


def delete_session(db: Session, session_id: int, owner_id: int, scope: str = "single") -> int:
    seed = get_session(db, session_id, owner_id)
    targets = _series_targets(db, seed, owner_id, scope)
    for row in targets:
        db.delete(row)
    db.commit()
    return len(targets)

