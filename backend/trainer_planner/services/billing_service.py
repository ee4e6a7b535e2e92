"""Billing Service 도메인 서비스 레이어입니다. 월별 정산/청구 금액 계산을 담당합니다.

세션/요금제/조정 금액으로부터 고객별 청구 항목과 합계(순액/부가세/총액)를 매번 새로
계산합니다. Payment 행은 정산 여부만 기록하며 청구 금액 계산에는 쓰이지 않습니다.
집계 함수(aggregate_month 등)는 메모리 상의 레코드만 다루는 순수 함수이고,
DB 조회는 모듈 하단의 *_for_owner 함수가 owner_id 범위로 수행합니다.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from fastapi import HTTPException
from sqlalchemy.orm import Session, selectinload

from trainer_planner.config import settings
from trainer_planner.models.client import Client, RatePlan, StaffTrainer
from trainer_planner.models.payment import MonthlyAdjustment, Payment
from trainer_planner.models.session import TrainingSession
from trainer_planner.models.user import TrainerProfile
from trainer_planner.utils.dates import InvalidDurationError, duration_minutes, month_bounds, month_key

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
GROUP_KEY = "group"
GROUP_LABEL = "Gruppe"
OVERRIDE_LABEL = "Individueller Preis"

SESSION_PLANNED = "planned"
SESSION_COMPLETED = "completed"
SESSION_CANCELLED = "cancelled"
SESSION_STATUSES = (SESSION_PLANNED, SESSION_COMPLETED, SESSION_CANCELLED)


class BillingMode(str, Enum):
    PER_SESSION = "per_session"
    PER_CLIENT = "per_client"
    MONTHLY = "monthly"


OVERRIDE_MODES = (BillingMode.PER_SESSION, BillingMode.PER_CLIENT)


class BillingSource(str, Enum):
    PLAN = "plan"
    OVERRIDE = "override"


def to_money(value) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class EffectiveBilling:
    price: Decimal
    mode: BillingMode
    source: BillingSource
    label: str
    rate_plan_id: Optional[int] = None


@dataclass
class LineItem:
    session_id: Optional[int]
    session_date: date
    start_time: str
    end_time: str
    description: str
    client_id: Optional[int]
    client_name: str
    duration_hours: float
    unit_price: Decimal
    amount: Decimal
    billing_mode: str
    participant_ids: List[int] = field(default_factory=list)


@dataclass
class BillingWarning:
    code: str  # unpriced/invalid_duration/unknown_client/group_session
    message: str
    session_id: Optional[int] = None
    session_date: Optional[date] = None
    client_ids: List[int] = field(default_factory=list)


@dataclass
class Totals:
    net: Decimal
    vat: Decimal
    gross: Decimal
    vat_rate: Decimal
    small_business: bool
    disclaimer: Optional[str] = None


@dataclass
class ClientStatement:
    client_id: Optional[int]
    client_name: str
    lines: List[LineItem] = field(default_factory=list)
    cash_lines: List[LineItem] = field(default_factory=list)
    subtotal: Decimal = ZERO
    adjustment: Decimal = ZERO
    cash_total: Decimal = ZERO
    totals: Optional[Totals] = None
    paid: bool = False

    @property
    def is_group(self) -> bool:
        return self.client_id is None

    @property
    def net(self) -> Decimal:
        return self.subtotal + self.adjustment

    @property
    def open_amount(self) -> Decimal:
        if self.paid or self.totals is None:
            return ZERO
        return self.totals.gross


@dataclass
class MonthlyBilling:
    month: str
    statements: List[ClientStatement]
    totals: Totals
    unpriced: List[BillingWarning] = field(default_factory=list)
    warnings: List[BillingWarning] = field(default_factory=list)

    def statement_for(self, client_id: Optional[int]) -> Optional[ClientStatement]:
        for statement in self.statements:
            if statement.client_id == client_id:
                return statement
        return None


@dataclass
class ClientInvoice:
    month: str
    client_id: Optional[int]
    recipient_name: str
    recipient_address: str
    statements: List[ClientStatement]
    lines: List[LineItem]
    adjustments: Decimal
    totals: Totals
    unpriced: List[BillingWarning] = field(default_factory=list)
    warnings: List[BillingWarning] = field(default_factory=list)
    client_names: List[str] = field(default_factory=list)

    @property
    def is_group(self) -> bool:
        return self.client_id is None

    @property
    def has_multiple_clients(self) -> bool:
        return len(self.statements) > 1


@dataclass
class StaffPayrollRow:
    staff_trainer_id: int
    name: str
    hourly_rate: Decimal
    session_count: int
    hours: float
    amount: Decimal


# ---------------------------------------------------------------------------
# 요금 결정: 세션의 개별 설정(override)이 있으면 요금제를 완전히 대체한다.
# ---------------------------------------------------------------------------

def resolve_billing(session, plan: Optional[RatePlan]) -> Optional[EffectiveBilling]:
    custom_price = getattr(session, "custom_price_per_hour", None)
    if custom_price is not None:
        custom_mode = getattr(session, "custom_billing_mode", None)
        mode = BillingMode(custom_mode) if custom_mode else BillingMode.PER_SESSION
        return EffectiveBilling(
            price=to_money(custom_price),
            mode=mode,
            source=BillingSource.OVERRIDE,
            label=OVERRIDE_LABEL,
        )
    if plan is None:
        return None
    return EffectiveBilling(
        price=to_money(plan.price_per_hour),
        mode=BillingMode(plan.billing_mode or BillingMode.PER_SESSION.value),
        source=BillingSource.PLAN,
        label=plan.name,
        rate_plan_id=plan.rate_plan_id,
    )


# ---------------------------------------------------------------------------
# 모드별 분배 규칙. 반환값은 {client_id 또는 GROUP_KEY: 금액}.
# ---------------------------------------------------------------------------

def _session_amount(billing: EffectiveBilling, minutes: int) -> Decimal:
    return (billing.price * minutes / 60).quantize(CENT, rounding=ROUND_HALF_UP)


def per_session_shares(billing: EffectiveBilling, minutes: int, client_ids: List[int], billed_flats: Set) -> Dict:
    amount = _session_amount(billing, minutes)
    if len(client_ids) == 1:
        return {client_ids[0]: amount}
    return {GROUP_KEY: amount}


def per_client_shares(billing: EffectiveBilling, minutes: int, client_ids: List[int], billed_flats: Set) -> Dict:
    amount = _session_amount(billing, minutes)
    ordered = sorted(client_ids)
    share = (amount / len(ordered)).quantize(CENT, rounding=ROUND_HALF_UP)
    shares = {cid: share for cid in ordered}
    # 반올림 차이는 첫 참가자에게 배정해 합계를 세션 금액과 맞춘다.
    shares[ordered[0]] += amount - share * len(ordered)
    return shares


def monthly_shares(billing: EffectiveBilling, minutes: int, client_ids: List[int], billed_flats: Set) -> Dict:
    shares = {}
    for cid in sorted(client_ids):
        key = (cid, billing.rate_plan_id, billing.label)
        if key in billed_flats:
            shares[cid] = ZERO
            continue
        billed_flats.add(key)
        shares[cid] = billing.price
    return shares


MODE_RULES: Dict[BillingMode, Callable[..., Dict]] = {
    BillingMode.PER_SESSION: per_session_shares,
    BillingMode.PER_CLIENT: per_client_shares,
    BillingMode.MONTHLY: monthly_shares,
}


def compute_totals(
    net: Decimal,
    vat_rate,
    small_business: bool,
    disclaimer: Optional[str] = None,
) -> Totals:
    net = to_money(net)
    if small_business:
        return Totals(
            net=net,
            vat=ZERO,
            gross=net,
            vat_rate=ZERO,
            small_business=True,
            disclaimer=disclaimer if disclaimer is not None else settings.SMALL_BUSINESS_NOTICE,
        )
    rate = Decimal(str(vat_rate if vat_rate is not None else settings.DEFAULT_VAT_RATE))
    vat = (net * rate / 100).quantize(CENT, rounding=ROUND_HALF_UP)
    return Totals(net=net, vat=vat, gross=net + vat, vat_rate=rate, small_business=False)


def _index(items: Iterable, attr: str) -> Dict:
    if isinstance(items, Mapping):
        return dict(items)
    return {getattr(item, attr): item for item in items}


def _session_sort_key(session) -> Tuple:
    return (session.session_date, str(session.start_time or ""), getattr(session, "session_id", 0) or 0)


def _description(session, billing: EffectiveBilling, minutes: int, share_count: int) -> str:
    base = f"{billing.label} ({session.start_time}-{session.end_time})"
    if billing.mode == BillingMode.PER_CLIENT and share_count > 1:
        return f"{base}, geteilt durch {share_count}"
    if billing.mode == BillingMode.MONTHLY:
        return f"{billing.label} (Monatspauschale)"
    return base


def aggregate_month(
    month: str,
    sessions: Iterable,
    rate_plans,
    clients,
    adjustments: Iterable = (),
    *,
    small_business: bool = False,
    vat_rate=None,
    disclaimer: Optional[str] = None,
) -> MonthlyBilling:
    """월 단위로 고객별 청구 내역을 집계합니다.

    - 완료(completed) 상태가 아닌 세션은 금액에 포함하지 않습니다.
    - 현금 결제(cash_paid) 세션은 cash_lines/cash_total로만 집계하고 순액에서 제외합니다.
    - 요금제도 개별 가격도 없는 세션은 unpriced 목록으로 보고하고 제외합니다.
    - 월정액(monthly) 요금제는 고객/요금제/월마다 한 번만 청구합니다. 그 달 첫 세션이
      현금 결제였다면 월정액은 현금으로 정산된 것으로 보고 이후 세션은 0원 행이 됩니다.
    """
    plans = _index(rate_plans, "rate_plan_id")
    roster = _index(clients, "client_id")
    start, end = month_bounds(month)

    statements: Dict = {}
    unpriced: List[BillingWarning] = []
    warnings: List[BillingWarning] = []
    billed_flats: Set = set()

    def statement(key) -> ClientStatement:
        if key not in statements:
            if key == GROUP_KEY:
                statements[key] = ClientStatement(client_id=None, client_name=GROUP_LABEL)
            else:
                statements[key] = ClientStatement(client_id=key, client_name=roster[key].name)
        return statements[key]

    month_sessions = [
        s for s in sessions
        if start <= s.session_date <= end and s.status == SESSION_COMPLETED
    ]
    for session in sorted(month_sessions, key=_session_sort_key):
        client_ids = list(getattr(session, "client_ids", None) or [])
        if not client_ids:
            warnings.append(BillingWarning(
                code="no_participants",
                message="참가 고객이 없는 세션입니다.",
                session_id=session.session_id,
                session_date=session.session_date,
            ))
            continue

        try:
            minutes = duration_minutes(session.start_time, session.end_time)
        except InvalidDurationError as exc:
            warnings.append(BillingWarning(
                code="invalid_duration",
                message=str(exc),
                session_id=session.session_id,
                session_date=session.session_date,
                client_ids=client_ids,
            ))
            continue

        billing = resolve_billing(session, plans.get(session.rate_plan_id))
        if billing is None:
            logger.warning("[billing] unpriced session excluded: session_id=%s date=%s",
                           session.session_id, session.session_date)
            unpriced.append(BillingWarning(
                code="unpriced",
                message="요금제 또는 개별 가격이 지정되지 않아 합계에서 제외되었습니다.",
                session_id=session.session_id,
                session_date=session.session_date,
                client_ids=client_ids,
            ))
            continue

        rule = MODE_RULES[billing.mode]
        shares = rule(billing, minutes, client_ids, billed_flats)
        hours = minutes / 60
        for key, amount in shares.items():
            if key != GROUP_KEY and key not in roster:
                warnings.append(BillingWarning(
                    code="unknown_client",
                    message=f"고객 {key}을(를) 찾을 수 없어 해당 몫을 제외했습니다.",
                    session_id=session.session_id,
                    session_date=session.session_date,
                    client_ids=[key],
                ))
                continue
            target = statement(key)
            description = _description(session, billing, minutes, len(client_ids))
            if key == GROUP_KEY:
                names = [roster[cid].name for cid in client_ids if cid in roster]
                description = f"{description}: {', '.join(names)}"
            line = LineItem(
                session_id=session.session_id,
                session_date=session.session_date,
                start_time=session.start_time,
                end_time=session.end_time,
                description=description,
                client_id=target.client_id,
                client_name=target.client_name,
                duration_hours=hours,
                unit_price=billing.price,
                amount=amount,
                billing_mode=billing.mode.value,
                participant_ids=list(client_ids),
            )
            if session.cash_paid:
                target.cash_lines.append(line)
                target.cash_total += amount
            else:
                target.lines.append(line)
                target.subtotal += amount

    for adjustment in adjustments:
        if adjustment.month != month:
            continue
        if adjustment.client_id not in roster:
            warnings.append(BillingWarning(
                code="unknown_client",
                message=f"고객 {adjustment.client_id}을(를) 찾을 수 없어 조정 금액을 제외했습니다.",
                client_ids=[adjustment.client_id],
            ))
            continue
        target = statement(adjustment.client_id)
        target.adjustment += to_money(adjustment.amount)

    ordered = sorted(
        statements.values(),
        key=lambda s: (s.is_group, s.client_name.lower(), s.client_id or 0),
    )
    for item in ordered:
        item.totals = compute_totals(item.net, vat_rate, small_business, disclaimer)

    overall_net = sum((s.net for s in ordered), ZERO)
    return MonthlyBilling(
        month=month,
        statements=ordered,
        totals=compute_totals(overall_net, vat_rate, small_business, disclaimer),
        unpriced=unpriced,
        warnings=warnings,
    )


def linked_client_ids(client_id: int, clients) -> List[int]:
    """client_id와, 청구서를 client_id 앞으로 받는 고객(형제 등)의 id 목록."""
    roster = _index(clients, "client_id")
    linked = sorted(
        cid for cid, c in roster.items()
        if getattr(c, "billing_client_id", None) == client_id and cid != client_id
    )
    return [client_id, *linked]


def build_client_invoice(
    billing: MonthlyBilling,
    client,
    clients,
    *,
    small_business: bool = False,
    vat_rate=None,
    disclaimer: Optional[str] = None,
) -> ClientInvoice:
    member_ids = linked_client_ids(client.client_id, clients)
    statements = [s for s in (billing.statement_for(cid) for cid in member_ids) if s is not None]

    lines = sorted(
        (line for s in statements for line in s.lines),
        key=lambda l: (l.session_date, l.start_time, l.client_name),
    )
    subtotal = sum((s.subtotal for s in statements), ZERO)
    adjustments = sum((s.adjustment for s in statements), ZERO)

    members = set(member_ids)
    unpriced = [w for w in billing.unpriced if members.intersection(w.client_ids)]
    warnings = [w for w in billing.warnings if members.intersection(w.client_ids)]
    group = billing.statement_for(None)
    if group is not None:
        for line in group.lines:
            if members.intersection(line.participant_ids):
                warnings.append(BillingWarning(
                    code="group_session",
                    message="여러 고객이 함께한 세션은 이 청구서가 아닌 그룹 청구서로 청구됩니다.",
                    session_id=line.session_id,
                    session_date=line.session_date,
                    client_ids=list(line.participant_ids),
                ))

    if client.separate_billing and client.billing_recipient:
        recipient = client.billing_recipient
    else:
        recipient = client.name

    return ClientInvoice(
        month=billing.month,
        client_id=client.client_id,
        recipient_name=recipient,
        recipient_address=client.billing_address or "",
        statements=statements,
        lines=lines,
        adjustments=adjustments,
        totals=compute_totals(subtotal + adjustments, vat_rate, small_business, disclaimer),
        unpriced=unpriced,
        warnings=warnings,
        client_names=[s.client_name for s in statements],
    )


def build_group_invoice(
    billing: MonthlyBilling,
    clients,
    *,
    small_business: bool = False,
    vat_rate=None,
    disclaimer: Optional[str] = None,
) -> Optional[ClientInvoice]:
    """여러 고객이 함께한 per_session 세션을 모은 "Gruppe" 청구서. 없으면 None."""
    group = billing.statement_for(None)
    if group is None:
        return None
    roster = _index(clients, "client_id")
    member_ids = sorted({cid for line in group.lines for cid in line.participant_ids})
    return ClientInvoice(
        month=billing.month,
        client_id=None,
        recipient_name=GROUP_LABEL,
        recipient_address="",
        statements=[group],
        lines=list(group.lines),
        adjustments=group.adjustment,
        totals=compute_totals(group.net, vat_rate, small_business, disclaimer),
        client_names=[roster[cid].name for cid in member_ids if cid in roster],
    )


def staff_payroll(month: str, sessions: Iterable, staff: Iterable) -> List[StaffPayrollRow]:
    start, end = month_bounds(month)
    hours_by_staff: Dict[int, float] = defaultdict(float)
    count_by_staff: Dict[int, int] = defaultdict(int)
    for session in sessions:
        if session.status != SESSION_COMPLETED or not (start <= session.session_date <= end):
            continue
        if session.staff_trainer_id is None:
            continue
        try:
            hours_by_staff[session.staff_trainer_id] += duration_minutes(session.start_time, session.end_time) / 60
        except InvalidDurationError:
            logger.warning("[billing] payroll skipped invalid session: session_id=%s", session.session_id)
            continue
        count_by_staff[session.staff_trainer_id] += 1

    rows = []
    for trainer in staff:
        hours = hours_by_staff.get(trainer.staff_trainer_id, 0.0)
        rate = to_money(trainer.hourly_rate)
        rows.append(StaffPayrollRow(
            staff_trainer_id=trainer.staff_trainer_id,
            name=trainer.name,
            hourly_rate=rate,
            session_count=count_by_staff.get(trainer.staff_trainer_id, 0),
            hours=hours,
            amount=(rate * Decimal(str(hours))).quantize(CENT, rounding=ROUND_HALF_UP),
        ))
    return rows


# ---------------------------------------------------------------------------
# owner_id 범위 DB 조회
# ---------------------------------------------------------------------------

def get_profile(db: Session, owner_id: int) -> Optional[TrainerProfile]:
    return db.query(TrainerProfile).filter(TrainerProfile.owner_id == owner_id).first()


def tax_settings(profile: Optional[TrainerProfile]) -> Tuple[bool, object]:
    if profile is None:
        return False, settings.DEFAULT_VAT_RATE
    rate = profile.vat_rate if profile.vat_rate is not None else settings.DEFAULT_VAT_RATE
    return bool(profile.small_business), rate


def load_month_sessions(db: Session, owner_id: int, month: str) -> List[TrainingSession]:
    start, end = month_bounds(month)
    return (
        db.query(TrainingSession)
        .options(selectinload(TrainingSession.participants))
        .filter(
            TrainingSession.owner_id == owner_id,
            TrainingSession.session_date >= start,
            TrainingSession.session_date <= end,
        )
        .order_by(TrainingSession.session_date, TrainingSession.start_time)
        .all()
    )


def monthly_billing_for_owner(db: Session, owner_id: int, month: str) -> MonthlyBilling:
    small_business, vat_rate = tax_settings(get_profile(db, owner_id))
    billing = aggregate_month(
        month,
        load_month_sessions(db, owner_id, month),
        db.query(RatePlan).filter(RatePlan.owner_id == owner_id).all(),
        db.query(Client).filter(Client.owner_id == owner_id).all(),
        db.query(MonthlyAdjustment).filter(
            MonthlyAdjustment.owner_id == owner_id,
            MonthlyAdjustment.month == month,
        ).all(),
        small_business=small_business,
        vat_rate=vat_rate,
    )
    paid_ids = {
        row.client_id
        for row in db.query(Payment).filter(
            Payment.owner_id == owner_id,
            Payment.month == month,
            Payment.paid == True,
        ).all()
    }
    # client_id가 NULL인 Payment 행은 "Gruppe" 청구서의 수금 여부다.
    for item in billing.statements:
        item.paid = item.client_id in paid_ids
    return billing


def client_invoice_for_owner(db: Session, owner_id: int, month: str, client_id: int) -> ClientInvoice:
    clients = db.query(Client).filter(Client.owner_id == owner_id).all()
    client = next((c for c in clients if c.client_id == client_id), None)
    if client is None:
        raise HTTPException(status_code=404, detail="고객을 찾을 수 없습니다.")
    small_business, vat_rate = tax_settings(get_profile(db, owner_id))
    billing = monthly_billing_for_owner(db, owner_id, month)
    return build_client_invoice(
        billing,
        client,
        clients,
        small_business=small_business,
        vat_rate=vat_rate,
    )


def group_invoice_for_owner(db: Session, owner_id: int, month: str) -> ClientInvoice:
    clients = db.query(Client).filter(Client.owner_id == owner_id).all()
    small_business, vat_rate = tax_settings(get_profile(db, owner_id))
    billing = monthly_billing_for_owner(db, owner_id, month)
    invoice = build_group_invoice(billing, clients, small_business=small_business, vat_rate=vat_rate)
    if invoice is None:
        raise HTTPException(status_code=404, detail="이 달에는 그룹 청구 내역이 없습니다.")
    return invoice


def payroll_for_owner(db: Session, owner_id: int, month: str) -> List[StaffPayrollRow]:
    staff = (
        db.query(StaffTrainer)
        .filter(StaffTrainer.owner_id == owner_id)
        .order_by(StaffTrainer.name)
        .all()
    )
    return staff_payroll(month, load_month_sessions(db, owner_id, month), staff)


def current_month() -> str:
    return month_key(date.today())
