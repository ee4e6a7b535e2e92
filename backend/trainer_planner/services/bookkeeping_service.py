"""Bookkeeping Service 도메인 서비스 레이어입니다. 월/분기별 부가세(USt) 신고 자료를 계산합니다.

매출세액은 수금 완료(paid)로 표시된 고객-월의 순액과 현금 세션 금액을 과세표준으로,
매입세액은 세율이 기재된 지출의 총액에서 역산(amount × rate / (100 + rate))한다.
소규모 사업자(Kleinunternehmer)는 부가세를 신고하지 않으므로 빈 보고서를 돌려준다.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from trainer_planner.models.expense import Expense
from trainer_planner.services.billing_service import (
    CENT,
    ZERO,
    MonthlyBilling,
    tax_settings,
    get_profile,
    monthly_billing_for_owner,
    to_money,
)
from trainer_planner.utils.dates import MONTH_NAMES_DE, month_key

PERIOD_MONTH = "month"
PERIOD_QUARTER = "quarter"


@dataclass
class VatPeriod:
    period: str
    label: str
    income_net: Decimal = ZERO
    output_vat: Decimal = ZERO
    input_vat: Decimal = ZERO

    @property
    def payable(self) -> Decimal:
        return self.output_vat - self.input_vat


@dataclass
class VatReport:
    year: int
    period_type: str
    small_business: bool
    periods: List[VatPeriod] = field(default_factory=list)

    @property
    def total_output_vat(self) -> Decimal:
        return sum((p.output_vat for p in self.periods), ZERO)

    @property
    def total_input_vat(self) -> Decimal:
        return sum((p.input_vat for p in self.periods), ZERO)

    @property
    def total_payable(self) -> Decimal:
        return self.total_output_vat - self.total_input_vat


def input_vat(amount, rate) -> Decimal:
    gross = to_money(amount)
    rate = Decimal(str(rate))
    return (gross * rate / (100 + rate)).quantize(CENT, rounding=ROUND_HALF_UP)


def period_key(year: int, month: int, period_type: str) -> str:
    if period_type == PERIOD_QUARTER:
        return f"{year}-Q{(month - 1) // 3 + 1}"
    return f"{year:04d}-{month:02d}"


def period_label(year: int, month: int, period_type: str) -> str:
    if period_type == PERIOD_QUARTER:
        return f"Q{(month - 1) // 3 + 1} {year}"
    return f"{MONTH_NAMES_DE[month - 1]} {year}"


def collected_net(billing: MonthlyBilling, include_cash: bool = True) -> Decimal:
    """수금 완료된 청구 순액(+현금 세션 금액)을 합산합니다."""
    total = ZERO
    for statement in billing.statements:
        if statement.paid:
            total += statement.net
        if include_cash:
            total += statement.cash_total
    return total


def build_vat_report(
    year: int,
    period_type: str,
    billings: Iterable[MonthlyBilling],
    expenses: Iterable,
    *,
    small_business: bool,
    vat_rate,
    include_cash: bool = True,
) -> VatReport:
    report = VatReport(year=year, period_type=period_type, small_business=small_business)
    if small_business:
        return report

    periods: Dict[str, VatPeriod] = {}
    for month in range(1, 13):
        key = period_key(year, month, period_type)
        if key not in periods:
            periods[key] = VatPeriod(period=key, label=period_label(year, month, period_type))

    rate = Decimal(str(vat_rate))
    for billing in billings:
        billing_year, billing_month = (int(part) for part in billing.month.split("-"))
        if billing_year != year:
            continue
        periods[period_key(year, billing_month, period_type)].income_net += collected_net(billing, include_cash)

    for expense in expenses:
        if expense.expense_date.year != year or not expense.has_input_vat or expense.input_vat_rate is None:
            continue
        target = periods[period_key(year, expense.expense_date.month, period_type)]
        target.input_vat += input_vat(expense.amount, expense.input_vat_rate)

    for item in periods.values():
        item.output_vat = (item.income_net * rate / 100).quantize(CENT, rounding=ROUND_HALF_UP)
    report.periods = list(periods.values())
    return report


def vat_report_for_owner(
    db: Session,
    owner_id: int,
    year: int,
    period_type: str = PERIOD_MONTH,
    include_cash: bool = True,
) -> VatReport:
    small_business, vat_rate = tax_settings(get_profile(db, owner_id))
    if small_business:
        return VatReport(year=year, period_type=period_type, small_business=True)

    billings = [monthly_billing_for_owner(db, owner_id, month_key(date(year, month, 1))) for month in range(1, 13)]
    expenses = db.query(Expense).filter(
        Expense.owner_id == owner_id,
        Expense.expense_date >= date(year, 1, 1),
        Expense.expense_date <= date(year, 12, 31),
    ).all()
    return build_vat_report(
        year,
        period_type,
        billings,
        expenses,
        small_business=False,
        vat_rate=vat_rate,
        include_cash=include_cash,
    )
