"""Billing 기능 API 라우터입니다. 월별 정산 현황, 고객 청구서, 급여/부가세 자료를 제공합니다."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from trainer_planner.database import get_db
from trainer_planner.schemas.billing import (
    BillingWarningOut,
    ClientInvoiceOut,
    ClientStatementOut,
    InvoiceRenderOut,
    InvoiceRenderRequest,
    LineItemOut,
    MonthlyOverviewOut,
    StaffPayrollOut,
    StaffPayrollRowOut,
    TotalsOut,
    VatPeriodOut,
    VatReportOut,
)
from trainer_planner.schemas.payment import MONTH_PATTERN
from trainer_planner.services import billing_service, bookkeeping_service
from trainer_planner.services.invoice_template import (
    TemplateError,
    invoice_values,
    render_invoice_document,
    unknown_tokens,
)
from trainer_planner.middleware.auth_middleware import get_current_user
from trainer_planner.models.user import User
from trainer_planner.utils.dates import invoice_number as next_invoice_number

router = APIRouter(prefix="/api/billing", tags=["billing"])


def _totals_out(totals) -> TotalsOut:
    return TotalsOut(
        net=float(totals.net),
        vat=float(totals.vat),
        gross=float(totals.gross),
        vat_rate=float(totals.vat_rate),
        small_business=totals.small_business,
        disclaimer=totals.disclaimer,
    )


def _line_out(line) -> LineItemOut:
    return LineItemOut(
        session_id=line.session_id,
        session_date=line.session_date,
        start_time=line.start_time,
        end_time=line.end_time,
        description=line.description,
        client_id=line.client_id,
        client_name=line.client_name,
        duration_hours=line.duration_hours,
        unit_price=float(line.unit_price),
        amount=float(line.amount),
        billing_mode=line.billing_mode,
    )


def _warnings_out(items) -> List[BillingWarningOut]:
    return [
        BillingWarningOut(
            code=w.code,
            message=w.message,
            session_id=w.session_id,
            session_date=w.session_date,
            client_ids=list(w.client_ids),
        )
        for w in items
    ]


def _statement_out(statement) -> ClientStatementOut:
    return ClientStatementOut(
        client_id=statement.client_id,
        client_name=statement.client_name,
        is_group=statement.is_group,
        lines=[_line_out(line) for line in statement.lines],
        cash_lines=[_line_out(line) for line in statement.cash_lines],
        subtotal=float(statement.subtotal),
        adjustment=float(statement.adjustment),
        cash_total=float(statement.cash_total),
        totals=_totals_out(statement.totals),
        paid=statement.paid,
        open_amount=float(statement.open_amount),
    )


def _month(month: Optional[str]) -> str:
    return month or billing_service.current_month()


def _load_invoice(db: Session, owner_id: int, month: str, client_id: Optional[int], group: bool):
    if group:
        return billing_service.group_invoice_for_owner(db, owner_id, month)
    if client_id is None:
        raise HTTPException(status_code=400, detail="client_id 또는 group=true를 지정하세요.")
    return billing_service.client_invoice_for_owner(db, owner_id, month, client_id)


@router.get("/overview", response_model=MonthlyOverviewOut)
def monthly_overview(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    billing = billing_service.monthly_billing_for_owner(db, current_user.user_id, _month(month))
    return MonthlyOverviewOut(
        month=billing.month,
        statements=[_statement_out(s) for s in billing.statements],
        totals=_totals_out(billing.totals),
        unpriced=_warnings_out(billing.unpriced),
        warnings=_warnings_out(billing.warnings),
    )


@router.get("/invoice", response_model=ClientInvoiceOut)
def client_invoice(
    client_id: Optional[int] = None,
    group: bool = False,
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = _load_invoice(db, current_user.user_id, _month(month), client_id, group)
    return ClientInvoiceOut(
        month=invoice.month,
        client_id=invoice.client_id,
        is_group=invoice.is_group,
        recipient_name=invoice.recipient_name,
        recipient_address=invoice.recipient_address,
        client_names=invoice.client_names,
        lines=[_line_out(line) for line in invoice.lines],
        adjustments=float(invoice.adjustments),
        totals=_totals_out(invoice.totals),
        unpriced=_warnings_out(invoice.unpriced),
        warnings=_warnings_out(invoice.warnings),
    )


@router.post("/invoice/render", response_model=InvoiceRenderOut)
def render_invoice(
    data: InvoiceRenderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = _load_invoice(db, current_user.user_id, data.month, data.client_id, data.group)
    profile = billing_service.get_profile(db, current_user.user_id)
    template = data.template or (profile.invoice_template if profile else None)
    number = data.invoice_number or next_invoice_number()
    values = invoice_values(
        invoice,
        profile=profile,
        invoice_number=number,
        invoice_date=data.invoice_date or date.today(),
        client_name=", ".join(invoice.client_names) if invoice.is_group else None,
    )
    try:
        html = render_invoice_document(template, values)
    except TemplateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return InvoiceRenderOut(
        invoice_number=number,
        html=html,
        totals=_totals_out(invoice.totals),
        unpriced=_warnings_out(invoice.unpriced),
        unknown_tokens=unknown_tokens(template or "", values.keys()),
    )


@router.get("/payroll", response_model=StaffPayrollOut)
def staff_payroll(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    key = _month(month)
    rows = billing_service.payroll_for_owner(db, current_user.user_id, key)
    return StaffPayrollOut(
        month=key,
        rows=[
            StaffPayrollRowOut(
                staff_trainer_id=row.staff_trainer_id,
                name=row.name,
                hourly_rate=float(row.hourly_rate),
                session_count=row.session_count,
                hours=row.hours,
                amount=float(row.amount),
            )
            for row in rows
        ],
        total_hours=sum(row.hours for row in rows),
        total_amount=float(sum((row.amount for row in rows), billing_service.ZERO)),
    )


@router.get("/vat-report", response_model=VatReportOut)
def vat_report(
    year: int = Query(..., ge=2000, le=2100),
    period: str = Query(bookkeeping_service.PERIOD_MONTH, pattern="^(month|quarter)$"),
    include_cash: bool = True,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report = bookkeeping_service.vat_report_for_owner(db, current_user.user_id, year, period, include_cash)
    return VatReportOut(
        year=report.year,
        period_type=report.period_type,
        small_business=report.small_business,
        periods=[
            VatPeriodOut(
                period=p.period,
                label=p.label,
                income_net=float(p.income_net),
                output_vat=float(p.output_vat),
                input_vat=float(p.input_vat),
                payable=float(p.payable),
            )
            for p in report.periods
        ],
        total_output_vat=float(report.total_output_vat),
        total_input_vat=float(report.total_input_vat),
        total_payable=float(report.total_payable),
    )
