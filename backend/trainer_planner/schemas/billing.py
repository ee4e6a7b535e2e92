"""정산/청구서 응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Literal
from datetime import date


class LineItemOut(BaseModel):
    session_id: Optional[int] = None
    session_date: date
    start_time: str
    end_time: str
    description: str
    client_id: Optional[int] = None
    client_name: str
    duration_hours: float
    unit_price: float
    amount: float
    billing_mode: str


class BillingWarningOut(BaseModel):
    code: str
    message: str
    session_id: Optional[int] = None
    session_date: Optional[date] = None
    client_ids: List[int] = Field(default_factory=list)


class TotalsOut(BaseModel):
    net: float
    vat: float
    gross: float
    vat_rate: float
    small_business: bool
    disclaimer: Optional[str] = None


class ClientStatementOut(BaseModel):
    client_id: Optional[int] = None
    client_name: str
    is_group: bool
    lines: List[LineItemOut]
    cash_lines: List[LineItemOut]
    subtotal: float
    adjustment: float
    cash_total: float
    totals: TotalsOut
    paid: bool
    open_amount: float


class MonthlyOverviewOut(BaseModel):
    month: str
    statements: List[ClientStatementOut]
    totals: TotalsOut
    unpriced: List[BillingWarningOut]
    warnings: List[BillingWarningOut]


class ClientInvoiceOut(BaseModel):
    month: str
    client_id: Optional[int] = None
    is_group: bool = False
    recipient_name: str
    recipient_address: str
    client_names: List[str]
    lines: List[LineItemOut]
    adjustments: float
    totals: TotalsOut
    unpriced: List[BillingWarningOut]
    warnings: List[BillingWarningOut]


class InvoiceRenderRequest(BaseModel):
    month: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    client_id: Optional[int] = None
    group: bool = False
    template: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None

    @model_validator(mode="after")
    def check_target(self):
        if self.group == (self.client_id is not None):
            raise ValueError("client_id와 group 중 하나만 지정해야 합니다.")
        return self


class InvoiceRenderOut(BaseModel):
    invoice_number: str
    html: str
    totals: TotalsOut
    unpriced: List[BillingWarningOut]
    unknown_tokens: List[str]


class StaffPayrollRowOut(BaseModel):
    staff_trainer_id: int
    name: str
    hourly_rate: float
    session_count: int
    hours: float
    amount: float


class StaffPayrollOut(BaseModel):
    month: str
    rows: List[StaffPayrollRowOut]
    total_hours: float
    total_amount: float


class VatPeriodOut(BaseModel):
    period: str
    label: str
    income_net: float
    output_vat: float
    input_vat: float
    payable: float


class VatReportOut(BaseModel):
    year: int
    period_type: Literal["month", "quarter"]
    small_business: bool
    periods: List[VatPeriodOut]
    total_output_vat: float
    total_input_vat: float
    total_payable: float
