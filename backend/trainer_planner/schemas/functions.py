"""외부 LLM/이메일 연동 함수 엔드포인트의 요청/응답 계약입니다.

요청/응답 필드는 기존 프런트엔드와 맞추기 위해 camelCase 별칭을 사용한다.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal

ReceiptCategory = Literal["venue-rental", "equipment", "travel", "continuing-education", "coaching-fee", "other"]


class GenerateTemplateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    current_template: Optional[str] = Field(default=None, alias="currentTemplate")


class ParseReceiptRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_base64: Optional[str] = Field(default=None, alias="imageBase64")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")


class SendRegistrationEmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    registration_id: Optional[int] = Field(default=None, alias="registrationId")


class ReceiptData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: Optional[str] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    category: ReceiptCategory = "other"
    has_vat: bool = Field(default=False, alias="hasVAT")
    vat_rate: Optional[Literal[7, 19]] = Field(default=None, alias="vatRate")
    vendor: Optional[str] = None
    invoice_number: Optional[str] = Field(default=None, alias="invoiceNumber")
    invoice_date: Optional[str] = Field(default=None, alias="invoiceDate")
