"""AI Service 도메인 서비스 레이어입니다. 청구서 템플릿 작성과 영수증 인식을 담당합니다.

정산 로직은 아래 두 능력(capability) 인터페이스에만 의존하며, 제공자별 요청/응답
형식은 ai_client 모듈 안에만 존재한다.
"""

import json
import logging
import re
from typing import Any, Dict, Optional, Protocol

from trainer_planner.config import settings
from trainer_planner.services.ai_client import AIClient, UpstreamError
from trainer_planner.services.invoice_template import (
    DEFAULT_TEMPLATE,
    PLACEHOLDER_INFO,
    TOKEN_LINE_ITEMS,
    TOKEN_TOTALS,
    missing_required_tokens,
)

logger = logging.getLogger(__name__)

RECEIPT_CATEGORIES = ("venue-rental", "equipment", "travel", "continuing-education", "coaching-fee", "other")

# 모델이 원본 독일어 분류명으로 답하는 경우를 흡수한다.
_CATEGORY_ALIASES = {
    "platzmiete": "venue-rental",
    "hallenmiete": "venue-rental",
    "material": "equipment",
    "fahrtkosten": "travel",
    "fortbildung": "continuing-education",
    "tennistraining": "coaching-fee",
    "sonstiges": "other",
}

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

TEMPLATE_SYSTEM_PROMPT = f"""Du bist ein Experte für die Erstellung von HTML-Rechnungsvorlagen für einen Tennistrainer.
{PLACEHOLDER_INFO}
CSS-Klassen die du verwenden kannst:
- .flex - Flexbox Container für zwei Spalten
- .section - Abschnitt mit Margin
- .footer - Fußbereich
- Inline-Styles sind auch erlaubt

Regeln:
1. Gib NUR den HTML-Code zurück, ohne Erklärungen oder Markdown-Codeblöcke
2. Verwende IMMER {TOKEN_LINE_ITEMS} für die Trainings-Tabelle
3. Verwende IMMER {TOKEN_TOTALS} für die Summen
4. Halte das Design professionell und übersichtlich
5. Die Vorlage wird in ein PDF konvertiert, also keine JavaScript oder komplexe CSS

Hier ist die Standard-Vorlage als Referenz:
{DEFAULT_TEMPLATE}
"""

RECEIPT_PROMPT = """Analysiere diesen Beleg/Quittung/Rechnung und extrahiere die folgenden Informationen.
Antworte NUR mit einem validen JSON-Objekt (ohne Markdown-Codeblöcke), ohne zusätzlichen Text.

Das JSON soll folgende Felder haben:
- date: Das Datum im Format YYYY-MM-DD (oder null wenn nicht lesbar)
- amount: Der Gesamtbetrag als Zahl (Brutto-Betrag inkl. MwSt, oder null wenn nicht lesbar)
- description: Eine kurze Beschreibung was gekauft wurde (max 100 Zeichen)
- category: Eine der folgenden Kategorien die am besten passt: "venue-rental", "equipment", "travel", "continuing-education", "coaching-fee", "other"
  - "venue-rental" = Tennisplatz-Miete, Hallenmiete, Courtbuchung
  - "equipment" = Tennisbälle, Schläger, Netze, Trainingsgeräte, Sportartikel
  - "travel" = Tankquittungen, Parktickets, Bahntickets, Maut
  - "continuing-education" = Kurse, Seminare, Trainerlizenzen, Fachliteratur
  - "coaching-fee" = Tennisunterricht, Trainerstunden, Coaching-Gebühren
  - "other" = Alles andere
- hasVAT: true wenn MwSt/USt ausgewiesen ist, sonst false
- vatRate: Der MwSt-Satz als Zahl (7 oder 19), oder null wenn keine MwSt
- vendor: Name des Händlers/Geschäfts (oder null wenn nicht lesbar)
- invoiceNumber: Die Rechnungsnummer/Belegnummer (oder null wenn nicht vorhanden)
- invoiceDate: Das Rechnungsdatum im Format YYYY-MM-DD (oder null wenn nicht vorhanden, oft identisch mit date)

Beispiel-Antwort:
{"date":"2024-12-10","amount":49.99,"description":"Tennisbälle Wilson","category":"equipment","hasVAT":true,"vatRate":19,"vendor":"Decathlon","invoiceNumber":"RE-2024-12345","invoiceDate":"2024-12-10"}"""


class InvoiceTemplateAuthor(Protocol):
    def generate_template(self, prompt: str, current_template: Optional[str] = None) -> str:
        ...


class ReceiptParser(Protocol):
    def parse_receipt(self, data_base64: str, mime_type: str) -> Dict[str, Any]:
        ...


def strip_code_fence(text: str) -> str:
    stripped = (text or "").strip()
    fenced = re.match(r"^```[a-zA-Z]*\s*\n?([\s\S]*?)\n?```$", stripped)
    if fenced:
        return fenced.group(1).strip()
    return stripped


class AIService:
    """OpenAI 호환 모델을 이용한 InvoiceTemplateAuthor/ReceiptParser 구현."""

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id

    def _ensure_enabled(self):
        if not settings.AI_FEATURES_ENABLED:
            raise UpstreamError("AI 기능이 비활성화되어 있습니다.", status_code=503)

    def _parse_json_object(self, raw_text: str) -> Dict[str, Any]:
        text = strip_code_fence(raw_text)
        if not text:
            return {}

        try:
            parsed = json.loads(text)
            if isinstance(parsed, dict):
                return parsed
        except ValueError:
            pass

        # 설명 문장이 섞여 있으면 첫 JSON 객체 블록만 시도한다.
        start = text.find("{")
        end = text.rfind("}")
        if start >= 0 and end > start:
            try:
                parsed = json.loads(text[start:end + 1])
                if isinstance(parsed, dict):
                    return parsed
            except ValueError:
                return {}
        return {}

    def generate_template(self, prompt: str, current_template: Optional[str] = None) -> str:
        self._ensure_enabled()
        if current_template:
            user_prompt = f"Aktuelle Vorlage:\n{current_template}\n\nAnfrage des Benutzers: {prompt}"
        else:
            user_prompt = f"Anfrage des Benutzers: {prompt}"

        client = AIClient.get_client("template", self.user_id)
        raw = client.invoke(user_prompt, TEMPLATE_SYSTEM_PROMPT, max_tokens=settings.AI_TEMPLATE_MAX_TOKENS)
        html = strip_code_fence(raw)

        missing = missing_required_tokens(html)
        if missing:
            logger.warning("[ai] generated template rejected: model=%s missing=%s", client.model_name, missing)
            raise UpstreamError("생성된 템플릿에 필수 플레이스홀더가 없습니다: " + ", ".join(missing))
        return html

    def parse_receipt(self, data_base64: str, mime_type: str) -> Dict[str, Any]:
        self._ensure_enabled()
        client = AIClient.get_client("receipt", self.user_id)
        raw = client.invoke_with_attachment(
            RECEIPT_PROMPT,
            data_base64,
            mime_type,
            max_tokens=settings.AI_RECEIPT_MAX_TOKENS,
        )
        parsed = self._parse_json_object(raw)
        if not parsed:
            logger.warning("[ai] receipt response is not a JSON object: model=%s", client.model_name)
            raise UpstreamError("영수증 인식 결과를 JSON으로 해석할 수 없습니다.")
        return normalize_receipt(parsed)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_date(value: Any) -> Optional[str]:
    text = _optional_text(value)
    if text and _DATE_RE.match(text):
        return text
    return None


def _optional_amount(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace("€", "").strip().replace(",", ".")
    try:
        return round(float(value), 2)
    except (TypeError, ValueError):
        return None


def _category(value: Any) -> str:
    text = str(value or "").strip().lower()
    if text in RECEIPT_CATEGORIES:
        return text
    return _CATEGORY_ALIASES.get(text, "other")


def _vat_rate(value: Any) -> Optional[int]:
    amount = _optional_amount(value)
    if amount is None:
        return None
    rate = int(round(amount))
    return rate if rate in (7, 19) else None


def normalize_receipt(raw: Dict[str, Any]) -> Dict[str, Any]:
    """모델 응답을 camelCase 영수증 필드로 정규화합니다. 알 수 없는 값은 null로 둡니다."""
    vat_rate = _vat_rate(raw.get("vatRate"))
    has_vat = bool(raw.get("hasVAT")) and vat_rate is not None
    description = _optional_text(raw.get("description"))
    if description and len(description) > 100:
        description = description[:100]
    receipt_date = _optional_date(raw.get("date"))
    return {
        "date": receipt_date,
        "amount": _optional_amount(raw.get("amount")),
        "description": description,
        "category": _category(raw.get("category")),
        "hasVAT": has_vat,
        "vatRate": vat_rate if has_vat else None,
        "vendor": _optional_text(raw.get("vendor")),
        "invoiceNumber": _optional_text(raw.get("invoiceNumber")),
        "invoiceDate": _optional_date(raw.get("invoiceDate")) or receipt_date,
    }
