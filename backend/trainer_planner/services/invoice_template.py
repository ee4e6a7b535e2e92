"""청구서 HTML 템플릿의 플레이스홀더 치환과 기본 템플릿을 제공합니다."""

from __future__ import annotations

import html
import re
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional

from trainer_planner.config import settings
from trainer_planner.services.billing_service import ClientInvoice, Totals
from trainer_planner.utils.dates import format_date_german, format_month_german

TOKEN_LINE_ITEMS = "{{line_items_table}}"
TOKEN_TOTALS = "{{totals_block}}"
REQUIRED_TOKENS = (TOKEN_LINE_ITEMS, TOKEN_TOTALS)

_TOKEN_RE = re.compile(r"\{\{([a-zA-Z0-9_]+)\}\}")

PLACEHOLDER_INFO = """
Verfügbare Platzhalter für die Rechnungsvorlage:
- {{client_name}} - Name des Spielers/Kunden
- {{invoice_number}} - Eindeutige Rechnungsnummer
- {{invoice_date}} - Datum der Rechnung
- {{month}} - Abrechnungsmonat (z.B. "Dezember 2024")
- {{line_items_table}} - WICHTIG: Automatisch generierte HTML-Tabelle mit allen Trainingspositionen
- {{net}} - Nettobetrag
- {{vat}} - Umsatzsteuer-Betrag
- {{gross}} - Gesamtbetrag (Brutto)
- {{iban}} - IBAN des Trainers
- {{trainer_name}} - Name des Trainers
- {{trainer_address_html}} - Adresse des Trainers als HTML (mit <br> für Zeilenumbrüche)
- {{tax_number}} - Steuernummer des Trainers
- {{recipient_name}} - Name des Rechnungsempfängers
- {{recipient_address_html}} - Adresse des Empfängers als HTML
- {{small_business_notice}} - Automatischer Hinweis bei Kleinunternehmer-Status
- {{vat_line}} - USt-Zeile (leer bei Kleinunternehmer)
- {{payment_days}} - Zahlungsziel in Tagen
- {{totals_block}} - WICHTIG: Automatisch generierter HTML-Block mit Netto/USt/Brutto

WICHTIG: Die Platzhalter {{line_items_table}} und {{totals_block}} müssen verwendet werden - sie werden automatisch mit den echten Rechnungsdaten befüllt.
"""

DEFAULT_TEMPLATE = """<h1>RECHNUNG</h1>

<div class="flex">
  <div class="section">
    <strong>Rechnungssteller:</strong><br>
    {{trainer_name}}<br>
    {{trainer_address_html}}<br>
    Steuernummer: {{tax_number}}
  </div>
  <div class="section" style="text-align: right;">
    <strong>Rechnungsempfänger:</strong><br>
    {{recipient_name}}<br>
    {{recipient_address_html}}
  </div>
</div>

<div class="section">
  <strong>Rechnungsnummer:</strong> {{invoice_number}}<br>
  <strong>Rechnungsdatum:</strong> {{invoice_date}}<br>
  <strong>Leistungszeitraum:</strong> {{month}}
</div>

<p>Sehr geehrte Damen und Herren,</p>
<p>für die im Leistungszeitraum erbrachten Trainerstunden erlaube ich mir, folgende Rechnung zu stellen:</p>

{{line_items_table}}

{{totals_block}}

{{small_business_notice}}

<div class="footer">
  <p>Bitte überweisen Sie den Betrag innerhalb von {{payment_days}} Tagen auf folgendes Konto:</p>
  <p><strong>IBAN:</strong> {{iban}}<br>
  <strong>Kontoinhaber:</strong> {{trainer_name}}</p>
  <p>Vielen Dank für die Zusammenarbeit.</p>
  <p>Mit freundlichen Grüßen<br>{{trainer_name}}</p>
</div>"""

DOCUMENT_SHELL = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Rechnung {title}</title>
<style>
  body {{ font-family: 'Times New Roman', serif; padding: 40px; line-height: 1.6; font-size: 12px; }}
  h1 {{ text-align: center; margin-bottom: 30px; font-size: 24px; }}
  .section {{ margin-bottom: 20px; }}
  .flex {{ display: flex; justify-content: space-between; }}
  table {{ width: 100%; border-collapse: collapse; margin: 20px 0; }}
  th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
  th {{ background: #f5f5f5; font-size: 11px; }}
  .total {{ text-align: right; margin-top: 20px; }}
  .total-row {{ display: flex; justify-content: flex-end; gap: 40px; margin: 4px 0; }}
  .total-row.highlight {{ font-weight: bold; font-size: 14px; margin-top: 8px; border-top: 2px solid #333; padding-top: 8px; }}
  .footer {{ margin-top: 40px; }}
  @media print {{ body {{ padding: 20px; margin: 0; }} @page {{ size: A4; margin: 15mm; }} }}
</style>
</head>
<body>
{body}
</body>
</html>"""


class TemplateError(ValueError):
    """템플릿이 필수 플레이스홀더를 포함하지 않을 때 발생합니다."""


def missing_required_tokens(template: str) -> list:
    return [token for token in REQUIRED_TOKENS if token not in (template or "")]


def validate_template(template: str) -> None:
    missing = missing_required_tokens(template)
    if missing:
        raise TemplateError(
            "청구서 템플릿에 필수 플레이스홀더가 없습니다: " + ", ".join(missing)
            + " (청구 금액이 빠진 청구서가 만들어지지 않도록 반드시 포함해야 합니다.)"
        )


def substitute(template: str, values: Dict[str, str]) -> str:
    """{{name}} 토큰을 values로 치환합니다. 알 수 없는 토큰은 그대로 둡니다."""
    validate_template(template)

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name in values:
            return values[name]
        return match.group(0)

    return _TOKEN_RE.sub(_replace, template)


def format_money(value: Decimal) -> str:
    return f"{value:.2f} €"


def _multiline_html(value: Optional[str]) -> str:
    return "<br>".join(html.escape(line) for line in str(value or "").splitlines())


def _rate_label(rate: Decimal) -> str:
    normalized = rate.normalize()
    return f"{normalized:f}" if normalized == normalized.to_integral() else f"{rate}"


def render_line_items_table(invoice: ClientInvoice) -> str:
    show_client = invoice.has_multiple_clients
    head = ["<th>Datum</th>", "<th>Beschreibung</th>", "<th>Dauer</th>"]
    if show_client:
        head.append("<th>Spieler</th>")
    head += ['<th style="text-align: right">Einzelpreis</th>', '<th style="text-align: right">Betrag</th>']

    rows = []
    for line in invoice.lines:
        cells = [
            f"<td>{format_date_german(line.session_date)}</td>",
            f"<td>{html.escape(line.description)}</td>",
            f"<td>{line.duration_hours:.1f} Std.</td>",
        ]
        if show_client:
            cells.append(f"<td>{html.escape(line.client_name)}</td>")
        cells += [
            f'<td style="text-align: right">{format_money(line.unit_price)}</td>',
            f'<td style="text-align: right">{format_money(line.amount)}</td>',
        ]
        rows.append("<tr>" + "".join(cells) + "</tr>")

    if invoice.adjustments:
        colspan = len(head) - 1
        background = "#fee2e2" if invoice.adjustments < 0 else "#dcfce7"
        rows.append(
            f'<tr style="background: {background}"><td colspan="{colspan}"><em>Korrektur</em></td>'
            f'<td style="text-align: right">{format_money(invoice.adjustments)}</td></tr>'
        )

    return (
        "<table>\n<thead>\n<tr>" + "".join(head) + "</tr>\n</thead>\n<tbody>\n"
        + "\n".join(rows) + "\n</tbody>\n</table>"
    )


def render_vat_line(totals: Totals) -> str:
    if totals.small_business:
        return ""
    return (
        f'<div class="total-row"><span>USt ({_rate_label(totals.vat_rate)}%):</span>'
        f"<span>{format_money(totals.vat)}</span></div>"
    )


def render_totals_block(totals: Totals) -> str:
    parts = [
        '<div class="total">',
        f'<div class="total-row"><span>Nettobetrag:</span><span>{format_money(totals.net)}</span></div>',
    ]
    vat_line = render_vat_line(totals)
    if vat_line:
        parts.append(vat_line)
    parts.append(
        f'<div class="total-row highlight"><span>Gesamtbetrag:</span><span>{format_money(totals.gross)}</span></div>'
    )
    parts.append("</div>")
    return "\n".join(parts)


def render_small_business_notice(totals: Totals) -> str:
    if not totals.small_business or not totals.disclaimer:
        return ""
    return f"<p><em>{html.escape(totals.disclaimer)}</em></p>"


def invoice_values(
    invoice: ClientInvoice,
    *,
    profile=None,
    invoice_number: str,
    invoice_date: date,
    client_name: Optional[str] = None,
) -> Dict[str, str]:
    trainer_name = profile.display_name if profile is not None else ""
    return {
        "client_name": html.escape(client_name or invoice.recipient_name),
        "invoice_number": html.escape(invoice_number),
        "invoice_date": format_date_german(invoice_date),
        "month": format_month_german(invoice.month),
        "line_items_table": render_line_items_table(invoice),
        "net": format_money(invoice.totals.net),
        "vat": format_money(invoice.totals.vat),
        "gross": format_money(invoice.totals.gross),
        "iban": html.escape(getattr(profile, "iban", None) or ""),
        "trainer_name": html.escape(trainer_name),
        "trainer_address_html": _multiline_html(getattr(profile, "address", None)),
        "tax_number": html.escape(getattr(profile, "tax_number", None) or ""),
        "recipient_name": html.escape(invoice.recipient_name),
        "recipient_address_html": _multiline_html(invoice.recipient_address),
        "small_business_notice": render_small_business_notice(invoice.totals),
        "vat_line": render_vat_line(invoice.totals),
        "payment_days": str(settings.INVOICE_PAYMENT_DAYS),
        "totals_block": render_totals_block(invoice.totals),
    }


def render_invoice_document(template: Optional[str], values: Dict[str, str]) -> str:
    body = substitute(template or DEFAULT_TEMPLATE, values)
    return DOCUMENT_SHELL.format(title=values.get("invoice_number", ""), body=body)


def unknown_tokens(template: str, known: Iterable[str]) -> list:
    known_set = set(known)
    return sorted({m.group(1) for m in _TOKEN_RE.finditer(template or "")} - known_set)
