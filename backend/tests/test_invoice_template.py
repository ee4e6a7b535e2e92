from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from trainer_planner.services.billing_service import aggregate_month, build_client_invoice
from trainer_planner.services.invoice_template import (
    DEFAULT_TEMPLATE,
    TemplateError,
    invoice_values,
    render_invoice_document,
    render_totals_block,
    substitute,
    unknown_tokens,
    validate_template,
)


def _invoice(small_business=False, adjustments=(), clients=None):
    clients = clients or [
        SimpleNamespace(client_id=1, name="Mia <Junior>", billing_client_id=None, separate_billing=False,
                        billing_recipient=None, billing_address="Gartenweg 2\n10117 Berlin"),
    ]
    session = SimpleNamespace(
        session_id=1, session_date=date(2024, 12, 2), start_time="10:00", end_time="11:00",
        client_ids=[1], rate_plan_id=10, status="completed", cash_paid=False,
        custom_price_per_hour=None, custom_billing_mode=None,
    )
    plans = [SimpleNamespace(rate_plan_id=10, name="Einzeltraining", price_per_hour=60, billing_mode="per_session")]
    billing = aggregate_month("2024-12", [session], plans, clients, adjustments,
                              small_business=small_business, vat_rate=19)
    return build_client_invoice(billing, clients[0], clients, small_business=small_business, vat_rate=19)


def _profile():
    return SimpleNamespace(display_name="Anna Schmidt", iban="DE02120300000000202051",
                           address="Hauptstr. 1\n10115 Berlin", tax_number="12/345/67890")


def test_template_without_required_tokens_is_rejected():
    with pytest.raises(TemplateError):
        validate_template("<p>{{line_items_table}}</p>")
    with pytest.raises(TemplateError):
        substitute("<p>{{totals_block}}</p>", {})
    validate_template(DEFAULT_TEMPLATE)


def test_substitute_keeps_unknown_tokens():
    template = "{{line_items_table}} {{totals_block}} {{mystery}} {{client_name}}"
    out = substitute(template, {"line_items_table": "T", "totals_block": "S", "client_name": "Mia"})
    assert out == "T S {{mystery}} Mia"
    assert unknown_tokens(template, ["line_items_table", "totals_block", "client_name"]) == ["mystery"]


def test_rendered_invoice_contains_amounts_and_escaped_names():
    invoice = _invoice()
    values = invoice_values(invoice, profile=_profile(), invoice_number="RG-20241231-080509",
                            invoice_date=date(2024, 12, 31))
    html = render_invoice_document(None, values)

    assert "RG-20241231-080509" in html
    assert "Dezember 2024" in html
    assert "31.12.2024" in html
    assert "Mia &lt;Junior&gt;" in html
    assert "60.00 €" in html
    assert "USt (19%):" in html
    assert "71.40 €" in html
    assert "Hauptstr. 1<br>10115 Berlin" in html
    assert "{{" not in html


def test_small_business_invoice_has_notice_and_no_vat_row():
    invoice = _invoice(small_business=True)
    block = render_totals_block(invoice.totals)
    assert "USt" not in block

    values = invoice_values(invoice, profile=_profile(), invoice_number="RG-1", invoice_date=date(2024, 12, 31))
    assert "§19 UStG" in values["small_business_notice"]
    assert values["vat_line"] == ""


def test_adjustment_row_is_rendered_in_line_items_table():
    adjustments = [SimpleNamespace(month="2024-12", client_id=1, amount=-10)]
    invoice = _invoice(adjustments=adjustments)
    assert invoice.totals.net == Decimal("50.00")

    values = invoice_values(invoice, profile=_profile(), invoice_number="RG-1", invoice_date=date(2024, 12, 31))
    assert "Korrektur" in values["line_items_table"]
    assert "-10.00 €" in values["line_items_table"]
