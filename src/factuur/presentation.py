from __future__ import annotations

from decimal import Decimal, localcontext

from .models import DisplayVatRow, DocumentTotals, DocumentView, LineItem, LineView, PricingMode
from .money import MONEY_CONTEXT, round2
from .vat.classification import DEFAULT_TABLE, VatClassificationTable


def visible_breakdown(totals: DocumentTotals, fallback_default_rate: Decimal) -> tuple[DisplayVatRow, ...]:
    rows = tuple(
        DisplayVatRow(rate=row.rate, base=row.base, vat=row.vat) for row in totals.breakdown if row.rate != 0
    )
    if rows:
        return rows
    return (
        DisplayVatRow(
            rate=fallback_default_rate,
            base=totals.subtotal,
            vat=totals.vat_amount,
            synthetic=True,
        ),
    )


def line_view(
    line: LineItem,
    fallback_default_rate: Decimal,
    *,
    table: VatClassificationTable = DEFAULT_TABLE,
) -> LineView:
    with localcontext(MONEY_CONTEXT):
        line_total = round2(line.quantity * line.unit_price)
    return LineView(
        description=line.description,
        quantity=line.quantity,
        unit=line.unit,
        unit_price=line.unit_price,
        vat_treatment=line.vat_treatment,
        rate=table.effective_rate(line.vat_treatment, line.vat_rate_override, fallback_default_rate),
        line_total=line_total,
    )


def render_payload(view: DocumentView) -> dict:
    payload = view.model_dump(mode="json")
    payload["prices_include_vat"] = view.pricing_mode is PricingMode.INCLUSIVE
    return payload
