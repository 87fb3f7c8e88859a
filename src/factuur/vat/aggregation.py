from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal, localcontext

from ..models import DocumentTotals, LineItem, PricingMode, VatBreakdownRow
from ..money import MONEY_CONTEXT, ZERO, round2
from .classification import DEFAULT_TABLE, NOTICE_ORDER, VatClassificationTable
from .normalization import normalize_lines


_HUNDRED = Decimal("100")


def split_line(amount: Decimal, rate: Decimal, pricing_mode: PricingMode) -> tuple[Decimal, Decimal]:
    with localcontext(MONEY_CONTEXT):
        if pricing_mode is PricingMode.EXCLUSIVE:
            base = round2(amount)
            return base, round2(base * rate / _HUNDRED)

        gross = round2(amount)
        base = round2(gross / (1 + rate / _HUNDRED))
        return base, round2(gross - base)


def aggregate(
    lines: Iterable[LineItem | Mapping[str, object]],
    pricing_mode: PricingMode,
    fallback_default_rate: object = None,
    *,
    table: VatClassificationTable = DEFAULT_TABLE,
) -> DocumentTotals:
    subtotal = round2(ZERO)
    per_rate: dict[Decimal, tuple[Decimal, Decimal]] = {}
    triggered: set = set()

    for line in normalize_lines(lines):
        rate = table.effective_rate(line.vat_treatment, line.vat_rate_override, fallback_default_rate)
        base, vat = split_line(_amount(line), rate, pricing_mode)

        subtotal = round2(subtotal + base)

        row_base, row_vat = per_rate.get(rate, (ZERO, ZERO))
        per_rate[rate] = (round2(row_base + base), round2(row_vat + vat))

        if line.vat_treatment in NOTICE_ORDER:
            triggered.add(line.vat_treatment)

    breakdown = tuple(
        VatBreakdownRow(rate=rate, base=base, vat=vat) for rate, (base, vat) in sorted(per_rate.items())
    )
    vat_amount = round2(sum((row.vat for row in breakdown), ZERO))
    total = round2(subtotal + vat_amount)

    notices = []
    for treatment in NOTICE_ORDER:
        if treatment in triggered:
            notice = table.notice_for(treatment)
            if notice:
                notices.append(notice)

    return DocumentTotals(
        subtotal=subtotal,
        vat_amount=vat_amount,
        total=total,
        breakdown=breakdown,
        notices=tuple(notices),
    )


def _amount(line: LineItem) -> Decimal:
    with localcontext(MONEY_CONTEXT):
        return line.quantity * line.unit_price
