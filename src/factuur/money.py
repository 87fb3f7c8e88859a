from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext


CENT = Decimal("0.01")
ZERO = Decimal("0")

# Overflow, division by zero and out-of-range quantize yield Infinity/NaN
# instead of raising; round2 turns those into zero.
MONEY_CONTEXT = Context(prec=28, traps=[])


def round2(value: Decimal) -> Decimal:
    with localcontext(MONEY_CONTEXT):
        out = value.quantize(CENT, rounding=ROUND_HALF_UP) if value.is_finite() else value
    if not out.is_finite():
        return ZERO.quantize(CENT)
    return out


def to_decimal(value: object) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        out = value
    elif isinstance(value, int):
        out = Decimal(value)
    elif isinstance(value, float):
        out = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            out = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    if not out.is_finite():
        return None
    return out
