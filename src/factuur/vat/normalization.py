from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from ..models import LineItem, VatTreatment
from ..money import to_decimal


logger = logging.getLogger(__name__)


def normalize_line(raw: LineItem | Mapping[str, object]) -> LineItem | None:
    # Storage rows use qty/vat_type/vat_rate; canonical names are accepted too.
    if isinstance(raw, LineItem):
        return raw
    if not isinstance(raw, Mapping):
        logger.debug("Skipping line of unsupported type %s", type(raw).__name__)
        return None

    quantity = to_decimal(_first(raw, "quantity", "qty"))
    unit_price = to_decimal(raw.get("unit_price"))
    if quantity is None or unit_price is None:
        logger.debug(
            "Skipping malformed line %r (quantity=%r, unit_price=%r)",
            raw.get("description"),
            _first(raw, "quantity", "qty"),
            raw.get("unit_price"),
        )
        return None

    return LineItem(
        description=_opt_str(raw.get("description")),
        quantity=quantity,
        unit=_opt_str(raw.get("unit")),
        unit_price=unit_price,
        vat_treatment=VatTreatment.parse(_first(raw, "vat_treatment", "vat_type")),
        vat_rate_override=to_decimal(_first(raw, "vat_rate_override", "vat_rate")),
    )


def normalize_lines(raws: Iterable[LineItem | Mapping[str, object]]) -> Iterator[LineItem]:
    for raw in raws:
        line = normalize_line(raw)
        if line is not None:
            yield line


def _first(raw: Mapping[str, object], *keys: str) -> object:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _opt_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
