from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer


# Money and rates stay Decimal in Python and go out as plain JSON numbers.
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class VatTreatment(str, Enum):
    STANDARD_RATE = "NL_21"
    REDUCED_RATE = "NL_9_WONING"
    DOMESTIC_REVERSE_CHARGE = "NL_REVERSE_CHARGE"
    INTRA_COMMUNITY_REVERSE_CHARGE = "EU_B2B_REVERSE_CHARGE"
    OUTSIDE_SCOPE_NON_EU = "NON_EU_OUTSIDE_SCOPE"
    FOREIGN_LOCAL_RATE = "FOREIGN_LOCAL_VAT"

    @classmethod
    def parse(cls, value: object) -> "VatTreatment":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.STANDARD_RATE
        tag = value.strip()
        for member in cls:
            if tag == member.value or tag.upper() == member.name:
                return member
        return cls.STANDARD_RATE


class PricingMode(str, Enum):
    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"

    @classmethod
    def from_flag(cls, prices_include_vat: bool) -> "PricingMode":
        return cls.INCLUSIVE if prices_include_vat else cls.EXCLUSIVE


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str | None = None
    quantity: Amount
    unit: str | None = None
    unit_price: Amount
    vat_treatment: VatTreatment = VatTreatment.STANDARD_RATE
    vat_rate_override: Amount | None = None


class VatBreakdownRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate: Amount
    base: Amount
    vat: Amount


class DocumentTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtotal: Amount
    vat_amount: Amount
    total: Amount
    breakdown: tuple[VatBreakdownRow, ...] = ()
    notices: tuple[str, ...] = ()


class DisplayVatRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate: Amount
    base: Amount
    vat: Amount
    synthetic: bool = False


class LineView(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str | None = None
    quantity: Amount
    unit: str | None = None
    unit_price: Amount
    vat_treatment: VatTreatment
    rate: Amount
    line_total: Amount


class Document(BaseModel):
    id: str | None = None
    kind: Literal["quote", "invoice"] = "invoice"
    currency: str | None = None
    prices_include_vat: bool | None = None
    vat_rate: Decimal | None = None
    items: list[dict[str, Any]] = Field(default_factory=list)


class DocumentView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    kind: Literal["quote", "invoice"] = "invoice"
    currency: str
    pricing_mode: PricingMode
    fallback_vat_rate: Amount
    lines: tuple[LineView, ...] = ()
    totals: DocumentTotals
    visible_breakdown: tuple[DisplayVatRow, ...] = ()


class CurrencySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    currency: str
    document_count: int
    subtotal: Amount
    vat_amount: Amount
    total: Amount


class DocumentsSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    document_count: int = 0
    currencies: tuple[CurrencySummary, ...] = ()
