from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal
from types import MappingProxyType

from ..models import VatTreatment
from ..money import to_decimal


ZERO_RATE_TREATMENTS = frozenset(
    {
        VatTreatment.DOMESTIC_REVERSE_CHARGE,
        VatTreatment.INTRA_COMMUNITY_REVERSE_CHARGE,
        VatTreatment.OUTSIDE_SCOPE_NON_EU,
    }
)

# Order in which notices appear on a document.
NOTICE_ORDER = (
    VatTreatment.DOMESTIC_REVERSE_CHARGE,
    VatTreatment.INTRA_COMMUNITY_REVERSE_CHARGE,
    VatTreatment.OUTSIDE_SCOPE_NON_EU,
)

NOTICES_EN: Mapping[VatTreatment, str] = MappingProxyType(
    {
        VatTreatment.DOMESTIC_REVERSE_CHARGE: "VAT reverse-charged (subcontracting/construction).",
        VatTreatment.INTRA_COMMUNITY_REVERSE_CHARGE: "VAT reverse-charged – intra-Community supply (EU B2B).",
        VatTreatment.OUTSIDE_SCOPE_NON_EU: "Place of supply outside the home country (outside EU).",
    }
)

NOTICES_NL: Mapping[VatTreatment, str] = MappingProxyType(
    {
        VatTreatment.DOMESTIC_REVERSE_CHARGE: "BTW verlegd (onderaanneming/bouw).",
        VatTreatment.INTRA_COMMUNITY_REVERSE_CHARGE: "BTW verlegd – intracommunautaire dienst (EU B2B).",
        VatTreatment.OUTSIDE_SCOPE_NON_EU: "Plaats van dienst buiten Nederland (buiten EU).",
    }
)

NOTICE_SETS: Mapping[str, Mapping[VatTreatment, str]] = MappingProxyType({"en": NOTICES_EN, "nl": NOTICES_NL})


@dataclass(frozen=True, slots=True)
class VatClassificationTable:
    standard_rate: Decimal = Decimal("21")
    reduced_rate: Decimal = Decimal("9")
    notices: Mapping[VatTreatment, str] = field(default_factory=lambda: NOTICES_EN)

    def with_notices(self, overrides: Mapping[VatTreatment, str]) -> "VatClassificationTable":
        merged = dict(self.notices)
        merged.update(overrides)
        return replace(self, notices=MappingProxyType(merged))

    def is_zero_rate(self, treatment: VatTreatment) -> bool:
        return treatment in ZERO_RATE_TREATMENTS

    def effective_rate(
        self,
        treatment: VatTreatment,
        override_rate: object = None,
        fallback_default_rate: object = None,
    ) -> Decimal:
        if treatment in ZERO_RATE_TREATMENTS:
            return Decimal("0")

        override = to_decimal(override_rate)
        if override is not None and override >= 0:
            return override

        if treatment is VatTreatment.REDUCED_RATE:
            return self.reduced_rate

        # STANDARD_RATE and FOREIGN_LOCAL_RATE without an override
        fallback = to_decimal(fallback_default_rate)
        return fallback if fallback is not None else self.standard_rate

    def notice_for(self, treatment: VatTreatment) -> str | None:
        return self.notices.get(treatment)


DEFAULT_TABLE = VatClassificationTable()


def classify(
    treatment: object,
    override_rate: object = None,
    fallback_default_rate: object = None,
    *,
    table: VatClassificationTable = DEFAULT_TABLE,
) -> Decimal:
    return table.effective_rate(VatTreatment.parse(treatment), override_rate, fallback_default_rate)


def notice_for(treatment: object, *, table: VatClassificationTable = DEFAULT_TABLE) -> str | None:
    return table.notice_for(VatTreatment.parse(treatment))
