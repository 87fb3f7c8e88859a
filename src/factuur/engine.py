from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from .models import (
    CurrencySummary,
    Document,
    DocumentsSummary,
    DocumentTotals,
    DocumentView,
    PricingMode,
)
from .money import ZERO, round2, to_decimal
from .presentation import line_view, visible_breakdown
from .project_paths import ProjectPaths
from .settings.loader import Settings
from .vat.aggregation import aggregate
from .vat.normalization import normalize_lines


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedDefaults:
    currency: str
    pricing_mode: PricingMode
    fallback_vat_rate: Decimal


@dataclass(frozen=True, slots=True)
class DocumentEngine:
    settings: Settings = field(default_factory=Settings)

    @classmethod
    def detect(cls) -> "DocumentEngine":
        paths = ProjectPaths.detect()
        return cls(settings=Settings.load_from_dir(paths.config_dir))

    def resolve(self, document: Document) -> ResolvedDefaults:
        billing = self.settings.billing

        rate = to_decimal(document.vat_rate)
        if rate is None:
            rate = billing.default_vat_rate

        prices_include_vat = document.prices_include_vat
        if prices_include_vat is None:
            prices_include_vat = billing.prices_include_vat

        return ResolvedDefaults(
            currency=document.currency or billing.currency,
            pricing_mode=PricingMode.from_flag(prices_include_vat),
            fallback_vat_rate=rate,
        )

    def totals(self, document: Document) -> DocumentTotals:
        resolved = self.resolve(document)
        return aggregate(
            document.items,
            resolved.pricing_mode,
            resolved.fallback_vat_rate,
            table=self.settings.vat_table,
        )

    def view(self, document: Document) -> DocumentView:
        resolved = self.resolve(document)
        lines = list(normalize_lines(document.items))
        if len(lines) != len(document.items):
            logger.warning(
                "Document %s: skipped %d malformed line(s)",
                document.id or "<unsaved>",
                len(document.items) - len(lines),
            )

        totals = aggregate(
            lines,
            resolved.pricing_mode,
            resolved.fallback_vat_rate,
            table=self.settings.vat_table,
        )
        return DocumentView(
            id=document.id,
            kind=document.kind,
            currency=resolved.currency,
            pricing_mode=resolved.pricing_mode,
            fallback_vat_rate=resolved.fallback_vat_rate,
            lines=tuple(
                line_view(line, resolved.fallback_vat_rate, table=self.settings.vat_table) for line in lines
            ),
            totals=totals,
            visible_breakdown=visible_breakdown(totals, resolved.fallback_vat_rate),
        )

    def summarize(self, documents: Iterable[Document]) -> DocumentsSummary:
        per_currency: dict[str, tuple[int, Decimal, Decimal, Decimal]] = {}
        count = 0
        for document in documents:
            count += 1
            currency = self.resolve(document).currency
            totals = self.totals(document)
            n, subtotal, vat_amount, total = per_currency.get(currency, (0, ZERO, ZERO, ZERO))
            per_currency[currency] = (
                n + 1,
                round2(subtotal + totals.subtotal),
                round2(vat_amount + totals.vat_amount),
                round2(total + totals.total),
            )

        return DocumentsSummary(
            document_count=count,
            currencies=tuple(
                CurrencySummary(
                    currency=currency,
                    document_count=n,
                    subtotal=subtotal,
                    vat_amount=vat_amount,
                    total=total,
                )
                for currency, (n, subtotal, vat_amount, total) in sorted(per_currency.items())
            ),
        )
