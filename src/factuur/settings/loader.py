from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

import yaml

from ..models import VatTreatment
from ..money import to_decimal
from ..vat.classification import DEFAULT_TABLE, NOTICE_SETS, VatClassificationTable


logger = logging.getLogger(__name__)


class SettingsError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class BillingSettings:
    currency: str = "EUR"
    default_vat_rate: Decimal = Decimal("21")
    prices_include_vat: bool = False
    notice_language: str = "en"


@dataclass(frozen=True, slots=True)
class Settings:
    billing: BillingSettings = field(default_factory=BillingSettings)
    vat_table: VatClassificationTable = DEFAULT_TABLE

    @classmethod
    def load_from_dir(cls, config_dir: Path) -> "Settings":
        billing_raw = _load_yaml(config_dir / "billing.yml") or {}
        vat_raw = _load_yaml(config_dir / "vat.yml") or {}

        billing = _billing_from(billing_raw, config_dir / "billing.yml")

        notices = NOTICE_SETS.get(billing.notice_language)
        if notices is None:
            raise SettingsError(
                f"Unknown notice_language {billing.notice_language!r} in {config_dir / 'billing.yml'}; "
                f"expected one of {sorted(NOTICE_SETS)}."
            )

        overrides: dict[VatTreatment, str] = {}
        raw_notices = vat_raw.get("notices") or {}
        if not isinstance(raw_notices, dict):
            raise SettingsError(
                f"notices must be a mapping of VAT treatment tag to text in {config_dir / 'vat.yml'}, "
                f"got {type(raw_notices).__name__}."
            )
        for tag, text in raw_notices.items():
            treatment = VatTreatment.parse(tag)
            if treatment is VatTreatment.STANDARD_RATE and str(tag).strip() not in {"NL_21", "STANDARD_RATE"}:
                logger.warning("Ignoring notice for unknown VAT treatment %r in %s", tag, config_dir / "vat.yml")
                continue
            overrides[treatment] = str(text)

        table = VatClassificationTable(notices=notices).with_notices(overrides)
        return cls(billing=billing, vat_table=table)


def _billing_from(raw: dict, path: Path) -> BillingSettings:
    defaults = BillingSettings()

    rate = defaults.default_vat_rate
    if raw.get("default_vat_rate") is not None:
        rate = to_decimal(raw["default_vat_rate"])
        if rate is None or rate < 0:
            raise SettingsError(f"default_vat_rate must be a non-negative number in {path}.")

    prices_include_vat = raw.get("prices_include_vat", defaults.prices_include_vat)
    if not isinstance(prices_include_vat, bool):
        raise SettingsError(f"prices_include_vat must be true or false in {path}, got {prices_include_vat!r}.")

    return BillingSettings(
        currency=str(raw.get("currency") or defaults.currency),
        default_vat_rate=rate,
        prices_include_vat=prices_include_vat,
        notice_language=str(raw.get("notice_language") or defaults.notice_language),
    )


def _load_yaml(path: Path) -> dict | None:
    if not path.exists():
        logger.info("No settings file at %s, using defaults", path)
        return None
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return None
    if not isinstance(data, dict):
        raise SettingsError(f"Expected a YAML mapping at {path}, got {type(data).__name__}.")
    return data
