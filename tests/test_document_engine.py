from decimal import Decimal
from pathlib import Path

import pytest

from factuur.engine import DocumentEngine
from factuur.models import Document, PricingMode
from factuur.settings.loader import Settings, SettingsError


def _write_settings(config_dir: Path, *, language: str = "en", notices: list[str] | None = None) -> None:
    config_dir.mkdir(parents=True, exist_ok=True)

    (config_dir / "billing.yml").write_text(
        "\n".join(
            [
                "version: 1",
                "currency: EUR",
                "default_vat_rate: 21",
                "prices_include_vat: true",
                f"notice_language: {language}",
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    (config_dir / "vat.yml").write_text(
        "\n".join(["version: 1", "notices:", *(notices or ["  {}"])]) + "\n",
        encoding="utf-8",
    )


def _engine(tmp_path: Path, **kwargs) -> DocumentEngine:
    config_dir = tmp_path / "config"
    _write_settings(config_dir, **kwargs)
    return DocumentEngine(settings=Settings.load_from_dir(config_dir))


def test_settings_are_loaded_from_yaml(tmp_path: Path) -> None:
    engine = _engine(tmp_path)

    assert engine.settings.billing.prices_include_vat is True
    assert engine.settings.billing.default_vat_rate == Decimal("21")


def test_missing_settings_files_fall_back_to_defaults(tmp_path: Path) -> None:
    settings = Settings.load_from_dir(tmp_path / "nowhere")

    assert settings.billing.currency == "EUR"
    assert settings.billing.default_vat_rate == Decimal("21")
    assert settings.billing.prices_include_vat is False


def test_document_values_win_over_settings(tmp_path: Path) -> None:
    engine = _engine(tmp_path)

    resolved = engine.resolve(Document(currency="USD", prices_include_vat=False, vat_rate=Decimal("9")))
    defaulted = engine.resolve(Document())

    assert (resolved.currency, resolved.pricing_mode, resolved.fallback_vat_rate) == (
        "USD",
        PricingMode.EXCLUSIVE,
        Decimal("9"),
    )
    assert (defaulted.currency, defaulted.pricing_mode, defaulted.fallback_vat_rate) == (
        "EUR",
        PricingMode.INCLUSIVE,
        Decimal("21"),
    )


def test_view_uses_shared_totals_and_skips_broken_lines(tmp_path: Path) -> None:
    engine = _engine(tmp_path)
    document = Document(
        id="inv-1",
        items=[
            {"description": "Stelwerk", "qty": "1", "unit_price": "121.00", "vat_type": "NL_21", "vat_rate": None},
            {"description": "Kapotte regel", "qty": None, "unit_price": "10"},
        ],
    )

    view = engine.view(document)

    assert view.totals == engine.totals(document)
    assert len(view.lines) == 1
    assert view.totals.subtotal == Decimal("100.00")
    assert view.totals.total == Decimal("121.00")
    assert [r.rate for r in view.visible_breakdown] == [Decimal("21")]


def test_dutch_notices(tmp_path: Path) -> None:
    engine = _engine(tmp_path, language="nl")

    totals = engine.totals(Document(items=[{"qty": 1, "unit_price": 500, "vat_type": "NL_REVERSE_CHARGE"}]))

    assert totals.notices == ("BTW verlegd (onderaanneming/bouw).",)


def test_notice_override_from_vat_yml(tmp_path: Path) -> None:
    engine = _engine(tmp_path, notices=['  EU_B2B_REVERSE_CHARGE: "Reverse charge, art. 196 VAT Directive."'])

    totals = engine.totals(Document(items=[{"qty": 1, "unit_price": 10, "vat_type": "EU_B2B_REVERSE_CHARGE"}]))

    assert totals.notices == ("Reverse charge, art. 196 VAT Directive.",)


def test_unknown_notice_language_is_rejected(tmp_path: Path) -> None:
    config_dir = tmp_path / "config"
    _write_settings(config_dir, language="de")

    with pytest.raises(SettingsError):
        Settings.load_from_dir(config_dir)


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "billing.yml").write_text("- 21\n- 9\n", encoding="utf-8")

    with pytest.raises(SettingsError):
        Settings.load_from_dir(tmp_path)


def test_quoted_boolean_flag_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "billing.yml").write_text('prices_include_vat: "false"\n', encoding="utf-8")

    with pytest.raises(SettingsError, match="billing.yml"):
        Settings.load_from_dir(tmp_path)


def test_notices_must_be_a_mapping(tmp_path: Path) -> None:
    (tmp_path / "vat.yml").write_text("notices: [a, b]\n", encoding="utf-8")

    with pytest.raises(SettingsError, match="vat.yml"):
        Settings.load_from_dir(tmp_path)


def test_summary_groups_documents_by_currency() -> None:
    engine = DocumentEngine()
    documents = [
        Document(id="a", items=[{"qty": 1, "unit_price": 100}]),
        Document(id="b", prices_include_vat=True, items=[{"qty": 1, "unit_price": 109, "vat_type": "NL_9_WONING"}]),
        Document(id="c", currency="USD", items=[{"qty": 2, "unit_price": 10, "vat_type": "NON_EU_OUTSIDE_SCOPE"}]),
        Document(id="d", items=[]),
    ]

    summary = engine.summarize(documents)

    assert summary.document_count == 4
    assert [(c.currency, c.document_count, c.subtotal, c.vat_amount, c.total) for c in summary.currencies] == [
        ("EUR", 3, Decimal("200.00"), Decimal("30.00"), Decimal("230.00")),
        ("USD", 1, Decimal("20.00"), Decimal("0.00"), Decimal("20.00")),
    ]
