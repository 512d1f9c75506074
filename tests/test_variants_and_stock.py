import pytest

from modules.costing.stock import check_stock, shortfalls, stock_decrements
from modules.costing.types import MaterialLine, VariantAttribute, VariantOverride
from modules.costing.variants import effective_cost_and_price, summarize_variants, variant_display_name


def test_variant_without_overrides_uses_base_values():
    effective = effective_cost_and_price(12.5, 30.0, VariantOverride(name="Default"))
    assert effective.cost == 12.5
    assert effective.price == 30.0


def test_cost_override_keeps_base_price():
    effective = effective_cost_and_price(10.0, 20.0, VariantOverride(name="Small", cost_override=7))
    assert effective.cost == 7
    assert effective.price == 20.0


def test_overrides_are_absolute_not_deltas():
    override = VariantOverride(name="Large", cost_override=0, price_override=45)
    effective = effective_cost_and_price(10.0, 20.0, override)
    assert effective.cost == 0
    assert effective.price == 45


def test_inactive_variant_is_still_priced():
    override = VariantOverride(name="Retired", price_override=9, is_active=False)
    assert effective_cost_and_price(4.0, 12.0, override).price == 9


def test_summary_excludes_inactive_variants():
    summary = summarize_variants(
        [
            VariantOverride(name="S", stock_level=4),
            VariantOverride(name="M", stock_level=6),
            VariantOverride(name="L", stock_level=100, is_active=False),
        ]
    )
    assert summary.active_count == 2
    assert summary.inactive_count == 1
    assert summary.total_stock == 10


def test_display_name_follows_display_order():
    variant = VariantOverride(
        name="Variant 1",
        attributes=(
            VariantAttribute("Color", "Red", display_order=1),
            VariantAttribute("Size", "Large", display_order=0),
        ),
    )
    assert variant_display_name(variant) == "Large / Red"
    assert variant_display_name(VariantOverride(name="Plain")) == "Plain"


def test_stock_shortfall_for_a_batch():
    lines = [MaterialLine(name="Beeswax", quantity=3, price_per_unit=2, unit="g", library_material_id=1)]

    results = check_stock(lines, 10, {1: 12.0}.get)

    assert len(results) == 1
    result = results[0]
    assert result.required_quantity == pytest.approx(30.0)
    assert result.current_stock == pytest.approx(12.0)
    assert result.shortfall == pytest.approx(18.0)
    assert result.unit == "g"
    assert not result.sufficient


def test_covered_lines_report_zero_shortfall():
    lines = [MaterialLine(name="Wick", quantity=1, price_per_unit=0.2, library_material_id=2)]
    results = check_stock(lines, 5, {2: 40}.get)
    assert results[0].shortfall == 0
    assert shortfalls(results) == []


def test_unknown_material_means_no_stock():
    lines = [MaterialLine(name="Dye", quantity=0.5, price_per_unit=1, library_material_id=99)]
    results = check_stock(lines, 4, {}.get)
    assert results[0].current_stock == 0
    assert results[0].shortfall == pytest.approx(2.0)


def test_untracked_lines_are_skipped():
    lines = [
        MaterialLine(name="Scrap fabric", quantity=1, price_per_unit=0),
        MaterialLine(name="Button", quantity=4, price_per_unit=0.1, library_material_id=5),
    ]
    results = check_stock(lines, 2, {5: 3}.get)
    assert [r.material_name for r in results] == ["Button"]
    assert [r.material_name for r in shortfalls(results)] == ["Button"]


def test_decrements_sum_lines_sharing_a_material():
    lines = [
        MaterialLine(name="Wax (body)", quantity=0.2, price_per_unit=8, library_material_id=1),
        MaterialLine(name="Wax (top)", quantity=0.05, price_per_unit=8, library_material_id=1),
        MaterialLine(name="Label", quantity=1, price_per_unit=0.1),
    ]
    assert stock_decrements(lines, 10) == {1: pytest.approx(2.5)}
