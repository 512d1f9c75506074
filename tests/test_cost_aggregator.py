import pytest

from modules.costing.cost import allocate, compute_product_cost, labor_line_cost, material_line_cost
from modules.costing.types import LaborLine, MaterialLine, OtherCostLine, ProductCostProfile


def build_profile(batch_size=1, materials=(), labor=(), other=()):
    return ProductCostProfile(
        batch_size=batch_size,
        materials=tuple(materials),
        labor_lines=tuple(labor),
        other_cost_lines=tuple(other),
    )


def test_single_material_cost():
    profile = build_profile(materials=[MaterialLine(name="Wax", quantity=2, price_per_unit=5)])

    result = compute_product_cost(profile)

    assert result.materials == pytest.approx(10.0)
    assert result.labor == 0
    assert result.other == 0
    assert result.total == pytest.approx(10.0)


def test_units_made_spreads_material_over_items():
    line = MaterialLine(name="Fabric roll", quantity=1, price_per_unit=24, units_made=8)
    assert material_line_cost(line) == pytest.approx(3.0)


def test_units_made_below_one_is_treated_as_one():
    line = MaterialLine(name="Thread", quantity=3, price_per_unit=2, units_made=0)
    assert material_line_cost(line) == pytest.approx(6.0)


def test_batch_labor_is_split_across_batch():
    labor = LaborLine(activity="Pouring", time_spent_minutes=120, hourly_rate=30, per_unit=False)
    profile = build_profile(batch_size=4, labor=[labor])

    assert labor_line_cost(labor) == pytest.approx(60.0)
    assert compute_product_cost(profile).labor == pytest.approx(15.0)


@pytest.mark.parametrize("batch_size", [1, 3, 50])
def test_per_unit_labor_ignores_batch_size(batch_size):
    labor = LaborLine(activity="Labeling", time_spent_minutes=6, hourly_rate=20, per_unit=True)
    result = compute_product_cost(build_profile(batch_size=batch_size, labor=[labor]))
    assert result.labor == pytest.approx(2.0)


def test_other_costs_follow_the_same_split():
    other = [
        OtherCostLine(item="Jar", quantity=1, cost=1.5, per_unit=True),
        OtherCostLine(item="Market stall fee", quantity=1, cost=40, per_unit=False),
    ]
    result = compute_product_cost(build_profile(batch_size=20, other=other))
    assert result.other == pytest.approx(1.5 + 2.0)


def test_total_adds_all_three_buckets():
    profile = build_profile(
        batch_size=10,
        materials=[
            MaterialLine(name="Soy wax", quantity=0.2, price_per_unit=8, unit="kg"),
            MaterialLine(name="Wick", quantity=1, price_per_unit=0.3),
        ],
        labor=[
            LaborLine(activity="Setup", time_spent_minutes=30, hourly_rate=20, per_unit=False),
            LaborLine(activity="Finishing", time_spent_minutes=3, hourly_rate=20),
        ],
        other=[OtherCostLine(item="Box", quantity=1, cost=0.9)],
    )

    result = compute_product_cost(profile)

    assert result.materials == pytest.approx(1.6 + 0.3)
    assert result.labor == pytest.approx(10 / 10 + 1.0)
    assert result.other == pytest.approx(0.9)
    assert result.total == pytest.approx(result.materials + result.labor + result.other)


def test_zero_batch_size_is_guarded():
    labor = LaborLine(activity="Setup", time_spent_minutes=60, hourly_rate=12, per_unit=False)
    result = compute_product_cost(build_profile(batch_size=0, labor=[labor]))
    assert result.labor == pytest.approx(12.0)


def test_malformed_amounts_count_as_zero():
    profile = build_profile(
        materials=[
            MaterialLine(name="Broken", quantity=float("nan"), price_per_unit=4),
            MaterialLine(name="Negative", quantity=-2, price_per_unit=4),
        ],
        labor=[LaborLine(activity="Nothing", time_spent_minutes=None, hourly_rate=25)],
    )
    result = compute_product_cost(profile)
    assert result.total == 0
    assert result.total >= 0


def test_empty_profile_costs_nothing():
    assert compute_product_cost(ProductCostProfile()).total == 0


def test_aggregation_is_idempotent():
    profile = build_profile(
        batch_size=6,
        materials=[MaterialLine(name="Clay", quantity=0.5, price_per_unit=3.3)],
        labor=[LaborLine(activity="Firing", time_spent_minutes=90, hourly_rate=18, per_unit=False)],
    )
    assert compute_product_cost(profile) == compute_product_cost(profile)


@pytest.mark.parametrize(
    "bump",
    [
        lambda p: build_profile(p.batch_size, [MaterialLine("Clay", 1.5, 3.0)], p.labor_lines, p.other_cost_lines),
        lambda p: build_profile(p.batch_size, [MaterialLine("Clay", 1.0, 4.5)], p.labor_lines, p.other_cost_lines),
        lambda p: build_profile(
            p.batch_size,
            p.materials,
            [LaborLine("Firing", 90, 25, per_unit=False)],
            p.other_cost_lines,
        ),
        lambda p: build_profile(p.batch_size, p.materials, p.labor_lines, [OtherCostLine("Glaze", 3, 2.0)]),
    ],
)
def test_raising_any_line_never_lowers_total(bump):
    base = build_profile(
        batch_size=5,
        materials=[MaterialLine("Clay", 1.0, 3.0)],
        labor=[LaborLine("Firing", 90, 18, per_unit=False)],
        other=[OtherCostLine("Glaze", 2, 2.0)],
    )
    assert compute_product_cost(bump(base)).total >= compute_product_cost(base).total


def test_allocate():
    assert allocate(60.0, per_unit=False, batch_size=4) == pytest.approx(15.0)
    assert allocate(60.0, per_unit=True, batch_size=4) == pytest.approx(60.0)
    assert allocate(60.0, per_unit=False, batch_size=0) == pytest.approx(60.0)
