"""Per-unit cost aggregation.

Folds material, labor and other-cost lines into one per-unit product cost.
Materials are always per unit (``units_made`` already spreads a purchase over
the items it yields). Labor and other costs are either per unit or per batch;
batch-level costs are divided across ``batch_size`` units.

Every division here is guarded: ``batch_size`` and ``units_made`` below 1 count
as 1, and missing, NaN or negative amounts count as zero cost.
"""

import math
from typing import Optional

from modules.costing.types import LaborLine, MaterialLine, OtherCostLine, PerUnitCost, ProductCostProfile


def _amount(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or number < 0:
        return 0.0
    return number


def _at_least_one(value: Optional[float]) -> float:
    number = _amount(value)
    return number if number >= 1 else 1.0


def material_line_cost(line: MaterialLine) -> float:
    return _amount(line.quantity) * _amount(line.price_per_unit) / _at_least_one(line.units_made)


def labor_line_cost(line: LaborLine) -> float:
    return _amount(line.time_spent_minutes) / 60.0 * _amount(line.hourly_rate)


def other_cost_line_cost(line: OtherCostLine) -> float:
    return _amount(line.quantity) * _amount(line.cost)


def allocate(line_cost: float, per_unit: bool, batch_size: int) -> float:
    """Share of ``line_cost`` carried by a single finished unit."""
    if per_unit:
        return line_cost
    return line_cost / _at_least_one(batch_size)


def compute_product_cost(profile: ProductCostProfile) -> PerUnitCost:
    batch_size = _at_least_one(profile.batch_size)

    materials_cost = sum(material_line_cost(m) for m in profile.materials)

    labor_per_unit = sum(labor_line_cost(l) for l in profile.labor_lines if l.per_unit)
    labor_per_batch = sum(labor_line_cost(l) for l in profile.labor_lines if not l.per_unit)
    labor_cost = labor_per_unit + labor_per_batch / batch_size

    other_per_unit = sum(other_cost_line_cost(o) for o in profile.other_cost_lines if o.per_unit)
    other_per_batch = sum(other_cost_line_cost(o) for o in profile.other_cost_lines if not o.per_unit)
    other_cost = other_per_unit + other_per_batch / batch_size

    return PerUnitCost(
        materials=materials_cost,
        labor=labor_cost,
        other=other_cost,
        total=materials_cost + labor_cost + other_cost,
    )
