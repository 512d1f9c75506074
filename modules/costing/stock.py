"""Stock feasibility for a production batch.

Only reports shortfalls; decrementing library stock is done by the product
service when a product goes on sale.
"""

from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional

from modules.costing.types import MaterialLine, StockCheckResult

StockLookup = Callable[[int], Optional[float]]


def _batch(batch_size: int) -> int:
    return batch_size if batch_size and batch_size >= 1 else 1


def required_quantity(line: MaterialLine, batch_size: int) -> float:
    return max(0.0, line.quantity or 0.0) * _batch(batch_size)


def check_stock(
    materials: Iterable[MaterialLine],
    batch_size: int,
    stock_lookup: StockLookup,
) -> List[StockCheckResult]:
    """Check every library-linked material line against on-hand stock.

    All linked lines are returned, each with its shortfall (0 when covered).
    Lines without a library material are not stock tracked and are skipped.
    A lookup miss counts as no stock at all.
    """
    results: List[StockCheckResult] = []
    for line in materials:
        if line.library_material_id is None:
            continue
        current = stock_lookup(line.library_material_id)
        current_stock = float(current) if current is not None else 0.0
        required = required_quantity(line, batch_size)
        results.append(
            StockCheckResult(
                material_name=line.name,
                current_stock=current_stock,
                required_quantity=required,
                shortfall=max(0.0, required - current_stock),
                unit=line.unit,
                library_material_id=line.library_material_id,
            )
        )
    return results


def shortfalls(results: Iterable[StockCheckResult]) -> List[StockCheckResult]:
    return [r for r in results if r.shortfall > 0]


def stock_decrements(materials: Iterable[MaterialLine], batch_size: int) -> Dict[int, float]:
    """Quantity to take out of each library material to produce one batch."""
    totals: Dict[int, float] = defaultdict(float)
    for line in materials:
        if line.library_material_id is None:
            continue
        totals[line.library_material_id] += required_quantity(line, batch_size)
    return dict(totals)
