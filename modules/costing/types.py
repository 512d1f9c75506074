"""Value types consumed and produced by the costing engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class PricingMethod(str, Enum):
    MARKUP = "markup"
    PRICE = "price"
    PROFIT = "profit"
    MARGIN = "margin"

    @property
    def description(self) -> str:
        return _METHOD_DESCRIPTIONS[self]


_METHOD_DESCRIPTIONS = {
    PricingMethod.MARKUP: "Markup percentage applied to cost. Price = Cost × (1 + Markup%).",
    PricingMethod.PRICE: "Fixed selling price. Profit and margin are calculated from it.",
    PricingMethod.PROFIT: "Desired profit amount per unit. Price = Cost + Profit.",
    PricingMethod.MARGIN: "Desired profit margin percentage. Price = Cost ÷ (1 - Margin%).",
}


@dataclass(frozen=True)
class MaterialLine:
    name: str
    quantity: float
    price_per_unit: float
    unit: str = "pcs"
    units_made: int = 1
    library_material_id: Optional[int] = None


@dataclass(frozen=True)
class LaborLine:
    activity: str
    time_spent_minutes: float
    hourly_rate: float
    per_unit: bool = True


@dataclass(frozen=True)
class OtherCostLine:
    item: str
    quantity: float
    cost: float
    per_unit: bool = True


@dataclass(frozen=True)
class ProductCostProfile:
    batch_size: int = 1
    materials: Tuple[MaterialLine, ...] = ()
    labor_lines: Tuple[LaborLine, ...] = ()
    other_cost_lines: Tuple[OtherCostLine, ...] = ()


@dataclass(frozen=True)
class PerUnitCost:
    materials: float
    labor: float
    other: float
    total: float


@dataclass(frozen=True)
class PricingSpec:
    method: PricingMethod
    value: float
    resulting_price: float


@dataclass(frozen=True)
class PricingMetrics:
    price: float
    profit: float
    margin: float
    markup: float
    costs_percentage: Optional[float]


@dataclass(frozen=True)
class VariantAttribute:
    attribute_name: str
    attribute_value: str
    display_order: int = 0


@dataclass(frozen=True)
class VariantOverride:
    name: str
    sku: Optional[str] = None
    price_override: Optional[float] = None
    cost_override: Optional[float] = None
    stock_level: int = 0
    is_active: bool = True
    attributes: Tuple[VariantAttribute, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EffectiveVariant:
    cost: float
    price: float


@dataclass(frozen=True)
class VariantSummary:
    active_count: int
    inactive_count: int
    total_stock: int


@dataclass(frozen=True)
class StockCheckResult:
    material_name: str
    current_stock: float
    required_quantity: float
    shortfall: float
    unit: str
    library_material_id: Optional[int] = None

    @property
    def sufficient(self) -> bool:
        return self.shortfall <= 0
