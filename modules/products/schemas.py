from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from modules.costing.types import PricingMethod
from modules.products.types import ProductStatus


class MaterialLineBase(BaseModel):
    name: str = Field(..., min_length=1, description="Material name")
    quantity: float = Field(..., ge=0, description="Amount consumed per unit produced")
    unit: str = Field("pcs", min_length=1, description="Unit label")
    price_per_unit: float = Field(..., ge=0, description="Price of one unit")
    units_made: int = Field(1, ge=1, description="Finished items one batch of this material yields")
    library_material_id: Optional[int] = Field(None, description="Stock-tracked library material")


class MaterialLineRead(MaterialLineBase):
    id: int
    line_cost: float


class LaborLineBase(BaseModel):
    activity: str = Field(..., min_length=1)
    time_spent_minutes: float = Field(..., ge=0)
    hourly_rate: float = Field(..., ge=0)
    per_unit: bool = Field(True, description="False when the time is spent once per batch")


class LaborLineRead(LaborLineBase):
    id: int
    line_cost: float


class OtherCostLineBase(BaseModel):
    item: str = Field(..., min_length=1)
    quantity: float = Field(1, ge=0)
    cost: float = Field(..., ge=0)
    per_unit: bool = Field(True, description="False when the cost is paid once per batch")


class OtherCostLineRead(OtherCostLineBase):
    id: int
    line_cost: float


class VariantAttributeBase(BaseModel):
    attribute_name: str = Field(..., min_length=1)
    attribute_value: str = Field(..., min_length=1)
    display_order: int = Field(0, ge=0)


class VariantBase(BaseModel):
    name: str = Field(..., min_length=1)
    sku: Optional[str] = None
    price_override: Optional[float] = Field(None, ge=0)
    cost_override: Optional[float] = Field(None, ge=0)
    stock_level: int = Field(0, ge=0)
    is_active: bool = True
    attributes: List[VariantAttributeBase] = Field(default_factory=list)


class VariantRead(VariantBase):
    id: int
    display_name: str
    effective_cost: float
    effective_price: Optional[float] = None


class VariantSummaryRead(BaseModel):
    active_count: int
    inactive_count: int
    total_stock: int


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1)
    sku: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    status: ProductStatus = ProductStatus.DRAFT
    batch_size: int = Field(1, ge=1, description="Finished units per production run")
    pricing_method: Optional[PricingMethod] = None
    pricing_value: Optional[float] = Field(None, ge=0, description="Input for the chosen pricing method")
    target_price: Optional[float] = Field(None, ge=0, description="Used to derive pricing_value when it is omitted")


class ProductCreate(ProductBase):
    materials: List[MaterialLineBase] = Field(default_factory=list)
    labor_costs: List[LaborLineBase] = Field(default_factory=list)
    other_costs: List[OtherCostLineBase] = Field(default_factory=list)
    variants: List[VariantBase] = Field(default_factory=list)
    stock_batch_size: Optional[int] = Field(
        None, ge=1, description="Batch size used for the stock decrement when the product goes on sale"
    )


class ProductUpdate(ProductCreate):
    pass


class PricingUpdate(BaseModel):
    method: PricingMethod
    value: float = Field(..., ge=0)


class StatusUpdate(BaseModel):
    status: ProductStatus
    stock_batch_size: Optional[int] = Field(None, ge=1)


class CostingRead(BaseModel):
    materials_cost: float
    labor_cost: float
    other_cost: float
    product_cost: float


class PricingRead(BaseModel):
    method: Optional[PricingMethod] = None
    value: Optional[float] = None
    price: Optional[float] = None
    profit: Optional[float] = None
    margin: Optional[float] = None
    markup: Optional[float] = None
    costs_percentage: Optional[float] = None
    break_even_price: float


class ProductSummaryRead(ProductBase):
    id: int
    costing: CostingRead
    pricing: PricingRead
    variant_summary: VariantSummaryRead
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductRead(ProductSummaryRead):
    materials: List[MaterialLineRead] = Field(default_factory=list)
    labor_costs: List[LaborLineRead] = Field(default_factory=list)
    other_costs: List[OtherCostLineRead] = Field(default_factory=list)
    variants: List[VariantRead] = Field(default_factory=list)


class StockCheckLineRead(BaseModel):
    material_name: str
    library_material_id: Optional[int] = None
    unit: str
    current_stock: float
    required_quantity: float
    shortfall: float


class StockCheckRead(BaseModel):
    product_id: int
    batch_size: int
    sufficient: bool
    lines: List[StockCheckLineRead]
