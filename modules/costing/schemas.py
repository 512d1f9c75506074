from typing import Optional

from pydantic import BaseModel, Field

from modules.costing.types import PricingMethod


class PricingPreviewRequest(BaseModel):
    method: PricingMethod
    value: float = Field(..., ge=0, description="Input for the chosen method")
    cost: float = Field(..., ge=0, description="Per-unit cost")


class PricingConvertRequest(BaseModel):
    method: PricingMethod
    price: float = Field(..., ge=0)
    cost: float = Field(..., ge=0)


class PricingMetricsRead(BaseModel):
    price: float
    profit: float
    margin: float
    markup: float
    costs_percentage: Optional[float] = None


class PricingPreviewRead(PricingMetricsRead):
    method: PricingMethod
    value: float
    break_even_price: float


class PricingConvertRead(BaseModel):
    method: PricingMethod
    value: float


class PricingMethodRead(BaseModel):
    method: PricingMethod
    description: str
