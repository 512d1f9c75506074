from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MaterialSortField(str, Enum):
    NAME = "name"
    PRICE = "price"
    PRICE_PER_UNIT = "price_per_unit"
    STOCK_LEVEL = "stock_level"
    CATEGORY = "category"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class MaterialBase(BaseModel):
    name: str = Field(..., min_length=1, description="Material name")
    price: float = Field(..., ge=0, description="Purchase price of one pack")
    quantity: float = Field(0, ge=0, description="Amount contained in one pack")
    unit: str = Field(..., min_length=1, description="Unit label")
    price_per_unit: Optional[float] = Field(None, ge=0, description="Derived from price / quantity when omitted")
    details: Optional[str] = None
    supplier: Optional[str] = None
    supplier_link: Optional[str] = None
    stock_level: float = Field(0, ge=0)
    reorder_point: float = Field(0, ge=0)
    last_purchased_date: Optional[date] = None
    last_purchased_price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None

    @field_validator("supplier_link")
    @classmethod
    def validate_supplier_link(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError("supplier_link must be an http(s) URL")
        return v

    @model_validator(mode="after")
    def derive_price_per_unit(self):
        if self.price_per_unit is None:
            self.price_per_unit = self.price / self.quantity if self.quantity > 0 else self.price
        return self


class MaterialCreate(MaterialBase):
    pass


class MaterialUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = Field(None, min_length=1)
    price_per_unit: Optional[float] = Field(None, ge=0)
    details: Optional[str] = None
    supplier: Optional[str] = None
    supplier_link: Optional[str] = None
    stock_level: Optional[float] = Field(None, ge=0)
    reorder_point: Optional[float] = Field(None, ge=0)
    last_purchased_date: Optional[date] = None
    last_purchased_price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None


class MaterialRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: float
    quantity: float
    unit: str
    price_per_unit: float
    details: Optional[str] = None
    supplier: Optional[str] = None
    supplier_link: Optional[str] = None
    stock_level: float
    reorder_point: float
    last_purchased_date: Optional[date] = None
    last_purchased_price: Optional[float] = None
    category: Optional[str] = None
    is_low_stock: bool
