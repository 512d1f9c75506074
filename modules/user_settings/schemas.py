from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class UnitSystem(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class SettingsRead(BaseModel):
    currency: str
    tax_percentage: float
    revenue_goal: Optional[float] = None
    labor_hourly_cost: Optional[float] = None
    unit_system: UnitSystem
    units: List[str]


class SettingsUpdate(BaseModel):
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    tax_percentage: Optional[float] = Field(None, ge=0, le=100)
    revenue_goal: Optional[float] = Field(None, ge=0)
    labor_hourly_cost: Optional[float] = Field(None, ge=0)
    unit_system: Optional[UnitSystem] = None
    units: Optional[List[str]] = Field(None, min_length=1)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v

    @field_validator("tax_percentage", "revenue_goal", "labor_hourly_cost", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        # Form fields arrive as strings; an empty one means "not set".
        if isinstance(v, str):
            v = v.strip()
            return float(v) if v else None
        return v
