"""Application settings and shared constants."""

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_METRIC_UNITS: List[str] = ["ml", "L", "g", "kg", "mm", "cm", "m", "m²", "pcs"]
DEFAULT_IMPERIAL_UNITS: List[str] = ["fl oz", "pt", "qt", "gal", "oz", "lb", "in", "ft", "yd", "ft²", "pcs"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "PriceMe"
    database_url: str = "sqlite:///./priceme.db"
    default_currency: str = "USD"
    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("default_currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if len(v) != 3:
            raise ValueError("default_currency must be a 3-letter ISO code")
        return v.upper()


def default_units(unit_system: str) -> List[str]:
    if unit_system == "imperial":
        return list(DEFAULT_IMPERIAL_UNITS)
    return list(DEFAULT_METRIC_UNITS)


@lru_cache
def get_settings() -> Settings:
    return Settings()
