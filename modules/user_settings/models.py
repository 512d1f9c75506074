from sqlalchemy import Column, Float, Integer, JSON, String

from core.models import Base, TimestampMixin


class UserSettings(Base, TimestampMixin):
    """Workshop-wide preferences; the service keeps a single row."""

    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, index=True)
    currency = Column(String(3), nullable=False, default="USD")
    tax_percentage = Column(Float, nullable=False, default=0.0)
    revenue_goal = Column(Float, nullable=True)
    labor_hourly_cost = Column(Float, nullable=True)
    unit_system = Column(String(16), nullable=False, default="metric")
    units = Column(JSON, nullable=False, default=list)
