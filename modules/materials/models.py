from sqlalchemy import Column, Date, Float, Integer, String, Text

from core.models import Base, TimestampMixin


class Material(Base, TimestampMixin):
    """A stock-tracked entry in the material library."""

    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    price = Column(Float, nullable=False, default=0.0)
    quantity = Column(Float, nullable=False, default=0.0)
    unit = Column(String(32), nullable=False, default="pcs")
    price_per_unit = Column(Float, nullable=False, default=0.0)
    details = Column(Text, nullable=True)
    supplier = Column(String(255), nullable=True)
    supplier_link = Column(String(1024), nullable=True)
    stock_level = Column(Float, nullable=False, default=0.0)
    reorder_point = Column(Float, nullable=False, default=0.0)
    last_purchased_date = Column(Date, nullable=True)
    last_purchased_price = Column(Float, nullable=True)
    category = Column(String(128), nullable=True, index=True)

    @property
    def is_low_stock(self) -> bool:
        return (self.stock_level or 0) <= (self.reorder_point or 0)
