from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from core.models import Base, TimestampMixin


class Product(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    sku = Column(String(128), nullable=True)
    description = Column(Text, nullable=True)
    category = Column(String(128), nullable=True)
    status = Column(String(32), nullable=False, default="draft")
    batch_size = Column(Integer, nullable=False, default=1)
    pricing_method = Column(String(16), nullable=True)
    pricing_value = Column(Float, nullable=True)
    target_price = Column(Float, nullable=True)

    materials = relationship(
        "ProductMaterial", cascade="all, delete-orphan", back_populates="product", order_by="ProductMaterial.id"
    )
    labor_costs = relationship(
        "LaborCost", cascade="all, delete-orphan", back_populates="product", order_by="LaborCost.id"
    )
    other_costs = relationship(
        "OtherCost", cascade="all, delete-orphan", back_populates="product", order_by="OtherCost.id"
    )
    variants = relationship(
        "ProductVariant", cascade="all, delete-orphan", back_populates="product", order_by="ProductVariant.id"
    )


class ProductMaterial(Base, TimestampMixin):
    __tablename__ = "product_materials"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    library_material_id = Column(Integer, ForeignKey("materials.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(255), nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)
    unit = Column(String(32), nullable=False, default="pcs")
    price_per_unit = Column(Float, nullable=False, default=0.0)
    units_made = Column(Integer, nullable=False, default=1)

    product = relationship("Product", back_populates="materials")


class LaborCost(Base, TimestampMixin):
    __tablename__ = "labor_costs"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    activity = Column(String(255), nullable=False)
    time_spent_minutes = Column(Float, nullable=False, default=0.0)
    hourly_rate = Column(Float, nullable=False, default=0.0)
    per_unit = Column(Boolean, nullable=False, default=True)

    product = relationship("Product", back_populates="labor_costs")


class OtherCost(Base, TimestampMixin):
    __tablename__ = "other_costs"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    item = Column(String(255), nullable=False)
    quantity = Column(Float, nullable=False, default=1.0)
    cost = Column(Float, nullable=False, default=0.0)
    per_unit = Column(Boolean, nullable=False, default=True)

    product = relationship("Product", back_populates="other_costs")


class ProductVariant(Base, TimestampMixin):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    sku = Column(String(128), nullable=True)
    price_override = Column(Float, nullable=True)
    cost_override = Column(Float, nullable=True)
    stock_level = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    product = relationship("Product", back_populates="variants")
    attributes = relationship(
        "VariantAttribute",
        cascade="all, delete-orphan",
        back_populates="variant",
        order_by="VariantAttribute.display_order",
    )


class VariantAttribute(Base):
    __tablename__ = "variant_attributes"

    id = Column(Integer, primary_key=True, index=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=False)
    attribute_name = Column(String(128), nullable=False)
    attribute_value = Column(String(255), nullable=False)
    display_order = Column(Integer, nullable=False, default=0)

    variant = relationship("ProductVariant", back_populates="attributes")
