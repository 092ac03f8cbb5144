"""Product and price-break domain models, mapped to 'products' and 'price_breaks'."""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from erp_import.infrastructure.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Business key
    sku = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(500), nullable=False)

    # Defaults apply only when a new row is created and the ERP omitted the field
    description = Column(Text, nullable=True)
    category = Column(String(200), nullable=True, default="Uncategorized")
    supplier = Column(String(200), nullable=True, default="Unknown")
    supplier_email = Column(String(255), nullable=True)
    unit_cost = Column(Float, nullable=True, default=0)
    list_price = Column(Float, nullable=True, default=0)
    lead_time_days = Column(Integer, nullable=True, default=0)
    lead_time_text = Column(String(200), nullable=True)
    warehouse = Column(String(100), nullable=True, default="main")
    status = Column(String(50), nullable=True, default="active")  # active, inactive, discontinued
    cost_effective_from = Column(Date, nullable=True)
    cost_effective_to = Column(Date, nullable=True)
    buyer = Column(String(200), nullable=True)
    category_set = Column(String(200), nullable=True)
    assignment = Column(String(200), nullable=True)
    long_description = Column(Text, nullable=True)
    item_type = Column(String(100), nullable=True)
    unit_of_measure = Column(String(50), nullable=True)
    moq = Column(Float, nullable=True)
    min_quantity = Column(Float, nullable=True)
    max_quantity = Column(Float, nullable=True)
    weight = Column(Float, nullable=True)
    length = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    fleet = Column(String(200), nullable=True)
    country_of_origin = Column(String(100), nullable=True)
    tariff_amount = Column(Float, nullable=True)
    cs_notes = Column(Text, nullable=True)
    average_lead_time = Column(Float, nullable=True)
    rep_code = Column(String(100), nullable=True)
    rep_by = Column(String(200), nullable=True)
    revision = Column(String(50), nullable=True)
    inventory_item_id = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    price_breaks = relationship("PriceBreak", back_populates="product", passive_deletes=True)

    def __repr__(self):
        return f"<Product {self.sku} - {self.name}>"


class PriceBreak(Base):
    __tablename__ = "price_breaks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    min_quantity = Column(Float, nullable=False)
    max_quantity = Column(Float, nullable=False)
    unit_cost = Column(Float, nullable=False)
    description = Column(String(500), nullable=True)
    discount_percent = Column(Float, nullable=True)
    effective_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product", back_populates="price_breaks")

    def __repr__(self):
        return f"<PriceBreak product={self.product_id} {self.min_quantity}-{self.max_quantity}>"
