"""Cross reference domain model, maps to the 'cross_references' table."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from erp_import.infrastructure.database import Base


class CrossReference(Base):
    __tablename__ = "cross_references"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Match key: (internal, customer, supplier); the last two are "" when unknown, never NULL
    internal_part_number = Column(String(100), nullable=False, index=True)
    customer_part_number = Column(String(100), nullable=False, default="", index=True)
    supplier_part_number = Column(String(100), nullable=False, default="", index=True)

    supplier = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    type = Column(String(50), nullable=True)
    customer_id = Column(String(100), nullable=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    ordered_item_id = Column(String(100), nullable=True)
    usage_frequency = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<CrossReference {self.internal_part_number} c={self.customer_part_number!r} s={self.supplier_part_number!r}>"
