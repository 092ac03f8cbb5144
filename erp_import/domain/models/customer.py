"""Customer domain models: customers with their addresses and contacts."""

from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from erp_import.infrastructure.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_number = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(500), nullable=False)
    type = Column(String(100), nullable=False, default="Commercial")
    segment = Column(String(100), nullable=False, default="General")
    contract_number = Column(String(100), nullable=True)
    payment_terms = Column(String(100), nullable=True)
    currency = Column(String(10), nullable=False, default="USD")
    tier = Column(String(50), nullable=True)
    sales_manager = Column(String(200), nullable=True)
    sales_rep = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Customer {self.customer_number} - {self.name}>"


class CustomerAddress(Base):
    __tablename__ = "customer_addresses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_number = Column(
        String(100), ForeignKey("customers.customer_number", ondelete="CASCADE"), nullable=False, index=True
    )
    site_use_id = Column(String(100), nullable=True)
    address_line_1 = Column(String(500), nullable=False)
    address_line_2 = Column(String(500), nullable=True)
    address_line_3 = Column(String(500), nullable=True)
    city = Column(String(200), nullable=False)
    postal_code = Column(String(20), nullable=False)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=False)
    is_shipping = Column(Boolean, default=False)
    is_billing = Column(Boolean, default=False)
    is_primary = Column(Boolean, default=False)
    is_credit_hold = Column(Boolean, default=False)
    primary_warehouse = Column(String(100), nullable=True)
    second_warehouse = Column(String(100), nullable=True)
    third_warehouse = Column(String(100), nullable=True)
    fourth_warehouse = Column(String(100), nullable=True)
    fifth_warehouse = Column(String(100), nullable=True)

    def __repr__(self):
        return f"<CustomerAddress {self.customer_number} - {self.city}>"


class CustomerContact(Base):
    __tablename__ = "customer_contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_number = Column(
        String(100), ForeignKey("customers.customer_number", ondelete="CASCADE"), nullable=False, index=True
    )
    first_name = Column(String(200), nullable=False)
    last_name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    title = Column(String(200), nullable=True)
    department = Column(String(200), nullable=True)
    is_primary = Column(Boolean, default=False)
    notes = Column(Text, nullable=True)

    def __repr__(self):
        return f"<CustomerContact {self.customer_number} - {self.email}>"
