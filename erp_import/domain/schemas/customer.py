"""Pydantic schemas for customer imports (customer, addresses, contacts)."""

from typing import List, Optional

from erp_import.domain.schemas.product import ImportRecord


class CustomerAddressInput(ImportRecord):
    site_use_id: Optional[str] = None
    address_line_1: str
    address_line_2: Optional[str] = None
    address_line_3: Optional[str] = None
    city: str
    postal_code: str
    state: Optional[str] = None
    country: str
    is_shipping: Optional[bool] = False
    is_billing: Optional[bool] = False
    is_primary: Optional[bool] = False
    is_credit_hold: Optional[bool] = False
    primary_warehouse: Optional[str] = None
    second_warehouse: Optional[str] = None
    third_warehouse: Optional[str] = None
    fourth_warehouse: Optional[str] = None
    fifth_warehouse: Optional[str] = None


class CustomerContactInput(ImportRecord):
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    title: Optional[str] = None
    department: Optional[str] = None
    is_primary: Optional[bool] = False
    notes: Optional[str] = None


class CustomerInput(ImportRecord):
    customer_number: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    segment: Optional[str] = None
    contract_number: Optional[str] = None
    payment_terms: Optional[str] = None
    currency: Optional[str] = None
    tier: Optional[str] = None
    sales_manager: Optional[str] = None
    sales_rep: Optional[str] = None
    addresses: Optional[List[CustomerAddressInput]] = None
    contacts: Optional[List[CustomerContactInput]] = None
