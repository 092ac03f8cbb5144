"""Pydantic schemas for cross reference imports."""

from typing import Optional

from erp_import.domain.schemas.product import ImportRecord


class CrossReferenceInput(ImportRecord):
    internal_part_number: Optional[str] = None
    customer_part_number: Optional[str] = None
    supplier_part_number: Optional[str] = None
    supplier: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    customer_id: Optional[str] = None
    product_id: Optional[int] = None
    ordered_item_id: Optional[str] = None
