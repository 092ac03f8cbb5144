"""Pydantic schemas for product imports.

Input models keep track of which keys the ERP actually sent
(``model_fields_set``), so "not provided" and "explicitly null" stay
distinct all the way to the UPDATE statement.
"""

from datetime import date, datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, field_validator


class ImportRecord(BaseModel):
    """Base for ERP records: trims strings, blank strings become null."""

    model_config = {"coerce_numbers_to_str": True, "extra": "ignore"}

    @field_validator("*", mode="before")
    @classmethod
    def _strip_strings(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value


class PriceBreakInput(ImportRecord):
    min_quantity: Optional[float] = None
    max_quantity: Optional[float] = None
    unit_cost: Optional[float] = None
    description: Optional[str] = None
    discount_percent: Optional[float] = None
    effective_date: Optional[date] = None


class ProductInput(ImportRecord):
    sku: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    supplier: Optional[str] = None
    supplier_email: Optional[str] = None
    unit_cost: Optional[float] = None
    list_price: Optional[float] = None
    lead_time_days: Optional[int] = None
    lead_time_text: Optional[str] = None
    warehouse: Optional[str] = None
    status: Optional[Literal["active", "inactive", "discontinued"]] = None
    cost_effective_from: Optional[date] = None
    cost_effective_to: Optional[date] = None
    buyer: Optional[str] = None
    category_set: Optional[str] = None
    assignment: Optional[str] = None
    long_description: Optional[str] = None
    item_type: Optional[str] = None
    unit_of_measure: Optional[str] = None
    moq: Optional[float] = None
    min_quantity: Optional[float] = None
    max_quantity: Optional[float] = None
    weight: Optional[float] = None
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    fleet: Optional[str] = None
    country_of_origin: Optional[str] = None
    tariff_amount: Optional[float] = None
    cs_notes: Optional[str] = None
    average_lead_time: Optional[float] = None
    rep_code: Optional[str] = None
    rep_by: Optional[str] = None
    revision: Optional[str] = None
    inventory_item_id: Optional[str] = None
    # Validated per product in the price-break step, only when price breaks are imported
    price_breaks: Any = None


class ImportResult(BaseModel):
    success: bool
    message: str
    imported: int = 0
    failed: int = 0
    errors: Optional[List[str]] = None


class ProductImportResult(ImportResult):
    import_log_id: Optional[int] = None
    price_breaks_imported: int = 0
    price_breaks_failed: int = 0


class ImportLogRead(BaseModel):
    id: int
    import_type: str
    total_records: int
    successful_records: int
    failed_records: int
    errors: Optional[List[str]] = None
    status: str
    import_source: str
    imported_by: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
