"""Per-record validation and normalization for ERP import batches.

Each ``normalize_*`` function takes one raw JSON object and its index in
the batch and returns either a normalized record or a rejection message
naming the index and the offending field. Only keys present in the input
are emitted, so an UPDATE never touches a column the ERP did not send.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from erp_import.domain.schemas.cross_reference import CrossReferenceInput
from erp_import.domain.schemas.customer import CustomerInput
from erp_import.domain.schemas.product import PriceBreakInput, ProductInput

# Customer columns that are NOT NULL with an insert default; a null in the input means "use the default"
CUSTOMER_DEFAULTED_FIELDS = ("type", "segment", "currency")


@dataclass
class NormalizedProduct:
    row: Dict[str, Any]
    price_breaks: Optional[List[Any]] = None


@dataclass
class NormalizedCustomer:
    row: Dict[str, Any]
    addresses: List[Dict[str, Any]] = field(default_factory=list)
    contacts: List[Dict[str, Any]] = field(default_factory=list)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _describe_schema_error(label: str, index: int, error: SchemaError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "record"
    return f"{label} at index {index}: Invalid value for field '{location}': {first.get('msg')}"


def _validate(
    schema: Type[BaseModel], raw: Dict[str, Any], label: str, index: int
) -> Tuple[Optional[BaseModel], Optional[str]]:
    try:
        return schema.model_validate(raw), None
    except SchemaError as e:
        return None, _describe_schema_error(label, index, e)


def normalize_product(raw: Any, index: int) -> Tuple[Optional[NormalizedProduct], Optional[str]]:
    if not isinstance(raw, dict):
        return None, f"Product at index {index}: Record must be an object"
    if is_blank(raw.get("sku")) or is_blank(raw.get("name")):
        return None, f"Product at index {index}: Missing required field 'sku' or 'name'"

    record, error = _validate(ProductInput, raw, "Product", index)
    if error:
        return None, error

    row = record.model_dump(exclude_unset=True, exclude={"price_breaks"})
    # Anything but an array means "no price breaks sent"
    price_breaks = record.price_breaks if isinstance(record.price_breaks, list) else None
    return NormalizedProduct(row=row, price_breaks=price_breaks), None


def normalize_price_breaks(raw: List[Any]) -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    """Validate one product's price-break list as a whole; the first bad entry rejects the set."""
    rows: List[Dict[str, Any]] = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict):
            return None, f"Price break at position {position} must be an object"
        try:
            rows.append(PriceBreakInput.model_validate(entry).model_dump(exclude_unset=True))
        except SchemaError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ())) or "record"
            return None, f"Price break at position {position}: Invalid value for field '{location}': {first.get('msg')}"
    return rows, None


def normalize_cross_reference(raw: Any, index: int) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """The customer and supplier part numbers are always emitted, as "" when missing.

    They form the upsert match key together with the internal part number,
    so null and "" must compare equal.
    """
    if not isinstance(raw, dict):
        return None, f"Cross reference at index {index}: Record must be an object"
    if is_blank(raw.get("internal_part_number")):
        return None, f"Cross reference at index {index}: Missing required field 'internal_part_number'"

    record, error = _validate(CrossReferenceInput, raw, "Cross reference", index)
    if error:
        return None, error

    row = record.model_dump(exclude_unset=True)
    row["customer_part_number"] = record.customer_part_number or ""
    row["supplier_part_number"] = record.supplier_part_number or ""
    row["usage_frequency"] = 0
    return row, None


def normalize_customer(raw: Any, index: int) -> Tuple[Optional[NormalizedCustomer], Optional[str]]:
    if not isinstance(raw, dict):
        return None, f"Customer at index {index}: Record must be an object"
    if is_blank(raw.get("customer_number")):
        return None, f"Customer at index {index}: Missing required field 'customer_number'"
    if is_blank(raw.get("name")):
        return None, f"Customer at index {index}: Missing required field 'name'"

    record, error = _validate(CustomerInput, raw, "Customer", index)
    if error:
        return None, error

    row = record.model_dump(exclude_unset=True, exclude={"addresses", "contacts"})
    for name in CUSTOMER_DEFAULTED_FIELDS:
        if name in row and row[name] is None:
            del row[name]

    return (
        NormalizedCustomer(
            row=row,
            addresses=[a.model_dump() for a in record.addresses or []],
            contacts=[c.model_dump() for c in record.contacts or []],
        ),
        None,
    )
