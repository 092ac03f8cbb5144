"""Cross reference import service.

Upserts are resolved one record at a time against the
(internal, customer, supplier) part number triple, strictly in order,
so a check-then-write pair never races with the next record.
"""

from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from erp_import.application.services.batch import (
    database_error_message,
    require_batch,
    require_mode,
    summarize,
)
from erp_import.application.services.record_normalizer import normalize_cross_reference
from erp_import.domain.repositories.cross_reference_repository import CrossReferenceRepository
from erp_import.domain.repositories.product_repository import ProductRepository
from erp_import.domain.schemas.product import ImportResult

logger = structlog.get_logger(__name__)


def resolve_product_id(row: Dict[str, Any], product_repo: ProductRepository) -> Dict[str, Any]:
    """Fill product_id from the product whose SKU is the internal part number.

    A cross reference may arrive before its product; it is stored unlinked.
    """
    if row.get("product_id") is None:
        row["product_id"] = product_repo.get_id_by_sku(row["internal_part_number"])
    return row


def import_cross_references(
    cross_references: Any,
    cross_reference_repo: CrossReferenceRepository,
    product_repo: ProductRepository,
    mode: str = "upsert",
    imported_by: Optional[str] = None,
) -> ImportResult:
    cross_references = require_batch(cross_references, "cross_references")
    mode = require_mode(mode)

    logger.info(
        "Cross reference import started",
        total_records=len(cross_references),
        mode=mode,
        imported_by=imported_by,
    )

    errors: List[str] = []
    imported = 0
    failed = 0

    validated: List[Dict[str, Any]] = []
    for index, raw in enumerate(cross_references):
        row, error = normalize_cross_reference(raw, index)
        if error:
            logger.warning("Cross reference rejected", index=index, reason=error)
            errors.append(error)
            failed += 1
            continue
        try:
            validated.append(resolve_product_id(row, product_repo))
        except SQLAlchemyError as e:
            logger.warning("Product lookup failed", internal_part_number=row["internal_part_number"], error=str(e))
            errors.append(
                f"Database error looking up product for cross reference at index {index}: "
                f"{database_error_message(e)}"
            )
            failed += 1

    if validated and mode == "upsert":
        for row in validated:
            action = "looking up"
            try:
                existing = cross_reference_repo.find_by_key(
                    row["internal_part_number"], row["customer_part_number"], row["supplier_part_number"]
                )
                action = "updating" if existing else "inserting"
                if existing:
                    cross_reference_repo.update(existing, row)
                else:
                    cross_reference_repo.create(row)
            except SQLAlchemyError as e:
                logger.warning(
                    "Cross reference write failed",
                    internal_part_number=row["internal_part_number"],
                    error=str(e),
                )
                errors.append(f"Database error {action} cross reference: {database_error_message(e)}")
                failed += 1
            else:
                imported += 1
    elif validated:
        try:
            cross_reference_repo.insert_many(validated)
        except SQLAlchemyError as e:
            logger.error("Cross reference insert failed", error=str(e))
            errors.append(f"Database error: {database_error_message(e)}")
            failed += len(validated)
        else:
            imported = len(validated)

    logger.info("Cross reference import finished", imported=imported, failed=failed)

    return ImportResult(
        success=failed == 0,
        message=summarize("cross reference", imported, failed),
        imported=imported,
        failed=failed,
        errors=errors or None,
    )
