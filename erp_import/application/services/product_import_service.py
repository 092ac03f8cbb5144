"""Product import service.

Runs one batch end to end: audit log row, per-record normalization,
one bulk write for the products, then price-break replacement per written
product, then the single audit log update.
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
from erp_import.application.services.record_normalizer import (
    NormalizedProduct,
    normalize_price_breaks,
    normalize_product,
)
from erp_import.domain.repositories.import_log_repository import ImportLogRepository
from erp_import.domain.repositories.product_repository import ProductRepository
from erp_import.domain.schemas.product import ProductImportResult

logger = structlog.get_logger(__name__)


def merge_duplicate_skus(products: List[NormalizedProduct]) -> List[NormalizedProduct]:
    """Collapse repeated SKUs in input order; later present fields and price breaks win.

    A single ON CONFLICT statement cannot touch the same row twice.
    """
    merged: Dict[str, NormalizedProduct] = {}
    for product in products:
        sku = product.row["sku"]
        existing = merged.get(sku)
        if existing is None:
            merged[sku] = NormalizedProduct(row=dict(product.row), price_breaks=product.price_breaks)
            continue
        existing.row.update(product.row)
        if product.price_breaks is not None:
            existing.price_breaks = product.price_breaks
    return list(merged.values())


def import_products(
    products: Any,
    product_repo: ProductRepository,
    log_repo: ImportLogRepository,
    mode: str = "upsert",
    import_price_breaks: bool = True,
    imported_by: Optional[str] = None,
    import_source: str = "api",
) -> ProductImportResult:
    products = require_batch(products, "products")
    mode = require_mode(mode)

    log = log_repo.start(len(products), imported_by, import_source)
    logger.info(
        "Product import started",
        import_log_id=log.id,
        total_records=len(products),
        mode=mode,
        import_source=import_source,
    )

    errors: List[str] = []
    failed = 0
    imported = 0
    price_breaks_imported = 0
    price_breaks_failed = 0

    validated: List[NormalizedProduct] = []
    for index, raw in enumerate(products):
        product, error = normalize_product(raw, index)
        if error:
            logger.warning("Product rejected", import_log_id=log.id, index=index, reason=error)
            errors.append(error)
            failed += 1
            continue
        validated.append(product)

    if validated:
        to_write = merge_duplicate_skus(validated) if mode == "upsert" else validated
        rows = [p.row for p in to_write]
        try:
            if mode == "upsert":
                written = product_repo.upsert_many(rows)
            else:
                written = product_repo.insert_many(rows)
        except SQLAlchemyError as e:
            logger.error("Product write failed", import_log_id=log.id, mode=mode, error=str(e))
            errors.append(f"Database error: {database_error_message(e)}")
            failed += len(validated)
            written = []
        else:
            imported = len(validated)

        if import_price_breaks and written:
            price_breaks_by_sku = {p.row["sku"]: p.price_breaks for p in to_write}
            for product_id, sku in written:
                price_breaks = price_breaks_by_sku.get(sku)
                if not price_breaks:
                    continue
                break_rows, error = normalize_price_breaks(price_breaks)
                if error:
                    logger.warning("Price breaks rejected", sku=sku, reason=error)
                    errors.append(f"Failed to import price breaks for SKU {sku}: {error}")
                    price_breaks_failed += len(price_breaks)
                    continue
                try:
                    product_repo.replace_price_breaks(product_id, break_rows)
                except SQLAlchemyError as e:
                    logger.warning("Price break replacement failed", sku=sku, error=str(e))
                    errors.append(f"Failed to import price breaks for SKU {sku}: {database_error_message(e)}")
                    price_breaks_failed += len(price_breaks)
                else:
                    price_breaks_imported += len(price_breaks)

    log_repo.finish(log, imported, failed, errors)

    price_break_summary = ""
    if price_breaks_imported or price_breaks_failed:
        price_break_summary = f" and {price_breaks_imported} price break(s)"

    logger.info(
        "Product import finished",
        import_log_id=log.id,
        imported=imported,
        failed=failed,
        price_breaks_imported=price_breaks_imported,
        price_breaks_failed=price_breaks_failed,
    )

    return ProductImportResult(
        success=failed == 0,
        message=summarize("product", imported, failed, price_break_summary),
        imported=imported,
        failed=failed,
        errors=errors or None,
        import_log_id=log.id,
        price_breaks_imported=price_breaks_imported,
        price_breaks_failed=price_breaks_failed,
    )
