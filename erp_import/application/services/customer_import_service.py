"""Customer import service: customers plus their addresses and contacts."""

from typing import Any, List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from erp_import.application.services.batch import (
    database_error_message,
    require_batch,
    require_mode,
    summarize,
)
from erp_import.application.services.record_normalizer import NormalizedCustomer, normalize_customer
from erp_import.domain.repositories.customer_repository import CustomerRepository
from erp_import.domain.schemas.product import ImportResult

logger = structlog.get_logger(__name__)


class CustomerWriteError(Exception):
    """One customer could not be written; the batch continues."""


def _write_customer(customer: NormalizedCustomer, mode: str, repo: CustomerRepository) -> None:
    """Insert or update one customer, then replace whichever child lists it carries."""
    number = customer.row["customer_number"]
    try:
        existing = repo.get_by_customer_number(number) if mode == "upsert" else None
    except SQLAlchemyError as e:
        raise CustomerWriteError(f"Database error looking up customer {number}: {database_error_message(e)}") from e

    if existing:
        try:
            repo.update(existing, customer.row)
        except SQLAlchemyError as e:
            raise CustomerWriteError(f"Failed to update customer {number}: {database_error_message(e)}") from e
    else:
        try:
            repo.create(customer.row)
        except SQLAlchemyError as e:
            raise CustomerWriteError(f"Failed to insert customer {number}: {database_error_message(e)}") from e

    try:
        if customer.addresses:
            repo.replace_addresses(number, customer.addresses)
        if customer.contacts:
            repo.replace_contacts(number, customer.contacts)
    except SQLAlchemyError as e:
        raise CustomerWriteError(f"Error processing customer {number}: {database_error_message(e)}") from e


def import_customers(
    customers: Any,
    customer_repo: CustomerRepository,
    mode: str = "upsert",
    imported_by: Optional[str] = None,
) -> ImportResult:
    customers = require_batch(customers, "customers")
    mode = require_mode(mode)

    logger.info("Customer import started", total_records=len(customers), mode=mode, imported_by=imported_by)

    errors: List[str] = []
    imported = 0
    failed = 0

    for index, raw in enumerate(customers):
        customer, error = normalize_customer(raw, index)
        if error:
            logger.warning("Customer rejected", index=index, reason=error)
            errors.append(error)
            failed += 1
            continue

        try:
            _write_customer(customer, mode, customer_repo)
        except CustomerWriteError as e:
            logger.warning("Customer write failed", customer_number=customer.row["customer_number"], error=str(e))
            errors.append(str(e))
            failed += 1
        else:
            imported += 1

    logger.info("Customer import finished", imported=imported, failed=failed)

    return ImportResult(
        success=failed == 0,
        message=summarize("customer", imported, failed),
        imported=imported,
        failed=failed,
        errors=errors or None,
    )
