"""Customer import API routes."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, Request

from erp_import.application.services.auth_service import AuthResult
from erp_import.application.services.customer_import_service import import_customers
from erp_import.application.services.record_normalizer import is_blank
from erp_import.core.exceptions import ValidationError
from erp_import.domain.repositories.customer_repository import CustomerRepository
from erp_import.interfaces.api.common import (
    CATCH_ALL_METHODS,
    delete_all,
    read_json_object,
    result_response,
    unknown_endpoint,
)
from erp_import.interfaces.api.deps import import_api_caller
from erp_import.interfaces.deps import get_customer_repository

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/import-customers", tags=["Customer Import"])

caller = import_api_caller("customer_import_api", "Customer Import API")

AVAILABLE_ENDPOINTS = [
    "POST /import-customers - Batch import customers",
    "POST /import-customers/single - Import single customer",
    "DELETE /import-customers/all?confirm=yes-delete-all - Delete all customers",
]


@router.post("")
async def import_customers_batch(
    request: Request,
    auth: AuthResult = Depends(caller),
    customer_repo: CustomerRepository = Depends(get_customer_repository),
):
    body = await read_json_object(request)
    result = import_customers(
        body.get("customers"),
        customer_repo,
        mode=body.get("mode", "upsert"),
        imported_by=auth.user_id,
    )
    return result_response(result)


@router.post("/single")
async def import_single_customer(
    request: Request,
    auth: AuthResult = Depends(caller),
    customer_repo: CustomerRepository = Depends(get_customer_repository),
):
    customer = await read_json_object(request)
    if is_blank(customer.get("customer_number")) or is_blank(customer.get("name")):
        raise ValidationError("Invalid input: 'customer_number' and 'name' are required")

    result = import_customers([customer], customer_repo, mode="upsert", imported_by=auth.user_id)
    return result_response(result)


@router.delete("/all")
def delete_all_customers(
    confirm: Optional[str] = Query(None),
    auth: AuthResult = Depends(caller),
    customer_repo: CustomerRepository = Depends(get_customer_repository),
):
    """Deletes contacts, addresses and customers, in that order."""
    response = delete_all(customer_repo, confirm, "customers")
    response["message"] = "All customers, addresses, and contacts deleted successfully"
    logger.warning("All customers deleted", deleted=response["deleted"], requested_by=auth.user_id)
    return response


@router.api_route("", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
@router.api_route("/{rest:path}", methods=CATCH_ALL_METHODS, include_in_schema=False)
def unknown_customer_endpoint(auth: AuthResult = Depends(caller)):
    raise unknown_endpoint(AVAILABLE_ENDPOINTS)
