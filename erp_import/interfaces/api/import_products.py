"""Product import API routes: batch, single record, file upload, logs, delete-all."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.exc import SQLAlchemyError

from erp_import.application.services.auth_service import AuthResult
from erp_import.application.services.batch import database_error_message, require_flag
from erp_import.application.services.file_transformer import archive_upload, read_records
from erp_import.application.services.product_import_service import import_products
from erp_import.application.services.record_normalizer import is_blank
from erp_import.config import get_settings
from erp_import.core.exceptions import PersistenceError, ValidationError
from erp_import.domain.repositories.import_log_repository import ImportLogRepository
from erp_import.domain.repositories.product_repository import ProductRepository
from erp_import.domain.schemas.product import ImportLogRead
from erp_import.interfaces.api.common import (
    CATCH_ALL_METHODS,
    delete_all,
    read_json_object,
    result_response,
    unknown_endpoint,
)
from erp_import.interfaces.api.deps import import_api_caller
from erp_import.interfaces.deps import get_import_log_repository, get_product_repository

settings = get_settings()
logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/import-products", tags=["Product Import"])

caller = import_api_caller("import_api", "Import API")

AVAILABLE_ENDPOINTS = [
    "POST /import-products - Batch import products",
    "POST /import-products/single - Import single product",
    "POST /import-products/upload - Import products from a CSV or XLSX file",
    "GET /import-products/logs - Get import history",
    "DELETE /import-products/all?confirm=yes-delete-all - Delete all products",
]


@router.post("")
async def import_products_batch(
    request: Request,
    auth: AuthResult = Depends(caller),
    product_repo: ProductRepository = Depends(get_product_repository),
    log_repo: ImportLogRepository = Depends(get_import_log_repository),
):
    """Body: ``{products: [...], mode: "upsert"|"insert", import_price_breaks: bool}``."""
    body = await read_json_object(request)
    result = import_products(
        body.get("products"),
        product_repo,
        log_repo,
        mode=body.get("mode", "upsert"),
        import_price_breaks=require_flag(body.get("import_price_breaks"), "import_price_breaks"),
        imported_by=auth.user_id,
    )
    return result_response(result)


@router.post("/single")
async def import_single_product(
    request: Request,
    auth: AuthResult = Depends(caller),
    product_repo: ProductRepository = Depends(get_product_repository),
    log_repo: ImportLogRepository = Depends(get_import_log_repository),
):
    product = await read_json_object(request)
    if is_blank(product.get("sku")) or is_blank(product.get("name")):
        raise ValidationError("Invalid input: 'sku' and 'name' are required")

    import_price_breaks = require_flag(product.pop("import_price_breaks", None), "import_price_breaks")
    result = import_products(
        [product],
        product_repo,
        log_repo,
        mode="upsert",
        import_price_breaks=import_price_breaks,
        imported_by=auth.user_id,
    )
    return result_response(result)


@router.post("/upload")
async def import_products_file(
    file: UploadFile = File(...),
    mode: str = Form("upsert"),
    import_price_breaks: bool = Form(True),
    auth: AuthResult = Depends(caller),
    product_repo: ProductRepository = Depends(get_product_repository),
    log_repo: ImportLogRepository = Depends(get_import_log_repository),
):
    """Upload a CSV/XLSX export; each row is one product record."""
    content = await file.read()
    records = read_records(file.filename, content)
    archive_upload(file.filename, content)
    logger.info("Product file received", filename=file.filename, rows=len(records))

    result = import_products(
        records,
        product_repo,
        log_repo,
        mode=mode,
        import_price_breaks=import_price_breaks,
        imported_by=auth.user_id,
        import_source="file",
    )
    return result_response(result)


@router.get("/logs")
def list_import_logs(
    limit: Optional[int] = Query(None, ge=1),
    auth: AuthResult = Depends(caller),
    log_repo: ImportLogRepository = Depends(get_import_log_repository),
):
    try:
        logs = log_repo.list_recent(limit or settings.DEFAULT_LOG_LIMIT)
    except SQLAlchemyError as e:
        raise PersistenceError("Failed to fetch import logs", database_error_message(e)) from e
    return {"success": True, "logs": [ImportLogRead.model_validate(log) for log in logs]}


@router.delete("/all")
def delete_all_products(
    confirm: Optional[str] = Query(None),
    auth: AuthResult = Depends(caller),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    """Deletes every product and price break. Requires ``?confirm=yes-delete-all``."""
    response = delete_all(product_repo, confirm, "products")
    logger.warning("All products deleted", deleted=response["deleted"], requested_by=auth.user_id)
    return response


@router.api_route("", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
@router.api_route("/{rest:path}", methods=CATCH_ALL_METHODS, include_in_schema=False)
def unknown_product_endpoint(auth: AuthResult = Depends(caller)):
    raise unknown_endpoint(AVAILABLE_ENDPOINTS)
