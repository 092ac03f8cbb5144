"""Cross reference import API routes."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile

from erp_import.application.services.auth_service import AuthResult
from erp_import.application.services.cross_reference_import_service import import_cross_references
from erp_import.application.services.file_transformer import archive_upload, read_records
from erp_import.application.services.record_normalizer import is_blank
from erp_import.core.exceptions import ValidationError
from erp_import.domain.repositories.cross_reference_repository import CrossReferenceRepository
from erp_import.domain.repositories.product_repository import ProductRepository
from erp_import.interfaces.api.common import (
    CATCH_ALL_METHODS,
    delete_all,
    read_json_object,
    result_response,
    unknown_endpoint,
)
from erp_import.interfaces.api.deps import import_api_caller
from erp_import.interfaces.deps import get_cross_reference_repository, get_product_repository

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/import-cross-references", tags=["Cross Reference Import"])

caller = import_api_caller("cross_ref_import_api", "Cross Reference Import API")

AVAILABLE_ENDPOINTS = [
    "POST /import-cross-references - Batch import cross references",
    "POST /import-cross-references/single - Import single cross reference",
    "POST /import-cross-references/upload - Import cross references from a CSV or XLSX file",
    "DELETE /import-cross-references/all?confirm=yes-delete-all - Delete all cross references",
]


@router.post("")
async def import_cross_references_batch(
    request: Request,
    auth: AuthResult = Depends(caller),
    cross_reference_repo: CrossReferenceRepository = Depends(get_cross_reference_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    body = await read_json_object(request)
    result = import_cross_references(
        body.get("cross_references"),
        cross_reference_repo,
        product_repo,
        mode=body.get("mode", "upsert"),
        imported_by=auth.user_id,
    )
    return result_response(result)


@router.post("/single")
async def import_single_cross_reference(
    request: Request,
    auth: AuthResult = Depends(caller),
    cross_reference_repo: CrossReferenceRepository = Depends(get_cross_reference_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    cross_reference = await read_json_object(request)
    if is_blank(cross_reference.get("internal_part_number")):
        raise ValidationError("Invalid input: 'internal_part_number' is required")

    result = import_cross_references(
        [cross_reference],
        cross_reference_repo,
        product_repo,
        mode="upsert",
        imported_by=auth.user_id,
    )
    return result_response(result)


@router.post("/upload")
async def import_cross_references_file(
    file: UploadFile = File(...),
    mode: str = Form("upsert"),
    auth: AuthResult = Depends(caller),
    cross_reference_repo: CrossReferenceRepository = Depends(get_cross_reference_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    content = await file.read()
    records = read_records(file.filename, content)
    archive_upload(file.filename, content)
    logger.info("Cross reference file received", filename=file.filename, rows=len(records))

    result = import_cross_references(
        records,
        cross_reference_repo,
        product_repo,
        mode=mode,
        imported_by=auth.user_id,
    )
    return result_response(result)


@router.delete("/all")
def delete_all_cross_references(
    confirm: Optional[str] = Query(None),
    auth: AuthResult = Depends(caller),
    cross_reference_repo: CrossReferenceRepository = Depends(get_cross_reference_repository),
):
    response = delete_all(cross_reference_repo, confirm, "cross references")
    logger.warning("All cross references deleted", deleted=response["deleted"], requested_by=auth.user_id)
    return response


@router.api_route("", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
@router.api_route("/{rest:path}", methods=CATCH_ALL_METHODS, include_in_schema=False)
def unknown_cross_reference_endpoint(auth: AuthResult = Depends(caller)):
    raise unknown_endpoint(AVAILABLE_ENDPOINTS)
