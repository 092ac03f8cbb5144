"""Request and response helpers shared by the import routers."""

from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from erp_import.application.services.batch import database_error_message
from erp_import.core.exceptions import NotFoundError, PersistenceError, ValidationError
from erp_import.domain.repositories.base import BaseRepository
from erp_import.domain.schemas.product import ImportResult

CONFIRM_DELETE_ALL = "yes-delete-all"
CATCH_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


async def read_json_object(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON body")
    if not isinstance(body, dict):
        raise ValidationError("Invalid JSON body: expected an object")
    return body


def result_response(result: ImportResult) -> JSONResponse:
    """200 when every record went through, 400 with the same body otherwise."""
    return JSONResponse(
        status_code=200 if result.success else 400,
        content=result.model_dump(exclude_none=True),
    )


def delete_all(repo: BaseRepository, confirm: Optional[str], entity: str) -> Dict[str, Any]:
    if confirm != CONFIRM_DELETE_ALL:
        raise ValidationError(f"Missing confirmation parameter. Add ?confirm={CONFIRM_DELETE_ALL} to proceed")
    try:
        deleted = repo.delete_all()
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to delete {entity}", database_error_message(e)) from e
    return {"success": True, "message": f"All {entity} deleted successfully", "deleted": deleted}


def unknown_endpoint(available_endpoints: List[str]) -> NotFoundError:
    return NotFoundError("Unknown endpoint", {"available_endpoints": available_endpoints})
