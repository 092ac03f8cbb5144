"""User provisioning route, restricted to admins and managers."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaError

from erp_import.application.services.user_service import create_user, resolve_requesting_user
from erp_import.core.exceptions import ValidationError
from erp_import.domain.repositories.user_repository import UserRepository
from erp_import.domain.schemas.auth import CreateUserRequest
from erp_import.infrastructure.identity_provider import IdentityProvider, get_identity_provider
from erp_import.interfaces.api.common import read_json_object
from erp_import.interfaces.deps import get_user_repository

router = APIRouter(tags=["Users"])


@router.post("/create-user", status_code=status.HTTP_201_CREATED)
async def create_user_endpoint(
    request: Request,
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    user_repo: UserRepository = Depends(get_user_repository),
):
    """Body: ``{email, password, email_confirm=true, roles=[], display_name?}``."""
    requested_by = resolve_requesting_user(request.headers.get("authorization"), identity_provider)
    try:
        body = CreateUserRequest.model_validate(await read_json_object(request))
    except SchemaError as e:
        raise ValidationError("Invalid request body", {"error": str(e.errors()[0].get("msg"))}) from e

    user = create_user(body, requested_by, user_repo)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "success": True,
            "message": "User created successfully",
            "user": user.model_dump(mode="json"),
        },
    )
