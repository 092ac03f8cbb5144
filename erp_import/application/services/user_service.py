"""User provisioning for the create-user endpoint."""

from typing import Optional

import structlog

from erp_import.application.services.auth_service import hash_password
from erp_import.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from erp_import.domain.repositories.user_repository import UserRepository
from erp_import.domain.schemas.auth import CreatedUserRead, CreateUserRequest
from erp_import.infrastructure.identity_provider import IdentityError, IdentityProvider

logger = structlog.get_logger(__name__)

PRIVILEGED_ROLES = ("ADMIN", "MANAGER")
MIN_PASSWORD_LENGTH = 8


def resolve_requesting_user(authorization: Optional[str], identity_provider: IdentityProvider) -> str:
    """User id behind the Bearer token, or AuthenticationError."""
    if not authorization:
        raise AuthenticationError("Authorization header required")

    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authentication failed")
    try:
        principal = identity_provider.verify(token.strip())
    except IdentityError as e:
        logger.info("Create-user token rejected", reason=str(e))
        raise AuthenticationError("Authentication failed") from e
    return principal.user_id


def create_user(request: CreateUserRequest, requested_by: str, user_repo: UserRepository) -> CreatedUserRead:
    if not user_repo.has_active_role(requested_by, PRIVILEGED_ROLES):
        raise AuthorizationError("Insufficient permissions. Admin or Manager role required.")

    email = (request.email or "").strip()
    password = request.password or ""
    if not email or not password:
        raise ValidationError("Email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if user_repo.get_by_email(email):
        raise ValidationError("A user with this email address has already been registered")

    display_name = (request.display_name or "").strip() or email.split("@")[0]
    user, roles = user_repo.create_with_roles(
        email=email,
        password_hash=hash_password(password),
        display_name=display_name,
        email_confirmed=request.email_confirm,
        created_by=requested_by,
        roles=request.roles,
    )
    logger.info("User created", user_id=user.id, created_by=requested_by, roles=roles)

    return CreatedUserRead(id=user.id, email=user.email, created_at=user.created_at, roles=roles)
