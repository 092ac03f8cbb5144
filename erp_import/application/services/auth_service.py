"""Auth service: import API credential checks and password hashing."""

import base64
import binascii
import secrets
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog
from passlib.context import CryptContext

from erp_import.domain.repositories.config_repository import ConfigRepository
from erp_import.infrastructure.identity_provider import IdentityError, IdentityProvider

logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MSG_CREDENTIALS_REQUIRED = "Authentication required. Please provide credentials."
MSG_INVALID_CREDENTIALS = "Invalid credentials"
MSG_INVALID_BASIC_FORMAT = "Invalid authentication format"
MSG_INVALID_TOKEN = "Invalid token"
MSG_UNSUPPORTED_SCHEME = "Invalid authentication format. Use Basic or Bearer token."


class AuthMode(str, Enum):
    OPTIONAL = "optional"  # Bearer yields a user id when valid, anonymous otherwise
    REQUIRED = "required"  # Basic or Bearer must succeed


@dataclass(frozen=True)
class AuthResult:
    is_authenticated: bool
    user_id: Optional[str] = None
    error: Optional[str] = None


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def constant_time_equal(a: str, b: str) -> bool:
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def resolve_auth_mode(config_repo: ConfigRepository, config_prefix: str, require_auth: bool = False) -> AuthMode:
    if require_auth or config_repo.get_bool(f"{config_prefix}_enabled"):
        return AuthMode.REQUIRED
    return AuthMode.OPTIONAL


def verify_basic_auth(encoded: str, config_repo: ConfigRepository, config_prefix: str) -> AuthResult:
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return AuthResult(False, error=MSG_INVALID_BASIC_FORMAT)

    if ":" not in decoded:
        return AuthResult(False, error=MSG_INVALID_BASIC_FORMAT)
    username, password = decoded.split(":", 1)

    stored_username = config_repo.get(f"{config_prefix}_username") or ""
    stored_password = config_repo.get(f"{config_prefix}_password") or ""

    # Unset credentials never match, not even an empty pair
    if not stored_username or not stored_password:
        logger.warning("Basic auth attempted without stored credentials", config_prefix=config_prefix)
        return AuthResult(False, error=MSG_INVALID_CREDENTIALS)

    # Both comparisons always run so timing does not reveal which part was wrong
    username_ok = constant_time_equal(username, stored_username)
    password_ok = constant_time_equal(password, stored_password)
    if username_ok and password_ok:
        return AuthResult(True)
    return AuthResult(False, error=MSG_INVALID_CREDENTIALS)


def verify_bearer_auth(token: str, identity_provider: IdentityProvider) -> AuthResult:
    token = token.strip()
    if not token:
        return AuthResult(False, error=MSG_INVALID_TOKEN)
    try:
        principal = identity_provider.verify(token)
    except IdentityError as e:
        logger.info("Bearer token rejected", reason=str(e))
        return AuthResult(False, error=MSG_INVALID_TOKEN)
    if principal is None or not principal.user_id:
        return AuthResult(False, error=MSG_INVALID_TOKEN)
    return AuthResult(True, user_id=principal.user_id)


def _split_scheme(authorization: str):
    scheme, _, credentials = authorization.strip().partition(" ")
    return scheme.lower(), credentials


def authenticate(
    authorization: Optional[str],
    config_repo: ConfigRepository,
    identity_provider: IdentityProvider,
    config_prefix: str,
    require_auth: bool = False,
) -> AuthResult:
    """Decide whether the caller of an import endpoint may proceed.

    In OPTIONAL mode the request is always allowed; a valid Bearer token
    only attaches the caller's user id. In REQUIRED mode the Authorization
    header must carry matching Basic credentials or a verifiable Bearer
    token.
    """
    mode = resolve_auth_mode(config_repo, config_prefix, require_auth)

    if mode is AuthMode.OPTIONAL:
        if authorization:
            scheme, credentials = _split_scheme(authorization)
            if scheme == "bearer":
                result = verify_bearer_auth(credentials, identity_provider)
                if result.is_authenticated:
                    return result
        return AuthResult(True)

    if not authorization:
        return AuthResult(False, error=MSG_CREDENTIALS_REQUIRED)

    scheme, credentials = _split_scheme(authorization)
    if scheme == "basic":
        return verify_basic_auth(credentials, config_repo, config_prefix)
    if scheme == "bearer":
        return verify_bearer_auth(credentials, identity_provider)
    return AuthResult(False, error=MSG_UNSUPPORTED_SCHEME)
