"""FastAPI dependencies: import API authentication and rate limiting."""

from typing import Callable

import structlog
from fastapi import Depends, Request

from erp_import.application.services.auth_service import AuthResult, authenticate
from erp_import.config import get_settings
from erp_import.core.exceptions import AuthenticationError, RateLimitError
from erp_import.core.rate_limiter import RateLimiter, get_request_identifier
from erp_import.domain.repositories.config_repository import ConfigRepository
from erp_import.infrastructure.identity_provider import IdentityProvider, get_identity_provider
from erp_import.interfaces.deps import get_config_repository, get_rate_limiter

logger = structlog.get_logger(__name__)


def import_api_auth(config_prefix: str, realm: str) -> Callable[..., AuthResult]:
    """Auth dependency for one import API, gated by ``<config_prefix>_enabled``."""

    def dependency(
        request: Request,
        config_repo: ConfigRepository = Depends(get_config_repository),
        identity_provider: IdentityProvider = Depends(get_identity_provider),
    ) -> AuthResult:
        result = authenticate(
            request.headers.get("authorization"),
            config_repo,
            identity_provider,
            config_prefix,
        )
        if not result.is_authenticated:
            logger.info("Import API authentication failed", config_prefix=config_prefix, reason=result.error)
            raise AuthenticationError(result.error, realm=realm)
        return result

    return dependency


def enforce_rate_limit(request: Request, user_id: str | None, limiter: RateLimiter) -> None:
    """Count this request against the caller's window, or raise RateLimitError."""
    if not get_settings().RATE_LIMIT_ENABLED:
        return

    identifier = get_request_identifier(request, user_id)
    status = limiter.check(identifier)
    request.state.rate_limit = status
    if not status.allowed:
        logger.warning("Rate limit exceeded", identifier=identifier, path=request.url.path)
        raise RateLimitError(status.retry_after(limiter.now()), status.headers())


def import_api_caller(config_prefix: str, realm: str) -> Callable[..., AuthResult]:
    """Authentication first, then the rate limit keyed by the resolved identity."""
    auth_dependency = import_api_auth(config_prefix, realm)

    def dependency(
        request: Request,
        auth: AuthResult = Depends(auth_dependency),
        limiter: RateLimiter = Depends(get_rate_limiter),
    ) -> AuthResult:
        enforce_rate_limit(request, auth.user_id, limiter)
        return auth

    return dependency
