"""
Global exception handling for the import API.

Every error response is JSON shaped like the success bodies:
``{"success": false, "message": ..., **details}``.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing request shape."""
    def __init__(self, message: str = "Invalid input", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class AuthenticationError(AppError):
    """Missing or invalid credentials."""
    def __init__(self, message: str = "Unauthorized", realm: Optional[str] = None):
        headers = {"WWW-Authenticate": f'Basic realm="{realm}"'} if realm else None
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, headers=headers)


class AuthorizationError(AppError):
    """Authenticated, but the caller lacks the required role."""
    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class NotFoundError(AppError):
    """Unknown route or resource."""
    def __init__(self, message: str = "Unknown endpoint", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class RateLimitError(AppError):
    """Caller exceeded its request window."""
    def __init__(self, retry_after: int, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            "Rate limit exceeded. Please try again later.",
            status.HTTP_429_TOO_MANY_REQUESTS,
            details={"retryAfter": retry_after},
            headers={**(headers or {}), "Retry-After": str(retry_after)},
        )


class PersistenceError(AppError):
    """Downstream store failure outside of per-record processing."""
    def __init__(self, message: str = "Database operation failed", error: Optional[str] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, {"error": error} if error else None)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message, **exc.details},
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/query parsing failures are reported as 400 like every other bad input."""
    fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Invalid request",
            "fields": [f for f in fields if f],
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.exception("Unhandled error", path=request.url.path, method=request.method)

    # Rendered outside the middleware stack, so CORS headers are added here
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "Internal server error",
            "error": str(exc) or exc.__class__.__name__,
        },
        headers=CORS_HEADERS,
    )
