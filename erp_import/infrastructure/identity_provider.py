"""Bearer token verification against the identity provider.

Two adapters share the ``IdentityProvider`` contract: a local JWT verifier
(python-jose, shared secret) and a remote introspection client that asks
the hosted auth server who owns the token.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Protocol

import httpx
import structlog
from jose import JWTError, jwt

from erp_import.config import get_settings

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: Optional[str] = None


class IdentityError(Exception):
    """The token could not be verified or resolved to a user."""


class IdentityProvider(Protocol):
    def verify(self, token: str) -> Principal:
        """Resolve a token to its principal or raise IdentityError."""
        ...


class JWTIdentityProvider:
    """Verifies HS256 access tokens signed with the auth server's secret."""

    def __init__(self, secret: str, algorithm: str = "HS256", audience: Optional[str] = None):
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience or None

    def verify(self, token: str) -> Principal:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as e:
            raise IdentityError(str(e)) from e

        user_id = payload.get("sub")
        if not user_id:
            raise IdentityError("Token has no subject")
        return Principal(user_id=str(user_id), email=payload.get("email"))


class SupabaseIdentityProvider:
    """Resolves tokens through ``GET {base_url}/auth/v1/user``."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def verify(self, token: str) -> Principal:
        headers = {"Authorization": f"Bearer {token}", "apikey": self.api_key}
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(f"{self.base_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Identity provider unreachable", error=str(e))
            raise IdentityError(str(e)) from e

        if response.status_code != 200:
            raise IdentityError(f"Identity provider returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise IdentityError("Identity provider returned invalid JSON") from e

        user_id = data.get("id") if isinstance(data, dict) else None
        if not user_id:
            raise IdentityError("No user for token")
        return Principal(user_id=str(user_id), email=data.get("email"))


@lru_cache
def get_identity_provider() -> IdentityProvider:
    settings = get_settings()
    if settings.IDENTITY_PROVIDER == "supabase":
        return SupabaseIdentityProvider(
            settings.SUPABASE_URL,
            settings.SUPABASE_API_KEY,
            timeout=settings.IDENTITY_TIMEOUT_SECONDS,
        )
    return JWTIdentityProvider(
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        audience=settings.JWT_AUDIENCE,
    )
