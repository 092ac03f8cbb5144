"""Shared fixtures: in-memory SQLite, a fake clock, JWT minting and config seeding."""

import base64
import os
import tempfile
import time

# Settings are read once at import time, so the environment comes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["IDENTITY_PROVIDER"] = "jwt"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_AUDIENCE"] = "authenticated"
os.environ["RATE_LIMIT_ENABLED"] = "true"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="erp-import-uploads-")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from erp_import.core.rate_limiter import RateLimiter
from erp_import.domain.models.app_configuration import AppConfiguration
from erp_import.infrastructure.database import Base, SessionLocal, engine
from erp_import.infrastructure.repositories.config_repository import SQLAlchemyConfigRepository
from erp_import.main import create_app


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(clock):
    return RateLimiter(window_seconds=60, max_requests=1000, clock=clock)


@pytest.fixture
def app(db, rate_limiter):
    return create_app(rate_limiter=rate_limiter)


@pytest.fixture
def client(app):
    # No context manager: the lifespan (scheduler, create_all) is not needed here
    return TestClient(app)


@pytest.fixture
def set_config(db):
    repo = SQLAlchemyConfigRepository(db, AppConfiguration)

    def _set(key: str, value):
        repo.set(key, value)

    return _set


@pytest.fixture
def require_import_auth(set_config):
    """Turn on required auth for an import API prefix with stored Basic credentials."""

    def _enable(prefix: str = "import_api", username: str = "erp", password: str = "s3cret"):
        set_config(f"{prefix}_enabled", "true")
        set_config(f"{prefix}_username", username)
        set_config(f"{prefix}_password", password)

    return _enable


def make_token(user_id: str, secret: str = "test-secret", audience: str = "authenticated", expires_in: int = 3600) -> str:
    claims = {"sub": user_id, "aud": audience, "exp": int(time.time()) + expires_in, "email": f"{user_id}@example.com"}
    return jwt.encode(claims, secret, algorithm="HS256")


def bearer(user_id: str, **kwargs) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, **kwargs)}"}


def basic(username: str, password: str) -> dict:
    encoded = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {encoded}"}
