"""FastAPI application: main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from erp_import.config import get_settings
from erp_import.infrastructure.database import engine, Base
from erp_import.core.logging import configure_logging
from erp_import.core.middleware import setup_middleware
from erp_import.core.rate_limiter import RateLimiter
from erp_import.core.exceptions import (
    AppError,
    app_error_handler,
    global_exception_handler,
    request_validation_handler,
)

# Import all models so SQLAlchemy knows about them
from erp_import.domain.models.app_configuration import AppConfiguration  # noqa: F401
from erp_import.domain.models.product import Product, PriceBreak  # noqa: F401
from erp_import.domain.models.cross_reference import CrossReference  # noqa: F401
from erp_import.domain.models.import_log import ProductImportLog  # noqa: F401
from erp_import.domain.models.customer import Customer, CustomerAddress, CustomerContact  # noqa: F401
from erp_import.domain.models.user import User, UserRole  # noqa: F401

# Import routers
from erp_import.interfaces.api.import_products import router as import_products_router
from erp_import.interfaces.api.import_cross_references import router as import_cross_references_router
from erp_import.interfaces.api.import_customers import router as import_customers_router
from erp_import.interfaces.api.create_user import router as create_user_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting ERP Import API", env=settings.ENVIRONMENT)

    # Create DB tables (schema migrations are managed outside this service)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    from erp_import.scheduler.jobs import start_scheduler
    start_scheduler(app.state.rate_limiter)

    yield

    from erp_import.scheduler.jobs import stop_scheduler
    stop_scheduler()
    logger.info("ERP Import API stopped")


def create_app(rate_limiter: RateLimiter | None = None) -> FastAPI:
    app = FastAPI(
        title="ERP Import API",
        description="Authenticated bulk import of products, price breaks, cross references and customers",
        version="1.0.0",
        lifespan=lifespan,
    )

    # One limiter per application; tests pass their own with a fake clock
    if rate_limiter is None:
        rate_limiter = RateLimiter(
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        )
    app.state.rate_limiter = rate_limiter

    # Setup Middleware (CORS, Logging, Correlation ID)
    setup_middleware(app)

    # Exception Handling
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # Include routers
    app.include_router(import_products_router)
    app.include_router(import_cross_references_router)
    app.include_router(import_customers_router)
    app.include_router(create_user_router)

    @app.get("/")
    def root():
        return {
            "name": "ERP Import API",
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


app = create_app()
