"""
API Dependencies.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from erp_import.core.rate_limiter import RateLimiter
from erp_import.domain.models.app_configuration import AppConfiguration
from erp_import.domain.models.cross_reference import CrossReference
from erp_import.domain.models.customer import Customer
from erp_import.domain.models.import_log import ProductImportLog
from erp_import.domain.models.product import Product
from erp_import.domain.models.user import User
from erp_import.domain.repositories.config_repository import ConfigRepository
from erp_import.domain.repositories.cross_reference_repository import CrossReferenceRepository
from erp_import.domain.repositories.customer_repository import CustomerRepository
from erp_import.domain.repositories.import_log_repository import ImportLogRepository
from erp_import.domain.repositories.product_repository import ProductRepository
from erp_import.domain.repositories.user_repository import UserRepository
from erp_import.infrastructure.database import get_db
from erp_import.infrastructure.repositories.config_repository import SQLAlchemyConfigRepository
from erp_import.infrastructure.repositories.cross_reference_repository import SQLAlchemyCrossReferenceRepository
from erp_import.infrastructure.repositories.customer_repository import SQLAlchemyCustomerRepository
from erp_import.infrastructure.repositories.import_log_repository import SQLAlchemyImportLogRepository
from erp_import.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from erp_import.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_config_repository(db: Session = Depends(get_db)) -> ConfigRepository:
    """Get configuration repository instance."""
    return SQLAlchemyConfigRepository(db, AppConfiguration)


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    """Get product repository instance."""
    return SQLAlchemyProductRepository(db, Product)


def get_import_log_repository(db: Session = Depends(get_db)) -> ImportLogRepository:
    """Get import log repository instance."""
    return SQLAlchemyImportLogRepository(db, ProductImportLog)


def get_cross_reference_repository(db: Session = Depends(get_db)) -> CrossReferenceRepository:
    """Get cross reference repository instance."""
    return SQLAlchemyCrossReferenceRepository(db, CrossReference)


def get_customer_repository(db: Session = Depends(get_db)) -> CustomerRepository:
    """Get customer repository instance."""
    return SQLAlchemyCustomerRepository(db, Customer)


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_rate_limiter(request: Request) -> RateLimiter:
    """The application-wide limiter created in create_app()."""
    return request.app.state.rate_limiter
