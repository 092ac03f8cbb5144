"""
SQLAlchemy implementation of the Configuration Repository.
"""

from typing import Optional

from erp_import.domain.models.app_configuration import AppConfiguration
from erp_import.domain.repositories.config_repository import ConfigRepository
from erp_import.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyConfigRepository(SQLAlchemyRepository[AppConfiguration], ConfigRepository):
    """Reads feature flags and credentials from app_configurations."""

    def get(self, key: str) -> Optional[str]:
        row = (
            self.db.query(AppConfiguration.config_value)
            .filter(AppConfiguration.config_key == key)
            .first()
        )
        return row[0] if row else None

    def get_bool(self, key: str) -> bool:
        return self.get(key) == "true"

    def set(self, key: str, value: Optional[str], description: Optional[str] = None) -> AppConfiguration:
        existing = self.db.query(AppConfiguration).filter(AppConfiguration.config_key == key).first()
        if existing:
            return self.update(existing, {"config_value": value})
        return self.create({"config_key": key, "config_value": value, "description": description})
