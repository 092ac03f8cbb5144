"""Key-value configuration rows (feature flags and import API credentials)."""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from erp_import.infrastructure.database import Base


class AppConfiguration(Base):
    __tablename__ = "app_configurations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    config_key = Column(String(200), unique=True, nullable=False, index=True)
    config_value = Column(Text, nullable=True)
    description = Column(String(500), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<AppConfiguration {self.config_key}>"
