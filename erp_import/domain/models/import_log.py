"""Product import audit log, one row per batch call."""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func

from erp_import.infrastructure.database import Base


class ProductImportLog(Base):
    __tablename__ = "product_import_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    import_type = Column(String(20), nullable=False)  # single, full
    total_records = Column(Integer, nullable=False, default=0)
    successful_records = Column(Integer, nullable=False, default=0)
    failed_records = Column(Integer, nullable=False, default=0)
    errors = Column(JSON, nullable=True)
    status = Column(String(50), nullable=False, default="in_progress")  # in_progress, completed, completed_with_errors
    import_source = Column(String(50), nullable=False, default="api")  # api, file
    imported_by = Column(String(100), nullable=True)
    started_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<ProductImportLog {self.id} - {self.status}>"
