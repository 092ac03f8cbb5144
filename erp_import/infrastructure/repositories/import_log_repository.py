"""
SQLAlchemy implementation of the Import Log Repository.
"""

from datetime import datetime, timezone
from typing import List, Optional

from erp_import.domain.models.import_log import ProductImportLog
from erp_import.domain.repositories.import_log_repository import ImportLogRepository
from erp_import.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyImportLogRepository(SQLAlchemyRepository[ProductImportLog], ImportLogRepository):
    """Import log repository implementation using SQLAlchemy."""

    def start(self, total_records: int, imported_by: Optional[str], import_source: str = "api") -> ProductImportLog:
        return self.create(
            {
                "import_type": "single" if total_records == 1 else "full",
                "total_records": total_records,
                "import_source": import_source,
                "imported_by": imported_by,
                "status": "in_progress",
            }
        )

    def finish(self, log: ProductImportLog, successful: int, failed: int, errors: List[str]) -> ProductImportLog:
        return self.update(
            log,
            {
                "successful_records": successful,
                "failed_records": failed,
                "errors": list(errors) if errors else None,
                "completed_at": datetime.now(timezone.utc),
                "status": "completed_with_errors" if failed > 0 else "completed",
            },
        )

    def list_recent(self, limit: int = 50) -> List[ProductImportLog]:
        return (
            self.db.query(ProductImportLog)
            .order_by(ProductImportLog.started_at.desc(), ProductImportLog.id.desc())
            .limit(limit)
            .all()
        )
