"""
Import Log Repository Interface.
Audit trail for product import batches.
"""

from typing import List, Optional, Protocol

from erp_import.domain.models.import_log import ProductImportLog


class ImportLogRepository(Protocol):
    """Interface for the product import audit log."""

    def start(self, total_records: int, imported_by: Optional[str], import_source: str = "api") -> ProductImportLog:
        """Create the in_progress row before any record is processed."""
        ...

    def finish(self, log: ProductImportLog, successful: int, failed: int, errors: List[str]) -> ProductImportLog:
        """Write the single completion update."""
        ...

    def list_recent(self, limit: int = 50) -> List[ProductImportLog]:
        """Most recent batches first."""
        ...
