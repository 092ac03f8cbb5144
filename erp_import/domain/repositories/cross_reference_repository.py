"""
Cross Reference Repository Interface.
"""

from typing import Any, Dict, List, Optional

from erp_import.domain.repositories.base import BaseRepository
from erp_import.domain.models.cross_reference import CrossReference


class CrossReferenceRepository(BaseRepository[CrossReference]):
    """Interface for Cross Reference-specific operations."""

    def find_by_key(
        self, internal_part_number: str, customer_part_number: str, supplier_part_number: str
    ) -> Optional[CrossReference]:
        """Exact match on the (internal, customer, supplier) part number triple."""
        ...

    def insert_many(self, rows: List[Dict[str, Any]]) -> int:
        """Insert all rows in one transaction."""
        ...
