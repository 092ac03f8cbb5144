"""
SQLAlchemy implementation of the Cross Reference Repository.
"""

from typing import Any, Dict, List, Optional

from erp_import.domain.models.cross_reference import CrossReference
from erp_import.domain.repositories.cross_reference_repository import CrossReferenceRepository
from erp_import.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyCrossReferenceRepository(SQLAlchemyRepository[CrossReference], CrossReferenceRepository):
    """Cross reference repository implementation using SQLAlchemy."""

    def find_by_key(
        self, internal_part_number: str, customer_part_number: str, supplier_part_number: str
    ) -> Optional[CrossReference]:
        with self.reading():
            return (
                self.db.query(CrossReference)
                .filter(
                    CrossReference.internal_part_number == internal_part_number,
                    CrossReference.customer_part_number == customer_part_number,
                    CrossReference.supplier_part_number == supplier_part_number,
                )
                .order_by(CrossReference.id.asc())
                .first()
            )

    def insert_many(self, rows: List[Dict[str, Any]]) -> int:
        with self.transaction():
            self.db.add_all([CrossReference(**row) for row in rows])
            self.db.flush()
        return len(rows)
