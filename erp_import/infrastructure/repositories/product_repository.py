"""
SQLAlchemy implementation of the Product Repository.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite

from erp_import.domain.models.product import PriceBreak, Product
from erp_import.domain.repositories.product_repository import ProductRepository, WrittenProduct
from erp_import.infrastructure.repositories.base_repository import SQLAlchemyRepository

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SQLAlchemyProductRepository(SQLAlchemyRepository[Product], ProductRepository):
    """Product repository implementation using SQLAlchemy."""

    def get_id_by_sku(self, sku: str) -> Optional[int]:
        with self.reading():
            row = self.db.query(Product.id).filter(Product.sku == sku).first()
        return row[0] if row else None

    def insert_many(self, rows: List[Dict[str, Any]]) -> List[WrittenProduct]:
        products = [Product(**row) for row in rows]
        with self.transaction():
            self.db.add_all(products)
            self.db.flush()
            written = [(p.id, p.sku) for p in products]
        return written

    def upsert_many(self, rows: List[Dict[str, Any]]) -> List[WrittenProduct]:
        """ON CONFLICT (sku) DO UPDATE, one statement per distinct column set.

        A multi-row VALUES clause needs the same keys on every row, while the
        UPDATE must only touch the columns a record actually carried. Rows are
        grouped by their key set; all groups share one transaction.
        """
        insert = self._dialect_insert()
        groups: Dict[Tuple[str, ...], List[Dict[str, Any]]] = {}
        for row in rows:
            groups.setdefault(tuple(sorted(row)), []).append(row)

        written: List[WrittenProduct] = []
        with self.transaction():
            for columns, group in groups.items():
                stmt = insert(Product).values(group)
                set_ = {col: stmt.excluded[col] for col in columns if col != "sku"}
                set_["updated_at"] = func.now()
                stmt = stmt.on_conflict_do_update(index_elements=[Product.sku], set_=set_)
                result = self.db.execute(stmt.returning(Product.id, Product.sku))
                written.extend((r.id, r.sku) for r in result)
        return written

    def replace_price_breaks(self, product_id: int, price_breaks: List[Dict[str, Any]]) -> int:
        with self.transaction():
            self.db.query(PriceBreak).filter(PriceBreak.product_id == product_id).delete(
                synchronize_session=False
            )
            self.db.add_all([PriceBreak(product_id=product_id, **pb) for pb in price_breaks])
            self.db.flush()
        return len(price_breaks)

    def delete_all(self) -> int:
        with self.transaction():
            self.db.query(PriceBreak).delete(synchronize_session=False)
            deleted = self.db.query(Product).delete(synchronize_session=False)
        return deleted

    def _dialect_insert(self):
        dialect = self.db.get_bind().dialect.name
        try:
            return _UPSERT_DIALECTS[dialect]
        except KeyError:
            raise NotImplementedError(f"Product upsert is not supported on '{dialect}'") from None
