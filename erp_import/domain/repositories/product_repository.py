"""
Product Repository Interface.
Bulk write operations used by the product import pipeline.
"""

from typing import Any, Dict, List, Optional, Tuple

from erp_import.domain.repositories.base import BaseRepository
from erp_import.domain.models.product import Product

# (id, sku) pairs returned by bulk writes
WrittenProduct = Tuple[int, str]


class ProductRepository(BaseRepository[Product]):
    """Interface for Product-specific operations."""

    def get_id_by_sku(self, sku: str) -> Optional[int]:
        """Resolve a product id from its SKU."""
        ...

    def insert_many(self, rows: List[Dict[str, Any]]) -> List[WrittenProduct]:
        """Insert all rows in one transaction; any failure rolls back all of them."""
        ...

    def upsert_many(self, rows: List[Dict[str, Any]]) -> List[WrittenProduct]:
        """Insert or update by SKU, writing only the columns each row carries."""
        ...

    def replace_price_breaks(self, product_id: int, price_breaks: List[Dict[str, Any]]) -> int:
        """Delete the product's price breaks and insert the new set."""
        ...
