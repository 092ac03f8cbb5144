"""
Customer Repository Interface.
"""

from typing import Any, Dict, List, Optional

from erp_import.domain.repositories.base import BaseRepository
from erp_import.domain.models.customer import Customer


class CustomerRepository(BaseRepository[Customer]):
    """Interface for Customer-specific operations."""

    def get_by_customer_number(self, customer_number: str) -> Optional[Customer]:
        ...

    def replace_addresses(self, customer_number: str, addresses: List[Dict[str, Any]]) -> int:
        """Delete the customer's addresses and insert the new set."""
        ...

    def replace_contacts(self, customer_number: str, contacts: List[Dict[str, Any]]) -> int:
        """Delete the customer's contacts and insert the new set."""
        ...
