"""
SQLAlchemy implementation of the Customer Repository.
"""

from typing import Any, Dict, List, Optional

from erp_import.domain.models.customer import Customer, CustomerAddress, CustomerContact
from erp_import.domain.repositories.customer_repository import CustomerRepository
from erp_import.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyCustomerRepository(SQLAlchemyRepository[Customer], CustomerRepository):
    """Customer repository implementation using SQLAlchemy."""

    def get_by_customer_number(self, customer_number: str) -> Optional[Customer]:
        with self.reading():
            return self.db.query(Customer).filter(Customer.customer_number == customer_number).first()

    def replace_addresses(self, customer_number: str, addresses: List[Dict[str, Any]]) -> int:
        with self.transaction():
            self.db.query(CustomerAddress).filter(CustomerAddress.customer_number == customer_number).delete(
                synchronize_session=False
            )
            self.db.add_all([CustomerAddress(customer_number=customer_number, **a) for a in addresses])
            self.db.flush()
        return len(addresses)

    def replace_contacts(self, customer_number: str, contacts: List[Dict[str, Any]]) -> int:
        with self.transaction():
            self.db.query(CustomerContact).filter(CustomerContact.customer_number == customer_number).delete(
                synchronize_session=False
            )
            self.db.add_all([CustomerContact(customer_number=customer_number, **c) for c in contacts])
            self.db.flush()
        return len(contacts)

    def delete_all(self) -> int:
        """Contacts and addresses go first so the customer rows have no children left."""
        with self.transaction():
            self.db.query(CustomerContact).delete(synchronize_session=False)
            self.db.query(CustomerAddress).delete(synchronize_session=False)
            deleted = self.db.query(Customer).delete(synchronize_session=False)
        return deleted
