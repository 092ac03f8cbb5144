"""
Tests for the customer import API (customers, addresses, contacts).
"""

from sqlalchemy.exc import OperationalError

from erp_import.domain.models.customer import Customer, CustomerAddress, CustomerContact
from erp_import.infrastructure.repositories.customer_repository import SQLAlchemyCustomerRepository

ADDRESS = {"address_line_1": "1 Main St", "city": "Austin", "postal_code": "73301", "country": "US"}
CONTACT = {"first_name": "Ann", "last_name": "Lee", "email": "ann@acme.test"}


def _count(db, model, **filters):
    db.expire_all()
    return db.query(model).filter_by(**filters).count()


class TestCustomerImport:
    def test_insert_with_children_and_defaults(self, client, db):
        response = client.post(
            "/import-customers",
            json={"customers": [{"customer_number": "C-1", "name": "Acme", "addresses": [ADDRESS], "contacts": [CONTACT]}]},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Successfully imported 1 customer(s)"
        customer = db.query(Customer).one()
        assert (customer.type, customer.segment, customer.currency) == ("Commercial", "General", "USD")
        assert _count(db, CustomerAddress, customer_number="C-1") == 1
        assert _count(db, CustomerContact, customer_number="C-1") == 1

    def test_update_replaces_children(self, client, db):
        client.post(
            "/import-customers",
            json={"customers": [{"customer_number": "C-1", "name": "Acme", "addresses": [ADDRESS, {**ADDRESS, "city": "Dallas"}]}]},
        )
        client.post(
            "/import-customers",
            json={"customers": [{"customer_number": "C-1", "name": "Acme Corp", "addresses": [{**ADDRESS, "city": "Houston"}]}]},
        )

        db.expire_all()
        assert db.query(Customer).one().name == "Acme Corp"
        cities = [a.city for a in db.query(CustomerAddress).all()]
        assert cities == ["Houston"]

    def test_update_without_children_keeps_them(self, client, db):
        client.post(
            "/import-customers",
            json={"customers": [{"customer_number": "C-1", "name": "Acme", "contacts": [CONTACT]}]},
        )
        client.post("/import-customers", json={"customers": [{"customer_number": "C-1", "name": "Acme", "tier": "Gold"}]})

        assert _count(db, CustomerContact, customer_number="C-1") == 1
        assert db.query(Customer).one().tier == "Gold"

    def test_per_record_failures(self, client, db):
        response = client.post(
            "/import-customers",
            json={
                "customers": [
                    {"customer_number": "C-1"},
                    {"customer_number": "C-2", "name": "Beta", "contacts": [{"first_name": "No", "last_name": "Email"}]},
                    {"customer_number": "C-3", "name": "Gamma"},
                ]
            },
        )

        body = response.json()
        assert response.status_code == 400
        assert body["imported"] == 1
        assert body["failed"] == 2
        assert body["errors"][0] == "Customer at index 0: Missing required field 'name'"
        assert body["errors"][1].startswith("Customer at index 1: Invalid value for field 'contacts.0.email'")
        assert _count(db, Customer) == 1

    def test_insert_mode_duplicate_fails_that_record(self, client, db):
        client.post("/import-customers", json={"customers": [{"customer_number": "C-1", "name": "Acme"}]})

        response = client.post(
            "/import-customers",
            json={"mode": "insert", "customers": [{"customer_number": "C-1", "name": "Dup"}, {"customer_number": "C-2", "name": "Beta"}]},
        )

        body = response.json()
        assert body["imported"] == 1
        assert body["failed"] == 1
        assert body["errors"][0].startswith("Failed to insert customer C-1:")
        assert _count(db, Customer) == 2

    def test_single_requires_number_and_name(self, client):
        response = client.post("/import-customers/single", json={"customer_number": "C-1"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid input: 'customer_number' and 'name' are required"

    def test_delete_all(self, client, db):
        client.post(
            "/import-customers",
            json={"customers": [{"customer_number": "C-1", "name": "Acme", "addresses": [ADDRESS], "contacts": [CONTACT]}]},
        )

        assert client.delete("/import-customers/all").status_code == 400
        response = client.delete("/import-customers/all", params={"confirm": "yes-delete-all"})

        assert response.status_code == 200
        assert response.json()["message"] == "All customers, addresses, and contacts deleted successfully"
        assert _count(db, Customer) == 0
        assert _count(db, CustomerAddress) == 0
        assert _count(db, CustomerContact) == 0

    def test_lookup_failure_is_recorded_and_batch_continues(self, client, db, monkeypatch):
        original = SQLAlchemyCustomerRepository.get_by_customer_number

        def lookup(self, customer_number):
            if customer_number == "BAD":
                raise OperationalError("SELECT", {}, Exception("connection lost"))
            return original(self, customer_number)

        monkeypatch.setattr(SQLAlchemyCustomerRepository, "get_by_customer_number", lookup)

        response = client.post(
            "/import-customers",
            json={"customers": [{"customer_number": "BAD", "name": "Broken"}, {"customer_number": "C-1", "name": "Acme"}]},
        )

        body = response.json()
        assert response.status_code == 400
        assert body["imported"] == 1
        assert body["errors"] == ["Database error looking up customer BAD: connection lost"]
        assert _count(db, Customer, customer_number="C-1") == 1
