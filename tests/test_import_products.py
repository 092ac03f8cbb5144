"""
Tests for the product import API: batch, single, logs and delete-all.
"""

from erp_import.domain.models.import_log import ProductImportLog
from erp_import.domain.models.product import PriceBreak, Product

from conftest import basic, bearer


def _products(db):
    db.expire_all()
    return {p.sku: p for p in db.query(Product).all()}


def _price_breaks(db, sku):
    db.expire_all()
    product = db.query(Product).filter(Product.sku == sku).one()
    return sorted(
        (pb.min_quantity, pb.max_quantity, pb.unit_cost)
        for pb in db.query(PriceBreak).filter(PriceBreak.product_id == product.id)
    )


class TestBatchImport:
    def test_invalid_record_does_not_block_siblings(self, client, db):
        response = client.post(
            "/import-products",
            json={
                "products": [
                    {"sku": "B-1", "name": "Bolt"},
                    {"name": "No SKU"},
                    {"sku": "N-1", "name": "Nut"},
                ]
            },
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["imported"] == 2
        assert body["failed"] == 1
        assert body["errors"] == ["Product at index 1: Missing required field 'sku' or 'name'"]
        assert body["message"] == "Imported 2 product(s), 1 failed"
        assert set(_products(db)) == {"B-1", "N-1"}

    def test_success_shape(self, client, db):
        response = client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt"}]})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Successfully imported 1 product(s)"
        assert body["price_breaks_imported"] == 0
        assert body["price_breaks_failed"] == 0
        assert isinstance(body["import_log_id"], int)
        assert "errors" not in body

    def test_insert_defaults_for_new_product(self, client, db):
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt"}]})

        product = _products(db)["B-1"]
        assert product.category == "Uncategorized"
        assert product.supplier == "Unknown"
        assert product.warehouse == "main"
        assert product.status == "active"
        assert product.unit_cost == 0

    def test_upsert_same_sku_updates(self, client, db):
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt"}]})
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Hex Bolt"}]})

        products = _products(db)
        assert len(products) == 1
        assert products["B-1"].name == "Hex Bolt"

    def test_omitted_field_is_left_untouched(self, client, db):
        client.post(
            "/import-products",
            json={"products": [{"sku": "B-1", "name": "Bolt", "category": "Fasteners", "weight": 1.5}]},
        )
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt", "weight": None}]})

        product = _products(db)["B-1"]
        assert product.category == "Fasteners"
        assert product.weight is None

    def test_mixed_field_sets_in_one_batch(self, client, db):
        client.post(
            "/import-products",
            json={"products": [{"sku": "A", "name": "A", "buyer": "Kim"}, {"sku": "B", "name": "B", "buyer": "Lou"}]},
        )
        response = client.post(
            "/import-products",
            json={"products": [{"sku": "A", "name": "A2"}, {"sku": "B", "name": "B2", "buyer": "Max"}]},
        )

        assert response.status_code == 200
        products = _products(db)
        assert (products["A"].name, products["A"].buyer) == ("A2", "Kim")
        assert (products["B"].name, products["B"].buyer) == ("B2", "Max")

    def test_duplicate_skus_in_one_batch_are_merged(self, client, db):
        response = client.post(
            "/import-products",
            json={"products": [{"sku": "B-1", "name": "Bolt", "buyer": "Kim"}, {"sku": "B-1", "name": "Bolt v2"}]},
        )

        assert response.status_code == 200
        assert response.json()["imported"] == 2
        product = _products(db)["B-1"]
        assert (product.name, product.buyer) == ("Bolt v2", "Kim")

    def test_insert_mode_conflict_fails_whole_batch(self, client, db):
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt"}]})

        response = client.post(
            "/import-products",
            json={"mode": "insert", "products": [{"sku": "N-1", "name": "Nut"}, {"sku": "B-1", "name": "Dup"}]},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["imported"] == 0
        assert body["failed"] == 2
        assert body["errors"][0].startswith("Database error:")
        products = _products(db)
        assert set(products) == {"B-1"}
        assert products["B-1"].name == "Bolt"

    def test_upsert_mode_succeeds_where_insert_fails(self, client, db):
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt"}]})
        response = client.post(
            "/import-products",
            json={"mode": "upsert", "products": [{"sku": "N-1", "name": "Nut"}, {"sku": "B-1", "name": "Dup"}]},
        )
        assert response.status_code == 200
        assert set(_products(db)) == {"B-1", "N-1"}

    def test_unknown_mode(self, client, db):
        response = client.post("/import-products", json={"mode": "merge", "products": [{"sku": "B-1", "name": "Bolt"}]})
        assert response.status_code == 400
        assert db.query(ProductImportLog).count() == 0

    def test_empty_batch_is_rejected_before_logging(self, client, db):
        for body in ({"products": []}, {"products": {"sku": "B-1"}}, {}):
            response = client.post("/import-products", json=body)
            assert response.status_code == 400
            assert response.json() == {
                "success": False,
                "message": "Invalid input: 'products' must be a non-empty array",
            }
        assert db.query(ProductImportLog).count() == 0

    def test_invalid_json_body(self, client):
        response = client.post(
            "/import-products", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid JSON body"


class TestPriceBreaks:
    def test_second_import_fully_replaces_set(self, client, db):
        first = [
            {"min_quantity": 1, "max_quantity": 9, "unit_cost": 3},
            {"min_quantity": 10, "max_quantity": 99, "unit_cost": 2},
            {"min_quantity": 100, "max_quantity": 999, "unit_cost": 1},
        ]
        response = client.post(
            "/import-products", json={"products": [{"sku": "B-1", "name": "Bolt", "price_breaks": first}]}
        )
        assert response.json()["price_breaks_imported"] == 3
        assert response.json()["message"] == "Successfully imported 1 product(s) and 3 price break(s)"

        second = [{"min_quantity": 1, "max_quantity": 50, "unit_cost": 2.5}]
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt", "price_breaks": second}]})

        assert _price_breaks(db, "B-1") == [(1.0, 50.0, 2.5)]

    def test_flag_off_keeps_existing_breaks(self, client, db):
        breaks = [{"min_quantity": 1, "max_quantity": 9, "unit_cost": 3}]
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt", "price_breaks": breaks}]})

        response = client.post(
            "/import-products",
            json={
                "import_price_breaks": False,
                "products": [{"sku": "B-1", "name": "Bolt", "price_breaks": [{"min_quantity": 5, "max_quantity": 6, "unit_cost": 9}]}],
            },
        )

        assert response.json()["price_breaks_imported"] == 0
        assert _price_breaks(db, "B-1") == [(1.0, 9.0, 3.0)]

    def test_empty_list_leaves_breaks_alone(self, client, db):
        breaks = [{"min_quantity": 1, "max_quantity": 9, "unit_cost": 3}]
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt", "price_breaks": breaks}]})
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt", "price_breaks": []}]})

        assert _price_breaks(db, "B-1") == [(1.0, 9.0, 3.0)]

    def test_failed_replacement_keeps_product_and_old_breaks(self, client, db):
        breaks = [{"min_quantity": 1, "max_quantity": 9, "unit_cost": 3}]
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt", "price_breaks": breaks}]})

        # unit_cost is NOT NULL, so this replacement fails after the product write
        response = client.post(
            "/import-products",
            json={"products": [{"sku": "B-1", "name": "Renamed", "price_breaks": [{"min_quantity": 1, "max_quantity": 2}]}]},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["imported"] == 1
        assert body["failed"] == 0
        assert body["price_breaks_failed"] == 1
        assert body["errors"][0].startswith("Failed to import price breaks for SKU B-1:")
        assert _products(db)["B-1"].name == "Renamed"
        assert _price_breaks(db, "B-1") == [(1.0, 9.0, 3.0)]

    def test_malformed_break_does_not_cost_the_product(self, client, db):
        breaks = [{"min_quantity": 1, "max_quantity": 9, "unit_cost": 3}]
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt", "price_breaks": breaks}]})

        response = client.post(
            "/import-products",
            json={
                "products": [
                    {"sku": "B-1", "name": "Renamed", "price_breaks": [{"min_quantity": "abc", "unit_cost": 1}, {"unit_cost": 2}]}
                ]
            },
        )

        body = response.json()
        assert response.status_code == 200
        assert body["imported"] == 1
        assert body["failed"] == 0
        assert body["price_breaks_imported"] == 0
        assert body["price_breaks_failed"] == 2
        assert body["errors"][0].startswith(
            "Failed to import price breaks for SKU B-1: Price break at position 0: Invalid value for field 'min_quantity'"
        )
        assert _products(db)["B-1"].name == "Renamed"
        assert _price_breaks(db, "B-1") == [(1.0, 9.0, 3.0)]

    def test_malformed_breaks_ignored_when_flag_off(self, client, db):
        response = client.post(
            "/import-products",
            json={
                "import_price_breaks": False,
                "products": [{"sku": "B-1", "name": "Bolt", "price_breaks": [{"min_quantity": "abc"}]}],
            },
        )

        body = response.json()
        assert response.status_code == 200
        assert body["imported"] == 1
        assert "errors" not in body
        assert "B-1" in _products(db)

    def test_non_array_breaks_are_ignored(self, client, db):
        response = client.post(
            "/import-products", json={"products": [{"sku": "B-1", "name": "Bolt", "price_breaks": "oops"}]}
        )

        body = response.json()
        assert response.status_code == 200
        assert body["imported"] == 1
        assert body["price_breaks_imported"] == 0
        assert body["price_breaks_failed"] == 0
        assert body["message"] == "Successfully imported 1 product(s)"

    def test_flag_must_be_a_boolean(self, client, db):
        breaks = [{"min_quantity": 1, "max_quantity": 9, "unit_cost": 3}]
        response = client.post(
            "/import-products",
            json={"import_price_breaks": "false", "products": [{"sku": "B-1", "name": "Bolt", "price_breaks": breaks}]},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid input: 'import_price_breaks' must be a boolean"
        assert _products(db) == {}

    def test_single_flag_must_be_a_boolean(self, client, db):
        response = client.post(
            "/import-products/single", json={"sku": "B-1", "name": "Bolt", "import_price_breaks": "no"}
        )

        assert response.status_code == 400
        assert db.query(ProductImportLog).count() == 0


class TestSingleImport:
    def test_single_record(self, client, db):
        response = client.post(
            "/import-products/single",
            json={"sku": "B-1", "name": "Bolt", "price_breaks": [{"min_quantity": 1, "max_quantity": 9, "unit_cost": 3}]},
        )

        assert response.status_code == 200
        assert response.json()["price_breaks_imported"] == 1
        db.expire_all()
        log = db.query(ProductImportLog).one()
        assert log.import_type == "single"

    def test_missing_required_fields(self, client, db):
        response = client.post("/import-products/single", json={"sku": "B-1"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid input: 'sku' and 'name' are required"
        assert db.query(ProductImportLog).count() == 0


class TestImportLogs:
    def test_log_lifecycle(self, client, db):
        client.post(
            "/import-products",
            json={"products": [{"sku": "B-1", "name": "Bolt"}, {"sku": "N-1"}]},
            headers=bearer("user-1"),
        )

        db.expire_all()
        log = db.query(ProductImportLog).one()
        assert log.import_type == "full"
        assert log.total_records == 2
        assert log.successful_records == 1
        assert log.failed_records == 1
        assert log.status == "completed_with_errors"
        assert log.errors == ["Product at index 1: Missing required field 'sku' or 'name'"]
        assert log.imported_by == "user-1"
        assert log.import_source == "api"
        assert log.completed_at is not None

    def test_clean_batch_has_no_errors(self, client, db):
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt"}]})
        db.expire_all()
        log = db.query(ProductImportLog).one()
        assert log.status == "completed"
        assert log.errors is None

    def test_list_newest_first_with_limit(self, client):
        for sku in ("A", "B", "C"):
            client.post("/import-products", json={"products": [{"sku": sku, "name": sku}]})

        response = client.get("/import-products/logs", params={"limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["logs"]) == 2
        assert body["logs"][0]["id"] > body["logs"][1]["id"]

    def test_invalid_limit(self, client):
        assert client.get("/import-products/logs", params={"limit": "many"}).status_code == 400


class TestDeleteAll:
    def test_requires_confirmation(self, client, db):
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt"}]})

        response = client.delete("/import-products/all")
        wrong = client.delete("/import-products/all", params={"confirm": "yes"})

        assert response.status_code == 400
        assert wrong.status_code == 400
        assert "confirm=yes-delete-all" in response.json()["message"]
        assert set(_products(db)) == {"B-1"}

    def test_deletes_products_and_breaks(self, client, db):
        breaks = [{"min_quantity": 1, "max_quantity": 9, "unit_cost": 3}]
        client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt", "price_breaks": breaks}]})

        response = client.delete("/import-products/all", params={"confirm": "yes-delete-all"})

        assert response.status_code == 200
        assert response.json()["message"] == "All products deleted successfully"
        db.expire_all()
        assert db.query(Product).count() == 0
        assert db.query(PriceBreak).count() == 0


class TestAuthentication:
    def test_required_auth_without_header(self, client, require_import_auth):
        require_import_auth()
        response = client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt"}]})

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication required. Please provide credentials."
        assert response.headers["WWW-Authenticate"] == 'Basic realm="Import API"'

    def test_wrong_password_is_rejected_generically(self, client, db, require_import_auth):
        require_import_auth(username="erp", password="s3cret")
        response = client.post(
            "/import-products",
            json={"products": [{"sku": "B-1", "name": "Bolt"}]},
            headers=basic("erp", "wrong"),
        )

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}
        assert db.query(ProductImportLog).count() == 0

    def test_correct_basic_credentials(self, client, require_import_auth):
        require_import_auth(username="erp", password="s3cret")
        response = client.post(
            "/import-products",
            json={"products": [{"sku": "B-1", "name": "Bolt"}]},
            headers=basic("erp", "s3cret"),
        )
        assert response.status_code == 200

    def test_bearer_token_when_required(self, client, db, require_import_auth):
        require_import_auth()
        response = client.post(
            "/import-products", json={"products": [{"sku": "B-1", "name": "Bolt"}]}, headers=bearer("user-7")
        )
        assert response.status_code == 200
        db.expire_all()
        assert db.query(ProductImportLog).one().imported_by == "user-7"

    def test_other_prefix_is_not_affected(self, client, require_import_auth):
        require_import_auth(prefix="cross_ref_import_api")
        response = client.post("/import-products", json={"products": [{"sku": "B-1", "name": "Bolt"}]})
        assert response.status_code == 200
