"""
Tests for the operator script that stores import API credentials.
"""

import pytest

from erp_import.domain.models.app_configuration import AppConfiguration
from erp_import.infrastructure.repositories.config_repository import SQLAlchemyConfigRepository
from scripts.configure_import_auth import configure

from conftest import basic


@pytest.fixture
def config_repo(db):
    return SQLAlchemyConfigRepository(db, AppConfiguration)


def test_enable_then_import_requires_credentials(client, config_repo):
    configure(config_repo, "customer_import_api", True, "erp", "s3cret")

    payload = {"customers": [{"customer_number": "C-1", "name": "Acme"}]}
    assert client.post("/import-customers", json=payload).status_code == 401
    assert client.post("/import-customers", json=payload, headers=basic("erp", "s3cret")).status_code == 200


def test_disable_keeps_credentials(config_repo):
    configure(config_repo, "import_api", True, "erp", "s3cret")
    configure(config_repo, "import_api", False)

    assert config_repo.get("import_api_enabled") == "false"
    assert config_repo.get("import_api_username") == "erp"


def test_unknown_prefix(config_repo):
    with pytest.raises(ValueError):
        configure(config_repo, "notifications_api", True)
