import argparse
import getpass
import os
import sys

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from erp_import.domain.models.app_configuration import AppConfiguration
from erp_import.infrastructure.database import Base, SessionLocal, engine
from erp_import.infrastructure.repositories.config_repository import SQLAlchemyConfigRepository

PREFIXES = ("import_api", "cross_ref_import_api", "customer_import_api")


def configure(repo, prefix, enabled, username=None, password=None):
    """Write the ``{prefix}_enabled/_username/_password`` rows read by the import APIs."""
    if prefix not in PREFIXES:
        raise ValueError(f"Unknown prefix '{prefix}', expected one of {', '.join(PREFIXES)}")

    repo.set(f"{prefix}_enabled", "true" if enabled else "false", "Require auth for this import API")
    if username is not None:
        repo.set(f"{prefix}_username", username, "Basic auth username")
    if password is not None:
        repo.set(f"{prefix}_password", password, "Basic auth password")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Configure Basic credentials for the ERP import APIs")
    parser.add_argument("prefix", choices=PREFIXES)
    parser.add_argument("--disable", action="store_true", help="Make auth optional again")
    parser.add_argument("--username")
    args = parser.parse_args(argv)

    password = None
    if not args.disable and args.username:
        password = getpass.getpass(f"Password for {args.username}: ")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        configure(SQLAlchemyConfigRepository(db, AppConfiguration), args.prefix, not args.disable, args.username, password)
        state = "disabled" if args.disable else "enabled"
        print(f"Auth {state} for {args.prefix}.")
    except Exception as e:
        print(f"Configuration failed: {e}")
        db.rollback()
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
