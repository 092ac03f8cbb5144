"""Helpers shared by the batch import services."""

from typing import Any, List

from sqlalchemy.exc import SQLAlchemyError

from erp_import.core.exceptions import ValidationError

IMPORT_MODES = ("upsert", "insert")


def require_batch(records: Any, key: str) -> List[Any]:
    """Reject empty or non-list batches before anything is written."""
    if not isinstance(records, list) or not records:
        raise ValidationError(f"Invalid input: '{key}' must be a non-empty array")
    return records


def require_mode(mode: Any) -> str:
    if mode not in IMPORT_MODES:
        raise ValidationError("Invalid input: 'mode' must be 'upsert' or 'insert'")
    return mode


def database_error_message(error: SQLAlchemyError) -> str:
    """The driver's message without SQLAlchemy's statement and parameter dump."""
    return str(getattr(error, "orig", None) or error).strip()


def summarize(noun: str, imported: int, failed: int, extra: str = "") -> str:
    if failed == 0:
        return f"Successfully imported {imported} {noun}(s){extra}"
    return f"Imported {imported} {noun}(s){extra}, {failed} failed"


def require_flag(value: Any, key: str, default: bool = True) -> bool:
    """A JSON boolean, or the default when absent; strings like "false" are rejected."""
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(f"Invalid input: '{key}' must be a boolean")
    return value
