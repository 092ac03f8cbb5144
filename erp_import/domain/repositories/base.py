"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import Any, Dict, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic write operations."""

    def create(self, obj_in: Dict[str, Any]) -> T:
        """Insert a new entity and commit."""
        ...

    def update(self, db_obj: T, obj_in: Dict[str, Any]) -> T:
        """Write the given fields onto an existing entity and commit."""
        ...

    def delete_all(self) -> int:
        """Delete every row of the entity's table. Returns the row count."""
        ...
