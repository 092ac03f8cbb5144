"""
SQLAlchemy implementation of the Base Repository.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from erp_import.domain.repositories.base import BaseRepository
from erp_import.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models.

    Every write runs in ``transaction()``: committed on success, rolled back
    before re-raising on failure, so the session stays usable for the next
    record of a batch.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    @contextmanager
    def reading(self) -> Iterator[Session]:
        """Lookups roll back on failure; PostgreSQL refuses further statements in an aborted transaction."""
        try:
            yield self.db
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def create(self, obj_in: Dict[str, Any]) -> ModelType:
        db_obj = self.model(**obj_in)
        with self.transaction():
            self.db.add(db_obj)
        return db_obj

    def update(self, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        with self.transaction():
            for field, value in obj_in.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)
            self.db.add(db_obj)
        return db_obj

    def delete_all(self) -> int:
        with self.transaction():
            deleted = self.db.query(self.model).delete(synchronize_session=False)
        return deleted
