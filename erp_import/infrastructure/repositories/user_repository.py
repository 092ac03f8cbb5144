"""
SQLAlchemy implementation of the User Repository.
"""

import structlog
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from erp_import.domain.models.user import User, UserRole
from erp_import.domain.repositories.user_repository import UserRepository
from erp_import.infrastructure.repositories.base_repository import SQLAlchemyRepository

logger = structlog.get_logger(__name__)


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def has_active_role(self, user_id: str, roles: Iterable[str]) -> bool:
        return (
            self.db.query(UserRole.id)
            .filter(
                UserRole.user_id == user_id,
                UserRole.role.in_(list(roles)),
                UserRole.is_active.is_(True),
            )
            .first()
            is not None
        )

    def create_with_roles(
        self,
        email: str,
        password_hash: str,
        display_name: Optional[str],
        email_confirmed: bool,
        created_by: Optional[str],
        roles: List[str],
    ) -> Tuple[User, List[str]]:
        user = self.create(
            {
                "email": email,
                "password_hash": password_hash,
                "display_name": display_name,
                "email_confirmed": email_confirmed,
                "created_by": created_by,
            }
        )
        if not roles:
            return user, []

        # The user stays even when role assignment fails; the failure is only logged
        try:
            with self.transaction():
                self.db.add_all(
                    [UserRole(user_id=user.id, role=role, email=email, is_active=True) for role in roles]
                )
        except SQLAlchemyError as e:
            logger.error("Role assignment failed", user_id=user.id, error=str(e))
            return user, []
        return user, list(roles)
