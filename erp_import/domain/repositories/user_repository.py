"""
User Repository Interface.
"""

from typing import Iterable, List, Optional, Protocol, Tuple

from erp_import.domain.models.user import User


class UserRepository(Protocol):
    """Interface for user provisioning and role checks."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def has_active_role(self, user_id: str, roles: Iterable[str]) -> bool:
        """Whether the user holds any of the given roles with is_active set."""
        ...

    def create_with_roles(
        self,
        email: str,
        password_hash: str,
        display_name: Optional[str],
        email_confirmed: bool,
        created_by: Optional[str],
        roles: List[str],
    ) -> Tuple[User, List[str]]:
        """Create the user, then its roles. Returns the user and the roles actually stored."""
        ...
