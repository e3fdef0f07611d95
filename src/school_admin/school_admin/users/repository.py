from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_by_tenant_and_role(self, *, tenant_id: int, role: Role) -> Sequence[User]:
        """Users of one tenant and role, with their linked subject ids."""

        raise NotImplementedError

    def create_user(
        self,
        *,
        tenant_id: int,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        class_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def link_subject(self, *, user_id: int, subject_id: int) -> bool:
        """Attach a subject to a teacher. Idempotent; returns True if a link was added."""

        raise NotImplementedError
