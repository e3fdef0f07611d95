from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a tenant member.

    Plain data object; teachers carry the ids of the subjects they teach.
    """

    user_id: int
    tenant_id: Optional[int]
    name: str
    email: str
    password_hash: str
    role: Role
    class_id: Optional[int] = None
    subject_ids: tuple[int, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        """'Name [email]', the format used in import templates."""
        return f"{self.name} [{self.email}]"
