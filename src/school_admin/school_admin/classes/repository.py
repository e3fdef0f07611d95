from __future__ import annotations

from typing import Protocol, Sequence

from .model import SchoolClass


class ClassRepository(Protocol):
    def list_by_tenant(self, tenant_id: int) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def create(self, *, tenant_id: int, name: str) -> int:
        """Insert a class and return class_id."""

        raise NotImplementedError
