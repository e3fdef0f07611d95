from __future__ import annotations

from typing import Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def list_by_tenant(self, tenant_id: int) -> Sequence[Subject]:
        raise NotImplementedError

    def create(self, *, tenant_id: int, name: str, code: str) -> Subject:
        raise NotImplementedError
