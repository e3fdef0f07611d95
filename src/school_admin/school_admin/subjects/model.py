from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Subject:
    subject_id: int
    tenant_id: int
    name: str
    code: str

    @property
    def label(self) -> str:
        """'Name (CODE)', the format used in import templates."""
        return f"{self.name} ({self.code})"
