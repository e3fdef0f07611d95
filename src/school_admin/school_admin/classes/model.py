from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SchoolClass:
    class_id: int
    tenant_id: int
    name: str
