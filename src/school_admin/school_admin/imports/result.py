from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from ..core.enums import RowStatus
from .rows import RawRow


@dataclass(frozen=True)
class RowApplied:
    raw: RawRow
    status: RowStatus


@dataclass(frozen=True)
class RowFailed:
    raw: RawRow
    error: Exception

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


RowResult = Union[RowApplied, RowFailed]


@dataclass(frozen=True)
class RowError:
    row: RawRow
    message: str
    error_type: str

    def to_dict(self) -> dict[str, Any]:
        return {"row": dict(self.row), "message": self.message, "type": self.error_type}


@dataclass
class ImportOutcome:
    """Counts and per-row errors of one import job, in input order.

    imported: records newly created; updated: schedules whose natural key
    already existed; skipped: classes/users already present.
    """

    imported: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[RowError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.imported + self.updated + self.skipped + self.failed

    def record(self, result: RowResult) -> None:
        if isinstance(result, RowFailed):
            self.failed += 1
            self.errors.append(RowError(row=result.raw, message=result.message, error_type=type(result.error).__name__))
        elif result.status == RowStatus.CREATED:
            self.imported += 1
        elif result.status == RowStatus.UPDATED:
            self.updated += 1
        else:
            self.skipped += 1

    def to_dict(self) -> Mapping[str, Any]:
        return {
            "imported": self.imported,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
            "total": self.total,
            "errors": [e.to_dict() for e in self.errors],
        }
