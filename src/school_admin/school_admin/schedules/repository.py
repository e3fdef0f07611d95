from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Schedule, ScheduleExportRow


class ScheduleRepository(Protocol):
    def find_by_natural_key(
        self, *, tenant_id: int, class_id: int, day_of_week: int, start_time: str
    ) -> Optional[Schedule]:
        raise NotImplementedError

    def create(
        self,
        *,
        tenant_id: int,
        class_id: int,
        teacher_id: int,
        subject: str,
        day_of_week: int,
        start_time: str,
        end_time: str,
    ) -> int:
        """Insert a schedule and return schedule_id."""

        raise NotImplementedError

    def update(self, *, schedule_id: int, teacher_id: int, subject: str, end_time: str) -> None:
        raise NotImplementedError

    def list_for_export(
        self, *, tenant_id: int, class_id: Optional[int] = None, day_of_week: Optional[int] = None
    ) -> Sequence[ScheduleExportRow]:
        """Schedules joined with class and teacher, ordered by day and start time."""

        raise NotImplementedError
