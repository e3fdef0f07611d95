from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Schedule:
    """One weekly lesson slot. day_of_week: 0=Monday .. 6=Sunday; times are 'HH:MM'."""

    schedule_id: int
    tenant_id: int
    class_id: int
    teacher_id: int
    subject: str
    day_of_week: int
    start_time: str
    end_time: str


@dataclass(frozen=True)
class ScheduleExportRow:
    day_of_week: int
    start_time: str
    end_time: str
    class_name: str
    subject: str
    teacher_name: str
    teacher_email: str
