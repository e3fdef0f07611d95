from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Schedule, ScheduleExportRow
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_natural_key(
        self, *, tenant_id: int, class_id: int, day_of_week: int, start_time: str
    ) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT schedule_id, tenant_id, class_id, teacher_id, subject, day_of_week, start_time, end_time
                FROM schedules
                WHERE tenant_id=%s AND class_id=%s AND day_of_week=%s AND start_time=%s
                """,
                (int(tenant_id), int(class_id), int(day_of_week), start_time),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Schedule(
                schedule_id=int(r["schedule_id"]),
                tenant_id=int(r["tenant_id"]),
                class_id=int(r["class_id"]),
                teacher_id=int(r["teacher_id"]),
                subject=r["subject"],
                day_of_week=int(r["day_of_week"]),
                start_time=r["start_time"],
                end_time=r["end_time"],
            )

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedules(tenant_id, class_id, teacher_id, subject, day_of_week, start_time, end_time)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(tenant_id), int(class_id), int(teacher_id), subject, int(day_of_week), start_time, end_time),
            )
            return int(cur.lastrowid)

    def update(self, *, schedule_id: int, teacher_id: int, subject: str, end_time: str) -> None:
        # rowcount is 0 when nothing changed, so it is not reported back.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE schedules SET teacher_id=%s, subject=%s, end_time=%s WHERE schedule_id=%s",
                (int(teacher_id), subject, end_time, int(schedule_id)),
            )

    def list_for_export(
        self, *, tenant_id: int, class_id: Optional[int] = None, day_of_week: Optional[int] = None
    ) -> Sequence[ScheduleExportRow]:
        clauses = ["sc.tenant_id=%s"]
        params: list[object] = [int(tenant_id)]
        if class_id is not None:
            clauses.append("sc.class_id=%s")
            params.append(int(class_id))
        if day_of_week is not None:
            clauses.append("sc.day_of_week=%s")
            params.append(int(day_of_week))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    sc.day_of_week,
                    sc.start_time,
                    sc.end_time,
                    sc.subject,
                    c.name AS class_name,
                    u.name AS teacher_name,
                    u.email AS teacher_email
                FROM schedules sc
                JOIN classes c ON c.class_id = sc.class_id
                LEFT JOIN users u ON u.user_id = sc.teacher_id
                WHERE {where}
                ORDER BY sc.day_of_week ASC, sc.start_time ASC, c.name ASC
                """,
                tuple(params),
            )
            return [
                ScheduleExportRow(
                    day_of_week=int(r["day_of_week"]),
                    start_time=r["start_time"],
                    end_time=r["end_time"],
                    class_name=r["class_name"],
                    subject=r["subject"],
                    teacher_name=r.get("teacher_name") or "Unknown",
                    teacher_email=r.get("teacher_email") or "",
                )
                for r in fetchall(cur)
            ]
