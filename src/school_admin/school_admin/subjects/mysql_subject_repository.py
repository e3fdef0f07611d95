from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Subject
from .repository import SubjectRepository


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_by_tenant(self, tenant_id: int) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT subject_id, tenant_id, name, code FROM subjects WHERE tenant_id=%s ORDER BY name",
                (int(tenant_id),),
            )
            return [
                Subject(
                    subject_id=int(r["subject_id"]),
                    tenant_id=int(r["tenant_id"]),
                    name=r["name"],
                    code=r["code"],
                )
                for r in fetchall(cur)
            ]

    def create(self, *, tenant_id: int, name: str, code: str) -> Subject:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO subjects(tenant_id, name, code) VALUES(%s,%s,%s)",
                (int(tenant_id), name, code),
            )
            return Subject(subject_id=int(cur.lastrowid), tenant_id=int(tenant_id), name=name, code=code)
