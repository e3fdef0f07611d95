from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import SchoolClass
from .repository import ClassRepository


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_by_tenant(self, tenant_id: int) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_id, tenant_id, name FROM classes WHERE tenant_id=%s ORDER BY name",
                (int(tenant_id),),
            )
            return [
                SchoolClass(class_id=int(r["class_id"]), tenant_id=int(r["tenant_id"]), name=r["name"])
                for r in fetchall(cur)
            ]

    def create(self, *, tenant_id: int, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO classes(tenant_id, name) VALUES(%s,%s)", (int(tenant_id), name))
            return int(cur.lastrowid)
