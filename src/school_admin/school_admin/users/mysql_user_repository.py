from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, tenant_id, name, email, password_hash, role, class_id"


def _to_user(row: dict, subject_ids: tuple[int, ...] = ()) -> User:
    return User(
        user_id=int(row["user_id"]),
        tenant_id=int(row["tenant_id"]) if row.get("tenant_id") is not None else None,
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        class_id=row.get("class_id"),
        subject_ids=subject_ids,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            if not row:
                return None
            cur.execute("SELECT subject_id FROM teacher_subjects WHERE user_id=%s", (int(row["user_id"]),))
            return _to_user(row, tuple(int(r["subject_id"]) for r in fetchall(cur)))

    def list_by_tenant_and_role(self, *, tenant_id: int, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE tenant_id=%s AND role=%s ORDER BY name",
                (int(tenant_id), role.value),
            )
            rows = fetchall(cur)
            if not rows:
                return []

            user_ids = [int(r["user_id"]) for r in rows]
            cur.execute(
                f"SELECT user_id, subject_id FROM teacher_subjects WHERE user_id IN ({in_placeholders(user_ids)})",
                tuple(user_ids),
            )
            links: dict[int, list[int]] = {}
            for r in fetchall(cur):
                links.setdefault(int(r["user_id"]), []).append(int(r["subject_id"]))

            return [_to_user(r, tuple(links.get(int(r["user_id"]), []))) for r in rows]

    def create_user(
        self,
        *,
        tenant_id: int,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        class_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(tenant_id, name, email, password_hash, role, class_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(tenant_id), name, email, password_hash, role.value, class_id),
            )
            return int(cur.lastrowid)

    def link_subject(self, *, user_id: int, subject_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO teacher_subjects(user_id, subject_id) VALUES(%s,%s)",
                (int(user_id), int(subject_id)),
            )
            return cur.rowcount > 0
