from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for tenant scoping and route guards."""

    OWNER = "OWNER"
    SCHOOL_ADMIN = "SCHOOL_ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class ImportKind(str, Enum):
    """Which entity a spreadsheet import produces."""

    SCHEDULES = "schedules"
    CLASSES = "classes"
    USERS = "users"


class RowStatus(str, Enum):
    """How a successfully processed import row touched storage."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
