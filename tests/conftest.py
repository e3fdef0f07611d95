from __future__ import annotations

from dataclasses import replace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.school_admin.school_admin.classes.model import SchoolClass
from src.school_admin.school_admin.core.enums import ImportKind, Role
from src.school_admin.school_admin.imports.policy import ImportPolicy
from src.school_admin.school_admin.imports.service import ImportService
from src.school_admin.school_admin.schedules.model import Schedule, ScheduleExportRow
from src.school_admin.school_admin.subjects.model import Subject
from src.school_admin.school_admin.users.model import User

TENANT_ID = 1
OTHER_TENANT_ID = 2


class InMemoryClasses:
    def __init__(self):
        self.items: dict[int, SchoolClass] = {}
        self._id = 0
        self.fail_listing = False

    def list_by_tenant(self, tenant_id: int):
        if self.fail_listing:
            raise RuntimeError("database unavailable")
        return [c for c in self.items.values() if c.tenant_id == tenant_id]

    def create(self, *, tenant_id: int, name: str) -> int:
        self._id += 1
        self.items[self._id] = SchoolClass(class_id=self._id, tenant_id=tenant_id, name=name)
        return self._id


class InMemorySubjects:
    def __init__(self):
        self.items: dict[int, Subject] = {}
        self._id = 0
        self.create_calls = 0

    def list_by_tenant(self, tenant_id: int):
        return [s for s in self.items.values() if s.tenant_id == tenant_id]

    def create(self, *, tenant_id: int, name: str, code: str) -> Subject:
        self.create_calls += 1
        self._id += 1
        subject = Subject(subject_id=self._id, tenant_id=tenant_id, name=name, code=code)
        self.items[self._id] = subject
        return subject


class InMemoryUsers:
    def __init__(self):
        self.items: dict[int, User] = {}
        self.links: set[tuple[int, int]] = set()
        self._id = 0

    def get_by_email(self, email: str) -> Optional[User]:
        user = next((u for u in self.items.values() if u.email == email), None)
        return self._with_links(user) if user else None

    def list_by_tenant_and_role(self, *, tenant_id: int, role: Role):
        return [self._with_links(u) for u in self.items.values() if u.tenant_id == tenant_id and u.role == role]

    def create_user(self, *, tenant_id, name, email, password_hash, role, class_id=None) -> int:
        if self.get_by_email(email):
            raise RuntimeError(f"Duplicate entry '{email}' for key 'email'")
        self._id += 1
        self.items[self._id] = User(
            user_id=self._id,
            tenant_id=tenant_id,
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            class_id=class_id,
        )
        return self._id

    def link_subject(self, *, user_id: int, subject_id: int) -> bool:
        if (user_id, subject_id) in self.links:
            return False
        self.links.add((user_id, subject_id))
        return True

    def _with_links(self, user: User) -> User:
        return replace(user, subject_ids=tuple(sorted(s for u, s in self.links if u == user.user_id)))


class InMemorySchedules:
    def __init__(self, classes: InMemoryClasses, users: InMemoryUsers):
        self.items: dict[int, Schedule] = {}
        self._id = 0
        self._classes = classes
        self._users = users
        self.fail_writes = False

    def find_by_natural_key(self, *, tenant_id, class_id, day_of_week, start_time) -> Optional[Schedule]:
        return next(
            (
                s
                for s in self.items.values()
                if (s.tenant_id, s.class_id, s.day_of_week, s.start_time) == (tenant_id, class_id, day_of_week, start_time)
            ),
            None,
        )

    def create(self, *, tenant_id, class_id, teacher_id, subject, day_of_week, start_time, end_time) -> int:
        if self.fail_writes:
            raise RuntimeError("Lock wait timeout exceeded")
        self._id += 1
        self.items[self._id] = Schedule(
            schedule_id=self._id,
            tenant_id=tenant_id,
            class_id=class_id,
            teacher_id=teacher_id,
            subject=subject,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
        )
        return self._id

    def update(self, *, schedule_id, teacher_id, subject, end_time) -> None:
        if self.fail_writes:
            raise RuntimeError("Lock wait timeout exceeded")
        self.items[schedule_id] = replace(self.items[schedule_id], teacher_id=teacher_id, subject=subject, end_time=end_time)

    def list_for_export(self, *, tenant_id, class_id=None, day_of_week=None):
        rows = []
        for s in sorted(self.items.values(), key=lambda s: (s.day_of_week, s.start_time)):
            if s.tenant_id != tenant_id:
                continue
            if class_id is not None and s.class_id != class_id:
                continue
            if day_of_week is not None and s.day_of_week != day_of_week:
                continue
            teacher = self._users.items[s.teacher_id]
            rows.append(
                ScheduleExportRow(
                    day_of_week=s.day_of_week,
                    start_time=s.start_time,
                    end_time=s.end_time,
                    class_name=self._classes.items[s.class_id].name,
                    subject=s.subject,
                    teacher_name=teacher.name,
                    teacher_email=teacher.email,
                )
            )
        return rows


class School:
    """In-memory repositories plus helpers to seed one or more tenants."""

    def __init__(self):
        self.classes = InMemoryClasses()
        self.subjects = InMemorySubjects()
        self.users = InMemoryUsers()
        self.schedules = InMemorySchedules(self.classes, self.users)

    def add_class(self, name: str, tenant_id: int = TENANT_ID) -> int:
        return self.classes.create(tenant_id=tenant_id, name=name)

    def add_subject(self, name: str, code: str, tenant_id: int = TENANT_ID) -> Subject:
        subject = self.subjects.create(tenant_id=tenant_id, name=name, code=code)
        self.subjects.create_calls = 0
        return subject

    def add_user(self, name: str, email: str, role: Role, tenant_id: int = TENANT_ID, subjects=()) -> int:
        user_id = self.users.create_user(
            tenant_id=tenant_id,
            name=name,
            email=email,
            password_hash=generate_password_hash("secret"),
            role=role,
        )
        for subject in subjects:
            self.users.link_subject(user_id=user_id, subject_id=subject.subject_id)
        return user_id

    def add_teacher(self, name: str, email: str, subjects=(), tenant_id: int = TENANT_ID) -> int:
        return self.add_user(name, email, Role.TEACHER, tenant_id=tenant_id, subjects=subjects)

    def teacher_subject_ids(self, user_id: int) -> set[int]:
        return {s for u, s in self.users.links if u == user_id}

    def service(self, **policies: ImportPolicy) -> ImportService:
        return ImportService(
            self.classes,
            self.subjects,
            self.users,
            self.schedules,
            policies={ImportKind(k): v for k, v in policies.items()},
        )


@pytest.fixture
def school() -> School:
    return School()
