"""Per-kind row importers.

Each importer turns one decoded ImportRow into storage writes and reports
how the row landed (RowStatus). Expected problems are raised as
ImportRowError subclasses; the import service turns them into row results.
"""
from __future__ import annotations

import re
from typing import Optional, Protocol

from werkzeug.security import generate_password_hash

from ..classes.model import SchoolClass
from ..classes.repository import ClassRepository
from ..core.enums import Role, RowStatus
from ..core.exceptions import InvalidField, UnknownSubject, UnknownTeacher
from ..schedules.repository import ScheduleRepository
from ..users.repository import UserRepository
from . import fields
from .cache import CachedTeacher, ReferenceCache
from .daytime import normalize_time, parse_day
from .resolver import ReferenceResolver, persist
from .rows import ImportRow

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class RowImporter(Protocol):
    def apply(self, row: ImportRow) -> RowStatus:
        raise NotImplementedError


class ScheduleRowImporter:
    """Class + day + start time identify a lesson; re-imports update it in place."""

    def __init__(self, *, resolver: ReferenceResolver, schedules: ScheduleRepository, tenant_id: int):
        self._resolver = resolver
        self._schedules = schedules
        self._tenant_id = int(tenant_id)

    def apply(self, row: ImportRow) -> RowStatus:
        class_name = row.require(fields.CLASS_NAME, "Class")
        subject_raw = row.require(fields.SUBJECT, "Subject")
        day_raw = row.require(fields.DAY, "Day")
        start_raw = row.require(fields.START_TIME, "Start time")
        end_raw = row.require(fields.END_TIME, "End time")
        teacher_raw = row.get(fields.TEACHER)

        # No writes happen before this point or for a row that fails below it.
        day_of_week = parse_day(day_raw)
        start_time = normalize_time(start_raw, "Start time")
        end_time = normalize_time(end_raw, "End time")

        school_class = self._resolver.resolve_class(class_name)
        subject = self._resolver.find_subject(subject_raw)
        if subject is None and not self._resolver.policy.create_subjects:
            raise UnknownSubject(f"Subject '{subject_raw}' was not found")

        if teacher_raw:
            teacher = self._resolver.resolve_teacher(teacher_raw)
        elif subject is None:
            raise UnknownTeacher(
                f"'{subject_raw}' is a new subject and nobody teaches it yet. "
                "Fill in the teacher email (TeacherEmail/EmailGuru) for this row."
            )
        else:
            teacher = self._resolver.teacher_for_subject(subject.name)

        if subject is None:
            subject = self._resolver.create_subject(subject_raw)
        self._resolver.ensure_link(teacher, subject)

        existing = persist(
            "look up the existing schedule",
            self._schedules.find_by_natural_key,
            tenant_id=self._tenant_id,
            class_id=school_class.class_id,
            day_of_week=day_of_week,
            start_time=start_time,
        )
        if existing:
            persist(
                "update the schedule",
                self._schedules.update,
                schedule_id=existing.schedule_id,
                teacher_id=teacher.user_id,
                subject=subject.name,
                end_time=end_time,
            )
            return RowStatus.UPDATED

        persist(
            "create the schedule",
            self._schedules.create,
            tenant_id=self._tenant_id,
            class_id=school_class.class_id,
            teacher_id=teacher.user_id,
            subject=subject.name,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
        )
        return RowStatus.CREATED


class ClassRowImporter:
    """Creates classes by name; names already present are skipped."""

    def __init__(self, *, cache: ReferenceCache, classes: ClassRepository, tenant_id: int):
        self._cache = cache
        self._classes = classes
        self._tenant_id = int(tenant_id)

    def apply(self, row: ImportRow) -> RowStatus:
        name = re.sub(r"\s+", " ", row.require(fields.CLASS_NAME, "Class name"))
        if self._cache.find_class(name):
            return RowStatus.SKIPPED

        class_id = persist(f"create class '{name}'", self._classes.create, tenant_id=self._tenant_id, name=name)
        self._cache.add_class(SchoolClass(class_id=class_id, tenant_id=self._tenant_id, name=name))
        return RowStatus.CREATED


class UserRowImporter:
    """Creates teachers and students; emails already in this school are skipped."""

    def __init__(self, *, resolver: ReferenceResolver, cache: ReferenceCache, users: UserRepository, tenant_id: int):
        self._resolver = resolver
        self._cache = cache
        self._users = users
        self._tenant_id = int(tenant_id)

    @staticmethod
    def _role(raw: str) -> Role:
        value = (raw or "").strip().upper()
        return Role.TEACHER if value == Role.TEACHER.value else Role.STUDENT

    @staticmethod
    def _split_subjects(raw: str) -> list[str]:
        return [part.strip() for part in re.split(r"[;,]", raw or "") if part.strip()]

    def apply(self, row: ImportRow) -> RowStatus:
        name = row.require(fields.USER_NAME, "Name")
        email = row.require(fields.EMAIL, "Email").strip()
        if not _EMAIL_RE.match(email):
            raise InvalidField(f"Email '{email}' is not a valid address")

        role = self._role(row.get(fields.ROLE))
        password = row.get(fields.PASSWORD) or self._resolver.policy.default_password

        class_id: Optional[int] = None
        class_name = row.get(fields.CLASS_NAME)
        if role == Role.STUDENT and class_name:
            class_id = self._resolver.resolve_class(class_name).class_id

        tokens = self._split_subjects(row.get(fields.USER_SUBJECTS)) if role == Role.TEACHER else []
        if not self._resolver.policy.create_subjects:
            for token in tokens:
                if self._resolver.find_subject(token) is None:
                    raise UnknownSubject(f"Subject '{token}' was not found")

        existing = persist(f"look up user '{email}'", self._users.get_by_email, email=email)
        if existing:
            if existing.tenant_id != self._tenant_id:
                raise InvalidField(f"Email '{email}' is already registered with another school")
            return RowStatus.SKIPPED

        # Subjects are created only once the row is certain to add a user.
        subjects = [self._resolver.resolve_subject(token) for token in tokens]

        user_id = persist(
            f"create user '{email}'",
            self._users.create_user,
            tenant_id=self._tenant_id,
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            class_id=class_id,
        )

        if role == Role.TEACHER:
            teacher = CachedTeacher(user_id=user_id, name=name, email=email)
            self._cache.add_teacher(teacher)
            for subject in subjects:
                self._resolver.ensure_link(teacher, subject)
        return RowStatus.CREATED
