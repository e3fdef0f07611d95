from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..classes.model import SchoolClass
from ..classes.repository import ClassRepository
from ..core.enums import Role
from ..core.exceptions import ReferenceLoadError
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from ..users.model import User
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class CachedTeacher:
    """Mutable copy of a teacher; subject_ids grows as links are added during a job."""

    user_id: int
    name: str
    email: str
    subject_ids: set[int] = field(default_factory=set)

    @classmethod
    def from_user(cls, user: User) -> "CachedTeacher":
        return cls(user_id=user.user_id, name=user.name, email=user.email, subject_ids=set(user.subject_ids))

    @property
    def label(self) -> str:
        return f"{self.name} [{self.email}]"


@dataclass
class ReferenceCache:
    """Snapshot of one tenant's classes, subjects and teachers for a single import job.

    The job owns the cache and updates it in place whenever it creates a
    subject, class or teacher, or links a teacher to a subject, so later rows
    see earlier rows' effects without re-querying storage.
    """

    tenant_id: int
    classes: list[SchoolClass] = field(default_factory=list)
    subjects: list[Subject] = field(default_factory=list)
    teachers: list[CachedTeacher] = field(default_factory=list)

    @classmethod
    def load(
        cls,
        *,
        tenant_id: int,
        classes: ClassRepository,
        subjects: SubjectRepository,
        users: UserRepository,
    ) -> "ReferenceCache":
        try:
            class_list = list(classes.list_by_tenant(tenant_id))
            subject_list = list(subjects.list_by_tenant(tenant_id))
            teacher_list = [
                CachedTeacher.from_user(u) for u in users.list_by_tenant_and_role(tenant_id=tenant_id, role=Role.TEACHER)
            ]
        except Exception as e:
            logger.exception("Could not load reference data for tenant %s", tenant_id)
            raise ReferenceLoadError(f"Could not load reference data: {e}") from e

        logger.debug(
            "Reference cache for tenant %s: %d classes, %d subjects, %d teachers",
            tenant_id,
            len(class_list),
            len(subject_list),
            len(teacher_list),
        )
        return cls(tenant_id=tenant_id, classes=class_list, subjects=subject_list, teachers=teacher_list)

    def find_class(self, name: str) -> Optional[SchoolClass]:
        wanted = name.strip().lower()
        return next((c for c in self.classes if c.name.strip().lower() == wanted), None)

    def subject_by_id(self, subject_id: int) -> Optional[Subject]:
        return next((s for s in self.subjects if s.subject_id == subject_id), None)

    def teacher_subject_names(self, teacher: CachedTeacher) -> set[str]:
        names = set()
        for subject_id in teacher.subject_ids:
            subject = self.subject_by_id(subject_id)
            if subject:
                names.add(subject.name.strip().lower())
        return names

    def add_class(self, school_class: SchoolClass) -> None:
        self.classes.append(school_class)

    def add_subject(self, subject: Subject) -> None:
        self.subjects.append(subject)

    def add_teacher(self, teacher: CachedTeacher) -> None:
        self.teachers.append(teacher)
