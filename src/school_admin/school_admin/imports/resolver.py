from __future__ import annotations

import logging
import re
from typing import Callable, Optional, TypeVar

from werkzeug.security import generate_password_hash

from ..classes.model import SchoolClass
from ..core.constants import SUBJECT_CODE_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AmbiguousTeacher,
    ImportRowError,
    PersistenceFailure,
    UnknownClass,
    UnknownSubject,
    UnknownTeacher,
)
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from ..users.repository import UserRepository
from .cache import CachedTeacher, ReferenceCache
from .policy import ImportPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

_BRACKET_EMAIL_RE = re.compile(r"\[(.*?)\]")


def persist(action: str, write: Callable[..., T], **kwargs) -> T:
    """Run a storage write; any storage error becomes a row-level PersistenceFailure."""
    try:
        return write(**kwargs)
    except ImportRowError:
        raise
    except Exception as e:
        raise PersistenceFailure(f"Could not {action}: {e}") from e


def normalize_text(value: str) -> str:
    """Upper-case, trimmed, inner whitespace collapsed."""
    return re.sub(r"\s+", " ", (value or "").strip()).upper()


def extract_email(token: str) -> Optional[str]:
    """'Budi [budi@school.id]' or 'budi@school.id' -> 'budi@school.id'."""
    match = _BRACKET_EMAIL_RE.search(token or "")
    if match and match.group(1).strip():
        return match.group(1).strip()
    token = (token or "").strip()
    if "@" in token and " " not in token:
        return token
    return None


def subject_code_for(name: str) -> str:
    return name.strip()[:SUBJECT_CODE_LENGTH].upper()


def name_from_email(email: str) -> str:
    """'budi.santoso@school.id' -> 'Budi Santoso'."""
    local = email.split("@", 1)[0]
    return " ".join(part.capitalize() for part in re.split(r"[._]+", local) if part) or email


class ReferenceResolver:
    """Maps free text from spreadsheet cells to the tenant's entities.

    Lookups only read the job's ReferenceCache. The create_* / ensure_link
    methods write through the repositories and record the result in the
    cache, so later rows of the same job observe them.
    """

    def __init__(
        self,
        cache: ReferenceCache,
        *,
        subjects: SubjectRepository,
        users: UserRepository,
        policy: ImportPolicy,
    ):
        self._cache = cache
        self._subjects = subjects
        self._users = users
        self._policy = policy

    @property
    def policy(self) -> ImportPolicy:
        return self._policy

    # ---- classes -------------------------------------------------------

    def resolve_class(self, name: str) -> SchoolClass:
        school_class = self._cache.find_class(name)
        if not school_class:
            raise UnknownClass(f"Class '{name}' was not found")
        return school_class

    # ---- subjects ------------------------------------------------------

    def find_subject(self, token: str) -> Optional[Subject]:
        wanted = normalize_text(token)
        if not wanted:
            return None

        for subject in self._cache.subjects:
            if normalize_text(subject.name) == wanted or normalize_text(subject.code) == wanted:
                return subject

        # Template values look like 'MATEMATIKA (MTK01)'.
        for subject in self._cache.subjects:
            for candidate in (normalize_text(subject.code), normalize_text(subject.name)):
                if candidate and (candidate in wanted or wanted in candidate):
                    if wanted != normalize_text(subject.label):
                        logger.warning("Subject '%s' matched '%s' by partial text", token, subject.label)
                    return subject
        return None

    def resolve_subject(self, token: str) -> Subject:
        """find_subject, falling back to creation when the policy allows it."""
        subject = self.find_subject(token)
        if subject:
            return subject
        if not self._policy.create_subjects:
            raise UnknownSubject(f"Subject '{token}' was not found")
        return self.create_subject(token)

    def create_subject(self, name: str) -> Subject:
        name = re.sub(r"\s+", " ", name.strip())
        subject = persist(
            f"create subject '{name}'",
            self._subjects.create,
            tenant_id=self._cache.tenant_id,
            name=name,
            code=subject_code_for(name),
        )
        self._cache.add_subject(subject)
        logger.info("Created subject '%s' (%s) for tenant %s", subject.name, subject.code, self._cache.tenant_id)
        return subject

    # ---- teachers ------------------------------------------------------

    def find_teacher(self, token: str) -> Optional[CachedTeacher]:
        """Explicit teacher: email (exact) when one is given, otherwise the name."""
        email = extract_email(token)
        if email:
            return next((t for t in self._cache.teachers if t.email == email), None)

        wanted = normalize_text(token)
        return next((t for t in self._cache.teachers if normalize_text(t.name) == wanted), None)

    def resolve_teacher(self, token: str) -> CachedTeacher:
        teacher = self.find_teacher(token)
        if teacher:
            return teacher

        email = extract_email(token)
        if email and self._policy.create_teachers:
            return self.create_teacher(email)
        raise UnknownTeacher(f"Teacher '{token}' was not found")

    def teacher_for_subject(self, subject_name: str) -> CachedTeacher:
        """Auto-link: the single teacher already teaching this subject."""
        wanted = subject_name.strip().lower()
        matches = [t for t in self._cache.teachers if wanted in self._cache.teacher_subject_names(t)]

        if not matches:
            raise UnknownTeacher(
                f"No teacher teaches '{subject_name}'. Fill in the teacher email (TeacherEmail/EmailGuru) for this row."
            )
        if len(matches) > 1:
            raise AmbiguousTeacher(
                f"{len(matches)} teachers teach '{subject_name}'. Fill in the teacher email (TeacherEmail/EmailGuru) for this row."
            )
        return matches[0]

    def create_teacher(self, email: str) -> CachedTeacher:
        existing = persist(f"look up user '{email}'", self._users.get_by_email, email=email)
        if existing:
            if existing.role != Role.TEACHER:
                raise UnknownTeacher(f"Email '{email}' is registered as {existing.role.value}, not TEACHER")
            if existing.tenant_id != self._cache.tenant_id:
                raise UnknownTeacher(f"Email '{email}' belongs to a teacher of another school")
            # Storage may match emails case-insensitively; reuse the cached entry.
            cached = next((t for t in self._cache.teachers if t.user_id == existing.user_id), None)
            if cached:
                return cached
            teacher = CachedTeacher.from_user(existing)
            self._cache.add_teacher(teacher)
            return teacher

        name = name_from_email(email)
        user_id = persist(
            f"create teacher '{email}'",
            self._users.create_user,
            tenant_id=self._cache.tenant_id,
            name=name,
            email=email,
            password_hash=generate_password_hash(self._policy.default_password),
            role=Role.TEACHER,
        )
        teacher = CachedTeacher(user_id=user_id, name=name, email=email)
        self._cache.add_teacher(teacher)
        logger.info("Created teacher '%s' <%s> for tenant %s", name, email, self._cache.tenant_id)
        return teacher

    def ensure_link(self, teacher: CachedTeacher, subject: Subject) -> None:
        if subject.subject_id in teacher.subject_ids:
            return
        persist(
            f"link '{teacher.email}' to '{subject.name}'",
            self._users.link_subject,
            user_id=teacher.user_id,
            subject_id=subject.subject_id,
        )
        teacher.subject_ids.add(subject.subject_id)
        logger.info("Linked teacher %s to subject '%s'", teacher.email, subject.name)
