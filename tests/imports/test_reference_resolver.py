from __future__ import annotations

import pytest

from src.school_admin.school_admin.core.enums import Role
from src.school_admin.school_admin.core.exceptions import (
    AmbiguousTeacher,
    PersistenceFailure,
    UnknownClass,
    UnknownSubject,
    UnknownTeacher,
)
from src.school_admin.school_admin.imports.cache import ReferenceCache
from src.school_admin.school_admin.imports.policy import ImportPolicy
from src.school_admin.school_admin.imports.resolver import (
    ReferenceResolver,
    extract_email,
    name_from_email,
    normalize_text,
    persist,
    subject_code_for,
)

from conftest import TENANT_ID, InMemorySchedules, InMemoryUsers


def _resolver(school, policy=ImportPolicy()):
    cache = ReferenceCache.load(tenant_id=TENANT_ID, classes=school.classes, subjects=school.subjects, users=school.users)
    return ReferenceResolver(cache, subjects=school.subjects, users=school.users, policy=policy), cache


def test_helpers():
    assert normalize_text("  matematika   wajib ") == "MATEMATIKA WAJIB"
    assert extract_email("Budi [budi@school.id]") == "budi@school.id"
    assert extract_email("budi@school.id") == "budi@school.id"
    assert extract_email("Budi Santoso") is None
    assert subject_code_for("kimia") == "KIM"
    assert name_from_email("budi.santoso@school.id") == "Budi Santoso"


def test_class_lookup_is_case_insensitive(school):
    school.add_class("X-1")
    resolver, _ = _resolver(school)
    assert resolver.resolve_class("x-1").name == "X-1"
    with pytest.raises(UnknownClass):
        resolver.resolve_class("XI-9")


def test_subject_matches_name_code_and_template_label(school):
    mat = school.add_subject("Matematika", "MTK01")
    resolver, _ = _resolver(school)
    assert resolver.find_subject("matematika") == mat
    assert resolver.find_subject("mtk01") == mat
    assert resolver.find_subject("Matematika (MTK01)") == mat
    assert resolver.find_subject("Biologi") is None


def test_subject_creation_follows_policy(school):
    resolver, cache = _resolver(school)
    with pytest.raises(UnknownSubject):
        resolver.resolve_subject("Kimia")

    resolver, cache = _resolver(school, ImportPolicy(create_subjects=True))
    kimia = resolver.resolve_subject("Kimia")
    assert kimia.code == "KIM"
    assert kimia in cache.subjects
    assert resolver.resolve_subject("KIMIA") == kimia
    assert school.subjects.create_calls == 1


def test_explicit_teacher_by_email_or_name(school):
    budi = school.add_teacher("Budi Santoso", "budi@school.id")
    resolver, _ = _resolver(school)
    assert resolver.resolve_teacher("budi@school.id").user_id == budi
    assert resolver.resolve_teacher("Budi Santoso [budi@school.id]").user_id == budi
    assert resolver.resolve_teacher("budi  santoso").user_id == budi
    with pytest.raises(UnknownTeacher):
        resolver.resolve_teacher("Budi@School.id")


def test_teacher_for_subject_needs_exactly_one_match(school):
    mat = school.add_subject("Matematika", "MTK")
    fis = school.add_subject("Fisika", "FIS")
    school.add_teacher("A", "a@school.id", subjects=[mat])
    school.add_teacher("B", "b@school.id", subjects=[mat])
    c = school.add_teacher("C", "c@school.id", subjects=[fis])
    resolver, _ = _resolver(school)

    assert resolver.teacher_for_subject("fisika").user_id == c
    with pytest.raises(AmbiguousTeacher):
        resolver.teacher_for_subject("Matematika")
    with pytest.raises(UnknownTeacher):
        resolver.teacher_for_subject("Biologi")


def test_ensure_link_writes_once(school):
    mat = school.add_subject("Matematika", "MTK")
    budi = school.add_teacher("Budi", "budi@school.id")
    resolver, _ = _resolver(school)
    teacher = resolver.resolve_teacher("budi@school.id")

    resolver.ensure_link(teacher, mat)
    resolver.ensure_link(teacher, mat)

    assert school.teacher_subject_ids(budi) == {mat.subject_id}
    assert resolver.teacher_for_subject("Matematika") is teacher


def test_teacher_auto_creation(school):
    school.add_user("Siti", "siti@school.id", Role.STUDENT)
    school.add_teacher("Rina", "rina@other.id", tenant_id=2)
    resolver, cache = _resolver(school, ImportPolicy(create_teachers=True))

    created = resolver.resolve_teacher("new.teacher@school.id")
    assert created.name == "New Teacher"
    assert school.users.get_by_email("new.teacher@school.id").role == Role.TEACHER
    assert created in cache.teachers

    with pytest.raises(UnknownTeacher):
        resolver.resolve_teacher("siti@school.id")
    with pytest.raises(UnknownTeacher):
        resolver.resolve_teacher("rina@other.id")


def test_persist_wraps_storage_errors():
    def broken(**kwargs):
        raise RuntimeError("connection reset")

    with pytest.raises(PersistenceFailure) as exc:
        persist("create the schedule", broken)
    assert "connection reset" in str(exc.value)


class CaseInsensitiveUsers(InMemoryUsers):
    """Mirrors MySQL's case-insensitive collation on users.email."""

    def get_by_email(self, email: str):
        user = next((u for u in self.items.values() if u.email.lower() == email.lower()), None)
        return self._with_links(user) if user else None


def test_teacher_found_by_case_insensitive_storage_is_not_cached_twice(school):
    school.users = CaseInsensitiveUsers()
    school.schedules = InMemorySchedules(school.classes, school.users)
    school.add_class("X-1")
    mat = school.add_subject("Matematika", "MTK")
    budi = school.add_teacher("Budi", "budi@school.id", subjects=[mat])
    rows = [
        {"Hari": "Senin", "JamMulai": "07:00", "JamSelesai": "08:00", "Kelas": "X-1", "Mapel": "Matematika", "EmailGuru": "Budi@School.id"},
        {"Hari": "Selasa", "JamMulai": "07:00", "JamSelesai": "08:00", "Kelas": "X-1", "Mapel": "Matematika"},
    ]

    outcome = school.service(schedules=ImportPolicy(create_subjects=True, create_teachers=True)).import_schedules(
        tenant_id=TENANT_ID, rows=rows
    )

    assert (outcome.imported, outcome.failed) == (2, 0)
    assert {s.teacher_id for s in school.schedules.items.values()} == {budi}


def test_partial_subject_match_is_logged(school, caplog):
    school.add_subject("Bahasa Indonesia", "BAH")
    resolver, _ = _resolver(school)

    with caplog.at_level("WARNING"):
        subject = resolver.find_subject("Bahasa Inggris")

    assert subject.name == "Bahasa Indonesia"
    assert "partial text" in caplog.text


def test_template_label_match_is_not_logged(school, caplog):
    school.add_subject("Matematika", "MTK01")
    resolver, _ = _resolver(school)

    with caplog.at_level("WARNING"):
        resolver.find_subject("Matematika (MTK01)")

    assert caplog.text == ""
