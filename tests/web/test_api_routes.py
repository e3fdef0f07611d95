from __future__ import annotations

import io

import pytest

from src.school_admin.school_admin.container import build_services
from src.school_admin.school_admin.core.enums import Role
from src.school_admin.school_admin.main import create_app

from conftest import TENANT_ID


@pytest.fixture
def app(school, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    school.add_class("X-1")
    mat = school.add_subject("Matematika", "MTK")
    school.add_teacher("Budi", "budi@school.id", subjects=[mat])
    container = build_services(
        classes_repo=school.classes,
        subjects_repo=school.subjects,
        users_repo=school.users,
        schedules_repo=school.schedules,
    )
    return create_app(container)


def _login(client, role=Role.SCHOOL_ADMIN, tenant_id=TENANT_ID):
    with client.session_transaction() as sess:
        sess["user_id"] = 99
        sess["role"] = role.value
        sess["tenant_id"] = tenant_id


ROW = {"Hari": "Senin", "JamMulai": "7:00", "JamSelesai": "8:00", "Kelas": "X-1", "Mapel": "Matematika"}


def test_login_required(app):
    resp = app.test_client().post("/api/imports/schedules", json={"rows": [ROW]})
    assert resp.status_code == 401


def test_teachers_are_forbidden(app):
    client = app.test_client()
    _login(client, role=Role.TEACHER)
    assert client.post("/api/imports/schedules", json={"rows": [ROW]}).status_code == 403


def test_json_rows_import(app, school):
    client = app.test_client()
    _login(client)

    resp = client.post("/api/imports/schedules", json={"rows": [ROW, {**ROW, "Hari": "Funday"}]})

    assert resp.status_code == 200
    body = resp.get_json()
    assert (body["imported"], body["failed"], body["total"]) == (1, 1, 2)
    assert body["errors"][0]["row"]["Hari"] == "Funday"
    assert body["errors"][0]["type"] == "InvalidDay"
    assert len(school.schedules.items) == 1


def test_csv_upload(app):
    client = app.test_client()
    _login(client)
    csv = b"NamaKelas\nX-1\nX-2\n"

    resp = client.post(
        "/api/imports/classes",
        data={"file": (io.BytesIO(csv), "kelas.csv")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 200
    assert (resp.get_json()["imported"], resp.get_json()["skipped"]) == (1, 1)


def test_bad_payloads(app):
    client = app.test_client()
    _login(client)
    assert client.post("/api/imports/schedules", json={"rows": "nope"}).status_code == 400
    assert client.post("/api/imports/schedules", json={}).status_code == 400
    resp = client.post(
        "/api/imports/users",
        data={"file": (io.BytesIO(b"x"), "users.pdf")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert client.post("/api/imports/grades", json={"rows": []}).status_code == 404


def test_missing_tenant(app):
    client = app.test_client()
    _login(client, tenant_id=None)
    assert client.post("/api/imports/schedules", json={"rows": [ROW]}).status_code == 400


def test_owner_can_target_a_tenant(app, school):
    client = app.test_client()
    _login(client, role=Role.OWNER, tenant_id=None)

    resp = client.post(f"/api/imports/classes?tenantId={TENANT_ID}", json={"rows": [{"NamaKelas": "X-9"}]})

    assert resp.status_code == 200
    assert any(c.name == "X-9" for c in school.classes.list_by_tenant(TENANT_ID))


def test_school_admin_cannot_switch_tenant(app, school):
    client = app.test_client()
    _login(client)
    client.post("/api/imports/classes?tenantId=2", json={"rows": [{"NamaKelas": "X-9"}]})
    assert school.classes.list_by_tenant(2) == []


def test_reference_load_failure_is_503(app, school):
    school.classes.fail_listing = True
    client = app.test_client()
    _login(client)
    assert client.post("/api/imports/schedules", json={"rows": [ROW]}).status_code == 503


def test_template_download(app):
    client = app.test_client()
    _login(client)

    resp = client.get("/api/imports/template?type=users")

    assert resp.status_code == 200
    assert resp.headers["Content-Type"].startswith("application/vnd.openxmlformats")
    assert "template_users.xlsx" in resp.headers["Content-Disposition"]
    assert client.get("/api/imports/template?type=grades").status_code == 400


def test_schedule_export_download(app):
    client = app.test_client()
    _login(client)
    client.post("/api/imports/schedules", json={"rows": [ROW]})

    resp = client.get("/api/schedules/export?dayOfWeek=0")

    assert resp.status_code == 200
    assert resp.data[:2] == b"PK"
    assert client.get("/api/schedules/export?dayOfWeek=x").status_code == 400
    assert client.get("/api/schedules/export?dayOfWeek=8").status_code == 400
