from __future__ import annotations

import pytest

from src.internship_tracker.internship_tracker.core.enums import Role
from src.internship_tracker.internship_tracker.main import create_app
from tests.fakes import build_fake_container


@pytest.fixture()
def container():
    return build_fake_container()


@pytest.fixture()
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


@pytest.fixture()
def seeded(container):
    users = container.users_repo
    admin = users.add("admin", Role.ADMIN, password="admin123")
    mentor = users.add("mentor", Role.SUPERVISOR, password="mentor123")
    student = users.add("s001", password="secret123", full_name="Sinta", supervisor_id=mentor.user_id)
    users.add("s002", password="secret123")
    return {"admin": admin, "mentor": mentor, "student": student}


def _login(client, identifier, password):
    resp = client.post("/api/auth/login", json={"identifier": identifier, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


def test_register_and_me(client):
    resp = client.post(
        "/api/auth/register",
        json={"full_name": "Dewi", "identifier": "s100", "email": "dewi@example.com", "password": "secret123"},
    )
    assert resp.status_code == 201

    headers = _login(client, "s100", "secret123")
    me = client.get("/api/auth/me", headers=headers).get_json()

    assert me["identifier"] == "s100"
    assert me["role"] == "STUDENT"


def test_missing_and_bad_tokens_are_401(client):
    assert client.get("/api/auth/me").status_code == 401
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid or expired token"


def test_wrong_password_is_401(client, seeded):
    resp = client.post("/api/auth/login", json={"identifier": "s001", "password": "nope"})

    assert resp.status_code == 401


def test_attendance_flow(client, seeded):
    headers = _login(client, "s001", "secret123")

    assert client.get("/api/attendance/status", headers=headers).get_json() == {"status": "NOT_CHECKED_IN"}
    assert client.patch("/api/attendance/check-out", headers=headers).status_code == 404

    resp = client.post("/api/attendance/check-in", headers=headers)
    assert resp.status_code == 201
    assert resp.get_json()["data"]["status"] in {"PRESENT", "LATE"}

    assert client.post("/api/attendance/check-in", headers=headers).status_code == 409
    assert client.get("/api/attendance/status", headers=headers).get_json()["status"] == "CHECKED_IN"
    assert len(client.get("/api/attendance/history", headers=headers).get_json()) == 1


def test_leave_request_validation_and_decision(client, seeded):
    student = _login(client, "s001", "secret123")
    mentor = _login(client, "mentor", "mentor123")

    assert client.post("/api/leaves", headers=student, json={"date": "2024-05-01"}).status_code == 400
    assert client.post("/api/leaves", headers=student, json={"date": "01/05/2024", "reason": "x"}).status_code == 400

    resp = client.post("/api/leaves", headers=student, json={"date": "2024-05-01", "reason": "medical"})
    assert resp.status_code == 201
    leave_id = resp.get_json()["data"]["id"]

    assert client.post("/api/leaves", headers=student, json={"date": "2024-05-01", "reason": "again"}).status_code == 409
    assert client.patch(f"/api/leaves/{leave_id}/status", headers=student, json={"status": "APPROVED"}).status_code == 403

    resp = client.patch(f"/api/leaves/{leave_id}/status", headers=mentor, json={"status": "approved"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "APPROVED"

    assert client.patch(f"/api/leaves/{leave_id}/status", headers=mentor, json={"status": "REJECTED"}).status_code == 409


def test_journal_submit_review_and_scoping(client, seeded):
    student = _login(client, "s001", "secret123")
    peer = _login(client, "s002", "secret123")
    mentor = _login(client, "mentor", "mentor123")

    bad = client.post("/api/journals", headers=student, json={"date": "2024-05-02", "activity": "x", "description": "y", "hours": 0})
    assert bad.status_code == 400

    too_long = client.post(
        "/api/journals",
        headers=student,
        json={"date": "2024-05-02", "activity": "x", "description": "y", "hours": 1000},
    )
    assert too_long.status_code == 400

    resp = client.post(
        "/api/journals",
        headers=student,
        json={"date": "2024-05-02", "activity": "Set up CI", "description": "Pipelines", "hours": 6},
    )
    assert resp.status_code == 201
    entry_id = resp.get_json()["data"]["id"]

    assert client.post("/api/journals", headers=mentor, json={}).status_code == 403
    assert client.get(f"/api/journals/{entry_id}", headers=peer).status_code == 404

    resp = client.patch(f"/api/journals/{entry_id}/status", headers=mentor, json={"status": "APPROVED", "comment": "Good"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["comment"] == "Good"

    rows = client.get("/api/reports/journals", headers=peer).get_json()
    assert rows == []


def test_report_export_pdf(client, seeded):
    admin = _login(client, "admin", "admin123")
    student = _login(client, "s001", "secret123")

    resp = client.get("/api/reports/attendance/export?date=2024-05-02", headers=admin)
    assert resp.status_code == 200
    assert resp.mimetype == "application/pdf"
    assert resp.data.startswith(b"%PDF")
    assert "attendance_report_20240502.pdf" in resp.headers["Content-Disposition"]

    assert client.get("/api/reports/attendance/export", headers=student).status_code == 403
    assert client.get("/api/reports/payroll", headers=admin).status_code == 400


def test_admin_routes(client, seeded):
    admin = _login(client, "admin", "admin123")
    mentor = _login(client, "mentor", "mentor123")

    assert client.get("/api/admin/users", headers=mentor).status_code == 403

    students = client.get("/api/admin/users", headers=admin).get_json()
    assert {s["identifier"] for s in students} == {"s001", "s002"}

    detail = client.get("/api/admin/users/s001", headers=admin).get_json()
    assert detail["supervisor_id"] == seeded["mentor"].user_id

    resp = client.patch(f"/api/admin/users/{seeded['student'].user_id}/active", headers=admin, json={"is_active": False})
    assert resp.status_code == 200
    assert client.post("/api/auth/login", json={"identifier": "s001", "password": "secret123"}).status_code == 401

    resp = client.post(
        "/api/admin/supervisors",
        headers=admin,
        json={"identifier": "mentor2", "password": "secret123", "full_name": "Rina"},
    )
    assert resp.status_code == 201


def test_supervisor_students_and_dashboards(client, seeded):
    mentor = _login(client, "mentor", "mentor123")
    student = _login(client, "s001", "secret123")

    students = client.get("/api/supervisor/students", headers=mentor).get_json()
    assert [s["identifier"] for s in students] == ["s001"]

    assert client.get("/api/dashboard/supervisor", headers=mentor).get_json()["total_students"] == 1
    assert client.get("/api/dashboard/student", headers=student).get_json()["total_journals"] == 0
    assert client.get("/api/dashboard/admin", headers=student).status_code == 403


def test_profile_round_trip(client, seeded):
    student = _login(client, "s001", "secret123")

    resp = client.put(
        "/api/profile/me",
        headers=student,
        json={"full_name": "Sinta Dewi", "supervisor_identifier": "mentor", "start_date": "2024-02-01"},
    )
    assert resp.status_code == 200

    profile = client.get("/api/profile/me", headers=student).get_json()
    assert profile["full_name"] == "Sinta Dewi"
    assert profile["supervisor"]["identifier"] == "mentor"

    bad = client.put("/api/profile/me", headers=student, json={"supervisor_identifier": "s002"})
    assert bad.status_code == 400

    mentor = _login(client, "mentor", "mentor123")
    self_link = client.put("/api/profile/me", headers=mentor, json={"supervisor_identifier": "mentor"})
    assert self_link.status_code == 400
