from __future__ import annotations

from datetime import date, datetime

import pytest

from src.internship_tracker.internship_tracker.attendance.service import AttendanceService
from src.internship_tracker.internship_tracker.core.enums import Role
from src.internship_tracker.internship_tracker.core.exceptions import AuthorizationError
from src.internship_tracker.internship_tracker.journals.service import JournalService
from src.internship_tracker.internship_tracker.reports.dashboard import DashboardService
from tests.fakes import build_fake_repos, caller_of


@pytest.fixture()
def env():
    users, attendance, leaves, journals = build_fake_repos()
    admin = users.add("admin", Role.ADMIN)
    mentor = users.add("mentor", Role.SUPERVISOR)
    alice = users.add("s-alice", supervisor_id=mentor.user_id)
    users.add("s-bob")

    checkins = AttendanceService(attendance, leaves)
    checkins.check_in(alice.user_id, now=datetime(2024, 5, 2, 7, 50))
    checkins.check_in(alice.user_id, now=datetime(2024, 5, 3, 8, 30))

    journal_service = JournalService(journals, users)
    for day, hours in ((1, 3), (2, 4.5), (3, 2), (4, 1)):
        journal_service.submit(
            caller=caller_of(alice),
            entry_date=date(2024, 5, day),
            activity=f"Day {day}",
            description="Work",
            hours=hours,
        )
    journal_service.review(caller=caller_of(mentor), entry_id=1, decision="APPROVED")

    return {
        "service": DashboardService(users, attendance, journals),
        "admin": caller_of(admin),
        "mentor": caller_of(mentor),
        "alice": caller_of(alice),
    }


def test_student_dashboard(env):
    data = env["service"].student(caller=env["alice"])

    assert data["total_journals"] == 4
    assert data["approved_journals"] == 1
    assert data["total_hours"] == pytest.approx(10.5)
    assert data["attendance_days"] == 2
    assert data["late_days"] == 1
    assert [j["date"] for j in data["latest_journals"]] == ["2024-05-04", "2024-05-03", "2024-05-02"]


def test_admin_dashboard(env):
    data = env["service"].admin(caller=env["admin"], today=date(2024, 5, 3))

    assert data["total_students"] == 2
    assert data["pending_journals"] == 3
    assert data["checkins_today"] == 1
    assert len(data["latest_pending"]) == 3


def test_supervisor_dashboard(env):
    data = env["service"].supervisor(caller=env["mentor"])

    assert data["total_students"] == 1
    assert data["pending_journals"] == 3
    assert data["approved_journals"] == 1
    assert all(r["identifier"] == "s-alice" for r in data["latest_pending"])


def test_dashboards_are_role_gated(env):
    with pytest.raises(AuthorizationError):
        env["service"].admin(caller=env["mentor"])
    with pytest.raises(AuthorizationError):
        env["service"].student(caller=env["admin"])
