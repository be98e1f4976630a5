from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_LATE_CUTOFF, DEFAULT_TOKEN_EXPIRE_HOURS
from .database.connection import DatabaseConnection
from .identity.service import IdentityService
from .identity.token_service import TokenService
from .journals.mysql_journal_repository import MySQLJournalRepository
from .journals.repository import JournalRepository
from .journals.service import JournalService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .reports.dashboard import DashboardService
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, ProfileService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    journals_repo: JournalRepository

    tokens: TokenService
    identity_service: IdentityService
    auth_service: AuthService
    user_service: UserService
    profile_service: ProfileService
    attendance_service: AttendanceService
    leave_service: LeaveService
    journal_service: JournalService
    report_service: ReportService
    dashboard_service: DashboardService


def wire(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    journals_repo: JournalRepository,
    jwt_secret: str,
    token_expire_hours: int = DEFAULT_TOKEN_EXPIRE_HOURS,
    late_cutoff: time = DEFAULT_LATE_CUTOFF,
) -> Container:
    """Build the services on top of any set of repositories (MySQL or in-memory)."""

    tokens = TokenService(jwt_secret, expire_hours=token_expire_hours)

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        journals_repo=journals_repo,
        tokens=tokens,
        identity_service=IdentityService(users_repo, tokens),
        auth_service=AuthService(users_repo, tokens),
        user_service=UserService(users_repo),
        profile_service=ProfileService(users_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            leaves_repo,
            strategy_factory=AttendanceStrategyFactory(),
            late_cutoff=late_cutoff,
        ),
        leave_service=LeaveService(leaves_repo, attendance_repo, users_repo),
        journal_service=JournalService(journals_repo, users_repo),
        report_service=ReportService(attendance_repo, leaves_repo, journals_repo),
        dashboard_service=DashboardService(users_repo, attendance_repo, journals_repo),
    )


def build_container(
    *,
    conn: DatabaseConnection,
    jwt_secret: str,
    token_expire_hours: int = DEFAULT_TOKEN_EXPIRE_HOURS,
    late_cutoff: time = DEFAULT_LATE_CUTOFF,
) -> Container:
    return wire(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        journals_repo=MySQLJournalRepository(conn),
        jwt_secret=jwt_secret,
        token_expire_hours=token_expire_hours,
        late_cutoff=late_cutoff,
    )
