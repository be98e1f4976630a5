from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_DASHBOARD_LIMIT, STUDENT_DASHBOARD_LIMIT
from ..core.enums import ReviewStatus, Role
from ..identity.model import Caller
from ..identity.service import require_role
from ..journals.repository import JournalRepository
from ..scoping.visibility import ScopeFilter, scope_for
from ..users.repository import UserRepository


class DashboardService:
    """Per-role summary counters."""

    def __init__(
        self,
        users: UserRepository,
        attendance: AttendanceRepository,
        journals: JournalRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._attendance = attendance
        self._journals = journals
        self._clock = clock

    def student(self, *, caller: Caller) -> dict:
        require_role(caller, {Role.STUDENT})

        journal_stats = self._journals.stats_for_user(caller.user_id)
        attendance_stats = self._attendance.stats_for_user(caller.user_id)
        latest = self._journals.list_for_user(caller.user_id, limit=STUDENT_DASHBOARD_LIMIT)

        return {
            "total_journals": journal_stats["total"],
            "approved_journals": journal_stats["approved"],
            "total_hours": float(journal_stats["total_hours"]),
            "attendance_days": attendance_stats["days"],
            "late_days": attendance_stats["late_days"],
            "latest_journals": [j.to_dict() for j in latest],
        }

    def admin(self, *, caller: Caller, today: Optional[date] = None) -> dict:
        require_role(caller, {Role.ADMIN})
        today = today or self._clock().date()
        scope = ScopeFilter()

        return {
            "total_students": self._users.count_by_role(Role.STUDENT),
            "pending_journals": self._journals.count_by_status(ReviewStatus.PENDING, scope=scope),
            "checkins_today": self._attendance.count_for_date(today),
            "latest_pending": [
                r.to_dict() for r in self._journals.latest_pending(scope=scope, limit=DEFAULT_DASHBOARD_LIMIT)
            ],
        }

    def supervisor(self, *, caller: Caller) -> dict:
        require_role(caller, {Role.SUPERVISOR})
        scope = scope_for(caller)

        return {
            "total_students": len(self._users.list_students_of(caller.user_id)),
            "pending_journals": self._journals.count_by_status(ReviewStatus.PENDING, scope=scope),
            "approved_journals": self._journals.count_by_status(ReviewStatus.APPROVED, scope=scope),
            "latest_pending": [
                r.to_dict() for r in self._journals.latest_pending(scope=scope, limit=DEFAULT_DASHBOARD_LIMIT)
            ],
        }
