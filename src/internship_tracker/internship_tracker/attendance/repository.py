from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from ..scoping.visibility import ScopeFilter
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> int:
        """Insert the day's record.

        Must raise ConflictError if the user already has an attendance record or
        a leave request for ``work_date``, atomically with the insert.
        """

        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        """Set check-out once. Returns False if it was already set."""

        raise NotImplementedError

    def count_for_date(self, work_date: date) -> int:
        raise NotImplementedError

    def stats_for_user(self, user_id: int) -> dict:
        """``{"days": int, "late_days": int}``"""

        raise NotImplementedError

    def get_report_rows(self, *, scope: ScopeFilter, work_date: Optional[date] = None) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
