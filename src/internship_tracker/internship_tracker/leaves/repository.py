from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ReviewStatus
from ..scoping.visibility import ScopeFilter
from .model import LeaveReportRow, LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, leave_date: date) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def create_leave(self, *, user_id: int, leave_date: date, reason: str) -> int:
        """Insert a PENDING request.

        Must raise ConflictError if the user already has an attendance record or
        a leave request for ``leave_date``, atomically with the insert.
        """

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: ReviewStatus,
        decided_by: int,
        reviewer_note: Optional[str] = None,
    ) -> bool:
        """Resolve a PENDING request. Returns False if it was no longer pending."""

        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def get_report_rows(self, *, scope: ScopeFilter, leave_date: Optional[date] = None) -> Sequence[LeaveReportRow]:
        raise NotImplementedError
