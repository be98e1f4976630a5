from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import DECISIONS, ReviewStatus, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..identity.model import Caller
from ..identity.service import require_role
from ..scoping.visibility import check_reviewer, check_row_access
from ..users.repository import UserRepository
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave half of the day state machine.

    NOT_CHECKED_IN -> ON_LEAVE(PENDING) -> ON_LEAVE(APPROVED | REJECTED).
    The decision step is single-shot.
    """

    def __init__(self, leaves: LeaveRepository, attendance: AttendanceRepository, users: UserRepository):
        self._leaves = leaves
        self._attendance = attendance
        self._users = users

    def request_leave(self, *, caller: Caller, leave_date: Optional[date], reason: Optional[str]) -> LeaveRequest:
        if leave_date is None:
            raise ValidationError("date is required")
        reason = require_non_empty(reason, "reason")

        if self._attendance.get_for_user_and_date(caller.user_id, leave_date):
            raise ConflictError("Attendance already recorded for this date")
        if self._leaves.get_for_user_and_date(caller.user_id, leave_date):
            raise ConflictError("A leave request already exists for this date")

        request_id = self._leaves.create_leave(user_id=caller.user_id, leave_date=leave_date, reason=reason)
        logger.info("User %s requested leave for %s", caller.identifier, leave_date)

        return LeaveRequest(
            request_id=request_id,
            user_id=caller.user_id,
            leave_date=leave_date,
            reason=reason,
            status=ReviewStatus.PENDING,
        )

    def get_leave(self, *, caller: Caller, request_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(request_id)
        if not leave:
            raise NotFoundError("Leave request not found")
        check_row_access(
            caller,
            owner_id=leave.user_id,
            owner_supervisor_id=self._users.supervisor_of(leave.user_id),
            message="Leave request not found",
        )
        return leave

    def decide_leave(
        self,
        *,
        caller: Caller,
        request_id: int,
        decision,
        note: Optional[str] = None,
    ) -> LeaveRequest:
        require_role(caller, {Role.ADMIN, Role.SUPERVISOR})

        try:
            status = ReviewStatus(decision)
        except ValueError:
            raise ValidationError("status must be APPROVED or REJECTED")
        if status not in DECISIONS:
            raise ValidationError("status must be APPROVED or REJECTED")

        leave = self._leaves.get_by_id(request_id)
        if not leave:
            raise NotFoundError("Leave request not found")
        check_reviewer(
            caller,
            owner_id=leave.user_id,
            owner_supervisor_id=self._users.supervisor_of(leave.user_id),
        )

        if leave.status != ReviewStatus.PENDING:
            raise ConflictError("Leave request already decided")

        note = optional_text(note)
        if not self._leaves.decide(request_id=leave.request_id, status=status, decided_by=caller.user_id, reviewer_note=note):
            logger.warning("Leave %s was decided concurrently", leave.request_id)
            raise ConflictError("Leave request already decided")

        logger.info("Leave %s %s by %s", leave.request_id, status.value, caller.identifier)
        return self._leaves.get_by_id(leave.request_id) or leave

    def history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT):
        return self._leaves.get_recent_for_user(user_id, limit)
