from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LATE_CUTOFF
from ..core.enums import DayState
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..leaves.repository import LeaveRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, DayStatus
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Attendance half of the day state machine.

    NOT_CHECKED_IN -> CHECKED_IN (no check-out) -> CHECKED_IN (with check-out).
    A day already ON_LEAVE never enters this branch.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        late_cutoff: time = DEFAULT_LATE_CUTOFF,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._leaves = leaves
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._late_cutoff = late_cutoff
        self._clock = clock

    @property
    def late_cutoff(self) -> time:
        return self._late_cutoff

    def get_status(self, user_id: int, work_date: Optional[date] = None) -> DayStatus:
        work_date = work_date or self._clock().date()

        record = self._attendance.get_for_user_and_date(user_id, work_date)
        if record:
            return DayStatus(state=DayState.CHECKED_IN, attendance=record)

        leave = self._leaves.get_for_user_and_date(user_id, work_date)
        if leave:
            return DayStatus(state=DayState.ON_LEAVE, leave=leave)

        return DayStatus(state=DayState.NOT_CHECKED_IN)

    def check_in(self, user_id: int, *, now: datetime | None = None, work_date: date | None = None) -> AttendanceRecord:
        now = now or self._clock()
        work_date = work_date or now.date()

        if self._attendance.get_for_user_and_date(user_id, work_date):
            raise ConflictError("Already checked in for this date")
        if self._leaves.get_for_user_and_date(user_id, work_date):
            raise ConflictError("A leave request already exists for this date")

        strategy = self._factory.for_checkin(now=now, cutoff=self._late_cutoff)
        decision = strategy.decide_checkin(now=now, cutoff=self._late_cutoff)

        attendance_id = self._attendance.create_checkin(
            user_id=user_id,
            work_date=work_date,
            check_in_time=now,
            status=decision.status,
            note=decision.note,
        )
        logger.info("User %s checked in for %s as %s", user_id, work_date, decision.status.value)

        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            work_date=work_date,
            check_in_time=now,
            check_out_time=None,
            status=decision.status,
            note=decision.note,
        )

    def check_out(self, user_id: int, *, now: datetime | None = None, work_date: date | None = None) -> AttendanceRecord:
        now = now or self._clock()
        work_date = work_date or now.date()

        record = self._attendance.get_for_user_and_date(user_id, work_date)
        if not record:
            raise NotFoundError("Not checked in for this date")
        if record.check_out_time is not None:
            raise ConflictError("Already checked out for this date")
        if now < record.check_in_time:
            raise ValidationError("Check-out time cannot be before check-in time")

        if not self._attendance.update_checkout(attendance_id=record.attendance_id, check_out_time=now):
            # Another request checked out first.
            raise ConflictError("Already checked out for this date")

        logger.info("User %s checked out for %s", user_id, work_date)
        return replace(record, check_out_time=now)

    def history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT):
        return self._attendance.get_recent_for_user(user_id, limit)
