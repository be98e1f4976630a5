from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from ..core.enums import AttendanceStatus, DayState

if TYPE_CHECKING:
    from ..leaves.model import LeaveRequest


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance day of one user."""

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    note: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "user_id": self.user_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "check_in": self.check_in_time.strftime("%H:%M:%S"),
            "check_out": self.check_out_time.strftime("%H:%M:%S") if self.check_out_time else None,
            "status": self.status.value,
            "note": self.note,
        }


@dataclass(frozen=True)
class DayStatus:
    """Which branch of the day state machine a (user, date) cell is in."""

    state: DayState
    attendance: Optional[AttendanceRecord] = None
    leave: Optional["LeaveRequest"] = None

    def to_dict(self) -> dict:
        data: dict = {"status": self.state.value}
        if self.attendance is not None:
            data["data"] = self.attendance.to_dict()
        elif self.leave is not None:
            data["data"] = self.leave.to_dict()
        return data


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports."""

    user_id: int
    identifier: str
    full_name: Optional[str]
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    note: Optional[str] = None
