from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ReviewStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: int
    leave_date: date
    reason: str
    status: ReviewStatus
    created_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    reviewer_note: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "user_id": self.user_id,
            "date": self.leave_date.strftime("%Y-%m-%d"),
            "reason": self.reason,
            "status": self.status.value,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M") if self.created_at else None,
            "decided_by": self.decided_by,
            "decided_at": self.decided_at.strftime("%Y-%m-%d %H:%M") if self.decided_at else None,
            "reviewer_note": self.reviewer_note,
        }


@dataclass(frozen=True)
class LeaveReportRow:
    request_id: int
    user_id: int
    identifier: str
    full_name: Optional[str]
    leave_date: date
    reason: str
    status: ReviewStatus
    reviewer_note: Optional[str] = None
