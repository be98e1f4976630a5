from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import ReviewStatus


@dataclass(frozen=True)
class JournalEntry:
    """Domain entity: a dated activity report written by a student."""

    entry_id: int
    user_id: int
    entry_date: date
    activity: str
    description: str
    hours_worked: Decimal
    obstacles: Optional[str] = None
    next_plan: Optional[str] = None
    status: ReviewStatus = ReviewStatus.PENDING
    reviewer_comment: Optional[str] = None
    reviewed_by: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "user_id": self.user_id,
            "date": self.entry_date.strftime("%Y-%m-%d"),
            "activity": self.activity,
            "description": self.description,
            "hours": float(self.hours_worked),
            "obstacles": self.obstacles,
            "next_plan": self.next_plan,
            "status": self.status.value,
            "comment": self.reviewer_comment,
            "reviewed_by": self.reviewed_by,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M") if self.created_at else None,
        }


@dataclass(frozen=True)
class JournalReportRow:
    entry_id: int
    user_id: int
    identifier: str
    full_name: Optional[str]
    entry_date: date
    activity: str
    hours_worked: Decimal
    status: ReviewStatus
    reviewer_comment: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "identifier": self.identifier,
            "full_name": self.full_name,
            "date": self.entry_date.strftime("%Y-%m-%d"),
            "activity": self.activity,
            "hours": float(self.hours_worked),
            "status": self.status.value,
            "comment": self.reviewer_comment,
        }
