from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles used for authorization."""

    STUDENT = "STUDENT"
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"


class AttendanceStatus(str, Enum):
    """Attendance classification stored on check-in."""

    PRESENT = "PRESENT"
    LATE = "LATE"


class ReviewStatus(str, Enum):
    """Review state shared by leave requests and journal entries."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


DECISIONS = frozenset({ReviewStatus.APPROVED, ReviewStatus.REJECTED})


class DayState(str, Enum):
    """State of one (user, date) cell."""

    NOT_CHECKED_IN = "NOT_CHECKED_IN"
    CHECKED_IN = "CHECKED_IN"
    ON_LEAVE = "ON_LEAVE"


class ReportEntity(str, Enum):
    ATTENDANCE = "attendance"
    LEAVES = "leaves"
    JOURNALS = "journals"
