from __future__ import annotations

from datetime import datetime, time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class OnTimeStrategy(AttendanceStrategy):
    """Check-in at or before the cutoff."""

    def decide_checkin(self, *, now: datetime, cutoff: time) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
