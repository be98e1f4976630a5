from __future__ import annotations

from datetime import datetime, time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in after the cutoff."""

    def decide_checkin(self, *, now: datetime, cutoff: time) -> StatusDecision:
        late_by = datetime.combine(now.date(), now.time()) - datetime.combine(now.date(), cutoff)
        minutes = int(late_by.total_seconds() // 60)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Late by {minutes} min" if minutes else None)
