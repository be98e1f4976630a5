from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the check-in strategy.

    The cutoff itself is on time; anything strictly after it is late.
    """

    def for_checkin(self, *, now: datetime, cutoff: time) -> AttendanceStrategy:
        if now.time() <= cutoff:
            return OnTimeStrategy()
        return LateStrategy()
