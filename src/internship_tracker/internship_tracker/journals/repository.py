from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import ReviewStatus
from ..scoping.visibility import ScopeFilter
from .model import JournalEntry, JournalReportRow


class JournalRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[JournalEntry]:
        raise NotImplementedError

    def create_entry(
        self,
        *,
        user_id: int,
        entry_date: date,
        activity: str,
        description: str,
        hours_worked: Decimal,
        obstacles: Optional[str] = None,
        next_plan: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def set_review(self, *, entry_id: int, status: ReviewStatus, comment: Optional[str], reviewed_by: int) -> None:
        """Overwrites any earlier review."""

        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None) -> Sequence[JournalEntry]:
        """Newest first."""

        raise NotImplementedError

    def stats_for_user(self, user_id: int) -> dict:
        """``{"total", "approved", "total_hours"}``."""

        raise NotImplementedError

    def count_by_status(self, status: ReviewStatus, *, scope: ScopeFilter) -> int:
        raise NotImplementedError

    def latest_pending(self, *, scope: ScopeFilter, limit: int) -> Sequence[JournalReportRow]:
        raise NotImplementedError

    def get_report_rows(self, *, scope: ScopeFilter, entry_date: Optional[date] = None) -> Sequence[JournalReportRow]:
        raise NotImplementedError
