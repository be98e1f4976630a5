from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.validators import optional_text, require_hours, require_non_empty
from ..core.constants import JOURNAL_HOURS_PLACES, MAX_JOURNAL_HOURS
from ..core.enums import DECISIONS, ReviewStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..identity.model import Caller
from ..identity.service import require_role
from ..scoping.visibility import check_reviewer, check_row_access
from ..users.repository import UserRepository
from .model import JournalEntry
from .repository import JournalRepository

logger = logging.getLogger(__name__)


class JournalService:
    """Use cases: submit an activity journal, review it, read it back.

    Several entries per (user, date) are allowed. A review may be repeated; the
    last one wins.
    """

    def __init__(self, journals: JournalRepository, users: UserRepository):
        self._journals = journals
        self._users = users

    def submit(
        self,
        *,
        caller: Caller,
        entry_date: Optional[date],
        activity: Optional[str],
        description: Optional[str],
        hours,
        obstacles: Optional[str] = None,
        next_plan: Optional[str] = None,
    ) -> JournalEntry:
        require_role(caller, {Role.STUDENT})

        if entry_date is None:
            raise ValidationError("date is required")
        activity = require_non_empty(activity, "activity")
        description = require_non_empty(description, "description")
        hours_worked = require_hours(hours, "hours", maximum=MAX_JOURNAL_HOURS, places=JOURNAL_HOURS_PLACES)
        obstacles = optional_text(obstacles)
        next_plan = optional_text(next_plan)

        entry_id = self._journals.create_entry(
            user_id=caller.user_id,
            entry_date=entry_date,
            activity=activity,
            description=description,
            hours_worked=hours_worked,
            obstacles=obstacles,
            next_plan=next_plan,
        )
        logger.info("User %s submitted journal %s for %s", caller.identifier, entry_id, entry_date)

        return JournalEntry(
            entry_id=entry_id,
            user_id=caller.user_id,
            entry_date=entry_date,
            activity=activity,
            description=description,
            hours_worked=hours_worked,
            obstacles=obstacles,
            next_plan=next_plan,
        )

    def review(self, *, caller: Caller, entry_id: int, decision, comment: Optional[str] = None) -> JournalEntry:
        require_role(caller, {Role.ADMIN, Role.SUPERVISOR})

        try:
            status = ReviewStatus(decision)
        except ValueError:
            raise ValidationError("status must be APPROVED or REJECTED")
        if status not in DECISIONS:
            raise ValidationError("status must be APPROVED or REJECTED")

        entry = self._journals.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("Journal not found")
        check_reviewer(
            caller,
            owner_id=entry.user_id,
            owner_supervisor_id=self._users.supervisor_of(entry.user_id),
        )

        comment = optional_text(comment)
        self._journals.set_review(entry_id=entry.entry_id, status=status, comment=comment, reviewed_by=caller.user_id)

        logger.info("Journal %s %s by %s", entry.entry_id, status.value, caller.identifier)
        return self._journals.get_by_id(entry.entry_id) or entry

    def get_entry(self, *, caller: Caller, entry_id: int) -> JournalEntry:
        entry = self._journals.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("Journal not found")
        check_row_access(
            caller,
            owner_id=entry.user_id,
            owner_supervisor_id=self._users.supervisor_of(entry.user_id),
            message="Journal not found",
        )
        return entry

    def list_mine(self, *, caller: Caller):
        return self._journals.list_for_user(caller.user_id)
