"""Row-level visibility rules.

STUDENT sees its own rows, SUPERVISOR sees rows of students linked to it
through ``Profile.supervisor_id``, ADMIN sees everything. Any caller may read
a single row it owns.

Single-row access outside the caller's scope is reported as NotFound to
students (existence stays hidden) and as Forbidden to everyone else.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import AuthorizationError, NotFoundError
from ..identity.model import Caller


@dataclass(frozen=True)
class ScopeFilter:
    """Restriction applied to list queries. Both fields empty means unrestricted."""

    user_id: Optional[int] = None
    supervisor_id: Optional[int] = None

    @property
    def unrestricted(self) -> bool:
        return self.user_id is None and self.supervisor_id is None

    def allows(self, owner_id: int, owner_supervisor_id: Optional[int]) -> bool:
        if self.user_id is not None and int(owner_id) != self.user_id:
            return False
        if self.supervisor_id is not None and owner_supervisor_id != self.supervisor_id:
            return False
        return True


def scope_for(caller: Caller) -> ScopeFilter:
    if caller.is_admin:
        return ScopeFilter()
    if caller.is_supervisor:
        return ScopeFilter(supervisor_id=caller.user_id)
    return ScopeFilter(user_id=caller.user_id)


def hidden_error(caller: Caller, message: str = "Not found") -> Exception:
    """The error an out-of-scope caller gets for a row it asked about."""
    if caller.is_student:
        return NotFoundError(message)
    return AuthorizationError("Forbidden: outside your scope")


def check_row_access(caller: Caller, *, owner_id: int, owner_supervisor_id: Optional[int], message: str = "Not found") -> None:
    if int(owner_id) == caller.user_id:
        return
    if not scope_for(caller).allows(owner_id, owner_supervisor_id):
        raise hidden_error(caller, message)


def check_reviewer(caller: Caller, *, owner_id: int, owner_supervisor_id: Optional[int]) -> None:
    """ADMIN, or the SUPERVISOR linked to the row's owner, may review it.

    Nobody reviews their own row.
    """
    if int(owner_id) == caller.user_id:
        raise AuthorizationError("Forbidden: cannot review your own request")
    if caller.is_admin:
        return
    if caller.is_supervisor and owner_supervisor_id == caller.user_id:
        return
    raise AuthorizationError("Forbidden: not the linked supervisor")
