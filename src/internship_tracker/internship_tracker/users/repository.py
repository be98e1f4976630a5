from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile, User


class UserRepository(Protocol):
    """Repository interface for users and their profiles.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_identifier(self, identifier: str) -> Optional[User]:
        raise NotImplementedError

    def identifier_or_email_taken(self, identifier: str, email: Optional[str]) -> bool:
        raise NotImplementedError

    def email_taken(self, email: str) -> bool:
        raise NotImplementedError

    def create_user(
        self,
        *,
        identifier: str,
        email: Optional[str],
        password_hash: str,
        role: Role,
        full_name: Optional[str],
        profile: Optional[Profile] = None,
    ) -> int:
        """Insert the user, and its profile when given, in one transaction."""

        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def count_by_role(self, role: Role) -> int:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[dict]:
        """Admin listing rows (joined with profile)."""

        raise NotImplementedError

    def get_student_detail(self, identifier: str) -> Optional[dict]:
        raise NotImplementedError

    def list_students_of(self, supervisor_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def supervisor_summary(self) -> Sequence[dict]:
        raise NotImplementedError

    def get_profile(self, user_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def upsert_profile(self, profile: Profile, *, email: Optional[str] = None) -> None:
        """Save the profile, and the account email when given, in one transaction."""

        raise NotImplementedError

    def supervisor_of(self, student_id: int) -> Optional[int]:
        """Supervisor user id linked to a STUDENT's profile, if any."""

        raise NotImplementedError
