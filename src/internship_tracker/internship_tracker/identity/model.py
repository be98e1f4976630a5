from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Caller:
    """Authenticated identity attached to a request."""

    user_id: int
    identifier: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    @property
    def is_supervisor(self) -> bool:
        return self.role == Role.SUPERVISOR
