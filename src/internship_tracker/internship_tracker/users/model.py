from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    identifier: str
    email: Optional[str]
    password_hash: str
    role: Role
    full_name: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.identifier

    def public_view(self) -> dict:
        return {
            "id": self.user_id,
            "identifier": self.identifier,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role.value,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class Profile:
    """Extended attributes of a user; at most one per user."""

    user_id: int
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    institution: Optional[str] = None
    faculty: Optional[str] = None
    program: Optional[str] = None
    cohort: Optional[str] = None
    division: Optional[str] = None
    supervisor_id: Optional[int] = None
    supervisor_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    photo_url: Optional[str] = None
