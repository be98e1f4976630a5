from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..identity.model import Caller
from ..identity.service import require_role
from ..identity.token_service import TokenService
from .model import Profile, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: dict


class AuthService:
    """Use cases: register, login, who-am-i."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def register(self, *, full_name: str, identifier: str, email: str, password: str) -> int:
        full_name = require_non_empty(full_name, "full_name")
        identifier = require_non_empty(identifier, "identifier")
        email = require_non_empty(email, "email")
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)

        if self._users.identifier_or_email_taken(identifier, email):
            raise ConflictError("Identifier or email already registered")

        user_id = self._users.create_user(
            identifier=identifier,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.STUDENT,
            full_name=full_name,
        )
        logger.info("Registered student %s (id=%s)", identifier, user_id)
        return user_id

    def login(self, identifier: str, password: str) -> LoginResult:
        identifier = require_non_empty(identifier, "identifier")
        require_non_empty(password, "password")

        user = self._users.get_by_identifier(identifier)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid identifier or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.warning("Failed login for %s", identifier)
            raise AuthenticationError("Invalid identifier or password")

        return LoginResult(token=self._tokens.issue(user), user=user.public_view())

    def me(self, caller: Caller) -> dict:
        user = self._users.get_by_id(caller.user_id)
        if not user:
            raise NotFoundError("User not found")
        return user.public_view()


class UserService:
    """Use cases: manage users (admin) and list supervised students."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_user(
        self,
        *,
        caller: Caller,
        identifier: str,
        password: str,
        role: Role = Role.STUDENT,
        email: Optional[str] = None,
        full_name: Optional[str] = None,
        profile: Optional[Profile] = None,
    ) -> int:
        require_role(caller, {Role.ADMIN})
        identifier = require_non_empty(identifier, "identifier")
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        email = optional_text(email)

        if self._users.identifier_or_email_taken(identifier, email):
            raise ConflictError("Identifier or email already exists")

        user_id = self._users.create_user(
            identifier=identifier,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role(role),
            full_name=optional_text(full_name),
            profile=profile,
        )
        logger.info("Admin %s created %s user %s", caller.identifier, Role(role).value, identifier)
        return user_id

    def create_supervisor(
        self,
        *,
        caller: Caller,
        identifier: str,
        password: str,
        full_name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        division: Optional[str] = None,
    ) -> int:
        full_name = require_non_empty(full_name, "full_name")
        return self.create_user(
            caller=caller,
            identifier=identifier,
            password=password,
            role=Role.SUPERVISOR,
            email=email,
            full_name=full_name,
            profile=Profile(user_id=0, full_name=full_name, phone=optional_text(phone), division=optional_text(division)),
        )

    def list_students(self, *, caller: Caller):
        require_role(caller, {Role.ADMIN})
        return self._users.list_by_role(Role.STUDENT)

    def get_student(self, *, caller: Caller, identifier: str) -> dict:
        require_role(caller, {Role.ADMIN})
        detail = self._users.get_student_detail(identifier)
        if not detail:
            raise NotFoundError("Student profile not found")
        return detail

    def list_supervisors(self, *, caller: Caller):
        require_role(caller, {Role.ADMIN})
        return self._users.list_by_role(Role.SUPERVISOR)

    def supervisor_summary(self, *, caller: Caller):
        require_role(caller, {Role.ADMIN})
        return self._users.supervisor_summary()

    def set_active(self, *, caller: Caller, user_id: int, is_active: bool) -> None:
        require_role(caller, {Role.ADMIN})

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.role == Role.ADMIN and not is_active:
            raise ValidationError("Admin accounts cannot be deactivated")

        self._users.set_active(user_id, is_active=is_active)
        logger.info("Admin %s set user %s active=%s", caller.identifier, user.identifier, is_active)

    def list_my_students(self, *, caller: Caller):
        require_role(caller, {Role.SUPERVISOR})
        return self._users.list_students_of(caller.user_id)


@dataclass(frozen=True)
class ProfileUpdate:
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    institution: Optional[str] = None
    faculty: Optional[str] = None
    program: Optional[str] = None
    cohort: Optional[str] = None
    division: Optional[str] = None
    supervisor_identifier: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    photo_url: Optional[str] = None


class ProfileService:
    """Use cases: read and update the caller's own profile."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_profile(self, *, caller: Caller) -> dict:
        user = self._users.get_by_id(caller.user_id)
        if not user:
            raise NotFoundError("Profile not found")

        profile = self._users.get_profile(caller.user_id) or Profile(user_id=caller.user_id)
        supervisor = self._users.get_by_id(profile.supervisor_id) if profile.supervisor_id else None

        return {
            "identifier": user.identifier,
            "email": user.email,
            "full_name": profile.full_name or user.full_name,
            "phone": profile.phone,
            "address": profile.address,
            "institution": profile.institution,
            "faculty": profile.faculty,
            "program": profile.program,
            "cohort": profile.cohort,
            "division": profile.division,
            "start_date": profile.start_date.strftime("%Y-%m-%d") if profile.start_date else None,
            "end_date": profile.end_date.strftime("%Y-%m-%d") if profile.end_date else None,
            "supervisor": {
                "id": supervisor.user_id,
                "identifier": supervisor.identifier,
                "full_name": supervisor.display_name,
            } if supervisor else None,
            "photo_url": profile.photo_url,
        }

    def _resolve_supervisor(self, caller: Caller, identifier: Optional[str]) -> Optional[User]:
        identifier = optional_text(identifier)
        if not identifier:
            return None
        if not caller.is_student:
            raise ValidationError("Only students can be linked to a supervisor")
        supervisor = self._users.get_by_identifier(identifier)
        if not supervisor or supervisor.role != Role.SUPERVISOR or not supervisor.is_active:
            raise ValidationError("Supervisor not found")
        return supervisor

    def update_profile(self, *, caller: Caller, update: ProfileUpdate) -> None:
        if update.start_date and update.end_date and update.end_date < update.start_date:
            raise ValidationError("end_date must be on or after start_date")

        supervisor = self._resolve_supervisor(caller, update.supervisor_identifier)

        email = optional_text(update.email)
        if email:
            current = self._users.get_by_id(caller.user_id)
            if current and current.email == email:
                email = None
            elif self._users.email_taken(email):
                raise ConflictError("Email already in use")

        existing = self._users.get_profile(caller.user_id) or Profile(user_id=caller.user_id)

        profile = replace(
            existing,
            full_name=optional_text(update.full_name),
            phone=optional_text(update.phone),
            address=optional_text(update.address),
            institution=optional_text(update.institution),
            faculty=optional_text(update.faculty),
            program=optional_text(update.program),
            cohort=optional_text(update.cohort),
            division=optional_text(update.division),
            supervisor_id=supervisor.user_id if supervisor else None,
            supervisor_name=supervisor.display_name if supervisor else None,
            start_date=update.start_date,
            end_date=update.end_date,
            photo_url=optional_text(update.photo_url),
        )
        self._users.upsert_profile(profile, email=email)
        logger.info("Profile updated for user %s", caller.identifier)
