from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..users.repository import UserRepository
from .model import Caller
from .token_service import TokenService, parse_bearer

logger = logging.getLogger(__name__)


class IdentityService:
    """Use case: turn a bearer credential into a Caller."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def resolve(self, authorization: Optional[str]) -> Caller:
        claims = self._tokens.decode(parse_bearer(authorization))

        # The stored account is authoritative: deactivation and role changes apply at once.
        user = self._users.get_by_id(claims.user_id)
        if not user or not user.is_active:
            logger.warning("Rejected token for missing/inactive user %s", claims.user_id)
            raise AuthenticationError("Invalid or expired token")

        return Caller(user_id=user.user_id, identifier=user.identifier, role=user.role)


def require_role(caller: Caller, allowed: Iterable[Role]) -> None:
    allowed = set(allowed)
    if caller.role not in allowed:
        raise AuthorizationError("Forbidden: insufficient role")
