from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..core.constants import DEFAULT_TOKEN_EXPIRE_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..users.model import User
from .model import Caller

ALGORITHM = "HS256"


def parse_bearer(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    header = (authorization or "").strip()
    if not header.startswith("Bearer "):
        raise AuthenticationError("Token missing")
    token = header[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError("Token missing")
    return token


class TokenService:
    """Issues and verifies signed bearer tokens."""

    def __init__(self, secret: str, *, expire_hours: int = DEFAULT_TOKEN_EXPIRE_HOURS):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._expire = timedelta(hours=int(expire_hours))

    def issue(self, user: User, *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user.user_id),
            "identifier": user.identifier,
            "role": user.role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._expire).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> Caller:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JWTError:
            raise AuthenticationError("Invalid or expired token")

        try:
            return Caller(
                user_id=int(payload["sub"]),
                identifier=str(payload["identifier"]),
                role=Role(payload["role"]),
            )
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid or expired token")
