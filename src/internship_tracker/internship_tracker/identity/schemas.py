from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class RegisterSchema(BaseModel):
    full_name: Optional[str] = None
    identifier: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginSchema(BaseModel):
    identifier: Optional[str] = None
    password: Optional[str] = None
