from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel

from ..core.enums import Role


class CreateUserSchema(BaseModel):
    identifier: str
    password: str
    role: Role = Role.STUDENT
    email: Optional[str] = None
    full_name: Optional[str] = None


class CreateSupervisorSchema(BaseModel):
    identifier: str
    password: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    division: Optional[str] = None


class SetActiveSchema(BaseModel):
    is_active: bool


class ProfileUpdateSchema(BaseModel):
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
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    photo_url: Optional[str] = None
