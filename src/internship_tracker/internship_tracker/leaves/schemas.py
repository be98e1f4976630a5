from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel


class LeaveRequestSchema(BaseModel):
    date: Optional[dt.date] = None
    reason: Optional[str] = None


class LeaveDecisionSchema(BaseModel):
    status: str
    note: Optional[str] = None
