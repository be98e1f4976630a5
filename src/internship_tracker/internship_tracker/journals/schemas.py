from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class JournalSubmitSchema(BaseModel):
    date: Optional[dt.date] = None
    activity: Optional[str] = None
    description: Optional[str] = None
    hours: Optional[Decimal] = None
    obstacles: Optional[str] = None
    next_plan: Optional[str] = None


class JournalReviewSchema(BaseModel):
    status: str
    comment: Optional[str] = None
