from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ReminderType = Literal["medication", "exercise", "meal", "hydration", "custom"]


class ReminderCreate(BaseModel):
    type: ReminderType = "custom"
    title: str = Field(..., min_length=1, max_length=120)
    message: str = Field("", max_length=1000)
    scheduled_at: datetime  # naive UTC
    recurring: bool = False


class ReminderResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    scheduled_at: datetime
    recurring: bool
    is_active: bool
    next_at: datetime | None = None  # next firing time; None once a one-off has passed


class ReminderListResponse(BaseModel):
    reminders: list[ReminderResponse]
