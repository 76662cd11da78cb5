from pydantic import Field
from datetime import datetime
from typing import Optional

from ..scheduling import ReminderOffset, ReminderType, ScheduleStatus
from .base import CamelModel


class ScheduleCreate(CamelModel):
    post_id: str = Field(min_length=1)
    scheduled_at: datetime
    timezone: str = Field(min_length=1)


class ScheduleUpdate(CamelModel):
    scheduled_at: datetime


class ScheduleResponse(CamelModel):
    id: str
    post_id: str
    scheduled_at: datetime
    timezone: str
    status: ScheduleStatus
    created_at: datetime
    updated_at: datetime


class ReminderCreate(CamelModel):
    schedule_id: str
    offset: ReminderOffset = ReminderOffset.ONE_HOUR
    type: ReminderType = ReminderType.EMAIL


class ReminderResponse(CamelModel):
    id: str
    schedule_id: str
    type: ReminderType
    offset: ReminderOffset
    trigger_at: datetime
    sent: bool
    attempts: int
    sent_at: Optional[datetime] = None
    created_at: datetime


class SweepResponse(CamelModel):
    sent: int
    failed: int
    skipped: int
