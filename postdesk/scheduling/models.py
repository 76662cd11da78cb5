"""
Scheduling domain types: post schedules, reminders and their enums.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Optional


class ScheduleStatus(str, Enum):
    """Lifecycle of a post schedule"""
    DRAFT = "DRAFT"            # never produced by the scheduler
    SCHEDULED = "SCHEDULED"
    CANCELLED = "CANCELLED"    # terminal


class ReminderType(str, Enum):
    """How a reminder is delivered"""
    EMAIL = "EMAIL"
    IN_APP = "IN_APP"


class ReminderOffset(str, Enum):
    """How long before publication a reminder fires"""
    FIFTEEN_MIN = "15_MIN"
    THIRTY_MIN = "30_MIN"
    ONE_HOUR = "1_HOUR"
    ONE_DAY = "1_DAY"


class ExecutionResult(str, Enum):
    """Outcome of executing a single reminder"""
    SENT = "SENT"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


OFFSET_DURATIONS: Dict[ReminderOffset, timedelta] = {
    ReminderOffset.FIFTEEN_MIN: timedelta(milliseconds=900_000),
    ReminderOffset.THIRTY_MIN: timedelta(milliseconds=1_800_000),
    ReminderOffset.ONE_HOUR: timedelta(milliseconds=3_600_000),
    ReminderOffset.ONE_DAY: timedelta(milliseconds=86_400_000),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class PostSchedule:
    """A future publication intent for a post"""
    post_id: str
    scheduled_at: datetime
    timezone: str
    status: ScheduleStatus = ScheduleStatus.SCHEDULED
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status != ScheduleStatus.CANCELLED


@dataclass
class Reminder:
    """A timed notification derived from a schedule"""
    schedule_id: str
    type: ReminderType
    offset: ReminderOffset
    trigger_at: datetime
    sent: bool = False
    attempts: int = 0
    sent_at: Optional[datetime] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def is_due(self, now: datetime) -> bool:
        return not self.sent and self.trigger_at <= now
