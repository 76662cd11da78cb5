"""
Read-only calendar queries over a list of schedules.
"""
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from .models import PostSchedule, ScheduleStatus, as_utc, utcnow


def get_schedules_in_range(
    schedules: Iterable[PostSchedule],
    start: datetime,
    end: datetime,
) -> List[PostSchedule]:
    """Schedules with start <= scheduled_at <= end, any status."""
    start, end = as_utc(start), as_utc(end)
    return [s for s in schedules if start <= s.scheduled_at <= end]


def get_schedules_for_date(
    schedules: Iterable[PostSchedule],
    day: Union[date, datetime],
) -> List[PostSchedule]:
    """Schedules on the same UTC calendar day; the timezone label is ignored."""
    if isinstance(day, datetime):
        day = as_utc(day).date()
    return [s for s in schedules if as_utc(s.scheduled_at).date() == day]


def get_upcoming_schedules(
    schedules: Iterable[PostSchedule],
    limit: int = 10,
    now: Optional[datetime] = None,
) -> List[PostSchedule]:
    now = now or utcnow()
    upcoming = [
        s for s in schedules
        if s.status == ScheduleStatus.SCHEDULED and s.scheduled_at > now
    ]
    upcoming.sort(key=lambda s: s.scheduled_at)
    return upcoming[:limit]
