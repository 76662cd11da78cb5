"""
Reminder derivation: trigger time = schedule time minus a fixed offset.
"""
from datetime import datetime
from typing import Callable, List

from ..logging_config import reminder_logger
from .errors import InvalidState, InvalidTime, NotFound
from .models import (
    OFFSET_DURATIONS,
    Reminder,
    ReminderOffset,
    ReminderType,
    ScheduleStatus,
    as_utc,
    utcnow,
)
from .store import SchedulingState


class ReminderService:
    """Creates and lists reminders in the shared Reminder Store."""

    def __init__(self, state: SchedulingState, clock: Callable[[], datetime] = utcnow):
        self.state = state
        self.clock = clock

    def build_reminder(
        self,
        schedule_id: str,
        scheduled_at: datetime,
        offset: ReminderOffset,
        type: ReminderType,
    ) -> Reminder:
        """Validate and construct a reminder without storing it."""
        offset = ReminderOffset(offset)
        trigger_at = as_utc(scheduled_at) - OFFSET_DURATIONS[offset]
        now = self.clock()
        if trigger_at <= now:
            raise InvalidTime("Reminder trigger time must be in the future")

        return Reminder(
            schedule_id=schedule_id,
            type=ReminderType(type),
            offset=offset,
            trigger_at=trigger_at,
            created_at=now,
        )

    def commit(self, reminder: Reminder) -> Reminder:
        self.state.reminders.add(reminder)
        reminder_logger.info(
            "Reminder created",
            reminder_id=reminder.id,
            schedule_id=reminder.schedule_id,
            offset=reminder.offset.value,
            type=reminder.type.value,
            trigger_at=reminder.trigger_at.isoformat(),
        )
        return reminder

    def create_reminder(
        self,
        schedule_id: str,
        scheduled_at: datetime,
        offset: ReminderOffset,
        type: ReminderType,
    ) -> Reminder:
        return self.commit(self.build_reminder(schedule_id, scheduled_at, offset, type))

    def create_for_schedule(
        self,
        schedule_id: str,
        offset: ReminderOffset,
        type: ReminderType,
    ) -> Reminder:
        """Attach an extra reminder to an existing, still scheduled post."""
        schedule = self.state.schedules.get(schedule_id)
        if schedule is None:
            raise NotFound("Schedule", schedule_id)
        if schedule.status != ScheduleStatus.SCHEDULED:
            raise InvalidState("Reminders can only be added to scheduled posts")
        return self.create_reminder(schedule.id, schedule.scheduled_at, offset, type)

    def get_all(self) -> List[Reminder]:
        return self.state.reminders.all()

    def get_for_schedule(self, schedule_id: str) -> List[Reminder]:
        return self.state.reminders.for_schedule(schedule_id)
