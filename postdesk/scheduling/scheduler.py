"""
Post scheduler: create, reschedule and cancel publication slots.

Schedules live in the in-memory Schedule Store. Creating one also derives a
1-hour e-mail reminder. Rescheduling or cancelling leaves existing reminders
untouched, so their trigger times can drift from the schedule they belong to.
"""
from datetime import datetime
from typing import Callable, List

from ..logging_config import scheduler_logger
from .errors import AlreadyCancelled, InvalidState, InvalidTime, NotFound
from .models import (
    OFFSET_DURATIONS,
    PostSchedule,
    ReminderOffset,
    ReminderType,
    ScheduleStatus,
    as_utc,
    utcnow,
)
from .reminders import ReminderService
from .store import SchedulingState


class Scheduler:
    """
    Owns schedule mutations.

    Creation is two-phase: the schedule and its reminder are both built and
    validated before either store is touched, so a rejected reminder never
    leaves an orphan schedule behind.
    """

    DEFAULT_REMINDER_OFFSET = ReminderOffset.ONE_HOUR
    DEFAULT_REMINDER_TYPE = ReminderType.EMAIL

    def __init__(
        self,
        state: SchedulingState,
        reminders: ReminderService,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.state = state
        self.reminders = reminders
        self.clock = clock

    def create_schedule(
        self,
        post_id: str,
        scheduled_at: datetime,
        timezone: str,
        with_reminder: bool = True,
    ) -> PostSchedule:
        """
        Create a SCHEDULED schedule plus its default reminder.

        With ``with_reminder=False`` the reminder is left out, for callers
        scheduling a post too close to reserve a reminder slot.
        """
        scheduled_at = as_utc(scheduled_at)
        now = self.clock()
        if scheduled_at <= now:
            raise InvalidTime("Scheduled time must be in the future")

        schedule = PostSchedule(
            post_id=post_id,
            scheduled_at=scheduled_at,
            timezone=timezone,
            status=ScheduleStatus.SCHEDULED,
            created_at=now,
            updated_at=now,
        )
        reminder = None
        if with_reminder:
            reminder = self.reminders.build_reminder(
                schedule.id,
                schedule.scheduled_at,
                self.DEFAULT_REMINDER_OFFSET,
                self.DEFAULT_REMINDER_TYPE,
            )

        self.state.schedules.add(schedule)
        if reminder is not None:
            self.reminders.commit(reminder)

        scheduler_logger.info(
            "Schedule created",
            schedule_id=schedule.id,
            post_id=post_id,
            scheduled_at=scheduled_at.isoformat(),
            timezone=timezone,
            reminder=reminder is not None,
        )
        return schedule

    def reminder_fits(self, scheduled_at: datetime) -> bool:
        """Whether the default reminder would still lie in the future."""
        offset = OFFSET_DURATIONS[self.DEFAULT_REMINDER_OFFSET]
        return as_utc(scheduled_at) - offset > self.clock()

    def get_schedule(self, schedule_id: str) -> PostSchedule:
        schedule = self.state.schedules.get(schedule_id)
        if schedule is None:
            raise NotFound("Schedule", schedule_id)
        return schedule

    def update_schedule(self, schedule_id: str, new_scheduled_at: datetime) -> PostSchedule:
        new_scheduled_at = as_utc(new_scheduled_at)
        with self.state.schedules.lock:
            schedule = self.get_schedule(schedule_id)
            if schedule.status != ScheduleStatus.SCHEDULED:
                raise InvalidState("Only scheduled posts can be updated")

            now = self.clock()
            if new_scheduled_at <= now:
                raise InvalidTime("Updated time must be in the future")

            previous = schedule.scheduled_at
            schedule.scheduled_at = new_scheduled_at
            schedule.updated_at = now

        scheduler_logger.info(
            "Schedule updated",
            schedule_id=schedule_id,
            previous=previous.isoformat(),
            scheduled_at=new_scheduled_at.isoformat(),
        )
        return schedule

    def cancel_schedule(self, schedule_id: str) -> PostSchedule:
        with self.state.schedules.lock:
            schedule = self.get_schedule(schedule_id)
            if schedule.status == ScheduleStatus.CANCELLED:
                raise AlreadyCancelled("Schedule is already cancelled")

            schedule.status = ScheduleStatus.CANCELLED
            schedule.updated_at = self.clock()

        scheduler_logger.info("Schedule cancelled", schedule_id=schedule_id, post_id=schedule.post_id)
        return schedule

    def get_schedules_by_date_range(self, start: datetime, end: datetime) -> List[PostSchedule]:
        start, end = as_utc(start), as_utc(end)
        return sorted(
            (
                s for s in self.state.schedules.all()
                if s.is_active and start <= s.scheduled_at <= end
            ),
            key=lambda s: s.scheduled_at,
        )

    def get_schedules_by_post(self, post_id: str) -> List[PostSchedule]:
        return sorted(
            (s for s in self.state.schedules.all() if s.is_active and s.post_id == post_id),
            key=lambda s: s.scheduled_at,
        )

    def list_schedules(self) -> List[PostSchedule]:
        return self.state.schedules.all()
