"""
In-memory post scheduling and reminder core.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .delivery import ReminderDelivery, build_delivery
from .errors import AlreadyCancelled, InvalidState, InvalidTime, NotFound, SchedulingError
from .executor import ReminderExecutor, ReminderSweeper, SweepReport
from .models import (
    ExecutionResult,
    PostSchedule,
    Reminder,
    ReminderOffset,
    ReminderType,
    ScheduleStatus,
    utcnow,
)
from .reminders import ReminderService
from .scheduler import Scheduler
from .store import SchedulingState


@dataclass
class SchedulingCore:
    """Everything that shares one pair of stores"""
    state: SchedulingState
    reminders: ReminderService
    scheduler: Scheduler
    executor: ReminderExecutor
    sweeper: ReminderSweeper


def build_scheduling(
    settings,
    delivery: Optional[ReminderDelivery] = None,
    clock: Callable[[], datetime] = utcnow,
) -> SchedulingCore:
    state = SchedulingState()
    reminders = ReminderService(state, clock=clock)
    scheduler = Scheduler(state, reminders, clock=clock)
    executor = ReminderExecutor(
        reminders,
        delivery or build_delivery(settings),
        clock=clock,
        max_attempts=settings.reminder_max_attempts,
    )
    sweeper = ReminderSweeper(executor, interval_seconds=settings.reminder_sweep_interval_seconds)
    return SchedulingCore(state, reminders, scheduler, executor, sweeper)


__all__ = [
    "AlreadyCancelled",
    "ExecutionResult",
    "InvalidState",
    "InvalidTime",
    "NotFound",
    "PostSchedule",
    "Reminder",
    "ReminderExecutor",
    "ReminderOffset",
    "ReminderService",
    "ReminderSweeper",
    "ReminderType",
    "ScheduleStatus",
    "Scheduler",
    "SchedulingCore",
    "SchedulingError",
    "SchedulingState",
    "SweepReport",
    "build_scheduling",
]
