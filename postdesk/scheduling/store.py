"""
In-memory stores for schedules and reminders.

Each store owns its collection and serializes access with a lock: the
reminder sweep runs in a worker thread while request handlers mutate the
same objects.
"""
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .models import PostSchedule, Reminder


class ScheduleStore:
    """Schedules keyed by id, kept in insertion order"""

    def __init__(self):
        self._items: Dict[str, PostSchedule] = {}
        self._lock = threading.RLock()

    def add(self, schedule: PostSchedule) -> PostSchedule:
        with self._lock:
            self._items[schedule.id] = schedule
        return schedule

    def get(self, schedule_id: str) -> Optional[PostSchedule]:
        with self._lock:
            return self._items.get(schedule_id)

    def all(self) -> List[PostSchedule]:
        with self._lock:
            return list(self._items.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def lock(self) -> threading.RLock:
        return self._lock


class ReminderStore:
    """Reminders in creation order"""

    def __init__(self):
        self._items: List[Reminder] = []
        self._lock = threading.RLock()

    def add(self, reminder: Reminder) -> Reminder:
        with self._lock:
            self._items.append(reminder)
        return reminder

    def all(self) -> List[Reminder]:
        """Snapshot of the list; the reminders themselves are live objects."""
        with self._lock:
            return list(self._items)

    def for_schedule(self, schedule_id: str) -> List[Reminder]:
        with self._lock:
            return [r for r in self._items if r.schedule_id == schedule_id]

    def mark_sent(self, reminder: Reminder, sent_at: datetime) -> None:
        with self._lock:
            reminder.sent = True
            reminder.sent_at = sent_at

    def record_failure(self, reminder: Reminder) -> int:
        with self._lock:
            reminder.attempts += 1
            return reminder.attempts

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


@dataclass
class SchedulingState:
    """Owns both stores for the lifetime of one application instance"""
    schedules: ScheduleStore = field(default_factory=ScheduleStore)
    reminders: ReminderStore = field(default_factory=ReminderStore)
