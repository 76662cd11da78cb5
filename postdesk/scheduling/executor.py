"""
Reminder execution and the periodic sweep that drives it.

Failed deliveries stay unsent and are retried on every following sweep.
Set ``max_attempts`` to stop retrying after that many failures.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..logging_config import reminder_logger, timed
from .delivery import ReminderDelivery
from .models import ExecutionResult, Reminder, utcnow
from .reminders import ReminderService


@dataclass
class SweepReport:
    """Counts from one sweep"""
    sent: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def processed(self) -> int:
        return self.sent + self.failed + self.skipped


class ReminderExecutor:
    """Runs due reminders through a delivery channel."""

    def __init__(
        self,
        reminders: ReminderService,
        delivery: ReminderDelivery,
        clock: Callable[[], datetime] = utcnow,
        max_attempts: Optional[int] = None,
    ):
        self.reminders = reminders
        self.delivery = delivery
        self.clock = clock
        self.max_attempts = max_attempts

    def execute(self, reminder: Reminder) -> ExecutionResult:
        """Deliver one reminder. Never raises; does not flip ``sent``."""
        if reminder.sent:
            return ExecutionResult.SKIPPED

        if reminder.trigger_at > self.clock():
            return ExecutionResult.SKIPPED

        try:
            self.delivery.deliver(reminder)
        except Exception as e:
            reminder_logger.error(
                "Reminder delivery failed",
                error=e,
                reminder_id=reminder.id,
                schedule_id=reminder.schedule_id,
                attempts=reminder.attempts + 1,
            )
            return ExecutionResult.FAILED

        return ExecutionResult.SENT

    def _retry_allowed(self, reminder: Reminder) -> bool:
        return self.max_attempts is None or reminder.attempts < self.max_attempts

    def sweep(self) -> SweepReport:
        """Execute every due, unsent reminder once."""
        now = self.clock()
        report = SweepReport()
        store = self.reminders.state.reminders

        due = [r for r in self.reminders.get_all() if r.is_due(now) and self._retry_allowed(r)]
        for reminder in due:
            result = self.execute(reminder)
            if result == ExecutionResult.SENT:
                store.mark_sent(reminder, self.clock())
                report.sent += 1
            elif result == ExecutionResult.FAILED:
                store.record_failure(reminder)
                report.failed += 1
            else:
                report.skipped += 1

        if due:
            reminder_logger.info(
                "Reminder sweep finished",
                sent=report.sent,
                failed=report.failed,
                skipped=report.skipped,
            )
        return report


class ReminderSweeper:
    """
    Background ticker for the executor.

    Sweeps run in a worker thread so slow deliveries do not block the event
    loop. The lock keeps sweeps from overlapping, whether started by the
    ticker or on demand.
    """

    def __init__(self, executor: ReminderExecutor, interval_seconds: float = 60):
        self.executor = executor
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @timed(reminder_logger)
    async def run_once(self) -> SweepReport:
        async with self._lock:
            return await asyncio.to_thread(self.executor.sweep)

    async def _loop(self):
        reminder_logger.info("Reminder sweeper started", interval_seconds=self.interval_seconds)
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception as e:
                reminder_logger.error("Reminder sweep crashed", error=e)

    def start(self):
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        reminder_logger.info("Reminder sweeper stopped")
