"""
Tests for reminder derivation and execution.
"""
import asyncio
from datetime import timedelta

import pytest

from postdesk.scheduling import (
    ExecutionResult,
    InvalidState,
    InvalidTime,
    NotFound,
    ReminderExecutor,
    ReminderOffset,
    ReminderSweeper,
    ReminderType,
)
from postdesk.scheduling.delivery import InAppDelivery, RoutingDelivery, sign_payload


class TestReminderService:
    """Test reminder creation."""

    @pytest.mark.parametrize("offset,millis", [
        (ReminderOffset.FIFTEEN_MIN, 900_000),
        (ReminderOffset.THIRTY_MIN, 1_800_000),
        (ReminderOffset.ONE_HOUR, 3_600_000),
        (ReminderOffset.ONE_DAY, 86_400_000),
    ])
    def test_trigger_time_is_offset_before_schedule(self, reminder_service, clock, offset, millis):
        scheduled_at = clock.now + timedelta(days=2)

        reminder = reminder_service.create_reminder("sched-1", scheduled_at, offset, ReminderType.IN_APP)

        assert reminder.trigger_at == scheduled_at - timedelta(milliseconds=millis)
        assert reminder.sent is False
        assert reminder.type == ReminderType.IN_APP
        assert reminder_service.get_all() == [reminder]

    def test_offset_accepts_wire_value(self, reminder_service, clock):
        reminder = reminder_service.create_reminder("s", clock.now + timedelta(days=2), "1_DAY", "EMAIL")
        assert reminder.offset == ReminderOffset.ONE_DAY
        assert reminder.type == ReminderType.EMAIL

    def test_trigger_must_be_in_future(self, reminder_service, clock):
        with pytest.raises(InvalidTime):
            reminder_service.create_reminder(
                "sched-1", clock.now + timedelta(hours=1), ReminderOffset.ONE_HOUR, ReminderType.EMAIL
            )
        assert reminder_service.get_all() == []

    def test_get_all_is_a_snapshot(self, reminder_service, clock):
        reminder_service.create_reminder(
            "s", clock.now + timedelta(days=2), ReminderOffset.ONE_DAY, ReminderType.EMAIL
        )
        snapshot = reminder_service.get_all()
        snapshot.clear()
        assert len(reminder_service.get_all()) == 1

    def test_create_for_schedule(self, reminder_service, scheduler, clock):
        schedule = scheduler.create_schedule("post-1", clock.now + timedelta(days=3), "UTC")

        extra = reminder_service.create_for_schedule(schedule.id, ReminderOffset.ONE_DAY, ReminderType.IN_APP)

        assert extra.trigger_at == schedule.scheduled_at - timedelta(days=1)
        assert len(reminder_service.get_for_schedule(schedule.id)) == 2

    def test_create_for_unknown_or_cancelled_schedule(self, reminder_service, scheduler, clock):
        with pytest.raises(NotFound):
            reminder_service.create_for_schedule("nope", ReminderOffset.ONE_DAY, ReminderType.EMAIL)

        schedule = scheduler.create_schedule("post-1", clock.now + timedelta(days=3), "UTC")
        scheduler.cancel_schedule(schedule.id)
        with pytest.raises(InvalidState):
            reminder_service.create_for_schedule(schedule.id, ReminderOffset.ONE_DAY, ReminderType.EMAIL)


class TestReminderExecutor:
    """Test executing single reminders and sweeps."""

    def _due_reminder(self, scheduler, clock, state):
        scheduler.create_schedule("post-1", clock.now + timedelta(hours=2), "UTC")
        clock.advance(hours=1)
        return state.reminders.all()[0]

    def test_future_reminder_is_skipped(self, executor, scheduler, clock, state, delivery):
        scheduler.create_schedule("post-1", clock.now + timedelta(hours=2), "UTC")
        reminder = state.reminders.all()[0]

        assert executor.execute(reminder) == ExecutionResult.SKIPPED
        assert delivery.delivered == []

    def test_due_reminder_is_sent_but_not_flagged(self, executor, scheduler, clock, state, delivery):
        reminder = self._due_reminder(scheduler, clock, state)

        assert executor.execute(reminder) == ExecutionResult.SENT
        assert delivery.delivered == [reminder.id]
        assert reminder.sent is False

    def test_sent_reminder_is_always_skipped(self, executor, scheduler, clock, state, delivery):
        reminder = self._due_reminder(scheduler, clock, state)
        executor.sweep()
        assert reminder.sent is True

        assert executor.execute(reminder) == ExecutionResult.SKIPPED
        assert executor.execute(reminder) == ExecutionResult.SKIPPED
        assert reminder.sent is True
        assert delivery.delivered == [reminder.id]

    def test_failed_delivery_is_reported_not_raised(self, executor, scheduler, clock, state, delivery):
        reminder = self._due_reminder(scheduler, clock, state)
        delivery.fail = True

        assert executor.execute(reminder) == ExecutionResult.FAILED
        assert reminder.sent is False

    def test_sweep_marks_sent_and_ignores_future(self, executor, scheduler, clock, state):
        scheduler.create_schedule("soon", clock.now + timedelta(hours=2), "UTC")
        scheduler.create_schedule("later", clock.now + timedelta(days=2), "UTC")
        clock.advance(hours=1)

        report = executor.sweep()

        assert (report.sent, report.failed, report.skipped) == (1, 0, 0)
        soon, later = state.reminders.all()
        assert soon.sent is True
        assert soon.sent_at == clock.now
        assert later.sent is False

    def test_failed_reminders_retry_every_sweep(self, executor, scheduler, clock, state, delivery):
        reminder = self._due_reminder(scheduler, clock, state)
        delivery.fail = True

        for _ in range(5):
            assert executor.sweep().failed == 1
        assert reminder.attempts == 5
        assert reminder.sent is False

        delivery.fail = False
        assert executor.sweep().sent == 1
        assert reminder.sent is True
        assert executor.sweep().processed == 0

    def test_max_attempts_stops_retrying(self, reminder_service, scheduler, clock, state, delivery):
        executor = ReminderExecutor(reminder_service, delivery, clock=clock, max_attempts=2)
        reminder = self._due_reminder(scheduler, clock, state)
        delivery.fail = True

        assert executor.sweep().failed == 1
        assert executor.sweep().failed == 1
        assert executor.sweep().processed == 0
        assert reminder.attempts == 2

    def test_cancelled_schedule_still_fires_reminder(self, executor, scheduler, clock, state, delivery):
        schedule = scheduler.create_schedule("post-1", clock.now + timedelta(hours=2), "UTC")
        scheduler.cancel_schedule(schedule.id)
        clock.advance(hours=1, seconds=1)

        assert executor.sweep().sent == 1
        assert len(delivery.delivered) == 1


class TestReminderSweeper:
    """Test the background ticker."""

    def test_run_once_sweeps(self, executor, scheduler, clock, state):
        scheduler.create_schedule("post-1", clock.now + timedelta(hours=2), "UTC")
        clock.advance(hours=1)
        sweeper = ReminderSweeper(executor, interval_seconds=60)

        report = asyncio.run(sweeper.run_once())

        assert report.sent == 1
        assert state.reminders.all()[0].sent is True

    def test_start_and_stop(self, executor):
        async def scenario():
            sweeper = ReminderSweeper(executor, interval_seconds=0.01)
            sweeper.start()
            assert sweeper.running
            await asyncio.sleep(0.05)
            await sweeper.stop()
            return sweeper.running

        assert asyncio.run(scenario()) is False


class TestDelivery:
    """Test delivery channels."""

    def test_routing_by_type(self, reminder_service, clock):
        in_app = InAppDelivery()
        routing = RoutingDelivery({ReminderType.IN_APP: in_app})
        reminder = reminder_service.create_reminder(
            "s", clock.now + timedelta(days=2), ReminderOffset.ONE_DAY, ReminderType.IN_APP
        )

        routing.deliver(reminder)

        assert in_app.inbox[0]["reminder_id"] == reminder.id

    def test_missing_channel_raises(self, reminder_service, clock):
        routing = RoutingDelivery({})
        reminder = reminder_service.create_reminder(
            "s", clock.now + timedelta(days=2), ReminderOffset.ONE_DAY, ReminderType.EMAIL
        )
        with pytest.raises(ValueError):
            routing.deliver(reminder)

    def test_signature_is_stable(self):
        payload = {"b": 1, "a": 2}
        assert sign_payload(payload, "secret") == sign_payload({"a": 2, "b": 1}, "secret")
        assert sign_payload(payload, "secret").startswith("sha256=")
