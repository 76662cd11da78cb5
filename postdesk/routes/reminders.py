"""
Reminder routes: inspect reminders, add extra ones and trigger a sweep.
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from ..auth import get_required_user
from ..dependencies import get_scheduling
from ..models.user import User
from ..scheduling import SchedulingCore
from ..schemas.schedule import ReminderCreate, ReminderResponse, SweepResponse

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


@router.get("", response_model=List[ReminderResponse])
def list_reminders(
    schedule_id: Optional[str] = Query(None, alias="scheduleId"),
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """All reminders, optionally for one schedule."""
    if schedule_id:
        reminders = core.reminders.get_for_schedule(schedule_id)
    else:
        reminders = core.reminders.get_all()
    return [ReminderResponse.model_validate(r) for r in reminders]


@router.post("", response_model=ReminderResponse, status_code=201)
def create_reminder(
    body: ReminderCreate,
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Add another reminder to a scheduled post."""
    reminder = core.reminders.create_for_schedule(body.schedule_id, body.offset, body.type)
    return ReminderResponse.model_validate(reminder)


@router.post("/sweep", response_model=SweepResponse)
async def run_sweep(
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Run one reminder sweep now instead of waiting for the next tick."""
    report = await core.sweeper.run_once()
    return SweepResponse(sent=report.sent, failed=report.failed, skipped=report.skipped)
