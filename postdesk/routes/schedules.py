"""
Schedule routes: create, reschedule, cancel and query post schedules.
"""
from fastapi import APIRouter, Depends, Query, Request
from typing import List
from datetime import datetime

from ..auth import get_required_user
from ..config import get_settings
from ..dependencies import get_scheduling
from ..limiter import limiter
from ..models.user import User
from ..scheduling import SchedulingCore
from ..schemas.schedule import ScheduleCreate, ScheduleUpdate, ScheduleResponse

settings = get_settings()

router = APIRouter(prefix="/api/schedules", tags=["schedules"])


@router.post("", response_model=ScheduleResponse, status_code=201)
@limiter.limit(settings.schedule_rate_limit)
def create_schedule(
    request: Request,
    body: ScheduleCreate,
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Schedule a post; also sets up a reminder one hour before."""
    schedule = core.scheduler.create_schedule(body.post_id, body.scheduled_at, body.timezone)
    return ScheduleResponse.model_validate(schedule)


@router.get("", response_model=List[ScheduleResponse])
def get_schedules_by_date_range(
    start: datetime = Query(...),
    end: datetime = Query(...),
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Active schedules between start and end, inclusive."""
    schedules = core.scheduler.get_schedules_by_date_range(start, end)
    return [ScheduleResponse.model_validate(s) for s in schedules]


@router.get("/post/{post_id}", response_model=List[ScheduleResponse])
def get_schedules_by_post(
    post_id: str,
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Active schedules for one post."""
    return [ScheduleResponse.model_validate(s) for s in core.scheduler.get_schedules_by_post(post_id)]


@router.get("/{schedule_id}", response_model=ScheduleResponse)
def get_schedule(
    schedule_id: str,
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    return ScheduleResponse.model_validate(core.scheduler.get_schedule(schedule_id))


@router.patch("/{schedule_id}", response_model=ScheduleResponse)
def update_schedule(
    schedule_id: str,
    body: ScheduleUpdate,
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Move a scheduled post to a new time. Existing reminders keep their trigger time."""
    schedule = core.scheduler.update_schedule(schedule_id, body.scheduled_at)
    return ScheduleResponse.model_validate(schedule)


@router.delete("/{schedule_id}", response_model=ScheduleResponse)
def cancel_schedule(
    schedule_id: str,
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Cancel a schedule. Cancelled schedules are kept, never deleted."""
    return ScheduleResponse.model_validate(core.scheduler.cancel_schedule(schedule_id))
