"""
Calendar routes: read-only views over every schedule, cancelled included.
"""
from fastapi import APIRouter, Depends, Query
from typing import List
from datetime import date, datetime

from ..auth import get_required_user
from ..dependencies import get_scheduling
from ..models.user import User
from ..scheduling import SchedulingCore, calendar
from ..schemas.schedule import ScheduleResponse

router = APIRouter(prefix="/api/calendar", tags=["calendar"])


@router.get("", response_model=List[ScheduleResponse])
def get_schedules_in_range(
    start: datetime = Query(...),
    end: datetime = Query(...),
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Schedules between start and end, inclusive, in any status."""
    schedules = calendar.get_schedules_in_range(core.scheduler.list_schedules(), start, end)
    return [ScheduleResponse.model_validate(s) for s in schedules]


@router.get("/upcoming", response_model=List[ScheduleResponse])
def get_upcoming_schedules(
    limit: int = Query(10, ge=1, le=100),
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Next scheduled posts, soonest first."""
    schedules = calendar.get_upcoming_schedules(
        core.scheduler.list_schedules(),
        limit=limit,
        now=core.scheduler.clock(),
    )
    return [ScheduleResponse.model_validate(s) for s in schedules]


@router.get("/date/{day}", response_model=List[ScheduleResponse])
def get_schedules_for_date(
    day: date,
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Schedules falling on one UTC calendar day."""
    schedules = calendar.get_schedules_for_date(core.scheduler.list_schedules(), day)
    return [ScheduleResponse.model_validate(s) for s in schedules]
