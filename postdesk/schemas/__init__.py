from .schedule import ScheduleCreate, ScheduleUpdate, ScheduleResponse, ReminderCreate, ReminderResponse, SweepResponse
from .event_post import (
    DraftPostCreate,
    EventPostCreate,
    EventPostUpdate,
    EventPostResponse,
    EventPostStatusResponse,
    RejectRequest,
    ScheduleRequest,
)
from .applicant import ApplicationCreate, ApplicantStatusUpdate, ApplicantTeamUpdate, ApplicantResponse

__all__ = [
    "ScheduleCreate", "ScheduleUpdate", "ScheduleResponse",
    "ReminderCreate", "ReminderResponse", "SweepResponse",
    "DraftPostCreate", "EventPostCreate", "EventPostUpdate",
    "EventPostResponse", "EventPostStatusResponse", "RejectRequest", "ScheduleRequest",
    "ApplicationCreate", "ApplicantStatusUpdate", "ApplicantTeamUpdate", "ApplicantResponse",
]
